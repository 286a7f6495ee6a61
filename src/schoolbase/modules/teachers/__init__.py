"""
Teachers module - Teacher records (storage only).
"""

from schoolbase.modules.teachers.models import Teacher

__all__ = ["Teacher"]
