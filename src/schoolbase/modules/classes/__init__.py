"""
Classes module - A school's sections of the grade templates per session.
"""

from schoolbase.modules.classes.models import SchoolClass

__all__ = ["SchoolClass"]
