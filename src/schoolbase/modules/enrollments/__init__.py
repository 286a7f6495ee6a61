"""
Enrollments module - Student membership in classes.
"""

from schoolbase.modules.enrollments.models import Enrollment

__all__ = ["Enrollment"]
