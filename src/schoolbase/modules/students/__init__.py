"""
Students module - Per-school student profiles.
"""

from schoolbase.modules.students.models import Gender, Student, StudentStatus

__all__ = ["Gender", "Student", "StudentStatus"]
