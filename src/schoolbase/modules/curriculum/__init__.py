"""
Curriculum module - Grade templates, subjects and chapters.
"""

from schoolbase.modules.curriculum.models import Chapter, ClassList, Stream, Subject, SubjectClass

__all__ = ["Chapter", "ClassList", "Stream", "Subject", "SubjectClass"]
