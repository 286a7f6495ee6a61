"""
Users module - Phone-based login identities.
"""

from schoolbase.modules.users.models import User
from schoolbase.modules.users.repository import UserRepository

__all__ = ["User", "UserRepository"]
