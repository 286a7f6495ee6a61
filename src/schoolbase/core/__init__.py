"""
Core module - Configuration, database, security, and the auth gateway.
"""

from schoolbase.core.config import get_settings, settings
from schoolbase.core.database import Base, Database, get_db
from schoolbase.core.redis import close_redis, get_redis, init_redis
from schoolbase.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "Database",
    "get_db",
    # Redis
    "get_redis",
    "init_redis",
    "close_redis",
    # Security
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
