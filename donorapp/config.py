"""
Configuration for the donor service.

Values come from environment variables with development defaults.
"""

import os
from datetime import timedelta
from typing import Optional


class Config:
    """Main configuration class, consumed by ``app.config.from_object``."""

    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me")

    # Identity
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        minutes=int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES_MINUTES", "60"))
    )

    # Storage
    SQLALCHEMY_DATABASE_URI: str = os.getenv("DATABASE_URL", "sqlite:///donorapp.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "sql").lower()

    # HTTP
    API_PREFIX: str = os.getenv("API_PREFIX", "/api/v1")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    JWT_SECRET_KEY = SECRET_KEY
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    STORE_BACKEND = "memory"
    BCRYPT_LOG_ROUNDS = 4
