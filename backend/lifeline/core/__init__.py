"""
Core module - Security, rate limiting, and logging setup.
"""
from lifeline.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_token,
)
from lifeline.core.rate_limit import (
    check_rate_limit,
    increment_failed_login,
    check_user_lockout,
    reset_failed_attempts,
)
from lifeline.core.logging_config import configure_logging

__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
    "check_rate_limit",
    "increment_failed_login",
    "check_user_lockout",
    "reset_failed_attempts",
    "configure_logging",
]
