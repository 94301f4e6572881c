"""
Authentication module for admin JWT tokens
"""
from livescore.auth.utils import get_current_admin, create_access_token, verify_token

__all__ = [
    "get_current_admin",
    "create_access_token",
    "verify_token",
]
