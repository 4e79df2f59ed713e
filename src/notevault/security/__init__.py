"""Security utilities."""

from .jwt import create_access_token, decode_access_token, get_user_id_from_token
from .password import hash_password, needs_update, verify_password

__all__ = [
    "hash_password",
    "verify_password",
    "needs_update",
    "create_access_token",
    "decode_access_token",
    "get_user_id_from_token",
]
