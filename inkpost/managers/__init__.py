from inkpost.managers.password_manager import hash_password, verify_password
from inkpost.managers.rate_limiter import limiter, rate_limit_exceeded_handler, tiered_limit
from inkpost.managers.token_manager import create_access_token, decode_access_token

__all__ = [
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "limiter",
    "rate_limit_exceeded_handler",
    "tiered_limit",
    "verify_password",
]
