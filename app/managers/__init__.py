from app.managers.password_manager import (
    PasswordHasher,
    get_password_hasher,
    hash_password,
    verify_password,
)
from app.managers.rate_limiter import (
    auth_limit,
    limiter,
    rate_limit_exceeded_handler,
    read_limit,
    write_limit,
)
from app.managers.token_manager import create_access_token, decode_access_token

__all__ = [
    "PasswordHasher",
    "auth_limit",
    "create_access_token",
    "decode_access_token",
    "get_password_hasher",
    "hash_password",
    "limiter",
    "rate_limit_exceeded_handler",
    "read_limit",
    "verify_password",
    "write_limit",
]
