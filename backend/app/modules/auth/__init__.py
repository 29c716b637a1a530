# Authentication module

from app.modules.auth.dependencies import (
    get_token,
    get_optional_user,
    get_current_user,
    get_current_admin,
)

__all__ = [
    "get_token",
    "get_optional_user",
    "get_current_user",
    "get_current_admin",
]
