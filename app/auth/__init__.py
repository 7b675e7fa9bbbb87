"""
Auth Module - sessão por cookie
"""
from .router import router as auth_router, require_session, has_valid_session
from .config import AuthSettings, get_auth_settings

__all__ = [
    "auth_router",
    "require_session",
    "has_valid_session",
    "AuthSettings",
    "get_auth_settings",
]
