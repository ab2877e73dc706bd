"""Authentication: user model, auth context, profile editing."""

from asc3_gate.auth.context import AuthContext, AuthState, is_global_admin
from asc3_gate.auth.editor import ProfileEditor, clean_name
from asc3_gate.auth.models import LoginResult, ProfileUpdate, UserProfile

__all__ = [
    "AuthContext",
    "AuthState",
    "LoginResult",
    "ProfileEditor",
    "ProfileUpdate",
    "UserProfile",
    "clean_name",
    "is_global_admin",
]
