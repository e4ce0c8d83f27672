"""Models package."""
from tocapi.models.user import User
from tocapi.models.password_reset_token import PasswordResetToken

__all__ = ["User", "PasswordResetToken"]
