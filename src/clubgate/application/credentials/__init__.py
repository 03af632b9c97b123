"""Application credentials – password reset."""
from clubgate.application.credentials.password_reset import RESET_TOKEN_TTL, PasswordResetService

__all__ = ["RESET_TOKEN_TTL", "PasswordResetService"]
