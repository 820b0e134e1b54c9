from app.domains.identity.entities import User
from app.domains.identity.schemas import (
    UserCreate, UserLogin, UserUpdate, UserResponse, Token,
    PasswordResetRequest, PasswordReset, MessageResponse
)
from app.domains.identity.services import IdentityService

__all__ = [
    "User",
    "UserCreate", "UserLogin", "UserUpdate", "UserResponse", "Token",
    "PasswordResetRequest", "PasswordReset", "MessageResponse",
    "IdentityService"
]
