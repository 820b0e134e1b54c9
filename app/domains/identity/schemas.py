from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from typing import Optional
from datetime import datetime
import uuid

from app.core.config import settings


def check_password_strength(v: str) -> str:
    if len(v) < settings.password_min_length:
        raise ValueError(f'Password must be at least {settings.password_min_length} characters long')
    if not any(c.isalpha() for c in v):
        raise ValueError('Password must contain at least one letter')
    if not any(c.isdigit() for c in v):
        raise ValueError('Password must contain at least one digit')
    return v


class UserCreate(BaseModel):
    """Схема для регистрации пользователя"""
    email: EmailStr
    password: str = Field(..., max_length=128)
    name: str = Field(..., min_length=1, max_length=100)
    invitation_token: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be empty')
        return v.strip()

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return check_password_strength(v)


class UserLogin(BaseModel):
    """Схема для входа пользователя"""
    email: EmailStr
    password: str
    remember_me: bool = True


class UserUpdate(BaseModel):
    """Схема для обновления пользователя"""
    name: str = Field(..., min_length=1, max_length=100)
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(None, max_length=128)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be empty')
        return v.strip()

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v):
        return check_password_strength(v) if v else v


class PasswordResetRequest(BaseModel):
    """Запрос на сброс пароля"""
    email: EmailStr


class PasswordReset(BaseModel):
    """Установка нового пароля по токену"""
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., max_length=128)

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v):
        return check_password_strength(v)


class UserResponse(BaseModel):
    """Схема для ответа с данными пользователя"""
    uuid: uuid.UUID
    email: EmailStr
    name: str
    profile_image: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    """Схема для JWT токена"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class UserUpdateResponse(BaseModel):
    """Ответ на обновление профиля; при смене пароля выдается новый токен"""
    user: UserResponse
    access_token: Optional[str] = None
