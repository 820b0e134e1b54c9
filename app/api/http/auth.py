from typing import Any, Dict, Tuple

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_current_session, get_identity_service
from app.core.config import settings
from app.core.security import session_lifetime
from app.domains.identity.entities import User
from app.domains.identity.schemas import (
    UserCreate, UserLogin, UserResponse, Token, PasswordResetRequest, PasswordReset, MessageResponse
)
from app.domains.identity.services import IdentityService

router = APIRouter(prefix="/auth", tags=["authentication"])


def set_session_cookie(response: Response, token: str, persistent: bool = True) -> None:
    """HTTP-only cookie сессии; без max_age живет до закрытия браузера"""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=int(session_lifetime().total_seconds()) if persistent else None,
        httponly=True,
        samesite="lax",
        secure=not settings.is_development,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.session_cookie_name)


def token_response(user: User, token: str) -> Token:
    return Token(
        access_token=token,
        expires_in=int(session_lifetime().total_seconds()),
        user=UserResponse.model_validate(user)
    )


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserCreate,
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Регистрация нового пользователя"""
    user = await identity_service.register_user(user_data)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=Token)
async def login(
    login_data: UserLogin,
    response: Response,
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Вход пользователя"""
    user, token = await identity_service.login_user(login_data)
    set_session_cookie(response, token, persistent=login_data.remember_me)
    return token_response(user, token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    current_session: Tuple[User, Dict[str, Any]] = Depends(get_current_session),
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Выход пользователя"""
    _, payload = current_session
    await identity_service.logout(payload)
    clear_session_cookie(response)
    return MessageResponse(message="Logged out")


@router.post("/request-reset", response_model=MessageResponse)
async def request_reset(
    reset_data: PasswordResetRequest,
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Запрос на сброс пароля; ответ не зависит от существования email"""
    await identity_service.request_password_reset(reset_data.email)
    return MessageResponse(message="If the email is registered, a reset link has been sent")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    reset_data: PasswordReset,
    identity_service: IdentityService = Depends(get_identity_service)
):
    await identity_service.reset_password(reset_data.token, reset_data.new_password)
    return MessageResponse(message="Password has been reset")
