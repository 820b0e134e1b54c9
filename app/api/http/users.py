from fastapi import APIRouter, Depends, Response

from app.api.deps import get_current_user, get_identity_service
from app.api.http.auth import set_session_cookie
from app.domains.identity.entities import User
from app.domains.identity.schemas import UserResponse, UserUpdate, UserUpdateResponse
from app.domains.identity.services import IdentityService

router = APIRouter(prefix="/user", tags=["users"])


@router.get("", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Данные текущего пользователя"""
    return UserResponse.model_validate(current_user)


@router.put("", response_model=UserUpdateResponse)
async def update_me(
    update_data: UserUpdate,
    response: Response,
    current_user: User = Depends(get_current_user),
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Обновление имени и пароля текущего пользователя"""
    user, password_changed = await identity_service.update_user(current_user, update_data)

    access_token = None
    if password_changed:
        # Старые сессии отозваны, текущему клиенту выдаем новую
        access_token = identity_service.issue_token(user)
        set_session_cookie(response, access_token)

    return UserUpdateResponse(user=UserResponse.model_validate(user), access_token=access_token)
