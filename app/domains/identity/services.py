import logging
import uuid
from datetime import timedelta
from typing import Optional, Tuple, Dict, Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import unit_of_work
from app.core.errors import BadRequestError, UnauthorizedError
from app.core.security import create_access_token, verify_token, generate_token
from app.core.session_blacklist import SessionBlacklist
from app.db.models.notification import NotificationType
from app.db.repositories.user_repository import UserRepository
from app.db.repositories.team_repository import TeamRepository, TeamMemberRepository, InvitationRepository
from app.domains.identity.entities import User
from app.domains.identity.schemas import UserCreate, UserLogin, UserUpdate
from app.domains.notifications.services import NotificationService
from app.domains.teams.entities import TeamMember

logger = logging.getLogger(__name__)

# Одинаковый ответ для неизвестного email и неверного пароля
INVALID_CREDENTIALS = "Invalid email or password"


class IdentityService:
    """Сервис для работы с идентификацией и аутентификацией пользователей"""

    def __init__(self, session: AsyncSession, blacklist: Optional[SessionBlacklist] = None):
        self.session = session
        self.blacklist = blacklist
        self.user_repository = UserRepository(session)
        self.team_repository = TeamRepository(session)
        self.member_repository = TeamMemberRepository(session)
        self.invitation_repository = InvitationRepository(session)
        self.notification_service = NotificationService(session)

    async def register_user(self, user_data: UserCreate) -> User:
        """Регистрация нового пользователя, с приглашением в команду если есть токен"""
        if await self.user_repository.email_exists(user_data.email):
            raise BadRequestError("Email already registered")

        user = User.create_user(
            email=user_data.email,
            name=user_data.name,
            password=user_data.password
        )

        async with unit_of_work(self.session):
            user = await self.user_repository.create(user)
            if user_data.invitation_token:
                await self._join_by_invitation(user, user_data.invitation_token)

        logger.info(f"User registered: {user.email}")
        return user

    async def _join_by_invitation(self, user: User, token: str) -> None:
        invitation = await self.invitation_repository.get_by_token(token)
        if not invitation or not invitation.is_pending:
            return

        if invitation.is_expired():
            invitation.expire()
            await self.invitation_repository.update_status(invitation)
            return

        if invitation.email != user.email:
            logger.warning(f"Invitation {invitation.uuid} ignored: issued for another email")
            return

        await self.member_repository.create(
            TeamMember.create_member(user.uuid, invitation.team_id, invitation.role)
        )
        invitation.accept(user.uuid)
        await self.invitation_repository.update_status(invitation)

        team = await self.team_repository.get_by_uuid(invitation.team_id)
        await self.notification_service.notify(
            user_id=team.owner_id,
            type=NotificationType.MEMBER_JOINED,
            title="A new member joined your team",
            message=f"{user.name} joined the team",
            related_id=team.uuid
        )

    async def authenticate_user(self, login_data: UserLogin) -> Optional[User]:
        """Аутентификация пользователя"""
        user = await self.user_repository.get_by_email(login_data.email)

        if not user or not user.is_active:
            return None

        if not user.authenticate(login_data.password):
            return None

        return user

    async def login_user(self, login_data: UserLogin) -> Tuple[User, str]:
        """Вход пользователя и создание JWT токена"""
        user = await self.authenticate_user(login_data)

        if not user:
            logger.warning(f"Failed login attempt for {login_data.email}")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        user.record_login()
        async with unit_of_work(self.session):
            await self.user_repository.update(user)

        return user, self.issue_token(user)

    def issue_token(self, user: User) -> str:
        return create_access_token(data={"sub": str(user.uuid), "email": user.email})

    async def logout(self, token_payload: Dict[str, Any]) -> None:
        """Отзыв текущей сессии"""
        await self.blacklist.revoke_token(token_payload["jti"], float(token_payload["exp"]))

    async def request_password_reset(self, email: str) -> Optional[str]:
        """Выдача токена сброса пароля. Для неизвестного email молча ничего не делает"""
        user = await self.user_repository.get_by_email(email)
        if not user:
            return None

        token = generate_token()
        user.issue_reset_token(token, timedelta(seconds=settings.password_reset_token_expiry_seconds))
        async with unit_of_work(self.session):
            await self.user_repository.update(user)

        reset_url = f"{settings.app_base_url}/reset-password/{token}"
        if settings.is_development:
            logger.info(f"Password reset link for {user.email}: {reset_url}")
        return reset_url

    async def reset_password(self, token: str, new_password: str) -> None:
        """Установка нового пароля по токену"""
        user = await self.user_repository.get_by_reset_token(token)
        if not user or not user.has_valid_reset_token(token):
            raise BadRequestError("Invalid or expired reset token")

        async with unit_of_work(self.session):
            # Повторная проверка внутри транзакции
            current = await self.user_repository.get_by_reset_token(token)
            if not current or not current.has_valid_reset_token(token):
                raise BadRequestError("Reset token has already been used or expired")

            current.set_password(new_password)
            current.clear_reset_token()
            await self.user_repository.update(current)

        await self._revoke_all_sessions(user.uuid)
        logger.info(f"Password reset for user {user.uuid}")

    async def update_user(self, user: User, update_data: UserUpdate) -> Tuple[User, bool]:
        """Обновление имени и, при необходимости, пароля. Возвращает (user, password_changed)"""
        password_changed = False

        if update_data.current_password and update_data.new_password:
            if not user.authenticate(update_data.current_password):
                raise BadRequestError("Current password is incorrect")
            user.set_password(update_data.new_password)
            password_changed = True

        user.update_profile(name=update_data.name)
        async with unit_of_work(self.session):
            await self.user_repository.update(user)

        if password_changed:
            await self._revoke_all_sessions(user.uuid)
            logger.info(f"Password changed for user {user.uuid}")

        return user, password_changed

    async def _revoke_all_sessions(self, user_uuid: uuid.UUID) -> None:
        if self.blacklist is not None:
            await self.blacklist.revoke_user_sessions(user_uuid)

    async def get_current_user_from_token(self, token: str) -> Tuple[User, Dict[str, Any]]:
        """Получение текущего пользователя из JWT токена"""
        payload = verify_token(token)
        if not payload or not payload.get("sub"):
            raise UnauthorizedError()

        if self.blacklist is not None and await self.blacklist.is_revoked(payload):
            logger.warning(f"Rejected revoked session {payload.get('jti')}")
            raise UnauthorizedError("Session has been revoked")

        try:
            user_uuid = uuid.UUID(payload["sub"])
        except ValueError:
            raise UnauthorizedError()

        user = await self.user_repository.get_by_uuid(user_uuid)
        if user is None or not user.is_active:
            raise UnauthorizedError()

        return user, payload
