from typing import Optional, List, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
import uuid

from app.db.models.user import User as UserModel

if TYPE_CHECKING:
    from app.domains.identity.entities import User


class UserRepository:
    """Репозиторий для работы с пользователями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: "User") -> "User":
        """Создание нового пользователя"""
        db_user = UserModel(
            uuid=user.uuid,
            email=user.email,
            name=user.name,
            password_hash=user.password_hash,
            is_active=user.is_active
        )

        self.session.add(db_user)
        await self.session.flush()
        await self.session.refresh(db_user)
        return self._to_domain(db_user)

    async def get_by_uuid(self, user_uuid: uuid.UUID) -> Optional["User"]:
        """Получение пользователя по UUID"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.uuid == user_uuid)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def get_by_uuids(self, user_uuids: List[uuid.UUID]) -> List["User"]:
        if not user_uuids:
            return []
        result = await self.session.execute(
            select(UserModel).where(UserModel.uuid.in_(user_uuids))
        )
        return [self._to_domain(db_user) for db_user in result.scalars().all()]

    async def get_by_email(self, email: str) -> Optional["User"]:
        """Получение пользователя по email"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email.lower())
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def get_by_reset_token(self, token: str) -> Optional["User"]:
        """Получение пользователя по токену сброса пароля"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.reset_token == token)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def email_exists(self, email: str) -> bool:
        """Проверка существования email"""
        result = await self.session.execute(
            select(UserModel.uuid).where(UserModel.email == email.lower())
        )
        return result.scalar_one_or_none() is not None

    async def update(self, user: "User") -> "User":
        """Обновление пользователя"""
        stmt = (
            update(UserModel)
            .where(UserModel.uuid == user.uuid)
            .values(
                name=user.name,
                password_hash=user.password_hash,
                profile_image=user.profile_image,
                reset_token=user.reset_token,
                reset_token_expiry=user.reset_token_expiry,
                last_login_at=user.last_login_at,
                is_active=user.is_active,
                updated_at=user.updated_at
            )
        )

        await self.session.execute(stmt)
        await self.session.flush()
        return user

    def _to_domain(self, db_user: UserModel) -> "User":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.identity.entities import User

        return User(
            uuid=db_user.uuid,
            email=db_user.email,
            name=db_user.name,
            password_hash=db_user.password_hash,
            profile_image=db_user.profile_image,
            reset_token=db_user.reset_token,
            reset_token_expiry=db_user.reset_token_expiry,
            last_login_at=db_user.last_login_at,
            is_active=db_user.is_active,
            created_at=db_user.created_at,
            updated_at=db_user.updated_at
        )
