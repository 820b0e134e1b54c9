import uuid
from datetime import datetime, timedelta
from typing import Optional

from app.core.security import get_password_hash, verify_password


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        uuid: uuid.UUID,
        email: str,
        name: str,
        password_hash: str,
        profile_image: Optional[str] = None,
        reset_token: Optional[str] = None,
        reset_token_expiry: Optional[datetime] = None,
        last_login_at: Optional[datetime] = None,
        is_active: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.email = email
        self.name = name
        self.password_hash = password_hash
        self.profile_image = profile_image
        self.reset_token = reset_token
        self.reset_token_expiry = reset_token_expiry
        self.last_login_at = last_login_at
        self.is_active = is_active
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    def authenticate(self, password: str) -> bool:
        """Проверка пароля пользователя"""
        return verify_password(password, self.password_hash)

    def set_password(self, password: str) -> None:
        """Смена пароля"""
        self.password_hash = get_password_hash(password)
        self.updated_at = datetime.utcnow()

    def update_profile(self, name: Optional[str] = None) -> None:
        """Обновление профиля пользователя"""
        if name:
            self.name = name
        self.updated_at = datetime.utcnow()

    def record_login(self) -> None:
        self.last_login_at = datetime.utcnow()

    def issue_reset_token(self, token: str, lifetime: timedelta) -> None:
        """Выдача токена для сброса пароля"""
        self.reset_token = token
        self.reset_token_expiry = datetime.utcnow() + lifetime

    def has_valid_reset_token(self, token: str) -> bool:
        if not self.reset_token or self.reset_token != token:
            return False
        return self.reset_token_expiry is not None and self.reset_token_expiry > datetime.utcnow()

    def clear_reset_token(self) -> None:
        self.reset_token = None
        self.reset_token_expiry = None

    @classmethod
    def create_user(cls, email: str, name: str, password: str) -> "User":
        """Создание нового пользователя с хешированием пароля"""
        return cls(
            uuid=uuid.uuid4(),
            email=email.lower(),
            name=name,
            password_hash=get_password_hash(password)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"User(uuid={self.uuid}, email={self.email}, name={self.name})"
