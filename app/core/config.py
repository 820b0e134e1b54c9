from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./manualhub.db"
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    sql_echo: bool = False

    # Сессии
    session_max_age_days: int = 30
    session_cookie_name: str = "session_token"
    redis_url: str = "redis://localhost:6379/0"

    environment: str = "development"
    log_level: str = "INFO"
    app_base_url: str = "http://localhost:8000"
    cors_origins: List[str] = ["*"]

    # Пароли и токены
    password_min_length: int = 8
    token_byte_size: int = 32
    password_reset_token_expiry_seconds: int = 3600
    invitation_expiry_days: int = 7

    # Загрузка файлов
    upload_dir: str = "uploads"
    max_upload_size: int = 10 * 1024 * 1024
    allowed_file_types: List[str] = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "video/mp4",
        "video/webm",
    ]

    # PostgreSQL variables for Docker
    postgres_user: str = ""
    postgres_password: str = ""
    postgres_db: str = ""

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


settings = Settings()
