import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging() -> None:
    """Настройка логирования приложения"""
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)

    # SQL пишем только если явно включено
    if not settings.sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
