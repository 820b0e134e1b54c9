from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.core.config import settings

# Базовый класс для моделей
Base = declarative_base()


def enable_sqlite_foreign_keys(async_engine) -> None:
    """Включение каскадного удаления по внешним ключам для SQLite"""
    if async_engine.url.get_backend_name() != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Асинхронный движок
engine = create_async_engine(settings.database_url, future=True, echo=settings.sql_echo)
enable_sqlite_foreign_keys(engine)

# Сессии
SessionLocal = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


# Функция для dependency injection в FastAPI
async def get_db():
    async with SessionLocal() as session:
        yield session


@asynccontextmanager
async def unit_of_work(session: AsyncSession):
    """Одна транзакция на несколько операций репозиториев"""
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
