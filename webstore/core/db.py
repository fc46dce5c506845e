from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from webstore.core.config import Settings

# Базовый класс для моделей
Base = declarative_base()


def create_engine(settings: Settings) -> AsyncEngine:
    """Асинхронный движок для хранилища"""
    return create_async_engine(settings.resolved_database_url, future=True, echo=settings.sql_echo)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Фабрика сессий"""
    return async_sessionmaker(bind=engine, expire_on_commit=False)


async def init_models(engine: AsyncEngine) -> None:
    """Создание таблиц, если их ещё нет"""
    # Регистрируем модели в Base.metadata
    import webstore.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
