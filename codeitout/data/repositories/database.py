from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from codeitout.config import Config

async_engine = create_async_engine(url=Config.DATABASE_URL)

async_session_factory = async_sessionmaker(
    bind=async_engine, class_=AsyncSession, expire_on_commit=False
)


async def init_db() -> None:
    """
    Creates the users and problems tables if they do not exist yet.
    """
    # Register table models on SQLModel.metadata
    from codeitout.data.schemas import Problem, User  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get an async session for the application database.
    """
    async with async_session_factory() as session:
        yield session
