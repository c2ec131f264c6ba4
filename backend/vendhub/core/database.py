from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _async_url(url: str) -> str:
    # Hosting providers hand out postgres:// URLs; SQLAlchemy needs an explicit async driver
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def create_engine(url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    engine = create_async_engine(_async_url(url), future=True, echo=echo, **kwargs)
    if engine.dialect.name == "sqlite":
        # SQLite ignores foreign keys unless asked on every connection
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine
