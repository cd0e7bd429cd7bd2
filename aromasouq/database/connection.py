from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from aromasouq.config import settings


def _engine_kwargs() -> dict:
    if settings.is_sqlite:
        return {"connect_args": {"check_same_thread": False}, "echo": settings.DEBUG}

    kwargs = {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_pre_ping": True,
        "pool_recycle": 3600,  # recycle connections hourly
        "echo": settings.DEBUG,
    }
    if settings.DB_SCHEMA:
        kwargs["connect_args"] = {"options": f"-csearch_path={settings.DB_SCHEMA}"}
    return kwargs


engine = create_engine(settings.DATABASE_URL, **_engine_kwargs())

# expire_on_commit=False keeps loaded attributes usable after commit within a request.
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)
