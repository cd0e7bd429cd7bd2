import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import text

from aromasouq.config import settings
from aromasouq.database.connection import engine
from aromasouq.models import Base


def init_db():
    """Create the schema (PostgreSQL) and every table."""
    try:
        if settings.DB_SCHEMA and not settings.is_sqlite:
            with engine.connect() as conn:
                conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {settings.DB_SCHEMA}"))
                conn.commit()

        Base.metadata.create_all(bind=engine)
        print(f"Database initialized: {len(Base.metadata.tables)} tables")

    except Exception as e:
        print(f"Database initialization failed: {str(e)}")
        raise


if __name__ == "__main__":
    init_db()
