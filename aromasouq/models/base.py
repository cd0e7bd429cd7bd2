import uuid

from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import declarative_base, declared_attr

from aromasouq.utils.timezone_utils import utc_now

Base = declarative_base()


def new_uuid() -> str:
    return str(uuid.uuid4())


class TimestampMixin:
    """created_at / updated_at columns"""

    @declared_attr
    def created_at(cls):
        return Column(
            DateTime(timezone=True),
            default=utc_now,
            server_default=func.now(),
            nullable=False,
        )

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True),
            default=utc_now,
            server_default=func.now(),
            onupdate=utc_now,
            nullable=False,
        )


class BaseModel(Base, TimestampMixin):
    """Base class for every table"""

    __abstract__ = True

