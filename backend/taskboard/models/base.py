import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import Column, DateTime, Uuid
from sqlalchemy.orm import as_declarative, declared_attr


@as_declarative()
class Base:
    id: Any
    __name__: str

    # Table names are the lowercased class name: user, project, projectmember, task
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()


class BaseModel(Base):
    """
    Abstract row with a UUID key and naive-UTC audit timestamps.

    ``Uuid`` is the dialect-neutral type: native UUID on PostgreSQL, CHAR(32)
    elsewhere, so the same models run against SQLite in tests.
    """
    __abstract__ = True

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"
