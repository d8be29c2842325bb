from datetime import datetime, timezone

from sqlalchemy import Column, Integer, DateTime
from agroconnect.db.session import Base


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel(Base):
    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # set in Python so ordering by updated_at keeps sub-second resolution
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
