"""
SQLAlchemy ORM models.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase

from auth.tokens import generate_access_token


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(128), unique=True, nullable=False)
    user_name = Column("userName", String(64), unique=True, nullable=False)
    password_hash = Column("password", String(255), nullable=False)
    access_token = Column(
        "accessToken",
        String(512),
        unique=True,
        nullable=False,
        default=generate_access_token,
    )
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"<User id={self.id} userName={self.user_name!r}>"
