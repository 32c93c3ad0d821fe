"""
faceless/store/models.py
SQLAlchemy ORM model for the renders table.

Adapted for SQLite: UUIDs stored as String(36), request choices stored as JSON.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.types import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


def _new_uuid() -> str:
    return str(uuid.uuid4())


RENDER_STATUSES = ("waiting", "rendering", "succeeded", "failed")


class Render(TimestampMixin, Base):
    __tablename__ = "renders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_uuid)
    kind: Mapped[str] = mapped_column(String(40), nullable=False, default="fake_text")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="waiting")
    render_id: Mapped[str] = mapped_column(String(120), nullable=False, default="pending")
    video_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    choices: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "status": self.status,
            "render_id": self.render_id,
            "video_url": self.video_url,
            "choices": self.choices or {},
            "error": self.error,
        }
