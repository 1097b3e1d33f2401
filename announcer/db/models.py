from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, JSON, String, Text, func, text as sql_text
from sqlalchemy.orm import Mapped, mapped_column

from announcer.db.base import Base


class Recipient(Base):
    """An addressable user account that can receive announcements.

    Accounts are provisioned by the identity service; this core only reads
    them.  ``company``, ``role`` and ``permission`` are the attributes the
    filtered targeting mode matches against.
    """

    __tablename__ = "recipients"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    state: Mapped[str] = mapped_column(
        String(32), nullable=False, default="active", server_default=sql_text("'active'"), index=True
    )
    company: Mapped[str | None] = mapped_column(String(256), nullable=True)
    role: Mapped[str | None] = mapped_column(String(128), nullable=True)
    permission: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class RecipientNotification(Base):
    """One notification document stored against a recipient."""

    __tablename__ = "recipient_notifications"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    recipient_id: Mapped[str] = mapped_column(
        ForeignKey("recipients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default=sql_text("1"))
    color: Mapped[str] = mapped_column(String(32), nullable=False)
    icon: Mapped[str] = mapped_column(String(64), nullable=False)
    action_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    read: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sql_text("false")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class Announcement(Base):
    """Append-only audit record, one row per dispatch.

    ``targeting`` holds the descriptor exactly as the caller sent it.
    Rows are never updated or deleted by the dispatch core.
    """

    __tablename__ = "announcements"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default=sql_text("1"))
    color: Mapped[str] = mapped_column(String(32), nullable=False)
    icon: Mapped[str] = mapped_column(String(64), nullable=False)
    action_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    targeting: Mapped[dict] = mapped_column(JSON, nullable=False)
    sent_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    sent_by: Mapped[str] = mapped_column(
        String(320), nullable=False, default="System", server_default=sql_text("'System'")
    )
    delivered: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=sql_text("0"))
    failed: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=sql_text("0"))
    total: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=sql_text("0"))
