"""Notification write primitive.

Stores notification documents against recipients.  Bulk writes select
matching recipients and insert in one statement; single writes run in a
savepoint so a failing recipient never poisons the surrounding
transaction.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import uuid4

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from announcer.db.models import Recipient, RecipientNotification
from announcer.dispatch.content import AnnouncementContent
from announcer.dispatch.targeting import RecipientFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteResult:
    """Outcome of writing one notification."""

    recipient_id: str
    ok: bool
    reason: str | None = None

    @classmethod
    def success(cls, recipient_id: str) -> WriteResult:
        return cls(recipient_id=recipient_id, ok=True)

    @classmethod
    def failure(cls, recipient_id: str, reason: str) -> WriteResult:
        return cls(recipient_id=recipient_id, ok=False, reason=reason)


class NotificationWriter:
    """SQLAlchemy-backed writer bound to one session."""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def write_matching(
        self,
        recipient_filter: RecipientFilter,
        content: AnnouncementContent,
    ) -> int:
        """Write *content* to every recipient matching *recipient_filter*.

        Returns the number of notifications written.
        """
        recipient_ids = self.db.execute(
            select(Recipient.id).where(recipient_filter.to_clause())
        ).scalars().all()
        if not recipient_ids:
            return 0

        fields = content.notification_fields()
        rows = [{"id": uuid4(), "recipient_id": rid, **fields} for rid in recipient_ids]
        self.db.execute(insert(RecipientNotification), rows)
        return len(rows)

    def write_one(self, recipient_id: str, content: AnnouncementContent) -> WriteResult:
        """Write *content* to a single recipient; never raises for data errors."""
        if not recipient_id or not recipient_id.strip():
            return WriteResult.failure(recipient_id, "Recipient id is empty")

        if self.db.get(Recipient, recipient_id) is None:
            return WriteResult.failure(recipient_id, f"Recipient {recipient_id} not found")

        try:
            with self.db.begin_nested():
                self.db.add(
                    RecipientNotification(
                        recipient_id=recipient_id,
                        **content.notification_fields(),
                    )
                )
                self.db.flush()
        except SQLAlchemyError as exc:
            logger.warning("Notification insert failed for recipient %s: %s", recipient_id, exc)
            return WriteResult.failure(recipient_id, str(exc))
        return WriteResult.success(recipient_id)
