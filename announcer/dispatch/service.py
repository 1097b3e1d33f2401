"""Announcement dispatch service.

Order of operations for one dispatch:
1. Validate content (title/body) — before targeting is looked at.
2. Parse and resolve the targeting descriptor.
3. Deliver through the notification writer.
4. Build the audit record and append it (flush, not commit).

Validation failures raise before any write.  Per-recipient failures in
manual mode are reported in the result, never raised.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from announcer.core.settings import Settings, get_settings
from announcer.db.repositories import AnnouncementRepository
from announcer.dispatch.content import AnnouncementContent
from announcer.dispatch.errors import (
    INVALID_FIELD,
    AnnouncementValidationError,
    DependencyUnavailable,
)
from announcer.dispatch.executor import DeliveryExecutor, FailureDetail, RecipientWriter
from announcer.dispatch.history import AnnouncementSummary, HistoryReader
from announcer.dispatch.outcome import OutcomeAggregator
from announcer.dispatch.targeting import RecipientResolver, parse_targeting
from announcer.dispatch.writer import NotificationWriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    record_id: UUID
    title: str
    sent_at: datetime
    delivered: int
    failed: int
    failure_details: list[FailureDetail]


class AnnouncementService:
    """Dispatch announcements and list dispatch history for one session."""

    def __init__(
        self,
        db_session: Session | None,
        writer: RecipientWriter | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.db = db_session
        self.settings = settings or get_settings()
        if writer is None and db_session is not None:
            writer = NotificationWriter(db_session)
        self.writer = writer

    def _require_dependencies(self) -> None:
        if self.db is None:
            raise DependencyUnavailable("Database connection is not available")
        if self.writer is None:
            raise DependencyUnavailable("Notification writer is not available")

    # -- dispatch -------------------------------------------------------------

    def dispatch(self, payload: Mapping[str, Any] | None, sender: str | None = None) -> DispatchResult:
        self._require_dependencies()

        if payload is None:
            payload = {}
        elif not isinstance(payload, Mapping):
            raise AnnouncementValidationError(INVALID_FIELD, "Request body must be a JSON object")

        content = AnnouncementContent.from_payload(
            payload,
            default_color=self.settings.default_color,
            default_icon=self.settings.default_icon,
        )
        targeting = payload.get("targeting")
        descriptor = parse_targeting(targeting)
        plan = RecipientResolver(active_state=self.settings.active_state).resolve(descriptor)

        outcome = DeliveryExecutor(self.writer).execute(plan, content)

        record = OutcomeAggregator(system_sender=self.settings.system_sender).aggregate(
            outcome, content, targeting, sender
        )
        try:
            AnnouncementRepository(self.db).add(record)
        except SQLAlchemyError:
            logger.error(
                "Audit record not stored after delivery: delivered=%d failed=%d",
                outcome.delivered,
                outcome.failed,
            )
            raise
        logger.info(
            "Announcement %s recorded: mode=%s delivered=%d failed=%d sender=%s",
            record.id,
            descriptor.mode,
            record.delivered,
            record.failed,
            record.sent_by,
        )

        return DispatchResult(
            record_id=record.id,
            title=record.title,
            sent_at=record.sent_at,
            delivered=outcome.delivered,
            failed=outcome.failed,
            failure_details=list(outcome.failure_details),
        )

    # -- history --------------------------------------------------------------

    def history(self) -> list[AnnouncementSummary]:
        if self.db is None:
            raise DependencyUnavailable("Database connection is not available")
        reader = HistoryReader(AnnouncementRepository(self.db))
        return reader.list(limit=self.settings.history_limit)
