"""Outcome aggregation — builds the audit record for one dispatch.

The record embeds the caller's targeting data verbatim, not the resolved
plan.  Nothing is persisted here; the repository does the insert.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from announcer.db.models import Announcement
from announcer.dispatch.content import AnnouncementContent
from announcer.dispatch.executor import DeliveryOutcome

SYSTEM_SENDER = "System"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OutcomeAggregator:
    def __init__(
        self,
        system_sender: str = SYSTEM_SENDER,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.system_sender = system_sender
        self.clock = clock

    def aggregate(
        self,
        outcome: DeliveryOutcome,
        content: AnnouncementContent,
        targeting: Mapping[str, Any],
        sender: str | None,
    ) -> Announcement:
        return Announcement(
            id=uuid4(),
            title=content.title,
            body=content.body,
            priority=content.priority,
            color=content.color,
            icon=content.icon,
            action_url=content.action_url,
            targeting=dict(targeting),
            sent_at=self.clock(),
            sent_by=sender or self.system_sender,
            delivered=outcome.delivered,
            failed=outcome.failed,
            total=outcome.delivered + outcome.failed,
        )
