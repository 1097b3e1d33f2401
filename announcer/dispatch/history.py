"""Read-only projection of stored announcements into history summaries."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from announcer.db.models import Announcement
from announcer.db.repositories import AnnouncementRepository

HISTORY_LIMIT = 100


@dataclass(frozen=True)
class OutcomeSummary:
    delivered: int
    failed: int
    total: int


@dataclass(frozen=True)
class AnnouncementSummary:
    id: UUID
    title: str
    body: str
    priority: int
    color: str
    icon: str
    sent_at: datetime
    targeting_mode: str | None
    result: OutcomeSummary
    sent_by: str

    @classmethod
    def from_record(cls, record: Announcement) -> AnnouncementSummary:
        targeting = record.targeting if isinstance(record.targeting, dict) else {}
        return cls(
            id=record.id,
            title=record.title,
            body=record.body,
            priority=record.priority,
            color=record.color,
            icon=record.icon,
            sent_at=record.sent_at,
            targeting_mode=targeting.get("mode"),
            result=OutcomeSummary(
                delivered=record.delivered,
                failed=record.failed,
                total=record.total,
            ),
            sent_by=record.sent_by,
        )


class HistoryReader:
    def __init__(self, repository: AnnouncementRepository) -> None:
        self.repository = repository

    def list(self, limit: int = HISTORY_LIMIT) -> list[AnnouncementSummary]:
        """Most recent announcements first, at most *limit* of them."""
        records = self.repository.list_recent(limit=limit)
        return [AnnouncementSummary.from_record(record) for record in records]
