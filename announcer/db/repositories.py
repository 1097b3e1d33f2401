from __future__ import annotations

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from announcer.db import models

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    model: type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    def add(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        self.db.flush()
        return entity

    def get(self, entity_id) -> ModelT | None:
        return self.db.get(self.model, entity_id)


class AnnouncementRepository(BaseRepository[models.Announcement]):
    """Append-only store for announcement audit records."""

    model = models.Announcement

    def get(self, entity_id: UUID | str) -> models.Announcement | None:
        if isinstance(entity_id, str):
            entity_id = UUID(entity_id)
        return self.db.get(self.model, entity_id)

    def list_recent(self, limit: int = 100) -> list[models.Announcement]:
        """Return up to *limit* records, newest ``sent_at`` first."""
        stmt = (
            select(self.model)
            .order_by(self.model.sent_at.desc(), self.model.id.desc())
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())
