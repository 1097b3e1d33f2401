"""FastAPI dependency injection — database sessions, sender identity, services."""
from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from announcer.db.session import get_session_factory
from announcer.dispatch.service import AnnouncementService


def get_db() -> Generator[Session, None, None]:
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    db = get_session_factory()()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_sender(
    x_user_email: str | None = Header(default=None),
    x_user_mail: str | None = Header(default=None),
) -> str | None:
    """Identity of the acting sender, set by the upstream auth proxy."""
    return x_user_email or x_user_mail or None


def get_announcement_service(db: Session = Depends(get_db)) -> AnnouncementService:
    """Return an AnnouncementService bound to the current DB session."""
    return AnnouncementService(db)
