#!/usr/bin/env python3
"""Seed demo recipients so announcements have someone to reach.

Usage:
    python scripts/seed_demo.py          # uses DATABASE_URL from env / .env
    DATABASE_URL=... python scripts/seed_demo.py
"""
from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from announcer.core.settings import get_settings
from announcer.db.base import Base
from announcer.db.models import Recipient


def seed(session: Session) -> None:
    """Insert a small mix of active and inactive recipients."""
    demo_people = [
        # (id, name, email, state, company, role, permission)
        ("665f1c2a9b1e4a0001a1b001", "Alice Johnson", "alice.johnson@example.com", "active", "Acme", "Engineer", "user"),
        ("665f1c2a9b1e4a0001a1b002", "Bob Smith", "bob.smith@example.com", "active", "Acme", "Manager", "admin"),
        ("665f1c2a9b1e4a0001a1b003", "Priya Patel", "priya.patel@example.in", "active", "Globex", "Engineer", "user"),
        ("665f1c2a9b1e4a0001a1b004", "Carlos Rivera", "carlos.r@example.com", "inactive", "Globex", "Analyst", "user"),
        ("665f1c2a9b1e4a0001a1b005", "Fatima Khan", "fatima.khan@example.co.uk", "active", "Initech", "Analyst", "supervisor"),
        ("665f1c2a9b1e4a0001a1b006", "David Chen", "david.chen@example.com", "inactive", "Initech", "Manager", "admin"),
    ]

    for rid, name, email, state, company, role, permission in demo_people:
        session.merge(
            Recipient(
                id=rid,
                name=name,
                email=email,
                state=state,
                company=company,
                role=role,
                permission=permission,
            )
        )

    session.commit()
    print(f"Seeded {len(demo_people)} Recipients.")


def main() -> None:
    settings = get_settings()
    engine = create_engine(settings.database_url)
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        seed(session)


if __name__ == "__main__":
    main()
