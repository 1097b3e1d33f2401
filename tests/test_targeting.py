"""Tests for announcer/dispatch/targeting.py."""
from __future__ import annotations

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from announcer.db.base import Base
from announcer.db.models import Recipient
from announcer.dispatch.errors import (
    INVALID_FIELD,
    MISSING_RECIPIENTS,
    MISSING_TARGETING,
    UNKNOWN_TARGETING_MODE,
    AnnouncementValidationError,
)
from announcer.dispatch.targeting import (
    AllRecipients,
    BulkPlan,
    ExplicitPlan,
    FilteredRecipients,
    ManualRecipients,
    RecipientFilter,
    RecipientResolver,
    parse_targeting,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def db_session():
    engine = create_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    with Session() as session:
        yield session


def _matches(recipient_filter: RecipientFilter, recipient) -> bool:
    """Reference predicate evaluated in Python, one recipient at a time."""
    if recipient.state != recipient_filter.state:
        return False
    candidates = [
        (recipient_filter.companies, recipient.company),
        (recipient_filter.roles, recipient.role),
        (recipient_filter.permissions, recipient.permission),
    ]
    supplied = [(values, attr) for values, attr in candidates if values]
    if not supplied:
        return True
    return any(attr in values for values, attr in supplied)


def _seed(db_session) -> None:
    rows = [
        ("a1", "active", "Acme", "Engineer", "user"),
        ("a2", "active", "Acme", "Manager", "admin"),
        ("g1", "active", "Globex", "Engineer", "user"),
        ("g2", "inactive", "Globex", "Analyst", "admin"),
        ("i1", "active", "Initech", "Analyst", "supervisor"),
    ]
    for rid, state, company, role, permission in rows:
        db_session.add(
            Recipient(id=rid, state=state, company=company, role=role, permission=permission)
        )
    db_session.flush()


def _matching_ids(db_session, recipient_filter: RecipientFilter) -> set[str]:
    stmt = select(Recipient.id).where(recipient_filter.to_clause())
    return set(db_session.execute(stmt).scalars().all())


# ===========================================================================
# parse_targeting
# ===========================================================================

class TestParseTargeting:
    def test_all_mode(self):
        assert parse_targeting({"mode": "all"}) == AllRecipients()

    def test_filtered_mode_reads_criteria(self):
        descriptor = parse_targeting(
            {"mode": "filtered", "filter": {"companies": ["Acme"], "permissions": ["admin"]}}
        )
        assert descriptor == FilteredRecipients(companies=("Acme",), permissions=("admin",))

    def test_filtered_mode_without_filter_object(self):
        assert parse_targeting({"mode": "filtered"}) == FilteredRecipients()

    def test_manual_mode_keeps_order(self):
        descriptor = parse_targeting({"mode": "manual", "recipients": ["u3", "u1", "u2"]})
        assert descriptor == ManualRecipients(recipient_ids=("u3", "u1", "u2"))

    def test_manual_mode_without_recipients_parses_empty(self):
        assert parse_targeting({"mode": "manual"}) == ManualRecipients()

    @pytest.mark.parametrize("data", [None, {}, {"mode": ""}, "all", ["all"]])
    def test_missing_targeting(self, data):
        with pytest.raises(AnnouncementValidationError) as exc_info:
            parse_targeting(data)
        assert exc_info.value.reason == MISSING_TARGETING

    def test_unknown_mode(self):
        with pytest.raises(AnnouncementValidationError) as exc_info:
            parse_targeting({"mode": "everyone"})
        assert exc_info.value.reason == UNKNOWN_TARGETING_MODE

    def test_non_list_criterion_rejected(self):
        with pytest.raises(AnnouncementValidationError) as exc_info:
            parse_targeting({"mode": "filtered", "filter": {"companies": "Acme"}})
        assert exc_info.value.reason == INVALID_FIELD

    def test_non_string_recipient_rejected(self):
        with pytest.raises(AnnouncementValidationError) as exc_info:
            parse_targeting({"mode": "manual", "recipients": ["u1", 2]})
        assert exc_info.value.reason == INVALID_FIELD


# ===========================================================================
# RecipientResolver
# ===========================================================================

class TestResolve:
    def setup_method(self):
        self.resolver = RecipientResolver(active_state="active")

    def test_all_resolves_to_active_state_filter(self):
        plan = self.resolver.resolve(AllRecipients())

        assert isinstance(plan, BulkPlan)
        assert plan.mode == "all"
        assert plan.recipient_filter == RecipientFilter(state="active")

    def test_empty_filter_equals_all(self):
        plan_all = self.resolver.resolve(AllRecipients())
        plan_filtered = self.resolver.resolve(FilteredRecipients())

        assert plan_filtered.mode == "filtered"
        assert plan_filtered.recipient_filter == plan_all.recipient_filter

    def test_manual_resolves_to_explicit_ids(self):
        plan = self.resolver.resolve(ManualRecipients(recipient_ids=("u1", "u2")))

        assert isinstance(plan, ExplicitPlan)
        assert plan.recipient_ids == ("u1", "u2")

    def test_manual_without_ids_rejected(self):
        with pytest.raises(AnnouncementValidationError) as exc_info:
            self.resolver.resolve(ManualRecipients())
        assert exc_info.value.reason == MISSING_RECIPIENTS

    def test_unrecognised_descriptor_rejected(self):
        with pytest.raises(AnnouncementValidationError) as exc_info:
            self.resolver.resolve(object())
        assert exc_info.value.reason == UNKNOWN_TARGETING_MODE


# ===========================================================================
# RecipientFilter.to_clause
# ===========================================================================

class TestFilterClause:
    def test_state_only_selects_active_set(self, db_session):
        _seed(db_session)
        assert _matching_ids(db_session, RecipientFilter(state="active")) == {"a1", "a2", "g1", "i1"}

    def test_one_criterion(self, db_session):
        _seed(db_session)
        f = RecipientFilter(state="active", companies=("Globex",))
        assert _matching_ids(db_session, f) == {"g1"}

    def test_or_across_criteria(self, db_session):
        _seed(db_session)
        f = RecipientFilter(state="active", roles=("Analyst",), permissions=("admin",))
        assert _matching_ids(db_session, f) == {"a2", "i1"}

    @pytest.mark.parametrize(
        "f",
        [
            RecipientFilter(state="active"),
            RecipientFilter(state="inactive"),
            RecipientFilter(state="active", companies=("Acme",), roles=("Analyst",)),
            RecipientFilter(state="active", permissions=("admin",)),
            RecipientFilter(state="active", companies=("Globex",), roles=("Manager",), permissions=("supervisor",)),
            RecipientFilter(state="active", companies=("Nobody",)),
        ],
    )
    def test_clause_agrees_with_reference_predicate(self, db_session, f):
        _seed(db_session)
        everyone = db_session.execute(select(Recipient)).scalars().all()
        expected = {r.id for r in everyone if _matches(f, r)}
        assert _matching_ids(db_session, f) == expected
