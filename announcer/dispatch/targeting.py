"""Targeting descriptors and recipient resolution.

Three addressing modes:
- ``all``: every recipient in the active state
- ``filtered``: active recipients matching at least one supplied criterion
- ``manual``: an explicit, ordered list of recipient ids (no state filter)

``parse_targeting()`` turns request data into a descriptor;
``RecipientResolver.resolve()`` turns a descriptor into a delivery plan.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement

from announcer.db.models import Recipient
from announcer.dispatch.errors import (
    INVALID_FIELD,
    MISSING_RECIPIENTS,
    MISSING_TARGETING,
    UNKNOWN_TARGETING_MODE,
    AnnouncementValidationError,
)

logger = logging.getLogger(__name__)

MODE_ALL = "all"
MODE_FILTERED = "filtered"
MODE_MANUAL = "manual"

VALID_MODES: frozenset[str] = frozenset({MODE_ALL, MODE_FILTERED, MODE_MANUAL})


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AllRecipients:
    mode: ClassVar[str] = MODE_ALL


@dataclass(frozen=True)
class FilteredRecipients:
    mode: ClassVar[str] = MODE_FILTERED

    companies: tuple[str, ...] = ()
    roles: tuple[str, ...] = ()
    permissions: tuple[str, ...] = ()


@dataclass(frozen=True)
class ManualRecipients:
    mode: ClassVar[str] = MODE_MANUAL

    recipient_ids: tuple[str, ...] = ()


TargetingDescriptor = Union[AllRecipients, FilteredRecipients, ManualRecipients]


def _string_list(container: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = container.get(key)
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise AnnouncementValidationError(INVALID_FIELD, f"{key} must be a list of strings")
    return tuple(value)


def parse_targeting(data: Any) -> TargetingDescriptor:
    """Build a descriptor from request data such as ``{"mode": "all"}``.

    Raises ``AnnouncementValidationError`` when the data is missing, names
    no mode, or names an unknown mode.
    """
    if not isinstance(data, Mapping) or not data.get("mode"):
        raise AnnouncementValidationError(MISSING_TARGETING, "Targeting must specify a mode")

    mode = data["mode"]
    if mode == MODE_ALL:
        return AllRecipients()

    if mode == MODE_FILTERED:
        criteria = data.get("filter") or {}
        if not isinstance(criteria, Mapping):
            raise AnnouncementValidationError(INVALID_FIELD, "filter must be an object")
        return FilteredRecipients(
            companies=_string_list(criteria, "companies"),
            roles=_string_list(criteria, "roles"),
            permissions=_string_list(criteria, "permissions"),
        )

    if mode == MODE_MANUAL:
        return ManualRecipients(recipient_ids=_string_list(data, "recipients"))

    raise AnnouncementValidationError(
        UNKNOWN_TARGETING_MODE,
        f"Unknown targeting mode {mode!r}; must be one of {sorted(VALID_MODES)}",
    )


# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RecipientFilter:
    """Selection predicate for the bulk modes.

    A recipient matches when its state equals ``state`` and, if any
    candidate list is non-empty, its attribute appears in at least one of
    the non-empty lists.
    """

    state: str
    companies: tuple[str, ...] = ()
    roles: tuple[str, ...] = ()
    permissions: tuple[str, ...] = ()

    def to_clause(self) -> ColumnElement[bool]:
        """Render the predicate as a SQL condition over ``recipients``."""
        state_clause = Recipient.state == self.state

        disjuncts = []
        if self.companies:
            disjuncts.append(Recipient.company.in_(self.companies))
        if self.roles:
            disjuncts.append(Recipient.role.in_(self.roles))
        if self.permissions:
            disjuncts.append(Recipient.permission.in_(self.permissions))

        if not disjuncts:
            return state_clause
        return and_(state_clause, or_(*disjuncts))


@dataclass(frozen=True)
class BulkPlan:
    mode: str
    recipient_filter: RecipientFilter


@dataclass(frozen=True)
class ExplicitPlan:
    recipient_ids: tuple[str, ...]

    mode: ClassVar[str] = MODE_MANUAL


ResolvedPlan = Union[BulkPlan, ExplicitPlan]


# ---------------------------------------------------------------------------
# RecipientResolver
# ---------------------------------------------------------------------------

class RecipientResolver:
    """Classify a descriptor and build its delivery plan."""

    def __init__(self, active_state: str = "active") -> None:
        self.active_state = active_state

    def resolve(self, descriptor: TargetingDescriptor) -> ResolvedPlan:
        if isinstance(descriptor, AllRecipients):
            plan: ResolvedPlan = BulkPlan(
                mode=MODE_ALL,
                recipient_filter=RecipientFilter(state=self.active_state),
            )
        elif isinstance(descriptor, FilteredRecipients):
            plan = BulkPlan(
                mode=MODE_FILTERED,
                recipient_filter=RecipientFilter(
                    state=self.active_state,
                    companies=descriptor.companies,
                    roles=descriptor.roles,
                    permissions=descriptor.permissions,
                ),
            )
        elif isinstance(descriptor, ManualRecipients):
            if not descriptor.recipient_ids:
                raise AnnouncementValidationError(
                    MISSING_RECIPIENTS, "At least one recipient must be selected"
                )
            plan = ExplicitPlan(recipient_ids=descriptor.recipient_ids)
        else:
            raise AnnouncementValidationError(
                UNKNOWN_TARGETING_MODE,
                f"Unsupported targeting descriptor {type(descriptor).__name__}",
            )

        logger.info("Resolved targeting mode=%s", plan.mode)
        return plan
