"""Delivery executor.

Bulk plans become one ``write_matching`` call whose count is reported as
``delivered``; the writer exposes no per-recipient failures for bulk
writes, so ``failed`` is always 0 there.  Explicit plans write each id in
input order with one attempt per recipient, collecting failures without
stopping the loop.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from announcer.dispatch.content import AnnouncementContent
from announcer.dispatch.targeting import BulkPlan, ExplicitPlan, RecipientFilter, ResolvedPlan
from announcer.dispatch.writer import WriteResult

logger = logging.getLogger(__name__)


class RecipientWriter(Protocol):
    def write_matching(self, recipient_filter: RecipientFilter, content: AnnouncementContent) -> int: ...

    def write_one(self, recipient_id: str, content: AnnouncementContent) -> WriteResult: ...


@dataclass(frozen=True)
class FailureDetail:
    recipient_id: str
    reason: str


@dataclass
class DeliveryOutcome:
    delivered: int = 0
    failed: int = 0
    failure_details: list[FailureDetail] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.delivered + self.failed


class DeliveryExecutor:
    """Apply a resolved plan through a ``RecipientWriter``."""

    def __init__(self, writer: RecipientWriter) -> None:
        self.writer = writer

    def execute(self, plan: ResolvedPlan, content: AnnouncementContent) -> DeliveryOutcome:
        if isinstance(plan, BulkPlan):
            return self._execute_bulk(plan, content)
        if isinstance(plan, ExplicitPlan):
            return self._execute_explicit(plan, content)
        raise TypeError(f"Unsupported plan {type(plan).__name__}")

    # -- bulk ----------------------------------------------------------------

    def _execute_bulk(self, plan: BulkPlan, content: AnnouncementContent) -> DeliveryOutcome:
        delivered = self.writer.write_matching(plan.recipient_filter, content)
        logger.info("Bulk delivery mode=%s delivered=%d", plan.mode, delivered)
        return DeliveryOutcome(delivered=delivered)

    # -- explicit ------------------------------------------------------------

    def _execute_explicit(self, plan: ExplicitPlan, content: AnnouncementContent) -> DeliveryOutcome:
        outcome = DeliveryOutcome()
        for recipient_id in plan.recipient_ids:
            result = self.writer.write_one(recipient_id, content)
            if result.ok:
                outcome.delivered += 1
                continue
            outcome.failed += 1
            outcome.failure_details.append(
                FailureDetail(recipient_id=recipient_id, reason=result.reason or "Unknown error")
            )
            logger.warning("Delivery failed for recipient %s: %s", recipient_id, result.reason)

        logger.info(
            "Manual delivery delivered=%d failed=%d", outcome.delivered, outcome.failed
        )
        return outcome
