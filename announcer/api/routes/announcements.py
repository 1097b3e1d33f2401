"""Announcement routes — dispatch, history, and connectivity check."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from announcer.api.deps import get_announcement_service, get_sender
from announcer.dispatch.errors import DispatchError
from announcer.dispatch.history import AnnouncementSummary
from announcer.dispatch.service import AnnouncementService, DispatchResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/announcements", tags=["announcements"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _serialize_result(result: DispatchResult) -> dict:
    return {
        "id": str(result.record_id),
        "title": result.title,
        "sentAt": _isoformat(result.sent_at),
        "delivered": result.delivered,
        "failed": result.failed,
        "failures": [
            {"recipientId": f.recipient_id, "reason": f.reason}
            for f in result.failure_details
        ],
    }


def _serialize_summary(summary: AnnouncementSummary) -> dict:
    return {
        "id": str(summary.id),
        "title": summary.title,
        "body": summary.body,
        "priority": summary.priority,
        "color": summary.color,
        "icon": summary.icon,
        "sentAt": _isoformat(summary.sent_at),
        "targetingMode": summary.targeting_mode,
        "result": {
            "delivered": summary.result.delivered,
            "failed": summary.result.failed,
            "total": summary.result.total,
        },
        "sentBy": summary.sent_by,
    }


def _server_error(exc: Exception) -> JSONResponse:
    if isinstance(exc, OperationalError):
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Database connection error"},
        )
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "detail": str(exc)},
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.post("", summary="Dispatch an announcement")
def dispatch_announcement(
    payload: Any = Body(default=None),
    service: AnnouncementService = Depends(get_announcement_service),
    sender: str | None = Depends(get_sender),
):
    try:
        result = service.dispatch(payload, sender=sender)
    except DispatchError:
        raise
    except Exception as exc:
        logger.exception("Unexpected failure dispatching announcement")
        service.db.rollback()
        return _server_error(exc)

    return {
        "success": True,
        "message": f"Announcement sent to {result.delivered} recipient(s)",
        "data": _serialize_result(result),
    }


@router.get("", summary="List sent announcements, newest first")
def list_announcements(service: AnnouncementService = Depends(get_announcement_service)):
    try:
        summaries = service.history()
    except DispatchError:
        raise
    except Exception as exc:
        logger.exception("Unexpected failure listing announcements")
        return _server_error(exc)

    return {"success": True, "data": [_serialize_summary(s) for s in summaries]}


@router.get("/test", summary="Connectivity check")
def connectivity_check() -> dict[str, Any]:
    return {
        "success": True,
        "message": "Announcements endpoint is up",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
