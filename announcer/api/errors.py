"""Exception handlers mapping dispatch errors to JSON responses."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from announcer.dispatch.errors import INVALID_FIELD, AnnouncementValidationError, DependencyUnavailable

logger = logging.getLogger(__name__)


async def _validation_error_handler(_: Request, exc: AnnouncementValidationError) -> JSONResponse:
    logger.info("Announcement rejected: reason=%s", exc.reason)
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": exc.message, "reason": exc.reason},
    )


async def _request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Only reachable for bodies FastAPI cannot decode, e.g. malformed JSON.
    logger.info("Request rejected before dispatch: %d error(s)", len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Request body is not valid JSON", "reason": INVALID_FIELD},
    )


async def _dependency_error_handler(_: Request, exc: DependencyUnavailable) -> JSONResponse:
    logger.error("Dependency unavailable: %s", exc)
    return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AnnouncementValidationError, _validation_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(DependencyUnavailable, _dependency_error_handler)
