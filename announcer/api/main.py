"""FastAPI application factory.

Assembles CORS, error handlers, and all API routers.
This module is the authoritative app object — announcer/main.py re-exports it.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from announcer.api.errors import register_exception_handlers
from announcer.api.routes.announcements import router as announcements_router
from announcer.api.routes.health import router as health_router
from announcer.core.logging import setup_logging
from announcer.core.settings import get_settings


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging()
    yield


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS — restrict origins in production at the proxy
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health_router)
app.include_router(announcements_router)
