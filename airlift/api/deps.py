"""FastAPI dependency injection wiring."""

from __future__ import annotations

from fastapi import Request

from airlift.settings import Settings, get_settings


def get_app_settings(request: Request) -> Settings:
    """Settings captured at startup, falling back to the process-wide ones."""
    return getattr(request.app.state, "settings", None) or get_settings()
