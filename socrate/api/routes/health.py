"""
Health check endpoint.
"""

import time
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from socrate.api.dependencies import get_session_manager
from socrate.session.manager import SessionManager

router = APIRouter(tags=["health"])

# Track startup time for uptime
_start_time: Optional[float] = None


def set_start_time(t: float):
    """Set application start time."""
    global _start_time
    _start_time = t


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    active_sessions: int
    gateway_mode: str
    uptime_seconds: float


@router.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request,
    session_manager: SessionManager = Depends(get_session_manager),
):
    """
    Service health check.
    Returns status, live session count, gateway mode, uptime.
    """
    gateway = request.app.state.conversation.gateway
    gateway_mode = "http" if gateway.proxy_url else "in-process"

    uptime_seconds = 0.0
    if _start_time:
        uptime_seconds = round(time.time() - _start_time, 2)

    return HealthResponse(
        status="healthy",
        active_sessions=session_manager.active_count(),
        gateway_mode=gateway_mode,
        uptime_seconds=uptime_seconds,
    )
