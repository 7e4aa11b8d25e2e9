"""
FastAPI dependency injection for Socrate services.
"""

from fastapi import Depends, Request

from socrate.core.conversation import ConversationController
from socrate.core.diary import DiaryExporter
from socrate.core.socratic import SocraticController
from socrate.session.manager import SessionManager
from socrate.session.state import SessionState
from socrate.shared.llm import VendorProxy


def get_session_manager(request: Request) -> SessionManager:
    """Get SessionManager singleton from lifespan state."""
    return request.app.state.session_manager


def get_conversation(request: Request) -> ConversationController:
    """Get ConversationController from lifespan state."""
    return request.app.state.conversation


def get_socratic(request: Request) -> SocraticController:
    """Get SocraticController from lifespan state."""
    return request.app.state.socratic


def get_diary(request: Request) -> DiaryExporter:
    """Get DiaryExporter from lifespan state."""
    return request.app.state.diary


def get_proxy(request: Request) -> VendorProxy:
    """Get VendorProxy from lifespan state."""
    return request.app.state.proxy


def get_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
) -> SessionState:
    """Resolve the session named in the path."""
    return manager.get(session_id)
