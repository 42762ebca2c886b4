"""Shared FastAPI dependencies."""
from fastapi import Request

from passwordle.services.session_manager import SessionManager


def get_session_manager(request: Request) -> SessionManager:
    """Return the SessionManager built during application startup."""
    return request.app.state.session_manager
