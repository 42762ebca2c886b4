"""Session API endpoints.

Handlers are plain (sync) functions so FastAPI runs them on its thread
pool; the only blocking work is the session store round trip.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from passwordle.api.dependencies import get_session_manager
from passwordle.schemas.session import (
    GuessRequest, GuessResponse, SessionCreateRequest, SessionState
)
from passwordle.services.session_manager import SessionManager

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionState, status_code=status.HTTP_201_CREATED)
def create_session(
    request: Optional[SessionCreateRequest] = None,
    manager: SessionManager = Depends(get_session_manager),
):
    """Start a new game. All body fields are optional."""
    request = request or SessionCreateRequest()
    session = manager.create_session(
        word_length=request.word_length,
        max_guesses=request.max_guesses,
        session_id=request.session_id,
    )
    return SessionState.from_session(session, [])


@router.get("/{session_id}", response_model=SessionState)
def get_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    """Get session status and the classified guesses so far."""
    session = manager.get_session(session_id)
    return SessionState.from_session(session, manager.results_for(session))


@router.post("/{session_id}/guess", response_model=GuessResponse)
def submit_guess(
    session_id: str,
    request: GuessRequest,
    manager: SessionManager = Depends(get_session_manager),
):
    """Submit one guess.

    Errors map to: 400 wrong length, 404 unknown or expired session,
    409 finished session / guess limit / concurrent modification.
    """
    outcome = manager.submit_guess(session_id, request.guess)
    return GuessResponse.from_outcome(outcome)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    """Delete a session before it expires."""
    manager.delete_session(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
