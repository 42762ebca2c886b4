"""Session request/response schemas."""
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from passwordle.models.session import GuessOutcome, Session
from .enums import LetterResult, SessionStatus


class SessionCreateRequest(BaseModel):
    """Request schema for starting a new session."""
    word_length: Optional[int] = Field(None, ge=1, description="Secret length; server default if omitted")
    max_guesses: Optional[int] = Field(None, ge=1, description="Guess budget; server default if omitted")
    session_id: Optional[str] = Field(
        None, min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_-]+$",
        description="Caller-chosen id; generated if omitted",
    )


class GuessRequest(BaseModel):
    """Request schema for submitting a guess."""
    guess: str = Field(..., min_length=1, max_length=64, description="Full-length candidate word")

    @field_validator("guess")
    @classmethod
    def validate_guess(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("guess must not be blank")
        return v


class GuessRecord(BaseModel):
    """One past guess with its classification."""
    guess: str
    results: list[LetterResult]


class SessionState(BaseModel):
    """Public view of a session. The answer is only revealed once finished."""
    session_id: str
    status: SessionStatus
    word_length: int
    max_guesses: int
    guess_count: int
    guesses_remaining: int
    guesses: list[GuessRecord]
    created_at: float
    expires_at: Optional[float] = None
    # Present for salted-hash games; guesses are scored as md5(guess + salt)
    salt: Optional[str] = None
    answer: Optional[str] = None

    @classmethod
    def from_session(cls, session: Session, results: list[list[LetterResult]]) -> "SessionState":
        return cls(
            session_id=session.id,
            status=session.status,
            word_length=session.word_length,
            max_guesses=session.max_guesses,
            guess_count=session.guesses_used,
            guesses_remaining=session.guesses_remaining,
            guesses=[
                GuessRecord(guess=g, results=r)
                for g, r in zip(session.guesses, results)
            ],
            created_at=session.created_at,
            expires_at=session.expires_at,
            salt=session.salt,
            answer=session.secret if session.is_terminal else None,
        )


class GuessResponse(BaseModel):
    """Response for an accepted guess."""
    session_id: str
    guess: str
    results: list[LetterResult]
    status: SessionStatus
    guess_count: int
    guesses_remaining: int
    answer: Optional[str] = None
    digest: Optional[str] = None
    key: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: GuessOutcome) -> "GuessResponse":
        return cls(
            session_id=outcome.session_id,
            guess=outcome.guess,
            results=outcome.results,
            status=outcome.status,
            guess_count=outcome.guesses_used,
            guesses_remaining=outcome.guesses_remaining,
            answer=outcome.answer,
            digest=outcome.digest,
            key=outcome.key,
        )
