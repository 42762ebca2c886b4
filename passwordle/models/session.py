"""Session domain models and their JSON record format."""
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from passwordle.schemas.enums import LetterResult, SessionStatus


def new_session_id() -> str:
    """Generate an opaque session identifier."""
    return uuid.uuid4().hex


@dataclass
class Session:
    """One game instance tied to one secret word.

    A Session loaded from a store is a transient copy: changing it has no
    effect until it is written back with a matching version.
    """
    id: str
    secret: str
    max_guesses: int
    guesses: list[str] = field(default_factory=list)
    status: SessionStatus = SessionStatus.IN_PROGRESS
    created_at: float = field(default_factory=time.time)
    expires_at: Optional[float] = None
    version: int = 0
    # Set for salted sessions, whose secret is a digest of the password
    salt: Optional[str] = None
    # Length of an acceptable guess; 0 means len(secret)
    guess_length: int = 0

    @property
    def word_length(self) -> int:
        return self.guess_length or len(self.secret)

    @property
    def guesses_used(self) -> int:
        return len(self.guesses)

    @property
    def guesses_remaining(self) -> int:
        return max(self.max_guesses - len(self.guesses), 0)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self.expires_at is None:
            return False
        if now is None:
            now = time.time()
        return now >= self.expires_at


@dataclass
class GuessOutcome:
    """Result of one accepted guess and the session status it left behind."""
    session_id: str
    guess: str
    results: list[LetterResult]
    status: SessionStatus
    guesses_used: int
    guesses_remaining: int
    # Only set once the session is terminal
    answer: Optional[str] = None
    # Salted digest the guess was scored as (salted sessions only)
    digest: Optional[str] = None
    # Reward handed out on a win, when one is configured
    key: Optional[str] = None

    @property
    def is_win(self) -> bool:
        return self.status == SessionStatus.WON


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def serialize_session(session: Session) -> dict:
    """Serialize a Session dataclass to a JSON-compatible dict."""
    return {
        "id": session.id,
        "secret": session.secret,
        "guesses": list(session.guesses),
        "max_guesses": session.max_guesses,
        "status": session.status.value,
        "created_at": session.created_at,
        "expires_at": session.expires_at,
        "version": session.version,
        "salt": session.salt,
        "guess_length": session.guess_length,
    }


def deserialize_session(data: dict) -> Session:
    """Deserialize a dict back into a Session dataclass."""
    return Session(
        id=data["id"],
        secret=data["secret"],
        max_guesses=int(data["max_guesses"]),
        guesses=list(data.get("guesses", [])),
        status=SessionStatus(data.get("status", SessionStatus.IN_PROGRESS.value)),
        created_at=float(data.get("created_at", 0.0)),
        expires_at=data.get("expires_at"),
        version=int(data.get("version", 0)),
        salt=data.get("salt"),
        guess_length=int(data.get("guess_length") or 0),
    )
