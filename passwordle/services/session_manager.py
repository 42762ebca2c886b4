"""Game session orchestration.

The SessionManager owns the rules of a game (turn limit, win/loss) and
composes a word source, the evaluator and a session store. It keeps no
session state between calls: every operation loads from the store, and
every mutation is written back with a version check so concurrent
submissions against one session can never both land on the same version.
"""
import logging
import time
from dataclasses import replace
from typing import Callable, Optional

from passwordle.core.exceptions import (
    ConcurrentModificationError,
    GuessLimitExceededError,
    InvalidGameSettingsError,
    LengthMismatchError,
    SessionNotFoundError,
    SessionTerminalError,
    VersionConflictError,
)
from passwordle.models.session import GuessOutcome, Session, new_session_id
from passwordle.schemas.enums import LetterResult, SessionStatus
from passwordle.services.evaluator import evaluate, is_winning
from passwordle.services.word_source import TargetWordSource, salted_digest
from passwordle.storage.backend import SessionStoreBackend

logger = logging.getLogger(__name__)

DEFAULT_WORD_LENGTH = 5
DEFAULT_MAX_GUESSES = 6
MAX_GUESSES_LIMIT = 64
DEFAULT_TTL_SECONDS = 60 * 60 * 24
DEFAULT_MAX_CONFLICT_RETRIES = 3


class SessionManager:
    """Creates sessions, applies guesses and enforces the game state machine.

    IN_PROGRESS -> WON on a fully correct guess, IN_PROGRESS -> LOST when the
    last allowed guess misses; WON and LOST are terminal.
    """

    def __init__(
        self,
        store: SessionStoreBackend,
        word_source: TargetWordSource,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        default_word_length: int = DEFAULT_WORD_LENGTH,
        default_max_guesses: int = DEFAULT_MAX_GUESSES,
        max_guesses_limit: int = MAX_GUESSES_LIMIT,
        max_conflict_retries: int = DEFAULT_MAX_CONFLICT_RETRIES,
        reward_key: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._word_source = word_source
        self._ttl_seconds = ttl_seconds
        self._default_word_length = default_word_length
        self._default_max_guesses = default_max_guesses
        self._max_guesses_limit = max_guesses_limit
        self._max_conflict_retries = max_conflict_retries
        self._reward_key = reward_key or None
        self._clock = clock

    @classmethod
    def from_settings(cls, config, store: SessionStoreBackend, word_source: TargetWordSource):
        """Build a manager with the game rules from a Settings object."""
        return cls(
            store=store,
            word_source=word_source,
            ttl_seconds=config.SESSION_TTL_SECONDS,
            default_word_length=config.DEFAULT_WORD_LENGTH,
            default_max_guesses=config.DEFAULT_MAX_GUESSES,
            max_guesses_limit=config.MAX_GUESSES_LIMIT,
            max_conflict_retries=config.MAX_CONFLICT_RETRIES,
            reward_key=config.WIN_REWARD_KEY or None,
        )

    @property
    def store(self) -> SessionStoreBackend:
        return self._store

    @property
    def reward_key(self) -> Optional[str]:
        return self._reward_key

    def create_session(
        self,
        word_length: Optional[int] = None,
        max_guesses: Optional[int] = None,
        session_id: Optional[str] = None,
    ) -> Session:
        """Start a new game.

        Raises:
            InvalidGameSettingsError: word_length or max_guesses out of range
            NoWordAvailableError: the word source has no word of that length
            SessionExistsError: an explicit session_id is already in use
        """
        if word_length is None:
            word_length = self._default_word_length
        if max_guesses is None:
            max_guesses = self._default_max_guesses

        if word_length < 1:
            raise InvalidGameSettingsError(
                "word_length must be at least 1", setting="word_length"
            )
        if not 1 <= max_guesses <= self._max_guesses_limit:
            raise InvalidGameSettingsError(
                f"max_guesses must be between 1 and {self._max_guesses_limit}",
                setting="max_guesses",
            )

        secret = self._word_source.choose(word_length)
        salt = self._word_source.new_salt()
        if salt:
            secret = salted_digest(secret, salt)
        now = self._clock()
        session = Session(
            id=session_id or new_session_id(),
            secret=secret,
            max_guesses=max_guesses,
            salt=salt,
            guess_length=word_length,
            created_at=now,
            expires_at=now + self._ttl_seconds,
        )
        self._store.create(session.id, session, self._ttl_seconds)
        logger.info(
            "Session created",
            extra={
                "session_id": session.id,
                "word_length": word_length,
                "max_guesses": max_guesses,
                "salted": salt is not None,
            },
        )
        return session

    def get_session(self, session_id: str) -> Session:
        """Read-only fetch.

        Raises:
            SessionNotFoundError: absent or expired
        """
        session = self._store.get(session_id)
        if session is None or session.is_expired(self._clock()):
            raise SessionNotFoundError(session_id)
        return session

    def delete_session(self, session_id: str) -> None:
        if not self._store.delete(session_id):
            raise SessionNotFoundError(session_id)
        logger.info("Session deleted", extra={"session_id": session_id})

    def submit_guess(self, session_id: str, guess: str) -> GuessOutcome:
        """Apply one guess to a session and persist it.

        Version conflicts are retried up to max_conflict_retries times, each
        retry re-reading the session and re-checking every rule.

        Raises:
            SessionNotFoundError, SessionTerminalError, LengthMismatchError,
            GuessLimitExceededError, ConcurrentModificationError
        """
        guess = self._word_source.normalize(guess)
        attempts = 0
        while True:
            attempts += 1
            session = self.get_session(session_id)
            updated, outcome = self._apply_guess(session, guess)
            try:
                self._store.put_if_version_matches(session_id, session.version, updated)
            except VersionConflictError:
                if attempts > self._max_conflict_retries:
                    logger.warning(
                        "Giving up on session after repeated version conflicts",
                        extra={"session_id": session_id, "attempts": attempts},
                    )
                    raise ConcurrentModificationError(session_id, attempts) from None
                logger.warning(
                    "Version conflict, retrying guess",
                    extra={"session_id": session_id, "attempt": attempts},
                )
                continue

            if updated.is_terminal:
                logger.info(
                    "Session finished",
                    extra={
                        "session_id": session_id,
                        "status": updated.status.value,
                        "guesses_used": updated.guesses_used,
                    },
                )
            return outcome

    def _apply_guess(self, session: Session, guess: str) -> tuple[Session, GuessOutcome]:
        """Validate and apply a guess to a copy of session. Never touches the store."""
        if session.is_terminal:
            raise SessionTerminalError(session.id, session.status.value)
        if len(guess) != session.word_length:
            raise LengthMismatchError(expected=session.word_length, actual=len(guess))
        if session.guesses_used >= session.max_guesses:
            raise GuessLimitExceededError(session.id, session.max_guesses)

        digest = self._scored_form(session, guess)
        results = evaluate(session.secret, digest)
        guesses = session.guesses + [guess]

        if is_winning(results):
            status = SessionStatus.WON
        elif len(guesses) >= session.max_guesses:
            status = SessionStatus.LOST
        else:
            status = SessionStatus.IN_PROGRESS

        updated = replace(
            session,
            guesses=guesses,
            status=status,
            version=session.version + 1,
        )
        outcome = GuessOutcome(
            session_id=session.id,
            guess=guess,
            results=results,
            status=status,
            guesses_used=updated.guesses_used,
            guesses_remaining=updated.guesses_remaining,
            answer=session.secret if status.is_terminal else None,
            digest=digest if session.salt else None,
            key=self._reward_key if status == SessionStatus.WON else None,
        )
        return updated, outcome

    def results_for(self, session: Session) -> list[list[LetterResult]]:
        """Re-evaluate the stored guesses of a session, in order."""
        return [evaluate(session.secret, self._scored_form(session, g)) for g in session.guesses]

    @staticmethod
    def _scored_form(session: Session, guess: str) -> str:
        """The string a guess is compared as: its salted digest in salted sessions."""
        if session.salt:
            return salted_digest(guess, session.salt)
        return guess
