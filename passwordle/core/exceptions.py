"""Custom exceptions for the application.

Provides standardized error handling across the application. Every
exception carries a machine-readable code and the HTTP status the request
boundary should answer with.
"""
from typing import Optional

from fastapi import status


class AppException(Exception):
    """Base exception for application errors."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    retryable: bool = False

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[dict] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details
        }


class GameException(AppException):
    """Game-related exceptions."""
    pass


class LengthMismatchError(GameException):
    """Raised when a guess is not the same length as the secret."""

    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, expected: int, actual: int):
        super().__init__(
            message=f"Guess must be {expected} characters long, got {actual}",
            code="LENGTH_MISMATCH",
            details={"expected": expected, "actual": actual}
        )


class InvalidGameSettingsError(GameException):
    """Raised when a session is requested with out-of-range settings."""

    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(
            message=message,
            code="INVALID_GAME_SETTINGS",
            details={"setting": setting} if setting else {}
        )


class NoWordAvailableError(GameException):
    """Raised when the word source has no word of the requested length."""

    # Literal because Starlette renamed the 422 constant between releases
    http_status = 422

    def __init__(self, word_length: int):
        super().__init__(
            message=f"No word available with length {word_length}",
            code="NO_WORD_AVAILABLE",
            details={"word_length": word_length}
        )


class SessionException(AppException):
    """Session lifecycle exceptions."""
    pass


class SessionNotFoundError(SessionException):
    """Raised when a session does not exist or has expired."""

    http_status = status.HTTP_404_NOT_FOUND

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session not found: {session_id}",
            code="SESSION_NOT_FOUND",
            details={"session_id": session_id}
        )


class SessionExistsError(SessionException):
    """Raised when creating a session under an id that is already taken."""

    http_status = status.HTTP_409_CONFLICT

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session already exists: {session_id}",
            code="SESSION_EXISTS",
            details={"session_id": session_id}
        )


class SessionTerminalError(SessionException):
    """Raised when guessing in a session that is already won or lost."""

    http_status = status.HTTP_409_CONFLICT

    def __init__(self, session_id: str, session_status: str):
        super().__init__(
            message=f"Session is already finished ({session_status})",
            code="SESSION_TERMINAL",
            details={"session_id": session_id, "status": session_status}
        )


class GuessLimitExceededError(SessionException):
    """Raised when a session already holds its maximum number of guesses."""

    http_status = status.HTTP_409_CONFLICT

    def __init__(self, session_id: str, max_guesses: int):
        super().__init__(
            message=f"Guess limit of {max_guesses} reached",
            code="GUESS_LIMIT_EXCEEDED",
            details={"session_id": session_id, "max_guesses": max_guesses}
        )


class ConcurrentModificationError(SessionException):
    """Raised when a session kept changing underneath a guess submission."""

    http_status = status.HTTP_409_CONFLICT
    retryable = True

    def __init__(self, session_id: str, attempts: int):
        super().__init__(
            message="Session was modified concurrently, please retry",
            code="CONCURRENT_MODIFICATION",
            details={"session_id": session_id, "attempts": attempts}
        )


class StoreException(AppException):
    """Session store exceptions."""
    pass


class VersionConflictError(StoreException):
    """Raised by a store when a versioned write finds a different version."""

    http_status = status.HTTP_409_CONFLICT
    retryable = True

    def __init__(self, session_id: str, expected_version: int):
        super().__init__(
            message=f"Version conflict on session {session_id}",
            code="VERSION_CONFLICT",
            details={"session_id": session_id, "expected_version": expected_version}
        )


class StoreUnavailableError(StoreException):
    """Raised when the session store cannot be reached."""

    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True

    def __init__(self, operation: str, reason: str = ""):
        super().__init__(
            message=f"Session store unavailable during {operation}",
            code="STORE_UNAVAILABLE",
            details={"operation": operation, "reason": reason} if reason else {"operation": operation}
        )
