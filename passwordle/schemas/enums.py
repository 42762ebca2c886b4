"""Game enums definition."""
from enum import Enum


class SessionStatus(str, Enum):
    """Session status enum."""
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self is not SessionStatus.IN_PROGRESS


class LetterResult(str, Enum):
    """Classification of one guessed letter against the secret."""
    CORRECT = "correct"  # right letter, right position
    PRESENT = "present"  # in the secret, elsewhere
    ABSENT = "absent"
