"""Target word sources.

A word source picks the secret for a new session and normalizes guesses
so they compare against secrets on the same terms. Sources are immutable
and passed to the SessionManager explicitly.

A source may also hand out a per-session salt. Salted sessions never
store the plain secret: both the secret and every guess are replaced by
salted_digest() before they are compared.
"""
import base64
import hashlib
import logging
import random
import secrets
import string
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Optional, Protocol, Union

from passwordle.core.exceptions import NoWordAvailableError

logger = logging.getLogger(__name__)

DEFAULT_SECRET_ALPHABET = string.ascii_letters + string.digits
MAX_RANDOM_SECRET_LENGTH = 64
SALT_LENGTH = 8


def salted_digest(value: str, salt: str) -> str:
    """Base64 of the MD5 digest of value followed by salt (24 characters)."""
    digest = hashlib.md5((value + salt).encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


class TargetWordSource(Protocol):
    """Supplies secrets and normalizes guesses."""

    def choose(self, word_length: int) -> str:
        """Return a secret of word_length characters.

        Raises NoWordAvailableError if none can be supplied.
        """
        ...

    def normalize(self, guess: str) -> str:
        """Bring a raw guess into the same form as the secrets."""
        ...

    def new_salt(self) -> Optional[str]:
        """Return a fresh salt for a new session, or None for plain secrets."""
        ...


class WordListSource:
    """Picks secrets from a fixed word list, grouped by length.

    Words are upper-cased, guesses likewise, so matching is case-insensitive.
    Pass a seeded random.Random for deterministic selection.
    """

    def __init__(self, words: Iterable[str], rng: Optional[random.Random] = None):
        by_length: dict[int, list[str]] = {}
        seen = set()
        for raw in words:
            word = raw.strip().upper()
            if not word or not word.isalpha() or word in seen:
                continue
            seen.add(word)
            by_length.setdefault(len(word), []).append(word)
        self._by_length = MappingProxyType(
            {length: tuple(group) for length, group in by_length.items()}
        )
        self._rng = rng or random.SystemRandom()

    @classmethod
    def from_file(
        cls, path: Union[str, Path], rng: Optional[random.Random] = None
    ) -> "WordListSource":
        """Load one word per line; blank lines and '#' comments are skipped."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            words = [
                line for line in f
                if line.strip() and not line.lstrip().startswith("#")
            ]
        source = cls(words, rng=rng)
        if not source._by_length:
            raise RuntimeError(f"Word list is empty or missing: {path}")
        logger.info(f"Loaded {len(source)} words from {path}")
        return source

    def __len__(self) -> int:
        return sum(len(group) for group in self._by_length.values())

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        word = self.normalize(word)
        return word in self._by_length.get(len(word), ())

    @property
    def lengths(self) -> list[int]:
        return sorted(self._by_length)

    def choose(self, word_length: int) -> str:
        candidates = self._by_length.get(word_length)
        if not candidates:
            raise NoWordAvailableError(word_length)
        return self._rng.choice(candidates)

    def normalize(self, guess: str) -> str:
        return guess.strip().upper()

    def new_salt(self) -> Optional[str]:
        return None


class RandomSecretSource:
    """Generates random secrets over an alphabet (case-sensitive).

    The password flavour of the game: the secret is not a word, and
    any string of the right length is a legal guess.
    """

    def __init__(
        self,
        alphabet: str = DEFAULT_SECRET_ALPHABET,
        max_length: int = MAX_RANDOM_SECRET_LENGTH,
        rng: Optional[random.Random] = None,
    ):
        if not alphabet:
            raise ValueError("alphabet must not be empty")
        # Guesses are stripped, so a secret may not start or end with whitespace
        if any(ch.isspace() for ch in alphabet):
            raise ValueError("alphabet must not contain whitespace")
        self._alphabet = "".join(dict.fromkeys(alphabet))
        self._max_length = max_length
        self._rng = rng

    @property
    def alphabet(self) -> str:
        return self._alphabet

    def _draw(self, symbols: str, length: int) -> str:
        if self._rng is None:
            return "".join(secrets.choice(symbols) for _ in range(length))
        return "".join(self._rng.choice(symbols) for _ in range(length))

    def choose(self, word_length: int) -> str:
        if not 1 <= word_length <= self._max_length:
            raise NoWordAvailableError(word_length)
        return self._draw(self._alphabet, word_length)

    def normalize(self, guess: str) -> str:
        return guess.strip()

    def new_salt(self) -> Optional[str]:
        return None


class HashedSecretSource(RandomSecretSource):
    """Random password secrets that are only ever stored salted and hashed.

    Each session gets its own alphanumeric salt. The player guesses the
    password, but letters are scored on salted_digest(guess, salt) against
    salted_digest(password, salt), so feedback only says how close the
    hashes are.
    """

    def __init__(
        self,
        alphabet: str = DEFAULT_SECRET_ALPHABET,
        max_length: int = MAX_RANDOM_SECRET_LENGTH,
        salt_length: int = SALT_LENGTH,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(alphabet=alphabet, max_length=max_length, rng=rng)
        if salt_length < 1:
            raise ValueError("salt_length must be at least 1")
        self._salt_length = salt_length

    def new_salt(self) -> Optional[str]:
        return self._draw(DEFAULT_SECRET_ALPHABET, self._salt_length)


def create_word_source(config) -> TargetWordSource:
    """Build the word source selected by WORD_SOURCE (wordlist | random | hashed)."""
    if config.WORD_SOURCE in ("random", "hashed"):
        alphabet = config.SECRET_ALPHABET or DEFAULT_SECRET_ALPHABET
        if config.WORD_SOURCE == "hashed":
            logger.info(f"Word source: salted-hash passwords over {len(alphabet)} symbols")
            return HashedSecretSource(alphabet=alphabet)
        logger.info(f"Word source: random secrets over {len(alphabet)} symbols")
        return RandomSecretSource(alphabet=alphabet)

    if config.WORD_SOURCE != "wordlist":
        logger.warning("Unknown WORD_SOURCE=%s, using wordlist", config.WORD_SOURCE)
    return WordListSource.from_file(config.WORDS_PATH)
