"""Guess evaluation.

Implements canonical marking rules with a two-pass algorithm: exact
position matches are marked first, then letters present elsewhere are
marked only up to the number of occurrences still unmatched in the secret.
A single pass would over-report PRESENT for repeated letters.
"""
from collections import Counter
from typing import Iterable, Sequence

from passwordle.core.exceptions import LengthMismatchError
from passwordle.schemas.enums import LetterResult


def evaluate(secret: Sequence[str], guess: Sequence[str]) -> list[LetterResult]:
    """Classify each letter of guess against secret.

    Raises:
        LengthMismatchError: if guess and secret differ in length
    """
    if len(guess) != len(secret):
        raise LengthMismatchError(expected=len(secret), actual=len(guess))

    results = [LetterResult.ABSENT] * len(secret)
    available: Counter = Counter()

    # First pass: exact matches; everything else stays available
    for i, (s, g) in enumerate(zip(secret, guess)):
        if s == g:
            results[i] = LetterResult.CORRECT
        else:
            available[s] += 1

    # Second pass: present letters, bounded by remaining counts
    for i, g in enumerate(guess):
        if results[i] is LetterResult.CORRECT:
            continue
        if available[g] > 0:
            results[i] = LetterResult.PRESENT
            available[g] -= 1

    return results


def is_winning(results: Iterable[LetterResult]) -> bool:
    """True when every letter is CORRECT."""
    results = list(results)
    return bool(results) and all(r is LetterResult.CORRECT for r in results)
