"""Passwordle: a word-guessing game service with Redis-backed sessions."""

__version__ = "0.1.0"
