# Schemas package
from .enums import SessionStatus, LetterResult
