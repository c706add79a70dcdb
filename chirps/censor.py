"""
chirps/censor.py -- Chirp body validation and profanity masking.

Words are split on single spaces and compared case-insensitively. A match is
replaced with "****"; every other word keeps its original casing. Punctuation
attached to a word ("fornax!") means it is not a match.
"""

from __future__ import annotations

MAX_CHIRP_LENGTH = 140

PROFANE_WORDS: frozenset[str] = frozenset({"kerfuffle", "sharbert", "fornax"})

_MASK = "****"


class ChirpTooLong(ValueError):
    """Body exceeds MAX_CHIRP_LENGTH characters."""


def clean_body(body: str) -> str:
    """Validate length and return body with profane words masked."""
    if len(body) > MAX_CHIRP_LENGTH:
        raise ChirpTooLong(f"Chirp is too long (max {MAX_CHIRP_LENGTH} characters).")
    return " ".join(_MASK if word.lower() in PROFANE_WORDS else word for word in body.split(" "))
