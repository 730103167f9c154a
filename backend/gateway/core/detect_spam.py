"""Spam Detection — cheap binary heuristic over sanitized submission fields.

Invariants:
    - First match wins; no scoring, no partial credit
    - Keyword matching is case-insensitive substring matching on the message
    - is_spam() never raises on missing fields
"""

from collections.abc import Mapping

SPAM_KEYWORDS: tuple[str, ...] = (
    "crypto", "bitcoin", "forex", "casino", "pills", "viagra",
)
MIN_MESSAGE_LENGTH = 10


def contains_spam_keyword(message: str) -> bool:
    """True if the message mentions any blocked keyword."""
    lowered = message.lower()
    return any(keyword in lowered for keyword in SPAM_KEYWORDS)


def is_spam(submission: Mapping[str, str]) -> bool:
    """Classify a submission. Expects sanitized `message` and `email` values."""
    message = submission.get("message") or ""
    email = submission.get("email") or ""
    return (
        contains_spam_keyword(message)
        or len(message) < MIN_MESSAGE_LENGTH
        or "@" not in email
    )
