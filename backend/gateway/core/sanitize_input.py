"""Input Sanitizing — strip markup characters and check fields against named patterns.

Invariants:
    - sanitize() is idempotent: sanitize(sanitize(x)) == sanitize(x)
    - sanitize() output never contains '<' or '>' and never exceeds MAX_INPUT_LENGTH
    - validate() always receives sanitized text; callers sanitize first

Design Decisions:
    - Truncate before trimming so a cut that lands on whitespace cannot leave a
      trailing space for a second pass to remove
"""

import re

MAX_INPUT_LENGTH = 5000

_ANGLE_BRACKETS = re.compile(r"[<>]")

# [^\W\d_] is "any Unicode letter" in Python's re
FIELD_PATTERNS: dict[str, re.Pattern] = {
    "email": re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+"),
    "name": re.compile(r"(?:[^\W\d_]|[\s\-.'])+"),
    "message": re.compile(r".+", re.DOTALL),
    "project": re.compile(r"(?:[^\W\d_]|[\s\-_])+"),
}

FIELD_LENGTHS: dict[str, tuple[int, int]] = {
    "email": (3, 254),
    "name": (1, 100),
    "message": (5, 2000),
    "project": (1, 50),
}


def sanitize(raw: str | None) -> str:
    """Remove angle brackets, cap length, trim surrounding whitespace."""
    if not raw:
        return ""
    cleaned = _ANGLE_BRACKETS.sub("", raw)
    return cleaned[:MAX_INPUT_LENGTH].strip()


def validate(value: str, pattern: str) -> bool:
    """Check a sanitized value against a named field pattern and its length bounds."""
    regex = FIELD_PATTERNS.get(pattern)
    if regex is None:
        raise KeyError(f"Unknown field pattern: {pattern}")
    min_len, max_len = FIELD_LENGTHS[pattern]
    if not min_len <= len(value) <= max_len:
        return False
    return regex.fullmatch(value) is not None


def describe_rule(pattern: str) -> str:
    """Human-readable rule for a field, used in 400 error messages."""
    min_len, max_len = FIELD_LENGTHS[pattern]
    if pattern == "email":
        return "email must look like name@domain.tld"
    if pattern == "name":
        return (
            f"name must be {min_len}-{max_len} characters of letters, spaces, "
            "hyphens, periods or apostrophes"
        )
    if pattern == "project":
        return (
            f"project must be {min_len}-{max_len} characters of letters, spaces, "
            "hyphens or underscores"
        )
    return f"{pattern} must be between {min_len} and {max_len} characters"
