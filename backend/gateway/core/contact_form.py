"""Contact Form — turn an untrusted form payload into an accepted SubmissionRecord.

Invariants:
    - Every field is sanitized before it is validated
    - Fields are checked in a fixed order; the first failure raises and no other
      field errors are collected
    - A spam keyword in the message wins over any field error (SPAM_DETECTED)
    - SubmissionRecord is frozen; nothing downstream mutates it

Design Decisions:
    - project defaults to "general" and company to "" when omitted, matching the
      site's form where both are optional selects
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import datetime

from gateway.core.detect_spam import contains_spam_keyword, is_spam
from gateway.core.errors import SpamRejection, ValidationError
from gateway.core.sanitize_input import describe_rule, sanitize, validate

DEFAULT_PROJECT = "general"

# (field, required) in validation order
_CONTACT_FIELDS: tuple[tuple[str, bool], ...] = (
    ("name", True),
    ("email", True),
    ("project", False),
    ("message", True),
)


@dataclass(frozen=True)
class SubmissionRecord:
    """A sanitized, accepted contact submission."""
    name: str
    email: str
    company: str
    project: str
    message: str
    timestamp: str
    ip: str
    user_agent: str

    def to_dict(self) -> dict:
        return asdict(self)


def sanitize_contact_fields(raw: Mapping[str, object]) -> dict[str, str]:
    """Sanitize every known contact field. Unknown keys are dropped."""
    fields = {}
    for key in ("name", "email", "company", "project", "message"):
        value = raw.get(key)
        fields[key] = sanitize(value if isinstance(value, str) else None)
    return fields


def screen_spam_keywords(fields: Mapping[str, str]) -> None:
    """Reject blocked keywords before field validation can report anything else."""
    if contains_spam_keyword(fields.get("message", "")):
        raise SpamRejection()


def validate_contact_fields(fields: Mapping[str, str]) -> None:
    """Raise ValidationError for the first failing field."""
    for name, required in _CONTACT_FIELDS:
        value = fields.get(name, "")
        if not value:
            if required:
                raise ValidationError(
                    f"{name} is required", name, code=f"MISSING_{name.upper()}",
                )
            continue
        if not validate(value, name):
            raise ValidationError(describe_rule(name), name)


def reject_spam(fields: Mapping[str, str]) -> None:
    """Run the full classifier over validated fields."""
    if is_spam(fields):
        raise SpamRejection()


def make_submission(
    fields: Mapping[str, str], ip: str, user_agent: str, now: datetime,
) -> SubmissionRecord:
    """Freeze validated fields into a SubmissionRecord."""
    return SubmissionRecord(
        name=fields["name"],
        email=fields["email"],
        company=fields.get("company", ""),
        project=fields.get("project") or DEFAULT_PROJECT,
        message=fields["message"],
        timestamp=now.isoformat(),
        ip=ip,
        user_agent=sanitize(user_agent),
    )
