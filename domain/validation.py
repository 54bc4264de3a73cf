"""Input validation for the viewer form."""

import re

from domain.months import canonical_month

IDENTIFIER_LENGTH = 8

IDENTIFIER_PATTERN = re.compile(r"[0-9]{8}")


def validate_identifier(raw: str) -> bool:
    """Return True iff ``raw`` is exactly eight ASCII decimal digits."""
    if not isinstance(raw, str):
        return False
    return IDENTIFIER_PATTERN.fullmatch(raw) is not None


def digits_only(raw: str, limit: int = IDENTIFIER_LENGTH) -> str:
    """Strip every non-digit character and truncate, as the identifier field does while typing."""
    return re.sub(r"[^0-9]", "", raw or "")[:limit]


def validate_month(month: str) -> bool:
    return bool(month) and canonical_month(month) != ""
