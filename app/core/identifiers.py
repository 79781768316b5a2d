"""
Identifier and query-parameter parsing.

Parsing is fallible and returns ``None`` instead of raising, so handlers branch
explicitly and turn a malformed id into an InvalidIdentifierError response.
"""

from __future__ import annotations

import re
from typing import Optional

from bson import ObjectId

_EMAIL_RE = re.compile(r"^[^@\s/]+@[^@\s/]+$")


def parse_object_id(raw: Optional[str]) -> Optional[ObjectId]:
    """Return the ObjectId for ``raw``, or None when it is not a valid 24-hex id."""
    if raw is None or not ObjectId.is_valid(raw):
        return None
    return ObjectId(raw)


def parse_limit(raw: Optional[str]) -> Optional[int]:
    """
    Parse a ``limitTo`` query value.

    Absent, non-numeric and non-positive values all mean "no limit".
    """
    if raw is None:
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    return value if value > 0 else None


def looks_like_email(raw: str) -> bool:
    return bool(_EMAIL_RE.match(raw))
