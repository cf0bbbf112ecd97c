"""Decode raw cursus_users items into ``UserRecord`` objects."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from cursus_sync.models.users import UserRecord

logger = logging.getLogger(__name__)

PROFILE_KEY = "user"
USERNAME_KEY = "login"
EMAIL_KEY = "email"
FLAGGED_AT_KEY = "blackholed_at"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"  # 2023-08-29T23:58:16.887Z


class MalformedRecordError(ValueError):
    """Raised when an item lacks the profile fields needed to identify a user."""


def parse_flagged_at(value: Any) -> Optional[datetime]:
    """Parse the blackhole date, returning None for anything that is not a valid timestamp."""
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return None


def _required_text(profile: Mapping[str, Any], key: str) -> str:
    value = profile.get(key)
    if not isinstance(value, str):
        raise MalformedRecordError(f"cursus user profile is missing {key!r}")
    return value


def decode_user(item: Mapping[str, Any]) -> UserRecord:
    profile = item.get(PROFILE_KEY) if isinstance(item, Mapping) else None
    if not isinstance(profile, Mapping):
        raise MalformedRecordError(f"cursus user item is missing {PROFILE_KEY!r}")

    name = _required_text(profile, USERNAME_KEY)
    logger.debug("Decoding cursus user", extra={"login": name})
    return UserRecord(
        name=name,
        email=_required_text(profile, EMAIL_KEY),
        flagged_at=parse_flagged_at(item.get(FLAGGED_AT_KEY)),
    )


def decode_users(items: Iterable[Mapping[str, Any]]) -> List[UserRecord]:
    """Decode a page of items; any malformed item aborts the whole batch."""
    return [decode_user(item) for item in items]


__all__ = [
    "MalformedRecordError",
    "decode_user",
    "decode_users",
    "parse_flagged_at",
]
