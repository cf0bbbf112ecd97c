"""Service layer exports."""

from .user_decoder import MalformedRecordError, decode_user, decode_users, parse_flagged_at
from .user_sync import SyncSummary, UserRepository, UserSyncService

__all__ = [
    "MalformedRecordError",
    "SyncSummary",
    "UserRepository",
    "UserSyncService",
    "decode_user",
    "decode_users",
    "parse_flagged_at",
]
