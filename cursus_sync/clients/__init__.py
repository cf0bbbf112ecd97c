"""Expose constructed client wrappers."""

from .ft_auth import AuthError, FtTokenProvider
from .ft_users import CursusUsersClient, MalformedPageError
from .sqlite_store import SQLiteUserStore

__all__ = [
    "AuthError",
    "CursusUsersClient",
    "FtTokenProvider",
    "MalformedPageError",
    "SQLiteUserStore",
]
