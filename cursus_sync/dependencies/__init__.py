"""Expose factory helpers for assembling the sync job."""

from .clients import (
    build_http_client,
    get_token_provider,
    get_user_store,
    get_user_sync_service,
)

__all__ = [
    "build_http_client",
    "get_token_provider",
    "get_user_store",
    "get_user_sync_service",
]
