"""
Blackhole sync job: pull every page of cursus users and persist the ones
whose stored state is missing or out of date.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol, Sequence

from cursus_sync.clients.ft_auth import FtTokenProvider
from cursus_sync.clients.ft_users import CursusUsersClient
from cursus_sync.models.users import UserRecord
from cursus_sync.services.user_decoder import decode_users

logger = logging.getLogger(__name__)

FIRST_PAGE = 1


class UserRepository(Protocol):
    def filter_requiring_update(self, records: Sequence[UserRecord]) -> List[UserRecord]:
        ...

    def upsert(self, records: Sequence[UserRecord]) -> None:
        ...


@dataclass(slots=True)
class SyncSummary:
    pages: int = 0
    records_seen: int = 0
    records_updated: int = 0


class UserSyncService:
    """Drive fetch, decode, filter and upsert until the collection is exhausted."""

    def __init__(
        self,
        token_provider: FtTokenProvider,
        users_client: CursusUsersClient,
        repository: UserRepository,
    ) -> None:
        self._tokens = token_provider
        self._users = users_client
        self._repository = repository

    async def run(self) -> SyncSummary:
        """
        Run the job once.

        Any error raised while fetching, decoding or persisting aborts the run;
        pages already persisted stay persisted.
        """
        logger.info("Blackhole sync started")
        await self._tokens.get()

        summary = SyncSummary()
        page_number = FIRST_PAGE
        while True:
            page = await self._users.fetch(page_number)
            if page.is_past_last_page:
                break

            records = decode_users(page.items)
            pending = self._filter_pending(records)
            self._persist(pending)

            summary.pages += 1
            summary.records_seen += len(records)
            summary.records_updated += len(pending)
            page_number += 1

        logger.info(
            "Blackhole sync finished",
            extra={
                "pages": summary.pages,
                "records_seen": summary.records_seen,
                "records_updated": summary.records_updated,
            },
        )
        return summary

    def _filter_pending(self, records: List[UserRecord]) -> List[UserRecord]:
        pending = self._repository.filter_requiring_update(records)
        logger.info(
            "Filtered users requiring update",
            extra={"filtered": len(pending), "total": len(records)},
        )
        return pending

    def _persist(self, records: List[UserRecord]) -> None:
        if not records:
            return
        logger.info("Updating users", extra={"count": len(records)})
        self._repository.upsert(records)


__all__ = ["SyncSummary", "UserRepository", "UserSyncService"]
