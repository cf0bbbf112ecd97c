"""
Run-once entrypoint for the blackhole sync job.

Scheduling is left to cron (or any external scheduler):

    python -m cursus_sync
"""

from __future__ import annotations

import asyncio
import logging
import sys

from cursus_sync.core.config import AppSettings, get_settings
from cursus_sync.core.logging import configure_logging
from cursus_sync.dependencies import build_http_client, get_user_sync_service
from cursus_sync.services import SyncSummary

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


async def run_sync(settings: AppSettings) -> SyncSummary:
    """Run the sync once with an HTTP client scoped to the run."""
    async with build_http_client(settings) as http_client:
        service = get_user_sync_service(http_client, settings)
        return await service.run()


def main() -> int:
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting cursus sync", extra={"environment": settings.environment})

    try:
        asyncio.run(run_sync(settings))
    except Exception:
        logger.exception("Cursus sync aborted")
        return EXIT_FAILURE
    return EXIT_OK


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover - script entry point
    cli()
