"""Allow execution via ``python -m cursus_sync``."""

from cursus_sync.main import cli

cli()
