"""Test helper that normalizes sys.path and environment defaults."""

from __future__ import annotations

import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


_DEFAULT_ENV_VARS: dict[str, str] = {
    "FT_CLIENT_ID": "test-client-id",
    "FT_CLIENT_SECRET": "test-client-secret",
    "FT_USERS_URL_TEMPLATE": "https://api.example.com/v2/cursus/21/cursus_users?page={page}",
}

for key, value in _DEFAULT_ENV_VARS.items():
    os.environ.setdefault(key, value)
