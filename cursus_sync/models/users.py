"""
Domain models for cursus users pulled from the 42 API.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRecord(BaseModel):
    """A decoded cursus user as persisted by the sync job."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Intra login of the user.")
    email: str
    flagged_at: Optional[datetime] = Field(
        None,
        description="Blackhole date; None when the API value is absent or unparsable.",
    )


class UserPage(BaseModel):
    """One page of the cursus users collection."""

    items: List[Dict[str, Any]] = Field(default_factory=list)
    total_pages: int
    current_page: int

    @property
    def is_past_last_page(self) -> bool:
        # The API answers one page past the end with current == total + 1.
        return self.current_page > self.total_pages


__all__ = ["UserPage", "UserRecord"]
