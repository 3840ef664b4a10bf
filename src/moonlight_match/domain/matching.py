"""Matching run status as reported by the server."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class MatchingStatus:
    """Progress of one event's matching run."""

    event_id: str
    event_name: str
    total_users: int
    processed_users: int
    total_matches: int
    is_matching: bool
    is_complete: bool
    matches_sent: bool
    progress: float
    start_time: datetime | None = None
    end_time: datetime | None = None
    form_url: str | None = None

    @property
    def is_active(self) -> bool:
        """True while the server is still working on the run."""
        return self.is_matching and not self.is_complete

    @property
    def display_progress(self) -> float | None:
        """Progress percentage, only meaningful while matching."""
        return self.progress if self.is_matching else None
