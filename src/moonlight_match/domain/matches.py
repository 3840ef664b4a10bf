"""Read-only projections of computed matches."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class MatchParticipant:
    """One side of a match."""

    id: str
    name: str
    email: str | None = None
    image: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class Match:
    """A scored pairing between two attendees."""

    id: str
    matched_user: MatchParticipant
    score: float
    user: MatchParticipant | None = None
    is_initially_revealed: bool = False
    is_paid_reveal: bool = False
    similarities: tuple[str, ...] = field(default_factory=tuple)
    created_at: datetime | None = None

    @property
    def is_revealed(self) -> bool:
        return self.is_initially_revealed or self.is_paid_reveal
