"""Event and ticket domain models."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

_TODAY_WINDOW = timedelta(hours=24)


class EventStatus(Enum):
    """Where an event sits relative to now."""

    PAST = "past"
    TODAY = "today"
    UPCOMING = "upcoming"


class TicketPurchase(Enum):
    """Outcome of a ticket purchase the user can act on."""

    PURCHASED = "purchased"
    ALREADY_OWNED = "already_owned"


@dataclass(frozen=True)
class Event:
    """An event users can buy tickets for."""

    id: str
    name: str
    date: datetime | None
    form_url: str | None = None
    ticket_id: str | None = None

    def is_upcoming(self, now: datetime) -> bool:
        return self.date is not None and self.date >= now

    def status(self, now: datetime) -> EventStatus:
        """Classify the event as past, within the next day, or later."""
        if self.date is None or self.date < now:
            return EventStatus.PAST
        if self.date - now < _TODAY_WINDOW:
            return EventStatus.TODAY
        return EventStatus.UPCOMING
