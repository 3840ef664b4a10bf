"""View-model for the admin matching-control screen."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from moonlight_match.domain.matches import Match
from moonlight_match.domain.matching import MatchingStatus
from moonlight_match.services.admin import AdminService
from moonlight_match.services.scheduling import RepeatingTask

_logger = logging.getLogger(__name__)

START_MATCHING_PROMPT = (
    "Start Matching Process",
    "This will begin the AI matching algorithm for all registered users. "
    "This process cannot be stopped once started.",
)
SEND_MATCHES_PROMPT = (
    "Send Matches to Users",
    "This will reveal the top 3 matches to all users. "
    "This action cannot be undone.",
)
TOP_MATCHES_LIMIT = 10


class MonitorState(Enum):
    """Polling lifecycle of the monitor."""

    IDLE = "idle"
    POLLING = "polling"
    STOPPED = "stopped"


class AdminPrompter(Protocol):
    """UI collaborator for blocking confirmations and notices."""

    async def confirm(self, title: str, message: str) -> bool:
        """Ask the user to confirm an action."""

    async def notify(self, title: str, message: str) -> None:
        """Show a dismissible notice."""


@dataclass(frozen=True)
class MonitorSnapshot:
    """Everything the screen renders."""

    state: MonitorState
    status: MatchingStatus | None
    matches: tuple[Match, ...]
    top_matches: tuple[Match, ...]
    error: str | None
    is_busy: bool


MonitorListener = Callable[[MonitorSnapshot], None]


@dataclass
class MatchingMonitor:
    """Keep an event's matching status current while a run is active.

    ``start`` fetches once; a status that is matching and not complete
    starts a repeating poll, and a terminal status or ``close`` stops it.
    Responses carry no sequence number, so whichever resolves last wins.
    """

    event_id: str
    admin_service: AdminService
    prompter: AdminPrompter
    interval_seconds: float = 5.0
    state: MonitorState = field(default=MonitorState.IDLE, init=False)
    status: MatchingStatus | None = field(default=None, init=False)
    matches: list[Match] = field(default_factory=list, init=False)
    status_error: str | None = field(default=None, init=False)
    matches_error: str | None = field(default=None, init=False)
    is_busy: bool = field(default=False, init=False)
    fetch_cycles: int = field(default=0, init=False)
    _poller: RepeatingTask | None = field(default=None, init=False, repr=False)
    _listeners: list[MonitorListener] = field(
        default_factory=list, init=False, repr=False
    )

    @property
    def error(self) -> str | None:
        """Inline error text for the last failed passive fetch."""
        errors = [e for e in (self.status_error, self.matches_error) if e]
        return "; ".join(errors) or None

    @property
    def top_matches(self) -> tuple[Match, ...]:
        """Highest-scoring matches first, limited to the leaderboard size."""
        ranked = sorted(self.matches, key=lambda match: match.score, reverse=True)
        return tuple(ranked[:TOP_MATCHES_LIMIT])

    def snapshot(self) -> MonitorSnapshot:
        return MonitorSnapshot(
            state=self.state,
            status=self.status,
            matches=tuple(self.matches),
            top_matches=self.top_matches,
            error=self.error,
            is_busy=self.is_busy,
        )

    def subscribe(self, listener: MonitorListener) -> Callable[[], None]:
        """Register a change listener and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def start(self) -> None:
        """Fetch status and matches once, then poll if a run is active."""
        if self.state is MonitorState.STOPPED:
            raise RuntimeError("monitor has been closed")
        await self.refresh()

    async def refresh(self) -> None:
        """Run one fetch cycle and reconcile the poll loop."""
        await self._fetch_cycle()
        self._reconcile()
        self._notify()

    async def refresh_status(self) -> None:
        """Re-fetch only the status, outside the poll cycle."""
        await self._fetch_status()
        self._reconcile()
        self._notify()

    async def wait(self) -> None:
        """Wait until the current poll loop exits."""
        if self._poller is not None:
            await self._poller.wait()

    def close(self) -> None:
        """Tear down; no further fetches are applied after this."""
        self._stop_polling()
        self.state = MonitorState.STOPPED
        self._listeners.clear()

    async def start_matching(self) -> bool:
        """Confirm, then start the server-side run."""
        if not await self.prompter.confirm(*START_MATCHING_PROMPT):
            return False
        self.is_busy = True
        try:
            result = await self.admin_service.start_matching(self.event_id)
        finally:
            self.is_busy = False
        if not result:
            await self.prompter.notify("Error", "Failed to start matching process")
            return False
        await self.prompter.notify("Success", "Matching process started!")
        await self.refresh_status()
        return True

    async def send_matches(self) -> bool:
        """Confirm, then publish matches to attendees."""
        if not await self.prompter.confirm(*SEND_MATCHES_PROMPT):
            return False
        self.is_busy = True
        try:
            result = await self.admin_service.send_matches(self.event_id)
        finally:
            self.is_busy = False
        if not result:
            await self.prompter.notify("Error", "Failed to send matches")
            return False
        await self.prompter.notify("Success", "Matches sent to all users!")
        await self.refresh_status()
        return True

    async def save_form_url(self, form_url: str) -> bool:
        """Write the form link to the server, then re-fetch."""
        result = await self.admin_service.update_form_url(
            self.event_id, form_url.strip()
        )
        if not result:
            await self.prompter.notify("Error", "Failed to update form URL")
            return False
        await self.prompter.notify("Success", "Form URL updated!")
        await self.refresh_status()
        return True

    async def _fetch_cycle(self) -> None:
        self.fetch_cycles += 1
        await self._fetch_status()
        await self._fetch_matches()

    async def _fetch_status(self) -> None:
        result = await self.admin_service.get_matching_status(self.event_id)
        if self.state is MonitorState.STOPPED:
            return
        if result:
            self.status = result.value
            self.status_error = None
        else:
            self.status_error = "Failed to load matching status"

    async def _fetch_matches(self) -> None:
        result = await self.admin_service.list_event_matches(self.event_id)
        if self.state is MonitorState.STOPPED:
            return
        if result:
            self.matches = list(result.value or [])
            self.matches_error = None
        else:
            self.matches_error = "Failed to load matches"

    def _reconcile(self) -> None:
        if self.state is MonitorState.STOPPED:
            return
        active = self.status is not None and self.status.is_active
        if active and self._poller is None:
            self._poller = RepeatingTask(
                self.refresh,
                self.interval_seconds,
                name=f"matching-monitor:{self.event_id}",
            )
            self._poller.start()
            self.state = MonitorState.POLLING
            _logger.info("Polling matching status for event %s", self.event_id)
        elif not active and self._poller is not None:
            self._stop_polling()
            self.state = MonitorState.IDLE
            _logger.info("Matching run for event %s is no longer active", self.event_id)

    def _stop_polling(self) -> None:
        if self._poller is not None:
            self._poller.cancel()
            self._poller = None

    def _notify(self) -> None:
        if self.state is MonitorState.STOPPED:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.exception("Monitor listener failed")
