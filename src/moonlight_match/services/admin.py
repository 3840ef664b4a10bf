"""Admin console operations for running and publishing matches."""

import logging
import math
from dataclasses import dataclass

from moonlight_match.adapters.api_gateway import ApiGateway
from moonlight_match.domain.events import Event
from moonlight_match.domain.matches import Match
from moonlight_match.domain.matching import MatchingStatus
from moonlight_match.domain.results import Result
from moonlight_match.services.events import parse_event_list
from moonlight_match.services.matches import parse_match_list
from moonlight_match.services.responses import (
    fetch_json,
    malformed,
    parse_datetime,
    send,
)

_logger = logging.getLogger(__name__)


@dataclass
class AdminService:
    """Bearer-authenticated event administration."""

    gateway: ApiGateway

    async def list_events(self) -> Result[list[Event]]:
        """Return all events for the admin dashboard."""
        body = await fetch_json(self.gateway, "GET", "/api/events", action="Load events")
        if not body:
            return body.failed_as()
        return parse_event_list(body.value, action="Load events")

    async def get_matching_status(self, event_id: str) -> Result[MatchingStatus]:
        """Fetch the event and project its matching progress."""
        body = await fetch_json(
            self.gateway,
            "GET",
            f"/api/events/{event_id}",
            action="Load matching status",
        )
        if not body:
            return body.failed_as()
        try:
            return Result.success(parse_matching_status(body.value["event"]))
        except (KeyError, TypeError, ValueError) as exc:
            return malformed("Load matching status", exc)

    async def list_event_matches(self, event_id: str) -> Result[list[Match]]:
        """Return all matches computed for an event."""
        body = await fetch_json(
            self.gateway,
            "GET",
            f"/api/events/{event_id}/matches",
            action="Load event matches",
        )
        if not body:
            return body.failed_as()
        return parse_match_list(body.value, action="Load event matches")

    async def start_matching(self, event_id: str) -> Result[None]:
        """Kick off the server-side matching run."""
        return await self._post_action(event_id, "start-matching", "Start matching")

    async def send_matches(self, event_id: str) -> Result[None]:
        """Publish computed matches to attendees."""
        return await self._post_action(event_id, "send-matches", "Send matches")

    async def update_form_url(self, event_id: str, form_url: str) -> Result[None]:
        """Replace the event's registration form link."""
        sent = await send(
            self.gateway,
            "PATCH",
            f"/api/events/{event_id}",
            action="Update form URL",
            json={"formUrl": form_url},
        )
        if not sent:
            return sent.failed_as()
        return Result.success()

    async def _post_action(self, event_id: str, verb: str, action: str) -> Result[None]:
        sent = await send(
            self.gateway, "POST", f"/api/events/{event_id}/{verb}", action=action
        )
        if not sent:
            return sent.failed_as()
        _logger.info("%s requested for event %s", action, event_id)
        return Result.success()


def parse_matching_status(event: object) -> MatchingStatus:
    """Build a matching status from an event payload."""
    if not isinstance(event, dict):
        raise TypeError("event payload must be an object")
    total_users = int(event.get("userCount") or 0)
    processed_users = int(event.get("processedUsers") or 0)
    progress = _finite_or_none(event.get("progress"))
    if progress is None:
        progress = processed_users / total_users * 100 if total_users else 0.0
    return MatchingStatus(
        event_id=str(event["id"]),
        event_name=str(event.get("name", "")),
        total_users=total_users,
        processed_users=processed_users,
        total_matches=int(event.get("totalMatches") or 0),
        is_matching=bool(event.get("isMatching", False)),
        is_complete=bool(event.get("isMatchingComplete", False)),
        matches_sent=bool(event.get("matchesSent", False)),
        progress=min(max(progress, 0.0), 100.0),
        start_time=parse_datetime(event.get("matchingStartedAt")),
        end_time=parse_datetime(event.get("matchingCompletedAt")),
        form_url=event.get("formUrl") or None,
    )


def _finite_or_none(value: object) -> float | None:
    if value is None:
        return None
    number = float(value)  # type: ignore[arg-type]
    return number if math.isfinite(number) else None
