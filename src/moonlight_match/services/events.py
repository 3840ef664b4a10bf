"""Event browsing, ticketing and form completion."""

from dataclasses import dataclass
from datetime import datetime

from moonlight_match.adapters.api_gateway import ApiGateway
from moonlight_match.domain.events import Event, TicketPurchase
from moonlight_match.domain.results import FailureReason, Result
from moonlight_match.services.responses import (
    fetch_json,
    malformed,
    parse_datetime,
    send,
)


@dataclass
class EventService:
    """Attendee-facing event operations."""

    gateway: ApiGateway

    async def list_events(self) -> Result[list[Event]]:
        """Return the public event list."""
        body = await fetch_json(
            self.gateway, "GET", "/api/events", action="Load events", authenticated=False
        )
        if not body:
            return body.failed_as()
        return parse_event_list(body.value, action="Load events")

    async def create_event(
        self, name: str, date: datetime | None, form_url: str
    ) -> Result[Event]:
        """Create an event; all fields are required."""
        if not name.strip() or date is None or not form_url.strip():
            return Result.failure(
                FailureReason.PRECONDITION_FAILED, "Please fill in all fields."
            )
        body = await fetch_json(
            self.gateway,
            "POST",
            "/api/events",
            action="Create event",
            json={"name": name, "date": date.isoformat(), "formUrl": form_url},
            authenticated=False,
        )
        if not body:
            return body.failed_as()
        payload = body.value.get("event", body.value)
        try:
            return Result.success(parse_event(payload))
        except (KeyError, TypeError) as exc:
            return malformed("Create event", exc)

    async def purchase_ticket(
        self, user_id: str, event_id: str
    ) -> Result[TicketPurchase]:
        """Buy a ticket; an existing ticket counts as success."""
        if not user_id:
            return Result.failure(
                FailureReason.PRECONDITION_FAILED, "Log in to purchase tickets"
            )
        sent = await send(
            self.gateway,
            "POST",
            "/api/tickets",
            action="Purchase ticket",
            json={"userId": user_id, "eventId": event_id},
            authenticated=False,
        )
        if sent:
            return Result.success(TicketPurchase.PURCHASED)
        if sent.reason is FailureReason.CONFLICT:
            return Result.success(TicketPurchase.ALREADY_OWNED)
        return sent.failed_as()

    async def list_user_events(
        self, user_id: str, *, authenticated: bool = True
    ) -> Result[list[Event]]:
        """Return events the user holds tickets for.

        Some callers historically hit this endpoint without a token, so the
        bearer header is optional.
        """
        body = await fetch_json(
            self.gateway,
            "GET",
            "/api/user/events",
            action="Load your events",
            params={"userId": user_id},
            authenticated=authenticated,
        )
        if not body:
            return body.failed_as()
        return parse_event_list(body.value, action="Load your events")

    async def check_form_completion(self, email: str) -> Result[bool]:
        """Ask whether the linked registration form has been submitted."""
        body = await fetch_json(
            self.gateway,
            "POST",
            "/api/google-forms/check-completion",
            action="Check form completion",
            json={"email": email},
        )
        if not body:
            return body.failed_as()
        return Result.success(bool(body.value.get("hasCompletedForm")))


def parse_event(payload: object) -> Event:
    """Build an event from an API payload."""
    if not isinstance(payload, dict):
        raise TypeError("event payload must be an object")
    ticket_id = payload.get("ticketId")
    return Event(
        id=str(payload["id"]),
        name=str(payload.get("name", "")),
        date=parse_datetime(payload.get("date")),
        form_url=payload.get("formUrl") or None,
        ticket_id=str(ticket_id) if ticket_id else None,
    )


def parse_event_list(
    payload: dict[str, object], *, action: str
) -> Result[list[Event]]:
    """Build events from an ``{"events": [...]}`` payload."""
    events = payload.get("events") or []
    try:
        return Result.success([parse_event(event) for event in events])
    except (KeyError, TypeError) as exc:
        return malformed(action, exc)
