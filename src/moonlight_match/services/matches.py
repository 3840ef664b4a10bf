"""Attendee match listing and reveals."""

from dataclasses import dataclass

from moonlight_match.adapters.api_gateway import ApiGateway
from moonlight_match.domain.matches import Match, MatchParticipant
from moonlight_match.domain.results import Result
from moonlight_match.services.responses import (
    fetch_json,
    malformed,
    parse_datetime,
    send,
)


@dataclass
class MatchService:
    """Matches shown to the session holder."""

    gateway: ApiGateway

    async def list_user_matches(self, user_id: str) -> Result[list[Match]]:
        """Return the user's computed matches."""
        body = await fetch_json(
            self.gateway,
            "GET",
            f"/api/users/{user_id}/matches",
            action="Load matches",
        )
        if not body:
            return body.failed_as()
        return parse_match_list(body.value, action="Load matches")

    async def reveal_match(self, match_id: str) -> Result[None]:
        """Ask the server to reveal a hidden match."""
        sent = await send(
            self.gateway,
            "POST",
            f"/api/matches/{match_id}/reveal",
            action="Reveal match",
        )
        if not sent:
            return sent.failed_as()
        return Result.success()


def _parse_participant(payload: object) -> MatchParticipant:
    if not isinstance(payload, dict):
        raise TypeError("participant payload must be an object")
    return MatchParticipant(
        id=str(payload["id"]),
        name=str(payload.get("name", "")),
        email=payload.get("email"),
        image=payload.get("image"),
        description=payload.get("description"),
    )


def parse_match(payload: object) -> Match:
    """Build a match from an API payload."""
    if not isinstance(payload, dict):
        raise TypeError("match payload must be an object")
    user = payload.get("user")
    return Match(
        id=str(payload["id"]),
        matched_user=_parse_participant(payload["matchedUser"]),
        score=float(payload.get("score") or 0),
        user=_parse_participant(user) if user else None,
        is_initially_revealed=bool(payload.get("isInitiallyRevealed", False)),
        is_paid_reveal=bool(payload.get("isPaidReveal", False)),
        similarities=tuple(str(tag) for tag in payload.get("similarities") or []),
        created_at=parse_datetime(payload.get("createdAt")),
    )


def parse_match_list(
    payload: dict[str, object], *, action: str
) -> Result[list[Match]]:
    """Build matches from a ``{"matches": [...]}`` payload."""
    matches = payload.get("matches") or []
    try:
        return Result.success([parse_match(match) for match in matches])
    except (KeyError, TypeError, ValueError) as exc:
        return malformed(action, exc)
