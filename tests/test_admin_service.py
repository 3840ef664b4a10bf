"""Tests for admin console operations."""

import asyncio
from datetime import UTC, datetime

import httpx

from moonlight_match.domain.results import FailureReason
from moonlight_match.services.admin import AdminService, parse_matching_status
from tests.conftest import (
    InMemoryStorage,
    event_payload,
    make_gateway,
    match_payload,
    request_json,
)


def test_list_events_uses_bearer_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"events": [event_payload()]})

    service = AdminService(
        make_gateway(handler, InMemoryStorage(items={"mm_token": "admin"}))
    )

    result = asyncio.run(service.list_events())

    assert [event.name for event in result.value] == ["Moonlight Gala"]
    assert seen[0].headers["Authorization"] == "Bearer admin"


def test_get_matching_status_projects_event() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/events/evt-1"
        return httpx.Response(
            200,
            json={
                "event": event_payload(
                    isMatching=True,
                    processedUsers=10,
                    totalMatches=25,
                    matchingStartedAt="2025-03-01T21:00:00Z",
                )
            },
        )

    service = AdminService(make_gateway(handler, InMemoryStorage()))

    result = asyncio.run(service.get_matching_status("evt-1"))

    status = result.value
    assert status.event_name == "Moonlight Gala"
    assert status.total_users == 40
    assert status.processed_users == 10
    assert status.total_matches == 25
    assert status.progress == 25.0
    assert status.is_active
    assert status.start_time == datetime(2025, 3, 1, 21, tzinfo=UTC)
    assert status.form_url == "https://forms.google.com/gala"


def test_get_matching_status_missing_event_is_malformed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"events": []})

    service = AdminService(make_gateway(handler, InMemoryStorage()))

    result = asyncio.run(service.get_matching_status("evt-1"))

    assert result.reason is FailureReason.MALFORMED_RESPONSE


def test_parse_matching_status_defaults_and_clamps() -> None:
    sparse = parse_matching_status({"id": 7, "name": "Mixer"})
    overflowing = parse_matching_status(
        {"id": "evt-2", "progress": 140, "isMatching": True}
    )

    assert sparse.event_id == "7"
    assert sparse.total_users == 0
    assert sparse.progress == 0
    assert sparse.display_progress is None
    assert not sparse.is_active
    assert overflowing.progress == 100.0
    assert overflowing.display_progress == 100.0


def test_list_event_matches_includes_both_sides() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/events/evt-1/matches"
        return httpx.Response(200, json={"matches": [match_payload()]})

    service = AdminService(make_gateway(handler, InMemoryStorage()))

    result = asyncio.run(service.list_event_matches("evt-1"))

    match = result.value[0]
    assert match.user is not None
    assert match.user.email == "ann@example.com"
    assert match.matched_user.email == "ben@example.com"
    assert match.score == 0.87


def test_start_and_send_matching_post_to_event_actions() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(f"{request.method} {request.url.path}")
        return httpx.Response(200, json={"ok": True})

    service = AdminService(make_gateway(handler, InMemoryStorage()))

    started = asyncio.run(service.start_matching("evt-1"))
    sent = asyncio.run(service.send_matches("evt-1"))

    assert started and sent
    assert seen == [
        "POST /api/events/evt-1/start-matching",
        "POST /api/events/evt-1/send-matches",
    ]


def test_update_form_url_patches_event() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=event_payload())

    service = AdminService(make_gateway(handler, InMemoryStorage()))

    result = asyncio.run(service.update_form_url("evt-1", "https://forms.google.com/x"))

    assert result
    assert seen[0].method == "PATCH"
    assert request_json(seen[0]) == {"formUrl": "https://forms.google.com/x"}


def test_start_matching_network_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    service = AdminService(make_gateway(handler, InMemoryStorage()))

    result = asyncio.run(service.start_matching("evt-1"))

    assert result.reason is FailureReason.NETWORK_UNAVAILABLE


def test_parse_matching_status_ignores_non_finite_progress() -> None:
    for progress in (float("nan"), float("inf"), "NaN"):
        status = parse_matching_status(
            {
                "id": "evt-1",
                "userCount": 4,
                "processedUsers": 1,
                "progress": progress,
                "isMatching": True,
            }
        )

        assert status.progress == 25.0
        assert status.display_progress == 25.0
