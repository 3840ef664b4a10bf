"""Shared test fixtures."""

import json
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import pytest

from moonlight_match.adapters.api_gateway import HttpxApiGateway
from moonlight_match.adapters.storage import KeyValueStorage, StorageError
from moonlight_match.config import Settings
from moonlight_match.services.matching_monitor import AdminPrompter

BASE_URL = "https://api.test"

Handler = Callable[[httpx.Request], httpx.Response]


@dataclass
class InMemoryStorage(KeyValueStorage):
    """In-memory key-value storage for tests."""

    items: dict[str, str] = field(default_factory=dict)
    failing_keys: set[str] = field(default_factory=set)
    fail_reads: bool = False

    def get_item(self, key: str) -> str | None:
        if self.fail_reads:
            raise StorageError("read failed")
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if key in self.failing_keys:
            raise StorageError(f"write failed for {key}")
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        if key in self.failing_keys:
            raise StorageError(f"remove failed for {key}")
        self.items.pop(key, None)


@dataclass
class FakePrompter(AdminPrompter):
    """Prompter that answers confirmations and records notices."""

    answer: bool = True
    confirmations: list[str] = field(default_factory=list)
    notices: list[tuple[str, str]] = field(default_factory=list)

    async def confirm(self, title: str, message: str) -> bool:
        self.confirmations.append(title)
        return self.answer

    async def notify(self, title: str, message: str) -> None:
        self.notices.append((title, message))


def make_gateway(handler: Handler, storage: KeyValueStorage) -> HttpxApiGateway:
    """Build a gateway whose HTTP traffic is served by ``handler``."""
    return HttpxApiGateway(
        base_url=BASE_URL,
        storage=storage,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def request_json(request: httpx.Request) -> dict[str, object]:
    return json.loads(request.content.decode())


def user_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": "user-1",
        "email": "ann@example.com",
        "name": "Ann",
        "dataRetention": True,
        "isAdmin": False,
        "eventId": "moonlight-gala",
        "createdAt": "2025-02-01T18:00:00Z",
        "updatedAt": "2025-02-01T18:00:00Z",
    }
    payload.update(overrides)
    return payload


def event_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": "evt-1",
        "name": "Moonlight Gala",
        "date": "2025-03-01T20:00:00Z",
        "formUrl": "https://forms.google.com/gala",
        "userCount": 40,
        "isMatching": False,
        "isMatchingComplete": False,
        "matchesSent": False,
    }
    payload.update(overrides)
    return payload


def match_payload(match_id: str = "match-1", **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": match_id,
        "user": {"id": "user-1", "name": "Ann", "email": "ann@example.com"},
        "matchedUser": {"id": "user-2", "name": "Ben", "email": "ben@example.com"},
        "score": 0.87,
        "similarities": ["jazz", "hiking"],
        "createdAt": "2025-03-01T21:00:00Z",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def prompter() -> FakePrompter:
    return FakePrompter()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        api_base_url=f"{BASE_URL}/",
        storage_path=str(tmp_path / "storage.json"),
        poll_interval_seconds=0.0,
    )
