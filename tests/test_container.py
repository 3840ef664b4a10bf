"""Tests for container wiring."""

import asyncio
import logging

from moonlight_match.containers import build_container
from moonlight_match.services.matching_monitor import MonitorState
from tests.conftest import FakePrompter


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.session_store.is_initialized
    assert container.session_store.current() is None
    assert container.gateway.base_url == "https://api.test"

    monitor = container.matching_monitor("evt-1", FakePrompter())
    assert monitor.interval_seconds == 0.0
    assert monitor.state is MonitorState.IDLE
    asyncio.run(container.close_resources())


def test_build_container_applies_log_level(settings) -> None:
    settings.log_level = "WARNING"

    container = build_container(settings)

    assert logging.getLogger("moonlight_match").level == logging.WARNING
    asyncio.run(container.close_resources())
