"""Dependency container wiring for the client."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from moonlight_match.adapters.api_gateway import ApiGateway, HttpxApiGateway
from moonlight_match.adapters.storage import JsonFileStorage, KeyValueStorage
from moonlight_match.app_logging import configure_logging
from moonlight_match.config import Settings, normalize_base_url
from moonlight_match.services.admin import AdminService
from moonlight_match.services.events import EventService
from moonlight_match.services.matches import MatchService
from moonlight_match.services.matching_monitor import AdminPrompter, MatchingMonitor
from moonlight_match.services.session_store import SessionStore


@dataclass
class AppContainer:
    """Holds client-wide dependencies."""

    settings: Settings
    storage: KeyValueStorage
    gateway: ApiGateway
    session_store: SessionStore
    event_service: EventService
    match_service: MatchService
    admin_service: AdminService
    close_resources: Callable[[], Awaitable[None]]

    def matching_monitor(
        self, event_id: str, prompter: AdminPrompter
    ) -> MatchingMonitor:
        """Build a view-model for one event's matching screen."""
        return MatchingMonitor(
            event_id=event_id,
            admin_service=self.admin_service,
            prompter=prompter,
            interval_seconds=self.settings.poll_interval_seconds,
        )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    storage = JsonFileStorage.create(resolved_settings.storage_path)
    gateway = HttpxApiGateway.create(
        base_url=normalize_base_url(resolved_settings.api_base_url),
        storage=storage,
        timeout=resolved_settings.request_timeout_seconds,
    )
    session_store = SessionStore(
        storage=storage,
        gateway=gateway,
        default_event_id=resolved_settings.default_event_id,
    )
    session_store.initialize()

    async def close_resources() -> None:
        await gateway.close()

    return AppContainer(
        settings=resolved_settings,
        storage=storage,
        gateway=gateway,
        session_store=session_store,
        event_service=EventService(gateway),
        match_service=MatchService(gateway),
        admin_service=AdminService(gateway),
        close_resources=close_resources,
    )
