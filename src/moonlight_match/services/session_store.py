"""Session lifecycle: login, registration, logout and profile updates."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError

from moonlight_match.adapters.api_gateway import ApiGateway
from moonlight_match.adapters.storage import KeyValueStorage, StorageError
from moonlight_match.domain.results import FailureReason, Result
from moonlight_match.domain.session import (
    LOGGED_IN_KEY,
    SESSION_KEYS,
    TOKEN_KEY,
    USER_KEY,
    Session,
)
from moonlight_match.services.responses import json_body, send

_logger = logging.getLogger(__name__)

SessionListener = Callable[[Session | None], None]


@dataclass
class SessionStore:
    """Single source of truth for who is logged in.

    Every mutation writes through to storage before the in-memory session
    changes. A session exists only when both the user record and the token
    are stored.
    """

    storage: KeyValueStorage
    gateway: ApiGateway
    default_event_id: str = "moonlight-gala"
    is_loading: bool = field(default=True, init=False)
    is_initialized: bool = field(default=False, init=False)
    _session: Session | None = field(default=None, init=False, repr=False)
    _listeners: list[SessionListener] = field(
        default_factory=list, init=False, repr=False
    )

    def current(self) -> Session | None:
        """Return the active session, if any."""
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a change listener and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def initialize(self) -> Session | None:
        """Load the persisted session; failures leave no session."""
        session: Session | None = None
        try:
            raw_user = self.storage.get_item(USER_KEY)
            token = self.storage.get_item(TOKEN_KEY)
            if raw_user and token:
                session = Session.from_storage(raw_user)
        except (StorageError, ValidationError):
            _logger.exception("Failed to load stored session")
            session = None
        finally:
            self.is_loading = False
            self.is_initialized = True
        self._set_session(session)
        return session

    async def login(self, email: str, password: str) -> Result[Session]:
        """Authenticate with credentials and persist the new session."""
        if not email.strip() or not password:
            return Result.failure(
                FailureReason.PRECONDITION_FAILED, "Email and password are required"
            )
        return await self._authenticate(
            "/api/auth/login",
            {"email": email, "password": password},
            action="Login",
        )

    async def register(self, email: str, password: str, name: str) -> Result[Session]:
        """Create an account for the default event and persist the session."""
        if not email.strip() or not password or not name.strip():
            return Result.failure(
                FailureReason.PRECONDITION_FAILED,
                "Name, email and password are required",
            )
        return await self._authenticate(
            "/api/auth/register",
            {
                "email": email,
                "password": password,
                "name": name,
                "eventId": self.default_event_id,
            },
            action="Registration",
        )

    def logout(self) -> None:
        """Remove the persisted session and clear it in memory."""
        for key in SESSION_KEYS:
            try:
                self.storage.remove_item(key)
            except StorageError:
                _logger.exception("Failed to remove %s during logout", key)
        self._set_session(None)

    def update_user(self, fields: Mapping[str, object]) -> Result[Session]:
        """Shallow-merge fields onto the active session and persist it."""
        if self._session is None:
            return Result.failure(
                FailureReason.PRECONDITION_FAILED, "cannot update: no active session"
            )
        try:
            updated = self._session.merged(fields)
        except ValidationError as exc:
            _logger.warning("Rejected session update: %s", exc)
            return Result.failure(
                FailureReason.PRECONDITION_FAILED, "Invalid session fields"
            )
        try:
            self.storage.set_item(USER_KEY, updated.to_storage())
        except StorageError:
            _logger.exception("Failed to persist updated session")
            return Result.failure(FailureReason.STORAGE_ERROR, "Could not save profile")
        self._set_session(updated)
        return Result.success(updated)

    async def _authenticate(
        self, path: str, payload: dict[str, str], *, action: str
    ) -> Result[Session]:
        self.is_loading = True
        try:
            sent = await send(
                self.gateway,
                "POST",
                path,
                action=action,
                json=payload,
                authenticated=False,
                credentials=True,
            )
            if not sent:
                return sent.failed_as()
            parsed = _parse_auth_response(sent.value, action=action)
            if not parsed:
                return parsed.failed_as()
            session, token = parsed.value
            try:
                previous = {key: self.storage.get_item(key) for key in SESSION_KEYS}
            except StorageError:
                _logger.exception("Could not read stored session after %s", action)
                return Result.failure(
                    FailureReason.STORAGE_ERROR, "Could not save session"
                )
            try:
                self.storage.set_item(USER_KEY, session.to_storage())
                self.storage.set_item(TOKEN_KEY, token)
                self.storage.set_item(LOGGED_IN_KEY, "true")
            except StorageError:
                _logger.exception("%s succeeded but the session was not saved", action)
                if not self._restore_keys(previous):
                    self._set_session(None)
                return Result.failure(
                    FailureReason.STORAGE_ERROR, "Could not save session"
                )
            self._set_session(session)
            _logger.info("%s succeeded for user %s", action, session.id)
            return Result.success(session)
        finally:
            self.is_loading = False

    def _restore_keys(self, previous: Mapping[str, str | None]) -> bool:
        """Put back the stored session, or drop it if that fails too."""
        try:
            for key, value in previous.items():
                if value is None:
                    self.storage.remove_item(key)
                else:
                    self.storage.set_item(key, value)
        except StorageError:
            _logger.exception("Failed to restore stored session; clearing it")
        else:
            return True
        for key in SESSION_KEYS:
            try:
                self.storage.remove_item(key)
            except StorageError:
                _logger.exception("Failed to remove stored key %s", key)
        return False

    def _set_session(self, session: Session | None) -> None:
        self._session = session
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception:
                _logger.exception("Session listener failed")


def _parse_auth_response(
    response: httpx.Response, *, action: str
) -> Result[tuple[Session, str]]:
    body = json_body(response, action=action)
    if not body:
        return body.failed_as()
    user = body.value.get("user")
    token = body.value.get("token")
    if not isinstance(user, dict) or not isinstance(token, str) or not token:
        _logger.warning("%s response is missing user or token", action)
        return Result.failure(
            FailureReason.MALFORMED_RESPONSE, f"{action}: missing user or token"
        )
    try:
        session = Session.model_validate(user)
    except ValidationError as exc:
        _logger.warning("%s returned an invalid user: %s", action, exc)
        return Result.failure(FailureReason.MALFORMED_RESPONSE, f"{action}: bad user")
    return Result.success((session, token))
