"""Helpers turning gateway calls into typed results."""

import logging
from datetime import datetime

import httpx

from moonlight_match.adapters.api_gateway import ApiGateway
from moonlight_match.domain.results import FailureReason, Result, reason_for_status

_logger = logging.getLogger(__name__)


async def send(  # noqa: PLR0913
    gateway: ApiGateway,
    method: str,
    path: str,
    *,
    action: str,
    json: object | None = None,
    params: dict[str, str] | None = None,
    authenticated: bool = True,
    credentials: bool = False,
) -> Result[httpx.Response]:
    """Call the API and categorize transport and status failures."""
    try:
        response = await gateway.request(
            method, path, json=json, params=params, authenticated=authenticated
        )
    except httpx.TransportError as exc:
        _logger.warning("%s failed: %s", action, exc)
        return Result.failure(
            FailureReason.NETWORK_UNAVAILABLE, f"{action} failed: network error"
        )
    if response.is_success:
        return Result.success(response)
    _logger.warning("%s failed with status %s", action, response.status_code)
    return Result.failure(
        reason_for_status(response.status_code, credentials=credentials),
        _error_message(response) or f"{action} failed",
        status_code=response.status_code,
    )


def json_body(response: httpx.Response, *, action: str) -> Result[dict[str, object]]:
    """Decode a JSON object body."""
    try:
        payload = response.json()
    except ValueError:
        _logger.warning("%s returned a non-JSON body", action)
        return Result.failure(FailureReason.MALFORMED_RESPONSE, f"{action}: bad body")
    if not isinstance(payload, dict):
        return Result.failure(FailureReason.MALFORMED_RESPONSE, f"{action}: bad body")
    return Result.success(payload)


async def fetch_json(  # noqa: PLR0913
    gateway: ApiGateway,
    method: str,
    path: str,
    *,
    action: str,
    json: object | None = None,
    params: dict[str, str] | None = None,
    authenticated: bool = True,
) -> Result[dict[str, object]]:
    """Call the API and decode the JSON object it returns."""
    sent = await send(
        gateway,
        method,
        path,
        action=action,
        json=json,
        params=params,
        authenticated=authenticated,
    )
    if not sent:
        return sent.failed_as()
    return json_body(sent.value, action=action)


def malformed(action: str, exc: Exception) -> Result:
    """Log and return a malformed-payload failure."""
    _logger.warning("%s returned an unexpected payload: %s", action, exc)
    return Result.failure(FailureReason.MALFORMED_RESPONSE, f"{action}: bad payload")


def parse_datetime(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp, returning None when absent or invalid."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _error_message(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, str) and error:
            return error
    return None
