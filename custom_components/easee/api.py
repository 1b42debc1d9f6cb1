"""API client for the Easee cloud.

This module provides the client used to talk to the Easee cloud API,
including authentication, lazy token refresh, and the charger read calls.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from urllib.parse import quote

import httpx
from homeassistant.core import HomeAssistant
from homeassistant.helpers.httpx_client import create_async_httpx_client

from .const import (
    CHARGERS_URL,
    CONTENT_TYPE_BODY,
    CONTENT_TYPE_JSON,
    LOGIN_URL,
    REFRESH_TOKEN_URL,
    REQUEST_TIMEOUT,
)
from .models import AccessToken, ChargerListResult, EaseeCharger, EaseeChargerState

_LOGGER = logging.getLogger(__name__)

# HTTP status codes
HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403


class EaseeApiError(Exception):
    """Base exception for Easee API client errors."""


class EaseeAuthenticationError(EaseeApiError):
    """Exception raised when credentials or a token response are rejected."""


class EaseeCommunicationError(EaseeApiError):
    """Exception raised for transport failures and unexpected status codes."""


def create_headers(
    token: AccessToken | None = None, *, with_body: bool = False
) -> dict[str, str]:
    """Create HTTP headers for Easee API requests.

    Args:
        token: Optional access token to send as Authorization header.
        with_body: Whether the request carries a JSON body.

    Returns:
        Dictionary containing HTTP headers for API requests.

    """
    headers = {"Accept": CONTENT_TYPE_JSON}
    if with_body:
        headers["Content-Type"] = CONTENT_TYPE_BODY
    if token is not None:
        headers["Authorization"] = token.authorization
    return headers


def is_success(status: int) -> bool:
    """Check if HTTP status code indicates success.

    Only 200 is accepted; every other status is a failure.
    """
    return status == HTTP_OK


def is_auth_error(status: int) -> bool:
    """Check if HTTP status code indicates rejected credentials."""
    return status in (HTTP_BAD_REQUEST, HTTP_UNAUTHORIZED, HTTP_FORBIDDEN)


def validate_response(response: httpx.Response) -> Any:
    """Validate HTTP response and return parsed JSON data.

    Raises:
        EaseeCommunicationError: If the status is not 200 or the body is not JSON.

    """
    if not is_success(response.status_code):
        error_msg = f"Request failed: {response.status_code}"
        raise EaseeCommunicationError(error_msg)

    try:
        return response.json()
    except ValueError as err:
        error_msg = f"Invalid JSON in response: {err}"
        raise EaseeCommunicationError(error_msg) from err


def extract_chargers(data: Any) -> list[EaseeCharger]:
    """Extract charger list from the /chargers response.

    Raises:
        EaseeCommunicationError: If the body is not a list of chargers.

    """
    if not isinstance(data, list):
        error_msg = "Unexpected chargers response, expected a list"
        raise EaseeCommunicationError(error_msg)

    try:
        return [EaseeCharger.from_api(item) for item in data]
    except (KeyError, TypeError, ValueError) as err:
        error_msg = f"Failed to parse chargers response: {err}"
        raise EaseeCommunicationError(error_msg) from err


def extract_charger_state(data: Any) -> EaseeChargerState:
    """Extract charger state from the /chargers/{id}/state response.

    Raises:
        EaseeCommunicationError: If the body is not a state object.

    """
    try:
        return EaseeChargerState.from_api(data)
    except (KeyError, TypeError, ValueError) as err:
        error_msg = f"Failed to parse charger state response: {err}"
        raise EaseeCommunicationError(error_msg) from err


def create_session_client(hass: HomeAssistant) -> httpx.AsyncClient:
    """Create the HTTP client used for Easee cloud requests.

    No retry transport is installed; failed calls are retried on the next
    scheduled update.
    """
    return create_async_httpx_client(hass, timeout=REQUEST_TIMEOUT)


class EaseeApiClient:
    """Client for the Easee cloud owning the account's token.

    The token is only replaced while holding ``_token_lock`` so concurrent
    pollers sharing one client never refresh twice.
    """

    def __init__(
        self,
        session: httpx.AsyncClient,
        username: str,
        password: str,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            session: HTTP client session.
            username: Easee cloud username.
            password: Easee cloud password.
            now: Clock returning an aware UTC datetime.

        """
        self._session = session
        self._username = username
        self._password = password
        self._now = now or (lambda: datetime.now(UTC))
        self._token: AccessToken | None = None
        self._token_lock = asyncio.Lock()

    @property
    def username(self) -> str:
        """Return the account username."""
        return self._username

    @property
    def token(self) -> AccessToken | None:
        """Return the current token, which may be expired."""
        return self._token

    async def async_authenticate(self) -> AccessToken:
        """Log in with the stored credentials and store a fresh token.

        Raises:
            EaseeAuthenticationError: If credentials or the token response are
                rejected.
            EaseeCommunicationError: If the request fails in transport or
                returns an unexpected status.

        """
        _LOGGER.debug("Authenticating Easee cloud user '%s'", self._username)
        payload = {"userName": self._username, "password": self._password}

        async with self._token_lock:
            token = await self._async_request_token(LOGIN_URL, payload)
            self._token = token

        _LOGGER.debug(
            "Easee cloud authentication OK, token expires in %d seconds",
            token.expires_in,
        )
        return token

    async def async_ensure_valid_token(self) -> AccessToken | None:
        """Return a usable token, refreshing it once if it has expired.

        Returns:
            The valid token, or None when no login happened yet or the refresh
            failed. A failed refresh keeps the expired token so the next call
            tries again.

        """
        async with self._token_lock:
            token = self._token
            if token is None:
                _LOGGER.debug("No Easee access token, authenticate first")
                return None

            if not token.is_expired(self._now()):
                return token

            _LOGGER.debug(
                "Easee access token expires at %s, refreshing",
                token.expires_at.isoformat(),
            )
            payload = {
                "accessToken": token.access_token,
                "refreshToken": token.refresh_token,
            }
            try:
                new_token = await self._async_request_token(
                    REFRESH_TOKEN_URL, payload, token
                )
            except EaseeApiError as err:
                _LOGGER.warning("Failed to refresh Easee access token: %s", err)
                return None

            self._token = new_token
            _LOGGER.debug(
                "Easee access token refreshed, expires in %d seconds",
                new_token.expires_in,
            )
            return new_token

    async def async_fetch_chargers(self) -> ChargerListResult:
        """Fetch chargers on the account, reporting whether the fetch worked."""
        _LOGGER.debug("Retrieving chargers from Easee cloud")
        token = await self.async_ensure_valid_token()
        if token is None:
            return ChargerListResult(chargers=[], success=False)

        try:
            data = await self._async_get(CHARGERS_URL, token)
            chargers = extract_chargers(data)
        except EaseeApiError as err:
            _LOGGER.warning("Failed to retrieve chargers: %s", err)
            return ChargerListResult(chargers=[], success=False)

        _LOGGER.debug("Retrieved %d chargers from Easee cloud", len(chargers))
        return ChargerListResult(chargers=chargers, success=True)

    async def async_get_chargers(self) -> list[EaseeCharger]:
        """Fetch chargers on the account.

        Returns an empty list on any failure, so an empty result can also mean
        the cloud could not be reached.
        """
        result = await self.async_fetch_chargers()
        return result.chargers

    async def async_get_charger_state(
        self, charger_id: str
    ) -> EaseeChargerState | None:
        """Fetch the current state of one charger.

        Returns:
            The state snapshot, or None if it could not be retrieved.

        """
        _LOGGER.debug("Retrieving state of charger %s from Easee cloud", charger_id)
        token = await self.async_ensure_valid_token()
        if token is None:
            return None

        try:
            state_url = f"{CHARGERS_URL}/{quote(charger_id, safe='')}/state"
            data = await self._async_get(state_url, token)
            return extract_charger_state(data)
        except EaseeApiError as err:
            _LOGGER.warning("Failed to retrieve state of charger %s: %s", charger_id, err)
            return None

    async def async_close(self) -> None:
        """Drop the token and close the HTTP session."""
        async with self._token_lock:
            self._token = None
        await self._session.aclose()

    async def _async_request_token(
        self,
        url: str,
        payload: dict[str, str],
        token: AccessToken | None = None,
    ) -> AccessToken:
        try:
            response = await self._session.post(
                url,
                headers=create_headers(token, with_body=True),
                json=payload,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as err:
            error_msg = f"Token request failed: {err}"
            raise EaseeCommunicationError(error_msg) from err

        if is_auth_error(response.status_code):
            _LOGGER.debug("Token request rejected with status %d", response.status_code)
            error_msg = "Easee cloud rejected the credentials"
            raise EaseeAuthenticationError(error_msg)

        if not is_success(response.status_code):
            error_msg = f"Token request failed: {response.status_code}"
            raise EaseeCommunicationError(error_msg)

        try:
            return AccessToken.from_api(response.json(), issued_at=self._now())
        except (KeyError, TypeError, ValueError) as err:
            error_msg = f"Could not parse token response: {err}"
            raise EaseeAuthenticationError(error_msg) from err

    async def _async_get(self, url: str, token: AccessToken) -> Any:
        try:
            response = await self._session.get(url, headers=create_headers(token))
        except (httpx.HTTPError, httpx.InvalidURL) as err:
            error_msg = f"Request to {url} failed: {err}"
            raise EaseeCommunicationError(error_msg) from err

        return validate_response(response)
