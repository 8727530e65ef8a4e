"""httpx helpers shared by the provider clients.

Every transport, status or payload problem is logged with its detail and
surfaces as OAuthExchangeError with the generic message.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Any
from urllib.parse import urlencode

import httpx

from tollgate_auth.exceptions import OAuthExchangeError
from tollgate_identity.infrastructure.oauth.protocol import OAuthTokens

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20.0


def build_url(base: str, params: dict[str, str]) -> str:
    return f"{base}?{urlencode(params)}"


@asynccontextmanager
async def open_client(
    client: httpx.AsyncClient | None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one that is closed after use."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(
        timeout=DEFAULT_TIMEOUT,
        follow_redirects=False,
    ) as owned:
        yield owned


def _json_object(response: httpx.Response, provider: str, what: str) -> dict[str, Any]:
    try:
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as e:
        logger.error(
            "%s %s request failed with status %d",
            provider,
            what,
            e.response.status_code,
        )
        raise OAuthExchangeError from e
    except ValueError as e:
        logger.error("%s %s response is not JSON: %s", provider, what, e)
        raise OAuthExchangeError from e

    if not isinstance(payload, dict):
        logger.error(
            "%s %s response has unexpected type %s",
            provider,
            what,
            type(payload).__name__,
        )
        raise OAuthExchangeError
    return payload


async def request_tokens(
    client: httpx.AsyncClient | None,
    provider: str,
    url: str,
    data: dict[str, str],
    auth: tuple[str, str] | None = None,
) -> OAuthTokens:
    """POST a token request (form encoded) and parse the standard response."""
    try:
        async with open_client(client) as http:
            response = await http.post(
                url,
                data=data,
                auth=auth,
                headers={"Accept": "application/json"},
            )
    except httpx.HTTPError as e:
        logger.error("%s token request failed: %s", provider, e)
        raise OAuthExchangeError from e

    payload = _json_object(response, provider, "token")
    access_token = payload.get("access_token")
    if not access_token:
        logger.error("%s token response carries no access_token", provider)
        raise OAuthExchangeError

    try:
        expires_in = int(payload["expires_in"])
    except (KeyError, TypeError, ValueError):
        expires_in = None

    return OAuthTokens(
        access_token=str(access_token),
        expires_in=expires_in,
        refresh_token=payload.get("refresh_token"),
    )


async def get_json(
    client: httpx.AsyncClient | None,
    provider: str,
    url: str,
    access_token: str,
    params: dict[str, str] | None = None,
) -> dict[str, Any]:
    """GET a bearer-authenticated JSON resource."""
    try:
        async with open_client(client) as http:
            response = await http.get(
                url,
                params=params or {},
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                },
            )
    except httpx.HTTPError as e:
        logger.error("%s profile request failed: %s", provider, e)
        raise OAuthExchangeError from e
    return _json_object(response, provider, "profile")


def expires_at_from(tokens: OAuthTokens, now: datetime) -> datetime | None:
    if tokens.expires_in is None:
        return None
    return now + timedelta(seconds=tokens.expires_in)


def require_account_id(provider: str, value: Any) -> str:
    if value is None or str(value).strip() == "":
        logger.error("%s identity carries no account id", provider)
        raise OAuthExchangeError
    return str(value)
