"""bitbucket server REST client implementation"""

import logging
from typing import Any

import httpx

from bitbucket_mcp.settings import Settings

logger = logging.getLogger("bitbucket-mcp.client")


def create_http_client(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    """build the single client every tool call goes through

    Args:
        settings: validated connection settings
        transport: optional transport override (tests pass `httpx.MockTransport`)

    Returns:
        async client bound to `<bitbucket_url>/rest/api/1.0`, authenticated with
        a bearer token when one is configured, otherwise with basic auth
    """
    headers = {"Accept": "application/json"}
    auth: httpx.Auth | None = None

    if settings.bitbucket_token:
        headers["Authorization"] = f"Bearer {settings.bitbucket_token}"
    else:
        # settings validation guarantees the pair is complete here
        auth = httpx.BasicAuth(
            settings.bitbucket_username or "", settings.bitbucket_password or ""
        )

    return httpx.AsyncClient(
        base_url=settings.api_url,
        headers=headers,
        auth=auth,
        timeout=settings.bitbucket_timeout,
        transport=transport,
    )


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    path: str,
    json: dict[str, Any] | None = None,
    params: dict[str, Any] | None = None,
) -> Any:
    """make a request and decode the JSON body

    Raises:
        httpx.HTTPStatusError: on a non-2xx response
        httpx.TransportError: on network failures and timeouts
    """
    logger.debug("%s %s", method, path)
    response = await client.request(method, path, json=json, params=params)
    response.raise_for_status()

    if not response.content:
        return None
    return response.json()


async def request_text(
    client: httpx.AsyncClient, path: str, params: dict[str, Any] | None = None
) -> str:
    """GET a plain-text resource (diffs are patches, not JSON)"""
    logger.debug("GET %s (text/plain)", path)
    response = await client.get(path, params=params, headers={"Accept": "text/plain"})
    response.raise_for_status()
    return response.text


def api_error_message(error: httpx.HTTPError) -> str:
    """pull the most useful message out of a failed request

    Bitbucket answers errors either with a top-level `message` or with its
    `{"errors": [{"message": ...}]}` envelope. Anything else falls back to the
    transport-level text.
    """
    if isinstance(error, httpx.HTTPStatusError):
        try:
            body = error.response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            if isinstance(message := body.get("message"), str) and message:
                return message
            errors = body.get("errors")
            if isinstance(errors, list) and errors and isinstance(errors[0], dict):
                if (message := errors[0].get("message")) is not None:
                    return str(message)

    return str(error) or type(error).__name__
