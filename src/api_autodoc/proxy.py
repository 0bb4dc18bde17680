"""Forwards an intercepted request to the real backend and captures the exchange."""

import json
import logging
from collections.abc import Mapping
from urllib.parse import urlsplit

import httpx

from api_autodoc.models import DocumentationData

logger = logging.getLogger(__name__)

# Headers that describe the inbound hop rather than the request itself
SKIPPED_HEADERS = {
    "host",
    "content-length",
    "connection",
    "keep-alive",
    "transfer-encoding",
    "upgrade",
    "te",
    "trailer",
    "proxy-authorization",
    "proxy-connection",
}


def build_target_url(base_url: str, path: str, query: str = "") -> str:
    """Join the configured backend base URL with an intercepted path and query."""
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    if query:
        url = f"{url}?{query}"
    return url


def forward_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {k: v for k, v in headers.items() if k.lower() not in SKIPPED_HEADERS}


async def forward_request(
    client: httpx.AsyncClient,
    url: str,
    method: str,
    headers: Mapping[str, str],
    body: bytes = b"",
) -> DocumentationData:
    """Send the request to ``url`` and return the captured observation.

    The body is relayed verbatim for every method except GET. Raises
    ``httpx.HTTPError`` on network failure and ``ValueError`` when either
    body is not JSON.
    """
    method = method.upper()
    content = body if method != "GET" else None

    logger.info("Forwarding request to: %s", url)
    response = await client.request(method, url, headers=forward_headers(headers), content=content)

    parts = urlsplit(url)
    request_json = json.loads(content) if content else None

    return DocumentationData(
        method=method,
        path=parts.path or "/",
        params=dict(httpx.QueryParams(parts.query)),
        body=request_json,
        response=response.json(),
        status=response.status_code,
        headers=dict(response.headers),
    )
