import logging
import re
from typing import Optional

import httpx

from uptime_probe.contracts.request_descriptor import RequestDescriptor
from uptime_probe.core.errors import InvalidRequest

logger = logging.getLogger(__name__)

# Every probe must reach the origin, never a cache in between
NO_CACHE_HEADERS = {
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
    "Expires": "0",
}

# RFC 9110 token characters
_METHOD_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_ALLOWED_SCHEMES = ("http", "https")


def normalize_url(url: str) -> str:
    """Prefix a bare host such as ``example.com:8080/path`` with ``http://``."""
    url = url.strip()
    if "://" not in url:
        return f"http://{url}"
    return url


def build_request(
    method: str, url: str, body: Optional[bytes] = None
) -> RequestDescriptor:
    """
    Build the request reused by every probe of a run.

    Args:
        method (str): HTTP method, sent as given.
        url (str): Absolute http(s) URL.
        body (Optional[bytes]): Payload, or None for an empty body.

    Returns:
        RequestDescriptor: Immutable request with cache-disabling headers set.

    Raises:
        InvalidRequest: If the method is not an HTTP token or the URL is unusable.
    """
    if not method or not _METHOD_RE.fullmatch(method):
        raise InvalidRequest(f"invalid method {method!r}")
    try:
        parsed = httpx.URL(url)
        # Decoding the host may raise idna.IDNAError, a ValueError
        host, port = parsed.host, parsed.port
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise InvalidRequest(f"invalid URL {url!r}: {e}") from e
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise InvalidRequest(f"unsupported protocol scheme {parsed.scheme!r} in {url!r}")
    if not host:
        raise InvalidRequest(f"no host in request URL {url!r}")
    if port is not None and not 0 < port <= 65535:
        raise InvalidRequest(f"invalid port {port} in {url!r}")

    request = RequestDescriptor(
        method=method,
        url=str(parsed),
        headers=dict(NO_CACHE_HEADERS),
        body=body or None,
    )
    logger.debug(f"Built request {request.method} {request.url} headers={dict(request.headers)}")
    return request
