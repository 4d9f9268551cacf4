import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


def new_http_client(
    follow_redirects: bool = False,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create the client shared by every probe of a run.

    With follow_redirects disabled the redirect response itself is returned to
    the caller instead of being followed.
    """
    logger.debug(
        f"Creating HTTP client (follow_redirects={follow_redirects}, timeout={timeout}s)"
    )
    return httpx.AsyncClient(
        follow_redirects=follow_redirects, timeout=timeout, transport=transport
    )
