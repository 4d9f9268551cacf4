import logging
import time
from typing import Optional

import httpx

from uptime_probe.contracts.probe_outcome import ProbeOutcome
from uptime_probe.contracts.request_descriptor import RequestDescriptor
from uptime_probe.core.errors import BodyReadError, TransportError

logger = logging.getLogger(__name__)


async def execute_once(
    client: httpx.AsyncClient,
    request: RequestDescriptor,
    log: Optional[logging.Logger] = None,
) -> ProbeOutcome:
    """
    Send a single request, drain the response body, and measure the time used.

    Transport failures and body read failures are logged and returned as a
    failed outcome; nothing is raised.

    Args:
        client (httpx.AsyncClient): Client carrying the redirect policy and timeout.
        request (RequestDescriptor): The request to send.
        log (Optional[logging.Logger]): Destination for the per-probe line.

    Returns:
        ProbeOutcome: ok with the elapsed seconds, or a failure with its error.
    """
    log = log or logger
    start = time.monotonic()
    try:
        http_request = client.build_request(
            request.method, request.url, headers=request.headers, content=request.body
        )
        response = await client.send(http_request, stream=True)
    except Exception as e:
        # Anything from below httpx (e.g. an ExceptionGroup from the socket layer) is logged louder
        level = logging.WARNING if isinstance(e, httpx.HTTPError) else logging.ERROR
        log.log(level, f"{request.method} {request.url}: {e!r}")
        error = TransportError(str(e) or type(e).__name__)
        error.__cause__ = e
        return ProbeOutcome.failure(error)

    try:
        # The body must be read fully, otherwise the elapsed time misses the transfer
        await response.aread()
    except Exception as e:
        elapsed = time.monotonic() - start
        level = logging.WARNING if isinstance(e, (httpx.HTTPError, httpx.StreamError)) else logging.ERROR
        log.log(level, f"Reading response body failed: {e!r}")
        error = BodyReadError(str(e) or type(e).__name__)
        error.__cause__ = e
        return ProbeOutcome.failure(error, elapsed, response.status_code)
    finally:
        await response.aclose()

    elapsed = time.monotonic() - start
    log.info(
        f"{request.method} {request.url}: {response.status_code} {response.reason_phrase}({elapsed:.2f} secs)"
    )
    return ProbeOutcome.success(elapsed, response.status_code)
