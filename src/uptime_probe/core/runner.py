import asyncio
import logging
from typing import Optional

import httpx

from uptime_probe.config.config import ProbeConfig
from uptime_probe.core.aggregator import Aggregator
from uptime_probe.core.deadline import RunDeadline
from uptime_probe.core.http_client import new_http_client
from uptime_probe.core.profiler import Profiler
from uptime_probe.core.request_builder import build_request
from uptime_probe.core.scheduler import ProbeScheduler

logger = logging.getLogger(__name__)


class ProbeRunner:
    """
    Wires one complete run: request, client, deadline, scheduler and aggregator.
    """

    def __init__(
        self,
        config: ProbeConfig,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the ProbeRunner.

        Args:
            config (ProbeConfig): Validated run configuration.
            client (Optional[httpx.AsyncClient]): Client to probe with. When None a
                client is created from the config and closed after the run.
            logger (Optional[logging.Logger]): Logger handed to every component.
        """
        self.config = config
        self.client = client
        self.log = logger or logging.getLogger(__name__)
        self.scheduler = None
        self.aggregator = None

    @Profiler.profile
    async def run(self) -> Optional[float]:
        """
        Probe until the configured duration expires.

        Returns:
            Optional[float]: Mean latency in seconds of successful probes, None if none succeeded.

        Raises:
            InvalidRequest: Before any probe is sent, if the request cannot be built.
        """
        config = self.config
        request = build_request(config.method, config.url, config.body)

        owns_client = self.client is None
        client = self.client or new_http_client(
            follow_redirects=config.follow_redirects, timeout=config.timeout_seconds
        )
        deadline = RunDeadline(config.total_seconds)
        outcomes = asyncio.Queue(maxsize=config.queue_size)
        self.scheduler = ProbeScheduler(
            client, request, config.interval_seconds, deadline, outcomes, self.log
        )
        self.aggregator = Aggregator(deadline, outcomes, self.log)

        self.log.info(
            f"Probing {request.method} {request.url} every {config.interval_seconds}s "
            f"for {config.total_minutes} min"
        )
        deadline.start()
        producer = asyncio.create_task(self.scheduler.run())
        try:
            return await self.aggregator.run()
        finally:
            deadline.cancel()
            # A probe still in flight past the deadline is abandoned
            if not producer.done():
                producer.cancel()
            (result,) = await asyncio.gather(producer, return_exceptions=True)
            if isinstance(result, Exception):
                self.log.error(f"Scheduler failed: {result!r}")
            if owns_client:
                await client.aclose()


def run_probe(config: ProbeConfig) -> Optional[float]:
    """Blocking entry point: run a whole probe session on a fresh event loop."""
    return asyncio.run(ProbeRunner(config).run())
