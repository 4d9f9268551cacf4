import asyncio
import logging
import math
from enum import Enum
from typing import Optional

import httpx

from uptime_probe.contracts.probe_outcome import ProbeOutcome
from uptime_probe.contracts.request_descriptor import RequestDescriptor
from uptime_probe.core.deadline import RunDeadline
from uptime_probe.core.executor import execute_once
from uptime_probe.core.profiler import Profiler

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class ProbeScheduler:
    """
    Producer side of a run: fires one probe per interval tick until the
    deadline and publishes every outcome onto the outcome queue.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        request: RequestDescriptor,
        interval: float,
        deadline: RunDeadline,
        outcomes: asyncio.Queue,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the ProbeScheduler.

        Args:
            client (httpx.AsyncClient): Client shared by every probe.
            request (RequestDescriptor): Request reused on every tick.
            interval (float): Seconds between ticks.
            deadline (RunDeadline): Stops the scheduler once fired.
            outcomes (asyncio.Queue): Bounded queue read by the aggregator.
            logger (Optional[logging.Logger]): Logger for scheduler and probe lines.
        """
        self.client = client
        self.request = request
        self.interval = interval
        self.deadline = deadline
        self.outcomes = outcomes
        self.log = logger or logging.getLogger(__name__)
        self.state = SchedulerState.RUNNING
        self.probe_count = 0

    @property
    def running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    def stop(self):
        if self.state is SchedulerState.STOPPED:
            return
        self.state = SchedulerState.STOPPED
        self.log.debug(f"Scheduler stopped after {self.probe_count} probes")

    async def _deadline_within(self, timeout: float) -> bool:
        """Wait up to timeout seconds; True if the deadline fired meanwhile."""
        if timeout <= 0:
            return self.deadline.fired
        try:
            await asyncio.wait_for(self.deadline.wait(), timeout)
        except asyncio.TimeoutError:
            pass
        return self.deadline.fired

    def _advance(self, tick: float, now: float) -> float:
        # Like a ticker: at most one overdue tick is kept, older ones are dropped
        tick += self.interval
        if tick < now:
            tick += math.floor((now - tick) / self.interval) * self.interval
        return tick

    async def _publish(self, outcome: ProbeOutcome) -> bool:
        """
        Put the outcome on the queue, blocking while the queue is full but
        never past the deadline. Returns False if the outcome was dropped.
        """
        try:
            self.outcomes.put_nowait(outcome)
            return True
        except asyncio.QueueFull:
            self.log.debug("Outcome queue full, waiting for the aggregator")

        put = asyncio.ensure_future(self.outcomes.put(outcome))
        stop = asyncio.ensure_future(self.deadline.wait())
        try:
            done, _ = await asyncio.wait(
                {put, stop}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (put, stop):
                if not task.done():
                    task.cancel()
        return put in done

    @Profiler.profile
    async def run(self):
        """
        Run until the deadline fires. Probes run one at a time; a probe slower
        than the interval delays the next tick instead of overlapping it.
        """
        loop = asyncio.get_running_loop()
        tick = loop.time() + self.interval
        try:
            while self.running:
                if await self._deadline_within(tick - loop.time()):
                    break
                outcome = await execute_once(self.client, self.request, self.log)
                self.probe_count += 1
                if not await self._publish(outcome):
                    self.log.debug("Deadline fired while publishing, outcome dropped")
                    break
                tick = self._advance(tick, loop.time())
        finally:
            self.stop()
