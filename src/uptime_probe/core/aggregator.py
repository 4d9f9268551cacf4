import asyncio
import logging
from typing import Optional

from uptime_probe.contracts.probe_outcome import ProbeOutcome
from uptime_probe.core.deadline import RunDeadline
from uptime_probe.core.profiler import Profiler

logger = logging.getLogger(__name__)


class RunAccumulator:
    """
    Running totals of a probe run. Only successful probes count toward the mean.
    """

    def __init__(self):
        self.success_count = 0
        self.total_seconds = 0.0
        self.failure_count = 0

    def add(self, outcome: ProbeOutcome):
        if outcome.ok:
            self.success_count += 1
            self.total_seconds += outcome.elapsed_seconds
        else:
            self.failure_count += 1

    def average(self) -> Optional[float]:
        """
        Mean latency of successful probes, or None when no probe succeeded.
        """
        if self.success_count == 0:
            return None
        return self.total_seconds / self.success_count


class Aggregator:
    """
    Consumer side of a run: folds outcomes from the queue until the deadline fires.
    """

    def __init__(
        self,
        deadline: RunDeadline,
        outcomes: asyncio.Queue,
        logger: Optional[logging.Logger] = None,
    ):
        self.deadline = deadline
        self.outcomes = outcomes
        self.log = logger or logging.getLogger(__name__)
        self.accumulator = RunAccumulator()

    def _fold(self, outcome: ProbeOutcome):
        self.accumulator.add(outcome)
        if not outcome.ok:
            self.log.debug(
                f"Failed probe excluded from average ({self.accumulator.failure_count} so far): {outcome.error}"
            )

    @Profiler.profile
    async def run(self) -> Optional[float]:
        stop = asyncio.ensure_future(self.deadline.wait())
        get = None
        try:
            while not self.deadline.fired:
                get = asyncio.ensure_future(self.outcomes.get())
                done, _ = await asyncio.wait(
                    {get, stop}, return_when=asyncio.FIRST_COMPLETED
                )
                # Deadline wins a tie; an outcome received in the same instant is disregarded
                if stop in done:
                    break
                self._fold(get.result())
                get = None
        finally:
            for task in (get, stop):
                if task is not None and not task.done():
                    task.cancel()

        acc = self.accumulator
        self.log.info(
            f"Run finished: {acc.success_count} successful probes, {acc.failure_count} failed"
        )
        return acc.average()


async def aggregate(
    deadline: RunDeadline,
    outcomes: asyncio.Queue,
    logger: Optional[logging.Logger] = None,
) -> Optional[float]:
    """
    Consume outcomes until the deadline and return the mean latency in seconds
    of the successful ones, or None if there were none.
    """
    return await Aggregator(deadline, outcomes, logger).run()
