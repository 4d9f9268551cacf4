import asyncio
import logging

logger = logging.getLogger(__name__)


class RunDeadline:
    """
    One-shot signal that fires once the total run duration has elapsed.

    The scheduler and the aggregator each observe the same deadline
    independently; neither tells the other to stop.
    """

    def __init__(self, duration: float):
        self.duration = duration
        self._event = asyncio.Event()
        self._handle = None

    def start(self):
        """
        Arm the timer on the running event loop. Calling start twice is a no-op.
        """
        if self._handle is not None or self._event.is_set():
            return
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.duration, self._fire)
        logger.debug(f"Deadline armed for {self.duration:.2f}s")

    def _fire(self):
        if not self._event.is_set():
            logger.debug("Deadline fired")
            self._event.set()

    def cancel(self):
        """
        Disarm the timer without firing. Used when the run is torn down early.
        """
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def fired(self) -> bool:
        return self._event.is_set()

    async def wait(self):
        await self._event.wait()
