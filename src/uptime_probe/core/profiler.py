import functools
import logging
import time

logger = logging.getLogger(__name__)


class Profiler:
    """
    Provides a decorator to profile asynchronous methods,
    logging their execution times at debug level.
    """

    @staticmethod
    def profile(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start = time.monotonic()
            try:
                return await func(*args, **kwargs)
            finally:
                elapsed = time.monotonic() - start
                logger.debug(f"[Profiler] {func.__qualname__} took {elapsed:.4f}s")

        return async_wrapper
