from typing import Optional

from pydantic import BaseModel, ConfigDict

# Elapsed value reported when the request never produced a response
TRANSPORT_FAILURE_SECONDS = -1.0


class ProbeOutcome(BaseModel):
    """
    Result of a single probe, passed from the scheduler to the aggregator.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    elapsed_seconds: float
    ok: bool
    error: Optional[Exception] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls, elapsed_seconds: float, status_code: Optional[int] = None):
        return cls(elapsed_seconds=elapsed_seconds, ok=True, status_code=status_code)

    @classmethod
    def failure(
        cls,
        error: Exception,
        elapsed_seconds: float = TRANSPORT_FAILURE_SECONDS,
        status_code: Optional[int] = None,
    ):
        return cls(
            elapsed_seconds=elapsed_seconds,
            ok=False,
            error=error,
            status_code=status_code,
        )

    def __repr__(self):
        if self.ok:
            return f"ProbeOutcome(ok=True, elapsed_seconds={self.elapsed_seconds:.4f}, status_code={self.status_code})"
        return f"ProbeOutcome(ok=False, elapsed_seconds={self.elapsed_seconds:.4f}, error={self.error!r})"
