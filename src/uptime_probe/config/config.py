import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt


class Config:
    """
    Environment variable defaults for the probe CLI.
    """

    DEFAULT_METHOD = os.environ.get("UPTIME_PROBE_METHOD", "GET")
    DEFAULT_INTERVAL = int(os.environ.get("UPTIME_PROBE_INTERVAL", "10"))
    DEFAULT_TIME = int(os.environ.get("UPTIME_PROBE_TIME", "5"))  # minutes
    # Upper bound for a single probe so a hung request cannot stall the schedule
    REQUEST_TIMEOUT = float(os.environ.get("UPTIME_PROBE_TIMEOUT", "30"))
    QUEUE_SIZE = int(os.environ.get("UPTIME_PROBE_QUEUE_SIZE", "10"))


class ProbeConfig(BaseModel):
    """
    Immutable run configuration consumed by the runner.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    method: str = Config.DEFAULT_METHOD
    body: Optional[bytes] = None
    interval_seconds: PositiveInt = Config.DEFAULT_INTERVAL
    total_minutes: PositiveInt = Config.DEFAULT_TIME
    follow_redirects: bool = False
    verbose: bool = False
    timeout_seconds: PositiveFloat = Config.REQUEST_TIMEOUT
    queue_size: PositiveInt = Field(default=Config.QUEUE_SIZE)

    @property
    def total_seconds(self) -> float:
        return float(self.total_minutes * 60)
