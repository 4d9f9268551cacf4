class ProbeError(Exception):
    """Base class for every error raised by the probe."""


class InvalidRequest(ProbeError):
    """The method, URL or body cannot form a valid HTTP request."""


class TransportError(ProbeError):
    """The request failed before a response was received (DNS, connect, timeout)."""


class BodyReadError(ProbeError):
    """A response arrived but its body could not be fully read."""


class UsageError(ProbeError):
    """Bad command line arguments."""
