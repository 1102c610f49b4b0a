"""Domain-specific exceptions — framework-independent."""


class UpstreamError(Exception):
    """Raised when the upstream web API cannot deliver a usable response.

    Covers network failures, non-2xx statuses, malformed payloads and
    missing credentials. Recoverable: the next scheduled cycle retries.
    ``status_code`` is 0 when no HTTP response was received.
    """

    def __init__(self, endpoint: str, status_code: int, message: str):
        self.endpoint = endpoint
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{endpoint}] {status_code}: {message}")


class GateUnavailableError(Exception):
    """Raised when the shared rate-limit gate is closed (shutdown in progress)."""

    def __init__(self, message: str = "Rate-limit gate is closed"):
        super().__init__(message)


class CollectorError(Exception):
    """Raised when aggregation code inside a collector fails unexpectedly."""

    def __init__(self, domain: str, message: str):
        self.domain = domain
        self.message = message
        super().__init__(f"{domain} collector failed: {message}")


class SchedulerDisposedError(Exception):
    """Raised when a disposed scheduler is asked to start again."""

    def __init__(self, domain: str):
        self.domain = domain
        super().__init__(f"{domain} scheduler has been disposed")
