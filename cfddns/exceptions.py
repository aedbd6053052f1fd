"""Error types raised across cfddns."""


class CfddnsError(Exception):
    """Base class for all cfddns errors."""


class ConfigError(CfddnsError):
    """Invalid or incomplete configuration. Fatal at startup."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


class NetworkError(CfddnsError):
    """A request could not be completed, or its answer was unusable."""


class ApiError(CfddnsError):
    """The DNS provider rejected a request."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"HTTP {status}: {message}")

    @property
    def retryable(self) -> bool:
        return self.status == 429 or self.status >= 500


class PolicyError(CfddnsError):
    """A record is missing and creating it is disabled.

    Reported as a skip, never as a failure.
    """
