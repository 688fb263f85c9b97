"""Error types for service exposure and secret management.

Every failure raised by kubexpose derives from ``KubexposeError`` and carries
a ``retriable`` tag. The backoff loop only looks at that tag:

- **retriable**: the service is not there yet, the API server hiccupped,
  a delete failed. Trying again after a delay may succeed.
- **fatal**: a missing or malformed URL template, a service that exists but
  declares no ports, a missing required input. Never retried.
"""


class KubexposeError(Exception):
    """Base class for all kubexpose errors."""

    retriable: bool = False

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


class RetriableError(KubexposeError):
    """Transient failure; a bounded retry is a reasonable response."""

    retriable = True


class FatalError(KubexposeError):
    """Permanent failure; retrying will not help."""

    retriable = False


class RetryExhaustedError(KubexposeError):
    """Raised when the wait budget runs out while the check still fails."""

    def __init__(self, message: str, cause: BaseException | None = None, attempts: int = 0):
        super().__init__(message, cause)
        self.attempts = attempts


class ExposureError(KubexposeError):
    """Failure of the wait-and-open workflow for a single service."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        namespace: str | None = None,
        service: str | None = None,
    ):
        super().__init__(message, cause)
        self.namespace = namespace
        self.service = service


def is_retriable(error: BaseException) -> bool:
    """Return True if ``error`` is tagged retriable."""
    return bool(getattr(error, "retriable", False))
