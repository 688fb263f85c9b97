"""Readiness polling for services.

A service is ready once it can be fetched and declares at least one port.
A fetch failure is retried; a service that exists without ports is not,
since it will never gain any by waiting.
"""

import time
from typing import Callable

import structlog

from ...core.retry import expo
from ...models.errors import FatalError, RetriableError
from .client import KubernetesClient

logger = structlog.get_logger(__name__)


class ReadinessPoller:
    """Waits for a service to exist and declare ports."""

    def __init__(
        self,
        kube_client: KubernetesClient,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = kube_client
        self._sleep = sleep
        self._clock = clock

    def check(self, namespace: str, service: str) -> None:
        """Run a single readiness check.

        Raises:
            RetriableError: the service could not be fetched
            FatalError: the service exists but has no ports
        """
        try:
            svc = self.client.get_service(namespace, service)
        except Exception as e:
            raise RetriableError(f"Error getting service {service}", e) from e

        if not svc.spec or not svc.spec.ports:
            raise FatalError(f"{namespace}:{service} has no ports")

        logger.debug("Found service", namespace=namespace, service=service, svc=svc.to_dict())

    def wait(self, namespace: str, service: str, wait: float, interval: float) -> None:
        """Check repeatedly with exponential backoff until ready or out of time.

        Args:
            namespace: Service namespace
            service: Service name
            wait: Total wait budget in seconds
            interval: Initial interval between checks in seconds

        Raises:
            RetryExhaustedError: the service never became fetchable
            FatalError: the service exists but has no ports
        """
        expo(
            lambda: self.check(namespace, service),
            interval,
            wait,
            sleep=self._sleep,
            clock=self._clock,
        )
