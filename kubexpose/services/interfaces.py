"""Capability interfaces consumed by kubexpose services."""

# Standard library imports
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .kubernetes.client import KubernetesClient


class ClientProvider(ABC):
    """Hands out Kubernetes clients bound to the local cluster."""

    @abstractmethod
    def get_client(self, timeout: float | None = None) -> "KubernetesClient":
        """Return a client whose API calls time out after ``timeout`` seconds.

        Raises:
            FatalError: if the cluster configuration cannot be loaded.
        """
        pass


class HostIPProvider(ABC):
    """Resolves the externally reachable address of the cluster node."""

    @abstractmethod
    def get_ip(self, profile: str) -> str:
        """Return the node IP for the given profile (machine name).

        Raises:
            FatalError: if the address cannot be determined.
        """
        pass
