"""Services module for kubexpose."""

from .interfaces import ClientProvider, HostIPProvider
from .kubernetes import SecretManager, ServiceExposer, ServiceURLResolver

__all__ = [
    "ClientProvider",
    "HostIPProvider",
    "ServiceExposer",
    "ServiceURLResolver",
    "SecretManager",
]
