"""Kubernetes-backed exposure services.

This module provides service URL resolution, readiness polling, the
wait-and-open workflow and secret management.
"""

from .client import KubeconfigClientProvider, KubernetesClient
from .exposure import ServiceExposer
from .formatting import optionally_https_formatted_url, print_service_list
from .host import KubeconfigHostIPProvider, StaticHostIPProvider, get_host_ip_provider
from .models import ServiceExposure
from .readiness import ReadinessPoller
from .secrets import SecretManager
from .urls import ServiceURLResolver

__all__ = [
    "KubernetesClient",
    "KubeconfigClientProvider",
    "KubeconfigHostIPProvider",
    "StaticHostIPProvider",
    "get_host_ip_provider",
    "ServiceExposure",
    "ServiceURLResolver",
    "ReadinessPoller",
    "ServiceExposer",
    "SecretManager",
    "optionally_https_formatted_url",
    "print_service_list",
]
