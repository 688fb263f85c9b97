"""Kubernetes-specific configuration.

This module provides cluster connection settings and the defaults used when
waiting for a service and rendering its URLs.
"""

import os
from dataclasses import dataclass


@dataclass
class KubernetesConfig:
    """Cluster connection configuration."""

    # Kubeconfig context (and machine name) of the local cluster
    profile: str = "minikube"

    # Namespace used when the caller does not name one
    namespace: str = "default"

    # Explicit kubeconfig path; falls back to $KUBECONFIG, then ~/.kube/config
    kubeconfig: str | None = None

    # Per-request timeout for API calls, in seconds
    client_timeout: int = 60

    # Fixed node address; when unset the API server host of the profile is used
    host_ip: str | None = None

    def get_kubeconfig_path(self) -> str:
        """Resolve the kubeconfig file to load."""
        if self.kubeconfig:
            return os.path.expanduser(self.kubeconfig)
        return os.getenv("KUBECONFIG", os.path.expanduser("~/.kube/config"))


@dataclass
class ExposureConfig:
    """Defaults for the wait-and-open workflow."""

    # str.format pattern with {ip}, {port} and {name}
    url_format: str = "http://{ip}:{port}"

    # Print URLs instead of opening a browser
    url_mode: bool = False

    # Rewrite http:// URLs to https://
    https: bool = False

    # Total wait budget and initial retry interval, in seconds
    wait: int = 20
    interval: int = 6
