"""Node address discovery.

For a single-node local cluster the API server runs on the node itself, so
the host of the profile's kubeconfig cluster entry is the node IP that node
ports are reachable on.
"""

from urllib.parse import urlparse

import structlog
from kubernetes import client, config

from ...config.kubernetes import KubernetesConfig
from ...models.errors import FatalError
from ..interfaces import HostIPProvider

logger = structlog.get_logger(__name__)


class StaticHostIPProvider(HostIPProvider):
    """Always returns the configured address."""

    def __init__(self, ip: str):
        if not ip:
            raise FatalError("static host IP must not be empty")
        self.ip = ip

    def get_ip(self, profile: str) -> str:
        return self.ip


class KubeconfigHostIPProvider(HostIPProvider):
    """Reads the API server host of the profile's kubeconfig context."""

    def __init__(self, kube_config: KubernetesConfig | None = None):
        self.kube_config = kube_config or KubernetesConfig()

    def get_ip(self, profile: str) -> str:
        configuration = client.Configuration()
        try:
            config.load_kube_config(
                config_file=self.kube_config.get_kubeconfig_path(),
                context=profile,
                client_configuration=configuration,
            )
        except (config.ConfigException, OSError) as e:
            raise FatalError(f"Error getting ip from host {profile!r}", e) from e

        host = urlparse(configuration.host).hostname
        if not host:
            raise FatalError(f"Error getting ip from host {profile!r}: no server address in kubeconfig")

        logger.debug("Resolved host IP", profile=profile, ip=host)
        return host


def get_host_ip_provider(kube_config: KubernetesConfig) -> HostIPProvider:
    """Pick the provider matching the configuration."""
    if kube_config.host_ip:
        return StaticHostIPProvider(kube_config.host_ip)
    return KubeconfigHostIPProvider(kube_config)
