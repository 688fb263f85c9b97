"""Kubernetes client factory.

Provides Core V1 API access to the local cluster for services, endpoints
and secrets. Configuration comes from the kubeconfig context named after
the cluster profile, with in-cluster configuration as a fallback.
"""

import structlog
from kubernetes import client, config
from kubernetes.client import ApiClient, CoreV1Api

from ...config.kubernetes import KubernetesConfig
from ...models.errors import FatalError
from ..interfaces import ClientProvider

logger = structlog.get_logger(__name__)


def _load_api_client(profile: str, kubeconfig_path: str) -> ApiClient:
    """Build an API client for ``profile``.

    Tries the kubeconfig context first, falls back to in-cluster config.

    Raises:
        FatalError: if neither configuration source is usable.
    """
    try:
        api_client = config.new_client_from_config(config_file=kubeconfig_path, context=profile)
        logger.debug("Loaded kubeconfig", path=kubeconfig_path, context=profile)
        return api_client
    except (config.ConfigException, OSError) as kube_error:
        kubeconfig_error = kube_error

    # Running inside a pod
    try:
        configuration = client.Configuration()
        config.load_incluster_config(client_configuration=configuration)
        logger.debug("Loaded in-cluster Kubernetes configuration")
        return ApiClient(configuration)
    except config.ConfigException:
        pass

    logger.error("Failed to load Kubernetes config", path=kubeconfig_path, context=profile)
    raise FatalError(f"kubeConfig: could not load context {profile!r}", kubeconfig_error)


class KubernetesClient:
    """Thin wrapper over ``CoreV1Api`` that applies a request timeout.

    Calls raise ``kubernetes.client.ApiException`` (or transport errors)
    unchanged; classifying them is up to the caller.
    """

    def __init__(self, core_api: CoreV1Api, timeout: float | None = None):
        self.core_api = core_api
        self.timeout = timeout

    def _kwargs(self) -> dict:
        if self.timeout:
            return {"_request_timeout": self.timeout}
        return {}

    # -- Services --------------------------------------------------------------

    def get_service(self, namespace: str, name: str) -> client.V1Service:
        return self.core_api.read_namespaced_service(name=name, namespace=namespace, **self._kwargs())

    def list_services(self, namespace: str, label_selector: str | None = None) -> client.V1ServiceList:
        kwargs = self._kwargs()
        if label_selector:
            kwargs["label_selector"] = label_selector
        return self.core_api.list_namespaced_service(namespace=namespace, **kwargs)

    # -- Endpoints -------------------------------------------------------------

    def get_endpoints(self, namespace: str, name: str) -> client.V1Endpoints:
        return self.core_api.read_namespaced_endpoints(name=name, namespace=namespace, **self._kwargs())

    # -- Secrets ---------------------------------------------------------------

    def get_secret(self, namespace: str, name: str) -> client.V1Secret:
        return self.core_api.read_namespaced_secret(name=name, namespace=namespace, **self._kwargs())

    def create_secret(self, namespace: str, body: client.V1Secret) -> client.V1Secret:
        return self.core_api.create_namespaced_secret(namespace=namespace, body=body, **self._kwargs())

    def delete_secret(self, namespace: str, name: str) -> None:
        self.core_api.delete_namespaced_secret(
            name=name,
            namespace=namespace,
            body=client.V1DeleteOptions(),
            **self._kwargs(),
        )


class KubeconfigClientProvider(ClientProvider):
    """Hands out clients backed by one API client loaded from kubeconfig.

    The API client is loaded on first use and reused until ``close``.
    """

    def __init__(self, kube_config: KubernetesConfig | None = None):
        self.kube_config = kube_config or KubernetesConfig()
        self._api_client: ApiClient | None = None

    def get_client(self, timeout: float | None = None) -> KubernetesClient:
        if timeout is None:
            timeout = self.kube_config.client_timeout
        if self._api_client is None:
            self._api_client = _load_api_client(self.kube_config.profile, self.kube_config.get_kubeconfig_path())
        return KubernetesClient(CoreV1Api(self._api_client), timeout=timeout)

    def close(self) -> None:
        """Release the connection pool of the cached API client."""
        if self._api_client is not None:
            self._api_client.close()
            self._api_client = None


def label_selector(key: str, value: str) -> str:
    """Build an exact-match label selector for a single key."""
    return f"{key}={value}"
