"""Secret lifecycle management.

Secrets are upserted by deleting any existing secret of the same name and
creating a new one. The two steps are not atomic: concurrent writers race
and the last one wins, with a short window where the secret is absent.

Every client failure is raised as ``RetriableError``.
"""

import base64

import structlog
from kubernetes import client

from ...models.errors import KubexposeError, RetriableError
from ..interfaces import ClientProvider
from .client import KubernetesClient

logger = structlog.get_logger(__name__)

SECRET_TYPE_OPAQUE = "Opaque"


def encode_secret_data(data_values: dict[str, str]) -> dict[str, str]:
    """Encode string values the way the API expects secret ``data``.

    Values become UTF-8 bytes, sent base64-encoded.
    """
    return {key: base64.b64encode(value.encode("utf-8")).decode("ascii") for key, value in data_values.items()}


def decode_secret_data(data: dict[str, str] | None) -> dict[str, bytes]:
    """Decode secret ``data`` as returned by the API into raw bytes."""
    return {key: base64.b64decode(value) for key, value in (data or {}).items()}


class SecretManager:
    """Creates, replaces and deletes opaque secrets."""

    def __init__(self, client_provider: ClientProvider, timeout: float | None = None):
        self.client_provider = client_provider
        self.timeout = timeout

    def _get_client(self) -> KubernetesClient:
        try:
            return self.client_provider.get_client(self.timeout)
        except KubexposeError as e:
            raise RetriableError("Error getting kubernetes client", e) from e

    def create_secret(
        self,
        namespace: str,
        name: str,
        data_values: dict[str, str],
        labels: dict[str, str] | None = None,
    ) -> None:
        """Create the secret, replacing any existing one of the same name.

        Args:
            namespace: Target namespace
            name: Secret name
            data_values: String values, stored UTF-8 encoded
            labels: Labels for the secret

        Raises:
            RetriableError: if deleting the old secret or creating the new one fails.
        """
        kube_client = self._get_client()

        # A lookup failure most likely means there is nothing to replace
        try:
            existing = kube_client.get_secret(namespace, name)
        except Exception as e:
            logger.debug("Secret lookup failed", namespace=namespace, name=name, error=str(e))
            existing = None

        if existing is not None and existing.metadata is not None and existing.metadata.name:
            self.delete_secret(namespace, name)

        secret = client.V1Secret(
            api_version="v1",
            kind="Secret",
            metadata=client.V1ObjectMeta(name=name, labels=labels),
            data=encode_secret_data(data_values),
            type=SECRET_TYPE_OPAQUE,
        )

        try:
            kube_client.create_secret(namespace, secret)
        except Exception as e:
            raise RetriableError(f"Error creating secret {namespace}/{name}", e) from e

        logger.info("Created secret", namespace=namespace, name=name, keys=sorted(data_values))

    def delete_secret(self, namespace: str, name: str) -> None:
        """Delete a secret.

        A missing secret is reported like any other failure; callers that
        want delete-if-present semantics can catch ``RetriableError``.

        Raises:
            RetriableError: on any client failure.
        """
        kube_client = self._get_client()
        try:
            kube_client.delete_secret(namespace, name)
        except Exception as e:
            raise RetriableError(f"Error deleting secret {namespace}/{name}", e) from e

        logger.info("Deleted secret", namespace=namespace, name=name)
