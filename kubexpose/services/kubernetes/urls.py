"""Service URL resolution.

Maps the declared ports of a service to URLs reachable from the host by
combining the node IP, each port's node port, and the endpoint port name
taken from the service's live endpoints.
"""

import structlog

from ...models.errors import FatalError
from ...utils.template import URLTemplate
from .client import KubernetesClient
from .models import ServiceExposure, build_endpoint_port_index, target_port_number

logger = structlog.get_logger(__name__)


class ServiceURLResolver:
    """Resolves the externally reachable URLs of services."""

    def __init__(self, kube_client: KubernetesClient):
        self.client = kube_client

    def resolve(
        self,
        ip: str,
        service: str,
        namespace: str,
        template: URLTemplate | None,
    ) -> ServiceExposure:
        """Build the exposure of a single service.

        Only ports with a node port are reachable from the host; the others
        are skipped. A service without any such port yields an empty
        exposure rather than an error.

        Args:
            ip: Node address
            service: Service name
            namespace: Service namespace
            template: URL template to render each URL with

        Returns:
            ServiceExposure with one URL per node port, in port order.

        Raises:
            FatalError: if the template is missing, the service cannot be
                fetched, or rendering fails.
        """
        if template is None:
            raise FatalError("Error, attempted to generate service url with nil --format template")

        try:
            svc = self.client.get_service(namespace, service)
        except Exception as e:
            raise FatalError(f"service '{service}' could not be found running", e) from e

        # Endpoint names are best-effort
        try:
            endpoints = self.client.get_endpoints(namespace, service)
        except Exception as e:
            logger.debug("No endpoints for service", namespace=namespace, service=service, error=str(e))
            endpoints = None
        port_names_by_target = build_endpoint_port_index(endpoints)

        urls = []
        port_names = []
        for port in svc.spec.ports or []:
            if not port.node_port or port.node_port <= 0:
                continue
            port_name = port_names_by_target.get(target_port_number(port), "")
            urls.append(template.render(ip=ip, port=port.node_port, name=port_name))
            port_names.append(port_name)

        return ServiceExposure(
            namespace=svc.metadata.namespace or namespace,
            name=svc.metadata.name or service,
            urls=urls,
            port_names=port_names,
        )

    def resolve_all(self, ip: str, namespace: str, template: URLTemplate | None) -> list[ServiceExposure]:
        """Resolve every service in ``namespace``.

        Raises:
            FatalError: if listing fails or any single resolution fails.
        """
        try:
            services = self.client.list_services(namespace)
        except Exception as e:
            raise FatalError(f"listing services in namespace '{namespace}'", e) from e

        return [
            self.resolve(ip, svc.metadata.name, svc.metadata.namespace or namespace, template)
            for svc in services.items
        ]
