"""Data models for service exposure.

These models represent the externally reachable URLs of a service and the
helpers used to derive them from cluster objects.
"""

from dataclasses import dataclass, field

from kubernetes import client

# Placeholder shown in the report table for services without a node port
NO_NODE_PORT = "No node port"


@dataclass(frozen=True)
class ServiceExposure:
    """The externally reachable URLs of one service.

    ``urls[i]`` is served by the endpoint port named ``port_names[i]``;
    both follow the declaration order of the service's ports.
    """

    namespace: str
    name: str
    urls: tuple[str, ...] = field(default_factory=tuple)
    port_names: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any sequence but store immutable tuples
        object.__setattr__(self, "urls", tuple(self.urls))
        object.__setattr__(self, "port_names", tuple(self.port_names))
        if len(self.urls) != len(self.port_names):
            raise ValueError(
                f"{self.namespace}/{self.name}: {len(self.urls)} urls but {len(self.port_names)} port names"
            )

    @property
    def has_node_port(self) -> bool:
        """Whether at least one port is reachable from outside the cluster."""
        return bool(self.urls)

    def table_row(self) -> list[str]:
        """Row for the Namespace | Name | Target Port | URL report."""
        if not self.urls:
            return [self.namespace, self.name, "", NO_NODE_PORT]
        return [self.namespace, self.name, "\n".join(self.port_names), "\n".join(self.urls)]


def build_endpoint_port_index(endpoints: client.V1Endpoints | None) -> dict[int, str]:
    """Map target port numbers to endpoint port names.

    Scans every subset; when a port appears in several subsets the last one
    seen wins. Missing endpoints produce an empty index.
    """
    index: dict[int, str] = {}
    if endpoints is None or not endpoints.subsets:
        return index

    for subset in endpoints.subsets:
        for port in subset.ports or []:
            index[port.port] = port.name or ""
    return index


def target_port_number(port: client.V1ServicePort) -> int | None:
    """Numeric target port of a service port.

    ``target_port`` is an int-or-string; named target ports (and unset ones)
    do not match any numeric endpoint port.
    """
    target = port.target_port
    if isinstance(target, int) and not isinstance(target, bool):
        return target
    return None
