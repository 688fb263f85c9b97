"""Shared fixtures for kubexpose tests."""

from unittest.mock import MagicMock

import pytest
from kubernetes import client
from kubernetes.client import ApiException

from kubexpose.services.interfaces import ClientProvider, HostIPProvider
from kubexpose.services.kubernetes.client import KubernetesClient


def make_service(name="web", namespace="default", ports=None, labels=None):
    """Build a V1Service from ``(port, node_port, target_port)`` tuples."""
    service_ports = [
        client.V1ServicePort(port=port, node_port=node_port, target_port=target_port)
        for port, node_port, target_port in (ports or [])
    ]
    return client.V1Service(
        metadata=client.V1ObjectMeta(name=name, namespace=namespace, labels=labels),
        spec=client.V1ServiceSpec(ports=service_ports),
    )


def make_endpoints(name="web", namespace="default", subsets=None):
    """Build V1Endpoints from a list of subsets, each a list of ``(port, name)``."""
    return client.V1Endpoints(
        metadata=client.V1ObjectMeta(name=name, namespace=namespace),
        subsets=[
            client.V1EndpointSubset(
                ports=[client.CoreV1EndpointPort(port=port, name=port_name) for port, port_name in subset]
            )
            for subset in (subsets or [])
        ],
    )


def not_found():
    return ApiException(status=404, reason="Not Found")


class FakeClock:
    """Monotonic clock that only advances when slept on."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class FakeSecretClient:
    """In-memory stand-in for the secret calls of KubernetesClient."""

    def __init__(self):
        self.secrets = {}
        self.calls = []

    def get_secret(self, namespace, name):
        self.calls.append(("get", namespace, name))
        if (namespace, name) not in self.secrets:
            raise not_found()
        return self.secrets[(namespace, name)]

    def create_secret(self, namespace, body):
        self.calls.append(("create", namespace, body.metadata.name))
        key = (namespace, body.metadata.name)
        if key in self.secrets:
            raise ApiException(status=409, reason="AlreadyExists")
        self.secrets[key] = body
        return body

    def delete_secret(self, namespace, name):
        self.calls.append(("delete", namespace, name))
        if (namespace, name) not in self.secrets:
            raise not_found()
        del self.secrets[(namespace, name)]


class FakeClientProvider(ClientProvider):
    """Always hands out the same client and records requested timeouts."""

    def __init__(self, kube_client):
        self.kube_client = kube_client
        self.timeouts = []

    def get_client(self, timeout=None):
        self.timeouts.append(timeout)
        return self.kube_client


class FakeHostIPProvider(HostIPProvider):
    def __init__(self, ip="192.168.49.2"):
        self.ip = ip
        self.profiles = []

    def get_ip(self, profile):
        self.profiles.append(profile)
        return self.ip


@pytest.fixture
def kube_client():
    """KubernetesClient mock with no endpoints by default."""
    mock = MagicMock(spec=KubernetesClient)
    mock.get_endpoints.side_effect = not_found()
    return mock


@pytest.fixture
def fake_clock():
    return FakeClock()
