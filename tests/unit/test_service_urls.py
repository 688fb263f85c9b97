"""Unit tests for service URL resolution."""

from unittest.mock import MagicMock

import pytest
from kubernetes.client import ApiException

from kubexpose.models.errors import FatalError
from kubexpose.services.kubernetes.models import ServiceExposure, build_endpoint_port_index
from kubexpose.services.kubernetes.urls import ServiceURLResolver
from kubexpose.utils.template import URLTemplate
from tests.conftest import make_endpoints, make_service, not_found

IP = "192.168.49.2"


@pytest.fixture
def template():
    return URLTemplate("http://{ip}:{port}")


class TestResolve:
    """Tests for ServiceURLResolver.resolve."""

    def test_only_node_ports_produce_urls_in_declaration_order(self, kube_client, template):
        """Ports without a node port are skipped; order follows the service spec."""
        kube_client.get_service.return_value = make_service(
            ports=[(80, 30080, 8080), (81, None, 8081), (443, 30443, 8443), (9000, 0, 9000)]
        )

        exposure = ServiceURLResolver(kube_client).resolve(IP, "web", "default", template)

        assert exposure.urls == ("http://192.168.49.2:30080", "http://192.168.49.2:30443")
        assert len(exposure.urls) == len(exposure.port_names) == 2

    def test_port_names_come_from_endpoints(self, kube_client):
        """Endpoint port names are aligned with the URLs they back."""
        kube_client.get_service.return_value = make_service(ports=[(80, 30080, 8080), (443, 30443, 8443)])
        kube_client.get_endpoints.side_effect = None
        kube_client.get_endpoints.return_value = make_endpoints(subsets=[[(8080, "http")], [(8443, "https")]])

        exposure = ServiceURLResolver(kube_client).resolve(IP, "web", "default", URLTemplate("{name}:{ip}:{port}"))

        assert exposure.port_names == ("http", "https")
        assert exposure.urls == ("http:192.168.49.2:30080", "https:192.168.49.2:30443")

    def test_unmapped_target_port_has_empty_name(self, kube_client, template):
        """A target port missing from the endpoints renders with an empty name."""
        kube_client.get_service.return_value = make_service(ports=[(80, 30080, 8080)])
        kube_client.get_endpoints.side_effect = None
        kube_client.get_endpoints.return_value = make_endpoints(subsets=[[(9999, "other")]])

        exposure = ServiceURLResolver(kube_client).resolve(IP, "web", "default", template)

        assert exposure.port_names == ("",)

    def test_named_target_port_has_empty_name(self, kube_client, template):
        """Named target ports do not match numeric endpoint ports."""
        kube_client.get_service.return_value = make_service(ports=[(80, 30080, "http")])
        kube_client.get_endpoints.side_effect = None
        kube_client.get_endpoints.return_value = make_endpoints(subsets=[[(80, "http")]])

        exposure = ServiceURLResolver(kube_client).resolve(IP, "web", "default", template)

        assert exposure.urls == ("http://192.168.49.2:30080",)
        assert exposure.port_names == ("",)

    def test_endpoint_lookup_failure_is_ignored(self, kube_client, template):
        """Missing endpoints do not fail the resolution."""
        kube_client.get_service.return_value = make_service(ports=[(80, 30080, 8080)])
        kube_client.get_endpoints.side_effect = ApiException(status=500, reason="boom")

        exposure = ServiceURLResolver(kube_client).resolve(IP, "web", "default", template)

        assert exposure.urls == ("http://192.168.49.2:30080",)

    def test_no_node_port_is_an_empty_exposure(self, kube_client, template):
        """A ClusterIP-only service resolves to an empty, valid exposure."""
        kube_client.get_service.return_value = make_service(ports=[(80, None, 8080)])

        exposure = ServiceURLResolver(kube_client).resolve(IP, "web", "default", template)

        assert exposure.urls == ()
        assert exposure.port_names == ()
        assert not exposure.has_node_port

    def test_nil_template_is_fatal(self, kube_client):
        """No template means nothing can be rendered; no API call is made."""
        with pytest.raises(FatalError, match="nil --format template"):
            ServiceURLResolver(kube_client).resolve(IP, "web", "default", None)

        kube_client.get_service.assert_not_called()

    def test_missing_service_is_fatal(self, kube_client, template):
        """A service that cannot be fetched is a fatal resolution error."""
        kube_client.get_service.side_effect = not_found()

        with pytest.raises(FatalError, match="service 'web' could not be found running") as exc_info:
            ServiceURLResolver(kube_client).resolve(IP, "web", "default", template)

        assert not exc_info.value.retriable
        assert isinstance(exc_info.value.cause, ApiException)

    def test_render_failure_discards_partial_results(self, kube_client):
        """A render failure on any port aborts the whole resolution."""
        kube_client.get_service.return_value = make_service(ports=[(80, 30080, 8080), (81, 30081, 8081)])
        # Format spec only valid for strings
        template = URLTemplate("http://{ip}:{port:>5s}")

        with pytest.raises(FatalError, match="failed to render"):
            ServiceURLResolver(kube_client).resolve(IP, "web", "default", template)

    def test_uses_namespace_and_name_of_fetched_service(self, kube_client, template):
        kube_client.get_service.return_value = make_service(name="web", namespace="apps", ports=[(80, 30080, 8080)])

        exposure = ServiceURLResolver(kube_client).resolve(IP, "web", "apps", template)

        kube_client.get_service.assert_called_once_with("apps", "web")
        kube_client.get_endpoints.assert_called_once_with("apps", "web")
        assert (exposure.namespace, exposure.name) == ("apps", "web")


class TestResolveAll:
    """Tests for ServiceURLResolver.resolve_all."""

    def test_resolves_each_listed_service(self, kube_client, template):
        web = make_service(name="web", ports=[(80, 30080, 8080)])
        db = make_service(name="db", ports=[(5432, None, 5432)])
        kube_client.list_services.return_value = MagicMock(items=[web, db])
        kube_client.get_service.side_effect = lambda namespace, name: {"web": web, "db": db}[name]

        exposures = ServiceURLResolver(kube_client).resolve_all(IP, "default", template)

        assert [e.name for e in exposures] == ["web", "db"]
        assert exposures[0].urls == ("http://192.168.49.2:30080",)
        assert exposures[1].urls == ()

    def test_list_failure_is_fatal(self, kube_client, template):
        kube_client.list_services.side_effect = ApiException(status=403, reason="Forbidden")

        with pytest.raises(FatalError, match="listing services"):
            ServiceURLResolver(kube_client).resolve_all(IP, "default", template)


class TestEndpointPortIndex:
    """Tests for build_endpoint_port_index."""

    def test_none_and_empty_endpoints(self):
        assert build_endpoint_port_index(None) == {}
        assert build_endpoint_port_index(make_endpoints(subsets=[])) == {}

    def test_collects_ports_across_subsets(self):
        endpoints = make_endpoints(subsets=[[(8080, "http")], [(8443, "https"), (9090, "metrics")]])

        assert build_endpoint_port_index(endpoints) == {8080: "http", 8443: "https", 9090: "metrics"}

    def test_duplicate_port_last_subset_wins(self):
        """With a fixed subset order, the later subset's name is kept."""
        endpoints = make_endpoints(subsets=[[(8080, "first")], [(8080, "second")]])

        assert build_endpoint_port_index(endpoints) == {8080: "second"}


class TestServiceExposure:
    """Tests for the ServiceExposure model."""

    def test_lengths_must_match(self):
        with pytest.raises(ValueError):
            ServiceExposure(namespace="default", name="web", urls=["http://a"], port_names=[])

    def test_is_immutable(self):
        exposure = ServiceExposure(namespace="default", name="web", urls=["http://a"], port_names=["http"])

        with pytest.raises(AttributeError):
            exposure.urls = ()

    def test_table_row(self):
        exposure = ServiceExposure(
            namespace="default", name="web", urls=["http://a:1", "http://a:2"], port_names=["http", "admin"]
        )

        assert exposure.table_row() == ["default", "web", "http\nadmin", "http://a:1\nhttp://a:2"]

    def test_table_row_without_node_port(self):
        exposure = ServiceExposure(namespace="default", name="web")

        assert exposure.table_row() == ["default", "web", "", "No node port"]
