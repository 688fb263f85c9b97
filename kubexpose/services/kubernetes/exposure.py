"""Service exposure workflow.

Waits for a service to become ready, resolves its node port URLs and then
reports them: as a table, as a plain list, or by opening them in the
default browser.
"""

import sys
import webbrowser
from typing import Callable, TextIO

import structlog
from kubernetes import client

from ...config import Settings
from ...config import settings as default_settings
from ...models.errors import ExposureError, KubexposeError, RetriableError
from ...utils.template import URLTemplate
from ..interfaces import ClientProvider, HostIPProvider
from .client import KubernetesClient, label_selector
from .formatting import optionally_https_formatted_url, print_service_list
from .models import ServiceExposure
from .readiness import ReadinessPoller
from .urls import ServiceURLResolver

logger = structlog.get_logger(__name__)

# Marks an argument left to the configured default
_UNSET = object()


class ServiceExposer:
    """Entry point for exposing cluster services to the host.

    All collaborators are injected: the client provider, the host IP
    provider, the output streams and the browser opener.
    """

    def __init__(
        self,
        client_provider: ClientProvider,
        host_ip_provider: HostIPProvider,
        settings: Settings | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
        opener: Callable[[str], bool] = webbrowser.open,
        poller_factory: Callable[[KubernetesClient], ReadinessPoller] = ReadinessPoller,
    ):
        self.client_provider = client_provider
        self.host_ip_provider = host_ip_provider
        self.settings = settings or default_settings
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.opener = opener
        self.poller_factory = poller_factory

    def _get_client(self) -> KubernetesClient:
        return self.client_provider.get_client(self.settings.client_timeout)

    def _get_ip(self) -> str:
        try:
            return self.host_ip_provider.get_ip(self.settings.profile)
        except KubexposeError as e:
            raise ExposureError("Error getting ip from host", e) from e

    def _echo(self, message: str) -> None:
        print(message, file=self.out)

    # -- URL lookup ------------------------------------------------------------

    def get_service_urls(self, namespace: str, template: URLTemplate | None) -> list[ServiceExposure]:
        """Return the exposure of every service in ``namespace``."""
        ip = self._get_ip()
        return ServiceURLResolver(self._get_client()).resolve_all(ip, namespace, template)

    def get_service_urls_for_service(
        self,
        namespace: str,
        service: str,
        template: URLTemplate | None,
    ) -> ServiceExposure:
        """Return the exposure of a single service."""
        ip = self._get_ip()
        return ServiceURLResolver(self._get_client()).resolve(ip, service, namespace, template)

    def get_service_list_by_label(self, namespace: str, key: str, value: str) -> client.V1ServiceList:
        """List services in ``namespace`` whose label ``key`` equals ``value``.

        Raises:
            RetriableError: if the client or the list call fails.
        """
        try:
            kube_client = self._get_client()
        except KubexposeError as e:
            raise RetriableError("Error getting kubernetes client", e) from e

        try:
            return kube_client.list_services(namespace, label_selector=label_selector(key, value))
        except Exception as e:
            raise RetriableError(f"Error listing services in {namespace} with label {key}={value}", e) from e

    def print_service_urls(self, namespace: str, template: URLTemplate | None) -> list[ServiceExposure]:
        """Print the table of every service in ``namespace``."""
        exposures = self.get_service_urls(namespace, template)
        print_service_list(self.out, [exposure.table_row() for exposure in exposures])
        return exposures

    # -- Wait and open ---------------------------------------------------------

    def wait_and_maybe_open_service(
        self,
        namespace: str,
        service: str,
        url_template: URLTemplate | None = _UNSET,
        url_mode: bool | None = None,
        https: bool | None = None,
        wait: int | None = None,
        interval: int | None = None,
    ) -> ServiceExposure:
        """Wait for a service, then report or open its URLs.

        Omitted arguments fall back to the configured defaults. An explicit
        ``url_template=None`` is not replaced; resolution then fails.

        Returns:
            The resolved exposure (empty when the service has no node port).

        Raises:
            ExposureError: the service never became ready, or its URLs
                could not be resolved.
        """
        exposure_cfg = self.settings.exposure
        if url_template is _UNSET:
            url_template = URLTemplate(exposure_cfg.url_format)
        url_mode = exposure_cfg.url_mode if url_mode is None else url_mode
        https = exposure_cfg.https if https is None else https
        wait = exposure_cfg.wait if wait is None else wait
        interval = exposure_cfg.interval if interval is None else interval

        log = logger.bind(namespace=namespace, service=service)

        # Polling
        try:
            poller = self.poller_factory(self._get_client())
            poller.wait(namespace, service, wait=wait, interval=interval)
        except KubexposeError as e:
            log.warning("Service did not become ready", error=str(e))
            raise ExposureError(
                f"Could not find finalized endpoint being pointed to by {service}",
                e,
                namespace=namespace,
                service=service,
            ) from e

        # Ready
        try:
            exposure = self.get_service_urls_for_service(namespace, service, url_template)
        except KubexposeError as e:
            raise ExposureError(
                "Check that the cluster is running and that you have specified the correct namespace",
                e,
                namespace=namespace,
                service=service,
            ) from e

        if not url_mode:
            print_service_list(self.out, [exposure.table_row()])

        if not exposure.urls:
            self._echo(f"service {namespace}/{service} has no node port")
            return exposure

        for bare_url in exposure.urls:
            url, is_http_schemed = optionally_https_formatted_url(bare_url, https)

            if url_mode or not is_http_schemed:
                self._echo(url)
                continue

            self._echo(f"Opening kubernetes service {namespace}/{service} in default browser...")
            self._open(url, log)

        return exposure

    def _open(self, url: str, log: structlog.stdlib.BoundLogger) -> None:
        """Open ``url`` in the browser; failures are reported, never raised."""
        try:
            opened = self.opener(url)
        except Exception as e:
            error = str(e) or type(e).__name__
        else:
            if opened is not False:
                return
            error = "no runnable browser found"

        log.warning("Browser failed to open url", url=url, error=error)
        print(f"browser failed to open url: {error}", file=self.err)
