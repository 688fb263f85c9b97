"""Configuration for kubexpose.

Settings are read from ``KUBEXPOSE_*`` environment variables (and an
optional ``.env`` file). Grouped views are exposed as dataclasses through
the ``kubernetes`` and ``exposure`` properties.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.errors import FatalError
from ..utils.template import DEFAULT_URL_TEMPLATE, URLTemplate
from .kubernetes import ExposureConfig, KubernetesConfig


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="kubexpose_",
        env_file=".env",
        extra="ignore",
    )

    # -- Cluster ---------------------------------------------------------------
    profile: str = Field(default="minikube", min_length=1, description="Kubeconfig context of the cluster")
    namespace: str = Field(default="default", min_length=1)
    kubeconfig: str | None = Field(default=None, description="Path to kubeconfig file")
    client_timeout: int = Field(default=60, ge=1, description="API request timeout in seconds")
    host_ip: str | None = Field(default=None, description="Static node IP, overrides discovery")

    # -- Exposure --------------------------------------------------------------
    url_format: str = Field(
        default=DEFAULT_URL_TEMPLATE,
        description="URL template; may reference {ip}, {port} and {name}",
    )
    url_mode: bool = False
    https: bool = False
    wait: int = Field(default=20, ge=0, description="Total time to wait for a service, in seconds")
    interval: int = Field(default=6, ge=0, description="Initial retry interval, in seconds")

    # -- Logging ---------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["console", "json"] = "console"

    # -- Validators ------------------------------------------------------------

    @field_validator("kubeconfig", "host_ip", mode="before")
    @classmethod
    def _empty_string_to_none(cls, v: str | None) -> str | None:
        """Treat ``KUBEXPOSE_HOST_IP=""`` the same as unset."""
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("url_format")
    @classmethod
    def _validate_url_format(cls, v: str) -> str:
        """Reject templates that could never render."""
        try:
            URLTemplate(v)
        except FatalError as e:
            raise ValueError(str(e)) from e
        return v

    # -- Grouped views ---------------------------------------------------------

    @property
    def kubernetes(self) -> KubernetesConfig:
        return KubernetesConfig(
            profile=self.profile,
            namespace=self.namespace,
            kubeconfig=self.kubeconfig,
            client_timeout=self.client_timeout,
            host_ip=self.host_ip,
        )

    @property
    def exposure(self) -> ExposureConfig:
        return ExposureConfig(
            url_format=self.url_format,
            url_mode=self.url_mode,
            https=self.https,
            wait=self.wait,
            interval=self.interval,
        )

    def url_template(self) -> URLTemplate:
        """Build the configured URL template."""
        return URLTemplate(self.url_format)


settings = Settings()

__all__ = ["Settings", "settings", "KubernetesConfig", "ExposureConfig"]
