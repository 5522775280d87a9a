"""Configuration settings for the identity management client.

This module defines the configuration used by the HTTP layer: the tenant
domain requests are sent to, the management API token, transport
timeouts and the telemetry opt-in. Settings are loaded from environment
variables and .env files.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..exceptions import ConfigurationError


class Settings(BaseSettings):
    """Client settings loaded from environment variables.

    :param domain: Tenant domain (host name) of the identity API
    :type domain: Optional[str]
    :param management_token: Access token for management API calls
    :type management_token: Optional[str]
    :param http_telemetry: Send the telemetry header with each request
    :type http_telemetry: bool
    :param http_timeout: Transport timeout in seconds
    :type http_timeout: float
    :param log_level: Logging level for the application
    :type log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    domain: Optional[str] = Field(
        None,
        alias="IDM_DOMAIN",
        description="Tenant domain of the identity management API",
    )
    management_token: Optional[str] = Field(
        None,
        alias="IDM_MANAGEMENT_TOKEN",
        description="Access token for the management API",
    )
    http_telemetry: bool = Field(
        True,
        alias="IDM_HTTP_TELEMETRY",
        description="Include SDK telemetry header in API requests",
    )
    http_timeout: float = Field(
        30.0,
        alias="IDM_HTTP_TIMEOUT",
        description="Read timeout for API requests, in seconds",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )

    @field_validator("domain")
    @classmethod
    def normalize_domain(cls, v: Optional[str]) -> Optional[str]:
        """Strip any scheme and trailing slashes from the domain.

        :param v: The configured domain
        :type v: Optional[str]
        :return: Bare host name, or None when unset
        :rtype: Optional[str]
        """
        if v is None:
            return None
        v = v.strip()
        for scheme in ("https://", "http://"):
            if v.lower().startswith(scheme):
                v = v[len(scheme):]
        v = v.rstrip("/")
        return v or None

    @property
    def domain_uri(self) -> str:
        """Return the configured domain with protocol.

        :return: Domain URI such as ``https://tenant.example.com``
        :rtype: str
        :raises ConfigurationError: If no domain is configured
        """
        if not self.domain:
            raise ConfigurationError(
                "A domain must be configured to issue API requests.", setting="domain"
            )
        return f"https://{self.domain}"
