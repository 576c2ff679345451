"""Configuration settings for the Beeswax client.

This module defines the configuration for the client: API root,
login credentials, HTTP transport options and logging. Settings are
loaded from environment variables and .env files.
"""

from typing import Literal, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..exceptions import ConfigurationError
from ..models import Credentials

DEFAULT_API_ROOT = "https://stingersbx.api.beeswax.com"


class Settings(BaseSettings):
    """Client settings loaded from environment variables.

    :param beeswax_api_root: Root URL of the Beeswax API
    :type beeswax_api_root: str
    :param beeswax_email: Login email
    :type beeswax_email: Optional[str]
    :param beeswax_password: Login password
    :type beeswax_password: Optional[str]
    :param beeswax_keep_logged_in: Ask Beeswax for a longer lasting session
    :type beeswax_keep_logged_in: bool
    :param http_timeout_seconds: Request timeout; None disables timeouts
    :type http_timeout_seconds: Optional[float]
    :param http_verify_ssl: Verify TLS certificates
    :type http_verify_ssl: bool
    :param log_level: Logging level for the application
    :type log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in .env file
    )

    beeswax_api_root: str = Field(
        DEFAULT_API_ROOT, description="Beeswax API root URL"
    )
    beeswax_email: Optional[str] = Field(None, description="Beeswax login email")
    beeswax_password: Optional[str] = Field(
        None, repr=False, description="Beeswax login password"
    )
    beeswax_keep_logged_in: bool = Field(
        True, description="Request longer lasting sessions on login"
    )

    # Transport
    http_timeout_seconds: Optional[float] = Field(
        None, description="Request timeout in seconds (unset: no timeout)"
    )
    http_verify_ssl: bool = Field(True, description="Verify TLS certificates")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )

    @field_validator("beeswax_api_root")
    @classmethod
    def normalize_api_root(cls, v: str) -> str:
        """Strip whitespace and trailing slashes from the API root.

        :param v: The configured API root
        :type v: str
        :return: Normalized API root
        :rtype: str
        """
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("BEESWAX_API_ROOT must be an http(s) URL")
        return v

    @field_validator("http_timeout_seconds")
    @classmethod
    def positive_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be greater than 0")
        return v

    def credentials(self) -> Credentials:
        """Build the login credentials from these settings.

        :return: Immutable credentials
        :rtype: Credentials
        :raises ConfigurationError: If email or password is missing
        """
        missing = []
        if not (self.beeswax_email or "").strip():
            missing.append("BEESWAX_EMAIL")
        if not (self.beeswax_password or "").strip():
            missing.append("BEESWAX_PASSWORD")
        if missing:
            raise ConfigurationError(
                "Must provide credentials with email + password. Missing: "
                + ", ".join(missing),
                setting=missing[0],
            )
        try:
            return Credentials(email=self.beeswax_email, password=self.beeswax_password)
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors())
            raise ConfigurationError(f"Invalid credentials: {fields}") from e
