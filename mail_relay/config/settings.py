"""Mail relay configuration with Pydantic v2.

Manages the listen address, provider credentials, the request gate's
shared secret and origin allow-list, and logging, loaded from environment
variables or .env file.

All settings can be overridden via environment variables.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mail_relay.core.exceptions import RelayConfigError
from mail_relay.gate.origins import (
    BASE_ALLOWED_ORIGINS,
    DEVELOPMENT_ORIGINS,
    AllowedOriginSet,
)

DEFAULT_API_SECRET_KEY = "your-secret-key-here"

PROVIDER_DISPLAY_NAMES = {
    "brevo": "Brevo",
    "sendgrid": "SendGrid",
}


class RelayConfig(BaseSettings):
    """Mail relay configuration.

    Loads settings from environment variables and .env file using Pydantic v2.
    All settings are case-sensitive and strictly validated.

    Attributes:
        SERVICE_NAME: Name of the service.
        SERVICE_VERSION: Service version.
        API_HOST: API server host.
        PORT: API server port (1-65535).
        ENVIRONMENT: "development" (verbose errors, local origins) or "production".
        EMAIL_PROVIDER: Delivery provider ("brevo" or "sendgrid").
        BREVO_API_KEY: Brevo API key.
        BREVO_API_URL: Brevo API base URL.
        SENDGRID_API_KEY: SendGrid API key.
        SENDGRID_API_URL: SendGrid API base URL.
        API_SECRET_KEY: Shared secret expected in the X-API-Key header.
        ALLOWED_ORIGINS: Comma-separated origins merged with the built-in list.
        DEFAULT_FROM_EMAIL: Sender address used when a request omits "from".
        DEFAULT_FROM_NAME: Sender name used when a request omits "name".
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        LOG_TO_FILE: Whether to log to file.
        LOG_DIR: Directory for log files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ========================================================================
    # Service Configuration
    # ========================================================================
    SERVICE_NAME: str = Field(
        default="mail-relay",
        description="Name of the service",
    )
    SERVICE_VERSION: str = Field(
        default="1.0.0",
        description="Service version",
    )
    API_HOST: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="API server port",
    )
    ENVIRONMENT: str = Field(
        default="production",
        pattern="^(development|production)$",
        description="Runtime mode",
    )

    # ========================================================================
    # Provider Configuration
    # ========================================================================
    EMAIL_PROVIDER: str = Field(
        default="brevo",
        pattern="^(brevo|sendgrid)$",
        description="Email delivery provider",
    )
    BREVO_API_KEY: str = Field(
        default="",
        description="Brevo API key",
    )
    BREVO_API_URL: str = Field(
        default="https://api.brevo.com/v3",
        description="Brevo API base URL",
    )
    SENDGRID_API_KEY: str = Field(
        default="",
        description="SendGrid API key",
    )
    SENDGRID_API_URL: str = Field(
        default="https://api.sendgrid.com/v3",
        description="SendGrid API base URL",
    )
    DEFAULT_FROM_EMAIL: str = Field(
        default="info@kenyaonabudgetsafaris.co.uk",
        description="Default sender email address",
    )
    DEFAULT_FROM_NAME: str = Field(
        default="KenyaOnABudget Safaris",
        description="Default sender display name",
    )

    # ========================================================================
    # Request Gate Configuration
    # ========================================================================
    API_SECRET_KEY: str = Field(
        default=DEFAULT_API_SECRET_KEY,
        description="Shared secret for the X-API-Key header",
    )
    ALLOWED_ORIGINS: str = Field(
        default="",
        description="Comma-separated extra CORS origins",
    )

    # ========================================================================
    # Logging Configuration
    # ========================================================================
    LOG_LEVEL: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level",
    )
    LOG_TO_FILE: bool = Field(
        default=True,
        description="Whether to log to file",
    )
    LOG_DIR: str = Field(
        default="./logs",
        description="Directory for log files",
    )
    LOG_MAX_SIZE_MB: int = Field(
        default=10,
        gt=0,
        description="Maximum log file size in megabytes",
    )
    LOG_BACKUP_COUNT: int = Field(
        default=5,
        gt=0,
        description="Number of backup log files to keep",
    )

    @field_validator("API_SECRET_KEY")
    @classmethod
    def validate_api_secret_key(cls, v: str) -> str:
        """Validate the shared secret is not empty.

        Raises:
            ValueError: If the secret is empty or whitespace.
        """
        if not v.strip():
            raise ValueError("API_SECRET_KEY cannot be empty")
        return v

    @field_validator("DEFAULT_FROM_EMAIL")
    @classmethod
    def validate_from_email(cls, v: str) -> str:
        """Validate the default sender is not empty.

        Raises:
            ValueError: If email is empty.
        """
        if not v.strip():
            raise ValueError("DEFAULT_FROM_EMAIL cannot be empty")
        return v.strip()

    @field_validator("BREVO_API_URL", "SENDGRID_API_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def uses_default_secret(self) -> bool:
        return self.API_SECRET_KEY == DEFAULT_API_SECRET_KEY

    @property
    def provider_name(self) -> str:
        """Display name of the selected provider (e.g. "Brevo")."""
        return PROVIDER_DISPLAY_NAMES[self.EMAIL_PROVIDER]

    def allowed_origin_set(self) -> AllowedOriginSet:
        """Build the origin allow-list from the built-in base and ALLOWED_ORIGINS.

        Development mode also admits the local dev-server origins.

        Returns:
            Normalized, de-duplicated AllowedOriginSet.
        """
        base = BASE_ALLOWED_ORIGINS
        if self.is_development:
            base = base + DEVELOPMENT_ORIGINS
        return AllowedOriginSet.from_sources(base, self.ALLOWED_ORIGINS)

    def provider_api_key(self) -> str:
        """Return the API key of the selected provider."""
        if self.EMAIL_PROVIDER == "sendgrid":
            return self.SENDGRID_API_KEY
        return self.BREVO_API_KEY

    def validate_provider_config(self) -> None:
        """Validate the selected provider can authenticate.

        Raises:
            RelayConfigError: If the selected provider's API key is missing.
        """
        if not self.provider_api_key().strip():
            raise RelayConfigError(
                f"Required setting missing: {self.EMAIL_PROVIDER.upper()}_API_KEY. "
                f"Set this environment variable to enable email sending."
            )
