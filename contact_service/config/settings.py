"""Contact service configuration with Pydantic v2.

Manages HTTP, SMTP relay, delivery and logging settings loaded from
environment variables or .env file.

All settings can be overridden via environment variables.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from contact_service.models.delivery import DeliverySettings
from contact_service.models.smtp_config import SMTPConfig


class ContactConfig(BaseSettings):
    """Contact service configuration.

    Loads settings from environment variables and .env file using Pydantic v2.
    All settings are case-sensitive and strictly validated.

    Attributes:
        SERVICE_NAME: Name of the service.
        SERVICE_VERSION: Service version.
        API_HOST: HTTP bind host.
        API_PORT: HTTP bind port (1-65535).
        SMTP_HOST: SMTP relay hostname.
        SMTP_PORT: SMTP relay port (1-65535).
        SMTP_USER: SMTP authentication username (optional).
        SMTP_PASSWORD: SMTP authentication password (optional).
        SMTP_USE_TLS: Whether to upgrade the relay connection with STARTTLS.
        SMTP_TIMEOUT: SMTP connection timeout in seconds.
        MAIL_FROM: Sender mailbox for contact emails.
        MAIL_RECIPIENTS: Comma-separated, ordered recipient mailboxes.
        BACKUP_DIR: Directory where a copy of every message is archived.
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
        default="contact-service",
        description="Name of the service",
    )
    SERVICE_VERSION: str = Field(
        default="1.0.0",
        description="Service version",
    )
    API_HOST: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="API server port",
    )

    # ========================================================================
    # SMTP Relay Configuration
    # ========================================================================
    SMTP_HOST: str = Field(
        default="localhost",
        description="SMTP relay hostname",
    )
    SMTP_PORT: int = Field(
        default=1025,
        ge=1,
        le=65535,
        description="SMTP relay port",
    )
    SMTP_USER: str = Field(
        default="",
        description="SMTP authentication username",
    )
    SMTP_PASSWORD: str = Field(
        default="",
        description="SMTP authentication password",
    )
    SMTP_USE_TLS: bool = Field(
        default=False,
        description="Whether to use STARTTLS",
    )
    SMTP_TIMEOUT: int = Field(
        default=30,
        ge=1,
        le=300,
        description="SMTP connection timeout in seconds",
    )

    # ========================================================================
    # Delivery Configuration
    # ========================================================================
    MAIL_FROM: str = Field(
        default="contact@localhost",
        description="Sender mailbox",
    )
    MAIL_RECIPIENTS: str = Field(
        default="",
        description="Comma-separated recipient mailboxes, in delivery order",
    )
    BACKUP_DIR: str = Field(
        default="./emails",
        description="Directory for archived copies of sent messages",
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

    @field_validator("SMTP_HOST")
    @classmethod
    def validate_smtp_host(cls, v: str) -> str:
        """Validate SMTP host is not empty.

        Raises:
            ValueError: If hostname is empty or whitespace.
        """
        if not v.strip():
            raise ValueError("SMTP_HOST cannot be empty")
        return v.strip()

    @field_validator("MAIL_FROM")
    @classmethod
    def validate_mail_from(cls, v: str) -> str:
        """Validate MAIL_FROM is not empty.

        The mailbox syntax itself is checked at delivery time.

        Raises:
            ValueError: If the sender is empty.
        """
        if not v.strip():
            raise ValueError("MAIL_FROM cannot be empty")
        return v.strip()

    @field_validator("SMTP_PASSWORD")
    @classmethod
    def validate_smtp_password(cls, v: str) -> str:
        """Remove spaces from SMTP password.

        App passwords are often displayed in space-separated groups but must
        be used without them.
        """
        return v.replace(" ", "")

    def get_recipients(self) -> list[str]:
        """Split MAIL_RECIPIENTS into an ordered list.

        Returns:
            Recipient mailboxes in configured order, blanks dropped.

        Example:
            >>> # MAIL_RECIPIENTS="bob@fake.fake, beth@fake.fake"
            >>> # ["bob@fake.fake", "beth@fake.fake"]
        """
        return [part.strip() for part in self.MAIL_RECIPIENTS.split(",") if part.strip()]

    def get_smtp_config(self) -> SMTPConfig:
        """Project relay settings onto an SMTPConfig."""
        return SMTPConfig(
            host=self.SMTP_HOST,
            port=self.SMTP_PORT,
            username=self.SMTP_USER,
            password=self.SMTP_PASSWORD,
            use_tls=self.SMTP_USE_TLS,
            timeout=self.SMTP_TIMEOUT,
        )

    def get_delivery_settings(self) -> DeliverySettings:
        """Project addressing and archive settings onto DeliverySettings."""
        return DeliverySettings(
            from_address=self.MAIL_FROM,
            recipients=tuple(self.get_recipients()),
            archive_dir=self.BACKUP_DIR,
        )
