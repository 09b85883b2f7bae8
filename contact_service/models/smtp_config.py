"""SMTP relay configuration model.

Defines the Pydantic model for relay connection parameters.
"""

from pydantic import BaseModel, Field, field_validator


class SMTPConfig(BaseModel):
    """SMTP relay configuration model.

    Attributes:
        host: SMTP relay hostname.
        port: SMTP relay port (1-65535).
        username: SMTP authentication username (login skipped when empty).
        password: SMTP authentication password.
        use_tls: Whether to upgrade the connection with STARTTLS.
        timeout: Connection timeout in seconds.
    """

    model_config = {"frozen": True}

    host: str = Field(..., min_length=1, description="SMTP relay hostname")
    port: int = Field(..., ge=1, le=65535, description="SMTP relay port")
    username: str = Field(default="", description="SMTP authentication username")
    password: str = Field(default="", description="SMTP authentication password")
    use_tls: bool = Field(default=False, description="Use STARTTLS")
    timeout: int = Field(
        default=30, ge=1, le=300, description="Connection timeout (seconds)"
    )

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Validate host is not whitespace.

        Raises:
            ValueError: If host is blank.
        """
        if not v.strip():
            raise ValueError("SMTP host cannot be empty")
        return v.strip()

    @property
    def requires_login(self) -> bool:
        """Whether credentials are configured."""
        return bool(self.username)
