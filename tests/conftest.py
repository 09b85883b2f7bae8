"""Pytest configuration and fixtures for contact service tests.

Provides reusable fixtures for unit and integration tests including delivery
settings, mocked SMTP connections, mocked transports and a FastAPI test
client.
"""

from __future__ import annotations

import os
from typing import Generator
from unittest.mock import MagicMock

import pytest

# Set test environment before importing application modules
os.environ.setdefault("SMTP_HOST", "smtp.test.com")
os.environ.setdefault("SMTP_PORT", "1025")
os.environ.setdefault("MAIL_FROM", "contact@example.com")
os.environ.setdefault(
    "MAIL_RECIPIENTS", "bob@example.com, beth@example.com, george@example.org"
)
os.environ.setdefault("LOG_TO_FILE", "false")

from contact_service.models.contact import Contact, Email, Message, Name  # noqa: E402
from contact_service.models.delivery import DeliverySettings  # noqa: E402
from contact_service.models.smtp_config import SMTPConfig  # noqa: E402


# =============================================================================
# Domain Fixtures
# =============================================================================
@pytest.fixture
def sample_contact() -> Contact:
    """Create a valid contact."""
    return Contact(
        email=Email("scooby@mystery.van"),
        name=Name("Shaggy"),
        message=Message("Let's solve some mysteries, dude."),
    )


@pytest.fixture
def sample_form() -> dict[str, str]:
    """Create a valid contact form body."""
    return {
        "name": "Shaggy",
        "email": "scooby@mystery.van",
        "message": "Let's solve some mysteries, dude.",
    }


# =============================================================================
# Delivery Fixtures
# =============================================================================
@pytest.fixture
def recipients() -> tuple[str, ...]:
    """Ordered recipient list used by delivery tests."""
    return ("bob@example.com", "beth@example.com", "george@example.org")


@pytest.fixture
def delivery_settings(tmp_path, recipients) -> DeliverySettings:
    """Create delivery settings archiving into a temp directory."""
    return DeliverySettings(
        from_address="contact@example.com",
        recipients=recipients,
        archive_dir=str(tmp_path / "emails"),
    )


@pytest.fixture
def mock_archive() -> MagicMock:
    """Create a mock archive transport."""
    archive = MagicMock()
    archive.send.return_value = None
    return archive


@pytest.fixture
def mock_relay() -> MagicMock:
    """Create a mock relay transport."""
    relay = MagicMock()
    relay.send.return_value = None
    return relay


# =============================================================================
# SMTP Client Fixtures
# =============================================================================
@pytest.fixture
def smtp_config() -> SMTPConfig:
    """Create an SMTPConfig without TLS or login."""
    return SMTPConfig(host="smtp.test.com", port=1025, timeout=10)


@pytest.fixture
def auth_smtp_config() -> SMTPConfig:
    """Create an SMTPConfig with STARTTLS and login."""
    return SMTPConfig(
        host="smtp.test.com",
        port=587,
        username="test@test.com",
        password="testpassword",
        use_tls=True,
        timeout=10,
    )


@pytest.fixture
def mock_smtp_connection() -> MagicMock:
    """Create a mock SMTP connection."""
    smtp = MagicMock()
    smtp.sendmail.return_value = {}
    smtp.starttls.return_value = (220, b"TLS ready")
    smtp.login.return_value = (235, b"Authentication successful")
    smtp.quit.return_value = (221, b"Bye")
    return smtp


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================
@pytest.fixture
def mock_delivery_service() -> MagicMock:
    """Create a mock DeliveryService."""
    service = MagicMock()
    service.deliver.return_value = None
    return service


@pytest.fixture
def test_client(mock_delivery_service: MagicMock) -> Generator:
    """Create a FastAPI test client with a mocked delivery service."""
    from fastapi.testclient import TestClient

    from contact_service.api.main import create_app
    from contact_service.config import ContactConfig

    app = create_app(ContactConfig(), delivery_service=mock_delivery_service)

    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
