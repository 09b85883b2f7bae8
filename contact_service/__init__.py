"""Contact Service - contact form submission and email delivery.

Accepts a contact form over HTTP, validates it, and emails it to a fixed set
of recipients while archiving a copy of every message on disk.

Architecture:
    - Validator (pure, collects every field error)
    - Delivery service (build message → archive → SMTP relay)
    - File archive client (one .eml file per message)
    - SMTP client (connection per send, optional STARTTLS/login)

Modules:
    - core: Exceptions, logger
    - config: Pydantic v2 settings
    - models: Contact value objects, error codes, delivery models
    - validation: Contact validation
    - clients: External integrations (file archive, SMTP)
    - delivery: Delivery service
    - api: FastAPI application

Usage:
    from contact_service import DeliveryService, ContactConfig, validate_contact

    service = DeliveryService.from_config(ContactConfig())
    contact = validate_contact("scooby@mystery.van", "Shaggy", "Zoinks!")
    service.deliver(contact)

Version: 1.0.0
"""

__version__ = "1.0.0"

# Clients
from contact_service.clients import FileArchiveClient, MessageTransport, SMTPClient

# Configuration
from contact_service.config import ContactConfig

# Core utilities
from contact_service.core import (
    AddressParseError,
    ArchiveError,
    ContactConfigError,
    ContactServiceError,
    ContactValidationError,
    DeliveryError,
    FieldValidationError,
    MessageAssemblyError,
    SMTPClientError,
    get_logger,
)

# Delivery
from contact_service.delivery import DeliveryService

# Models
from contact_service.models import (
    Contact,
    ContactErrors,
    DeliverySettings,
    Email,
    EmailErrorCode,
    Message,
    MessageErrorCode,
    Name,
    NameErrorCode,
    OutboundMessage,
    SMTPConfig,
    describe_error,
)

# Validation
from contact_service.validation import validate_contact

__all__ = [
    # Version
    "__version__",
    # Core exceptions
    "ContactServiceError",
    "ContactConfigError",
    "FieldValidationError",
    "ContactValidationError",
    "DeliveryError",
    "AddressParseError",
    "MessageAssemblyError",
    "ArchiveError",
    "SMTPClientError",
    "get_logger",
    # Configuration
    "ContactConfig",
    # Models
    "Email",
    "Name",
    "Message",
    "Contact",
    "ContactErrors",
    "EmailErrorCode",
    "NameErrorCode",
    "MessageErrorCode",
    "describe_error",
    "DeliverySettings",
    "OutboundMessage",
    "SMTPConfig",
    # Validation
    "validate_contact",
    # Clients
    "FileArchiveClient",
    "MessageTransport",
    "SMTPClient",
    # Delivery
    "DeliveryService",
]
