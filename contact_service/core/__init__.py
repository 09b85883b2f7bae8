"""Core module for contact service.

Provides the exception hierarchy and logging configuration.
"""

from contact_service.core.exceptions import (
    AddressParseError,
    ArchiveError,
    ContactConfigError,
    ContactServiceError,
    ContactValidationError,
    DeliveryError,
    FieldValidationError,
    MessageAssemblyError,
    SMTPClientError,
)
from contact_service.core.logger import (
    get_logger,
    log_context,
    setup_logging,
)

__all__ = [
    # Exceptions
    "ContactServiceError",
    "ContactConfigError",
    "FieldValidationError",
    "ContactValidationError",
    "DeliveryError",
    "AddressParseError",
    "MessageAssemblyError",
    "ArchiveError",
    "SMTPClientError",
    # Logging
    "get_logger",
    "setup_logging",
    "log_context",
]
