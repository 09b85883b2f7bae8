"""Models module for contact service.

Defines the contact domain value objects, error codes, delivery settings and
SMTP configuration.
"""

from contact_service.models.contact import (
    ERROR_MESSAGES,
    Contact,
    ContactErrors,
    Email,
    EmailErrorCode,
    FieldErrorCode,
    Message,
    MessageErrorCode,
    Name,
    NameErrorCode,
    describe_error,
    grapheme_length,
)
from contact_service.models.delivery import DeliverySettings, OutboundMessage
from contact_service.models.smtp_config import SMTPConfig

__all__ = [
    # Error codes
    "EmailErrorCode",
    "NameErrorCode",
    "MessageErrorCode",
    "FieldErrorCode",
    "ERROR_MESSAGES",
    "describe_error",
    # Domain
    "Email",
    "Name",
    "Message",
    "Contact",
    "ContactErrors",
    "grapheme_length",
    # Delivery
    "DeliverySettings",
    "OutboundMessage",
    "SMTPConfig",
]
