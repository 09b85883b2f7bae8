"""Custom exceptions for contact service.

Defines two disjoint failure families: client-input validation failures and
delivery (environment/transport) failures. Both derive from a common base so
callers can catch everything the service raises with a single except block.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contact_service.models.contact import ContactErrors, FieldErrorCode


class ContactServiceError(Exception):
    """Base exception for all contact service errors."""

    pass


class ContactConfigError(ContactServiceError):
    """Exception raised for configuration errors.

    Indicates invalid or unusable configuration detected at startup, such as
    an archive directory that cannot be created.

    Example:
        raise ContactConfigError("Unable to create backup email dir: ./emails")
    """

    pass


# ============================================================================
# Validation
# ============================================================================
class FieldValidationError(ContactServiceError, ValueError):
    """Exception raised when a single form field fails validation.

    Attributes:
        code: Field-specific error code (EmailErrorCode, NameErrorCode or MessageErrorCode).
    """

    def __init__(self, code: FieldErrorCode):
        """Initialize field validation error.

        Args:
            code: Error code describing why the field was rejected.
        """
        super().__init__(f"{type(code).__name__}.{code.name}")
        self.code = code


class ContactValidationError(ContactServiceError):
    """Exception raised when a contact submission fails validation.

    Carries every failing field at once so the caller can report all problems
    in a single round trip. No side effects have happened when this is raised.

    Attributes:
        errors: Per-field error codes; passing fields are None.
    """

    def __init__(self, errors: ContactErrors):
        """Initialize contact validation error.

        Args:
            errors: Aggregate of per-field error codes.
        """
        super().__init__(f"Invalid contact submission: {errors}")
        self.errors = errors


# ============================================================================
# Delivery
# ============================================================================
class DeliveryError(ContactServiceError):
    """Base exception for failures while delivering a validated contact.

    These are operator-facing problems (bad configuration, filesystem or relay
    failures) and are never shown to the submitter in detail.
    """

    pass


class AddressParseError(DeliveryError):
    """Exception raised when a configured mailbox address cannot be parsed.

    Attributes:
        address: The raw address string that failed to parse.

    Example:
        raise AddressParseError("not-an-address", "missing @")
    """

    def __init__(self, address: str, reason: str | None = None):
        """Initialize address parse error.

        Args:
            address: Raw address string that failed.
            reason: Optional parser explanation.
        """
        message = f"Invalid mailbox address: {address!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.address = address


class MessageAssemblyError(DeliveryError):
    """Exception raised when the outbound message cannot be built."""

    pass


class ArchiveError(DeliveryError):
    """Exception raised when the archive copy cannot be written.

    Attributes:
        path: Path of the file (or directory) that could not be written.
    """

    def __init__(self, message: str, path: str | None = None):
        """Initialize archive error.

        Args:
            message: Error description.
            path: Optional path of the affected file.
        """
        super().__init__(message)
        self.path = path


class SMTPClientError(DeliveryError):
    """Exception raised for SMTP connection/delivery failures.

    Attributes:
        is_transient: Whether the error looks temporary. Informational only;
            the service never retries on its own.

    Example:
        raise SMTPClientError(
            "Connection timeout to localhost:1025",
            is_transient=True
        )
    """

    def __init__(self, message: str, is_transient: bool = False):
        """Initialize SMTP client error.

        Args:
            message: Error description.
            is_transient: Whether error is temporary.
        """
        super().__init__(message)
        self.is_transient = is_transient
