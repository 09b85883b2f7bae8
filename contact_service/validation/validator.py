"""Contact form validator.

Turns three raw, untrusted strings into a Contact. Every field is always
evaluated so that all problems are reported together.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from contact_service.core.exceptions import ContactValidationError, FieldValidationError
from contact_service.models.contact import Contact, ContactErrors, Email, Message, Name

T = TypeVar("T")


def _attempt(factory: Callable[[str], T], raw: str) -> tuple[T | None, object]:
    """Build one field value, capturing its error code instead of raising."""
    try:
        return factory(raw), None
    except FieldValidationError as e:
        return None, e.code


def validate_contact(raw_email: str, raw_name: str, raw_message: str) -> Contact:
    """Validate a contact submission.

    Args:
        raw_email: Submitted email address.
        raw_name: Submitted name.
        raw_message: Submitted message body.

    Returns:
        Contact with trimmed, validated fields.

    Raises:
        ContactValidationError: If any field is invalid. The attached
            ContactErrors holds a code for every failing field.

    Example:
        >>> contact = validate_contact("good@foo.com", "  joe ", "hello world")
        >>> str(contact.name)
        'joe'
    """
    email, email_error = _attempt(Email, raw_email)
    name, name_error = _attempt(Name, raw_name)
    message, message_error = _attempt(Message, raw_message)

    if email is None or name is None or message is None:
        raise ContactValidationError(
            ContactErrors(
                email=email_error,
                name=name_error,
                message=message_error,
            )
        )

    return Contact(email=email, name=name, message=message)
