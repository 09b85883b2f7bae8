"""Contact form domain models.

Defines the validated field value objects (Email, Name, Message), the Contact
aggregate, the closed per-field error codes, and the mapping from error codes
to user-visible text.

Field values validate themselves on construction: surrounding whitespace is
trimmed and the trimmed text is measured in grapheme clusters, so a value
object that exists is always valid.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

import regex

from contact_service.core.exceptions import FieldValidationError

# Extended grapheme cluster (user-perceived character)
_GRAPHEME = regex.compile(r"\X")
# Leading or trailing Unicode White_Space (\x1c-\x1f are kept, unlike str.strip)
_EDGE_WHITESPACE = regex.compile(r"\A\p{White_Space}+|\p{White_Space}+\Z")


def grapheme_length(text: str) -> int:
    """Count user-perceived characters in text.

    Args:
        text: Text to measure.

    Returns:
        Number of extended grapheme clusters.

    Example:
        >>> grapheme_length("é")
        1
    """
    return len(_GRAPHEME.findall(text))


# ============================================================================
# Error codes
# ============================================================================
class EmailErrorCode(str, Enum):
    """Reasons an email field is rejected."""

    EMPTY = "email_empty"
    TOO_LONG = "email_too_long"
    MISSING_AT_SIGN = "email_missing_at_sign"


class NameErrorCode(str, Enum):
    """Reasons a name field is rejected."""

    EMPTY = "name_empty"
    TOO_LONG = "name_too_long"


class MessageErrorCode(str, Enum):
    """Reasons a message field is rejected."""

    EMPTY = "message_empty"
    TOO_LONG = "message_too_long"


FieldErrorCode = Union[EmailErrorCode, NameErrorCode, MessageErrorCode]

# Email.TOO_LONG keeps the historical "200" wording although the limit is 300.
ERROR_MESSAGES: dict[FieldErrorCode, str] = {
    EmailErrorCode.EMPTY: "Email may not be empty.",
    EmailErrorCode.MISSING_AT_SIGN: "Email is missing @ symbol.",
    EmailErrorCode.TOO_LONG: "Email may not be longer than 200 characters long.",
    NameErrorCode.EMPTY: "Name may not be empty.",
    NameErrorCode.TOO_LONG: "Name may not be longer than 200 characters long.",
    MessageErrorCode.EMPTY: "Message may not be empty.",
    MessageErrorCode.TOO_LONG: "Message may not be longer than 2000 characters long.",
}


def describe_error(code: FieldErrorCode) -> str:
    """Return the user-visible text for a field error code.

    Args:
        code: Any member of EmailErrorCode, NameErrorCode or MessageErrorCode.

    Returns:
        Human readable error message.

    Raises:
        KeyError: If the code has no registered message.
    """
    return ERROR_MESSAGES[code]


def _clean(raw: str, max_length: int, empty: FieldErrorCode, too_long: FieldErrorCode) -> str:
    """Trim raw input and enforce the non-empty and length rules."""
    value = _EDGE_WHITESPACE.sub("", raw)
    if not value:
        raise FieldValidationError(empty)
    if grapheme_length(value) > max_length:
        raise FieldValidationError(too_long)
    return value


# ============================================================================
# Field value objects
# ============================================================================
@dataclass(frozen=True, order=True)
class Email:
    """Submitter email address.

    Trimmed, non-empty, at most 300 grapheme clusters and containing at
    least one "@". No further address syntax is enforced.

    Raises:
        FieldValidationError: With an EmailErrorCode if the input is rejected.

    Example:
        >>> str(Email("  good@foo.com "))
        'good@foo.com'
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 300

    def __post_init__(self) -> None:
        value = _clean(
            self.value,
            self.MAX_LENGTH,
            EmailErrorCode.EMPTY,
            EmailErrorCode.TOO_LONG,
        )
        if "@" not in value:
            raise FieldValidationError(EmailErrorCode.MISSING_AT_SIGN)
        object.__setattr__(self, "value", value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, order=True)
class Name:
    """Submitter name: trimmed, non-empty, at most 200 grapheme clusters."""

    value: str

    MAX_LENGTH: ClassVar[int] = 200

    def __post_init__(self) -> None:
        value = _clean(
            self.value,
            self.MAX_LENGTH,
            NameErrorCode.EMPTY,
            NameErrorCode.TOO_LONG,
        )
        object.__setattr__(self, "value", value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, order=True)
class Message:
    """Message body: trimmed, non-empty, at most 2000 grapheme clusters."""

    value: str

    MAX_LENGTH: ClassVar[int] = 2000

    def __post_init__(self) -> None:
        value = _clean(
            self.value,
            self.MAX_LENGTH,
            MessageErrorCode.EMPTY,
            MessageErrorCode.TOO_LONG,
        )
        object.__setattr__(self, "value", value)

    def __str__(self) -> str:
        return self.value


# ============================================================================
# Aggregates
# ============================================================================
@dataclass(frozen=True)
class Contact:
    """A fully validated contact form submission.

    Attributes:
        email: Validated submitter email.
        name: Validated submitter name.
        message: Validated message body.
    """

    email: Email
    name: Name
    message: Message

    def __post_init__(self) -> None:
        for attr, expected in (("email", Email), ("name", Name), ("message", Message)):
            if not isinstance(getattr(self, attr), expected):
                raise TypeError(
                    f"Contact.{attr} must be {expected.__name__}, "
                    f"got {type(getattr(self, attr)).__name__}"
                )


@dataclass(frozen=True)
class ContactErrors:
    """Per-field validation failures of a contact submission.

    A field is None when that field validated successfully.
    """

    email: EmailErrorCode | None = None
    name: NameErrorCode | None = None
    message: MessageErrorCode | None = None

    @property
    def has_errors(self) -> bool:
        """Whether any field failed."""
        return any(code is not None for code in (self.email, self.name, self.message))

    def to_messages(self) -> dict[str, str | None]:
        """Render every field error as user-visible text.

        Returns:
            Dict with "email", "name" and "message" keys; valid fields map to None.
        """
        return {
            "email": describe_error(self.email) if self.email is not None else None,
            "name": describe_error(self.name) if self.name is not None else None,
            "message": describe_error(self.message) if self.message is not None else None,
        }
