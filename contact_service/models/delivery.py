"""Delivery models.

Defines the delivery settings consumed by the DeliveryService and the
OutboundMessage built once per delivery attempt.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from email.message import EmailMessage
from email.policy import SMTP

from pydantic import BaseModel, Field


class DeliverySettings(BaseModel):
    """Addressing and archive settings for contact delivery.

    Addresses are kept as raw strings here; they are parsed into mailboxes
    on every delivery so a bad address surfaces as a delivery failure.

    Attributes:
        from_address: Sender mailbox ("addr@host" or "Name <addr@host>").
        recipients: Ordered recipient mailboxes.
        archive_dir: Directory receiving one .eml file per delivery.
        subject_format: Subject line format with {name} and {email} fields.
    """

    model_config = {"frozen": True}

    from_address: str = Field(..., description="Sender mailbox")
    recipients: tuple[str, ...] = Field(
        default_factory=tuple, description="Ordered recipient mailboxes"
    )
    archive_dir: str = Field(..., min_length=1, description="Archive directory")
    subject_format: str = Field(
        default="{name} ({email})", description="Subject line format"
    )


@dataclass(frozen=True)
class OutboundMessage:
    """A fully assembled message ready for both transports.

    Built once per delivery; the archive and the relay are handed the same
    serialized bytes.

    Attributes:
        sender: Envelope sender address (addr-spec only).
        recipients: Envelope recipient addresses (addr-spec only), in order.
        message: The assembled RFC 5322 message.
    """

    sender: str
    recipients: tuple[str, ...]
    message: EmailMessage
    _payload: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_payload", self.message.as_bytes(policy=SMTP))

    @property
    def subject(self) -> str:
        return str(self.message["Subject"])

    @property
    def message_id(self) -> str:
        return str(self.message["Message-ID"])

    def as_bytes(self) -> bytes:
        """Serialized message with CRLF line endings."""
        return self._payload
