"""Contact delivery service.

Turns a validated Contact into one email, archives it on disk and relays it
over SMTP. The archive write always happens first: a message is never handed
to the relay unless its copy is safely on disk.

Version: 1.0.0
"""

from __future__ import annotations

from email.errors import HeaderParseError
from email.headerregistry import Address
from email.message import EmailMessage
from email.utils import formatdate, getaddresses, make_msgid

from email_validator import SPECIAL_USE_DOMAIN_NAMES, EmailNotValidError, validate_email

from contact_service.clients.archive import FileArchiveClient
from contact_service.clients.base import MessageTransport
from contact_service.clients.smtp import SMTPClient
from contact_service.config import ContactConfig
from contact_service.core.exceptions import (
    AddressParseError,
    DeliveryError,
    MessageAssemblyError,
)
from contact_service.core.logger import get_logger, log_context
from contact_service.models.contact import Contact
from contact_service.models.delivery import DeliverySettings, OutboundMessage
from contact_service.models.smtp_config import SMTPConfig

logger = get_logger(__name__)


def _syntax_form(addr_spec: str) -> str:
    """Rewrite a special-use domain suffix (localhost, .local, ...) to "test".

    email_validator rejects special-use names outright, except "test" in its
    test environment. Only their syntax is checked here.
    """
    local_part, _, domain = addr_spec.rpartition("@")
    lowered = domain.lower()
    for name in SPECIAL_USE_DOMAIN_NAMES:
        if lowered == name or lowered.endswith("." + name):
            return f"{local_part}@{domain[: len(domain) - len(name)]}test"
    return addr_spec


def parse_mailbox(raw: str) -> Address:
    """Parse a configured mailbox string.

    Accepts a bare address ("bob@example.com") or one with a display name
    ("Bob <bob@example.com>"). Special-use domains such as localhost are
    allowed so development relays work.

    Args:
        raw: Mailbox string from configuration.

    Returns:
        Parsed Address.

    Raises:
        AddressParseError: If raw is not exactly one valid mailbox.
    """
    parsed = getaddresses([raw])
    if len(parsed) != 1 or not parsed[0][1]:
        raise AddressParseError(raw, "expected exactly one mailbox")

    display_name, addr_spec = parsed[0]

    try:
        validate_email(
            _syntax_form(addr_spec),
            check_deliverability=False,
            globally_deliverable=False,
            test_environment=True,
        )
    except EmailNotValidError as e:
        raise AddressParseError(raw, str(e)) from e

    try:
        return Address(display_name=display_name, addr_spec=addr_spec)
    except (ValueError, IndexError, HeaderParseError) as e:
        raise AddressParseError(raw, str(e)) from e


class DeliveryService:
    """Delivers validated contacts to the configured recipients.

    Holds immutable settings and two transports. It is shared by all
    requests; each call to deliver() is independent of any other.

    Attributes:
        settings: Addressing and archive settings.
    """

    def __init__(
        self,
        settings: DeliverySettings,
        archive: MessageTransport | None = None,
        relay: MessageTransport | None = None,
        smtp_config: SMTPConfig | None = None,
    ) -> None:
        """Initialize delivery service.

        Args:
            settings: Addressing and archive settings.
            archive: Archive transport (FileArchiveClient on settings.archive_dir
                if None; this creates the directory).
            relay: Relay transport (SMTPClient if None).
            smtp_config: Relay configuration used when relay is None.

        Raises:
            ContactConfigError: If the archive directory cannot be created.
        """
        self.settings = settings
        self._archive = archive or FileArchiveClient(settings.archive_dir)
        self._relay = relay or SMTPClient(smtp_config)

        logger.info(
            f"Delivery service initialized: from={settings.from_address} "
            f"recipients={len(settings.recipients)}"
        )

    @classmethod
    def from_config(cls, config: ContactConfig) -> DeliveryService:
        """Build a service with real transports from application settings."""
        return cls(
            config.get_delivery_settings(),
            smtp_config=config.get_smtp_config(),
        )

    def build_message(self, contact: Contact) -> OutboundMessage:
        """Assemble the outbound message for a contact.

        Args:
            contact: Validated contact.

        Returns:
            OutboundMessage with From, To, Subject, Date, Message-ID and a
            plain-text body.

        Raises:
            AddressParseError: If the sender or a recipient is invalid.
            MessageAssemblyError: If no recipients are configured or the
                message cannot be built.
        """
        sender = parse_mailbox(self.settings.from_address)
        recipients = tuple(parse_mailbox(raw) for raw in self.settings.recipients)

        if not recipients:
            raise MessageAssemblyError("No recipients configured")

        subject = self.settings.subject_format.format(
            name=contact.name,
            email=contact.email,
        )
        # Header values cannot carry line breaks
        subject = " ".join(subject.splitlines())

        message = EmailMessage()
        try:
            message["From"] = sender
            message["To"] = recipients
            message["Subject"] = subject
            message["Date"] = formatdate(localtime=True)
            message["Message-ID"] = make_msgid(domain=sender.domain or None)
            message.set_content(
                str(contact.message),
                charset="utf-8",
                cte="quoted-printable",
            )
        except (ValueError, TypeError) as e:
            raise MessageAssemblyError(f"Unable to build message: {e}") from e

        return OutboundMessage(
            sender=sender.addr_spec,
            recipients=tuple(r.addr_spec for r in recipients),
            message=message,
        )

    def deliver(self, contact: Contact) -> None:
        """Archive and relay one contact message.

        Steps run in order and the first failure stops the rest: build,
        archive, relay. A relay failure is still reported although the
        archived copy exists.

        Args:
            contact: Validated contact.

        Raises:
            DeliveryError: AddressParseError, MessageAssemblyError,
                ArchiveError or SMTPClientError.
        """
        context = log_context(
            "deliver",
            submitter=str(contact.email),
            recipients=len(self.settings.recipients),
        )
        logger.info(f"Processing contact: {context}")

        try:
            outbound = self.build_message(contact)
            logger.info(f"Message built. {outbound.message_id}")

            self._archive.send(outbound)
            logger.info(f"Message archived. {outbound.message_id}")

            self._relay.send(outbound)
            logger.info(f"Message relayed. {outbound.message_id}")

        except DeliveryError as e:
            logger.error(f"Delivery failed ({type(e).__name__}): {e} [{context}]")
            raise
