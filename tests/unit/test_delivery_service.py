"""Unit tests for the delivery service.

Tests message assembly, mailbox parsing, archive-before-relay ordering and
error propagation.
"""

from __future__ import annotations

import email
import email.policy
import logging
import shutil
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import pytest

from contact_service.core.exceptions import (
    AddressParseError,
    ArchiveError,
    ContactConfigError,
    MessageAssemblyError,
    SMTPClientError,
)
from contact_service.delivery.service import DeliveryService, parse_mailbox
from contact_service.models.contact import Contact, Email, Message, Name
from contact_service.models.delivery import DeliverySettings


def _parse(data: bytes) -> email.message.EmailMessage:
    return email.message_from_bytes(data, policy=email.policy.default)


def _relayed(relay: MagicMock):
    relay.send.assert_called_once()
    return relay.send.call_args.args[0]


class TestParseMailbox:
    """Tests for parse_mailbox."""

    def test_bare_address(self):
        address = parse_mailbox("bob@example.com")

        assert address.addr_spec == "bob@example.com"
        assert address.display_name == ""

    def test_address_with_display_name(self):
        address = parse_mailbox("Contact Form <contact@example.com>")

        assert address.addr_spec == "contact@example.com"
        assert address.display_name == "Contact Form"

    def test_local_domain_allowed(self):
        assert parse_mailbox("contact@localhost").domain == "localhost"

    @pytest.mark.parametrize("raw,domain", [
        ("a@example.local", "example.local"),
        ("Dev <dev@mail.LOCALHOST>", "mail.LOCALHOST"),
        ("ops@relay.test", "relay.test"),
    ])
    def test_special_use_domains_allowed(self, raw, domain):
        assert parse_mailbox(raw).domain == domain

    @pytest.mark.parametrize("raw", [
        "bad..dots@localhost",
        "a@bad..local",
    ])
    def test_special_use_domains_still_checked(self, raw):
        with pytest.raises(AddressParseError):
            parse_mailbox(raw)

    @pytest.mark.parametrize("raw", [
        "",
        "not-an-address",
        "bob@",
        "@example.com",
        "a@example.com, b@example.com",
    ])
    def test_invalid_mailboxes(self, raw):
        with pytest.raises(AddressParseError) as exc_info:
            parse_mailbox(raw)

        assert exc_info.value.address == raw


class TestDeliveryServiceInit:
    """Tests for DeliveryService construction."""

    def test_creates_archive_dir_at_construction(self, delivery_settings, mock_relay):
        DeliveryService(delivery_settings, relay=mock_relay)

        from pathlib import Path
        assert Path(delivery_settings.archive_dir).is_dir()

    def test_unusable_archive_dir(self, tmp_path, mock_relay):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        settings = DeliverySettings(
            from_address="contact@example.com",
            recipients=("bob@example.com",),
            archive_dir=str(blocker / "emails"),
        )

        with pytest.raises(ContactConfigError):
            DeliveryService(settings, relay=mock_relay)


class TestBuildMessage:
    """Tests for message assembly."""

    def test_headers_and_body(self, delivery_settings, mock_archive, mock_relay, sample_contact):
        service = DeliveryService(delivery_settings, archive=mock_archive, relay=mock_relay)

        outbound = service.build_message(sample_contact)
        parsed = _parse(outbound.as_bytes())

        assert parsed["From"] == "contact@example.com"
        assert parsed["To"] == "bob@example.com, beth@example.com, george@example.org"
        assert parsed["Subject"] == "Shaggy (scooby@mystery.van)"
        assert parsed["Date"] is not None
        assert parsed["Message-ID"] is not None
        assert parsed.get_content().rstrip("\r\n") == "Let's solve some mysteries, dude."

    def test_envelope_addresses(self, delivery_settings, mock_archive, mock_relay, sample_contact, recipients):
        service = DeliveryService(delivery_settings, archive=mock_archive, relay=mock_relay)

        outbound = service.build_message(sample_contact)

        assert outbound.sender == "contact@example.com"
        assert outbound.recipients == recipients

    def test_display_name_sender(self, tmp_path, mock_archive, mock_relay, sample_contact):
        settings = DeliverySettings(
            from_address="Contact Form <contact@example.com>",
            recipients=("bob@example.com",),
            archive_dir=str(tmp_path),
        )
        service = DeliveryService(settings, archive=mock_archive, relay=mock_relay)

        outbound = service.build_message(sample_contact)

        assert _parse(outbound.as_bytes())["From"] == "Contact Form <contact@example.com>"
        assert outbound.sender == "contact@example.com"

    def test_non_ascii_subject_and_body(self, delivery_settings, mock_archive, mock_relay):
        contact = Contact(
            email=Email("zoe@example.com"),
            name=Name("Zoë"),
            message=Message("Ça va? \U0001F44D"),
        )
        service = DeliveryService(delivery_settings, archive=mock_archive, relay=mock_relay)

        parsed = _parse(service.build_message(contact).as_bytes())

        assert parsed["Subject"] == "Zoë (zoe@example.com)"
        assert parsed.get_content().rstrip("\r\n") == "Ça va? \U0001F44D"

    def test_line_breaks_removed_from_subject(self, delivery_settings, mock_archive, mock_relay):
        contact = Contact(
            email=Email("a@example.com"),
            name=Name("Sha\nggy"),
            message=Message("hi"),
        )
        service = DeliveryService(delivery_settings, archive=mock_archive, relay=mock_relay)

        assert service.build_message(contact).subject == "Sha ggy (a@example.com)"

    def test_message_ids_are_unique(self, delivery_settings, mock_archive, mock_relay, sample_contact):
        service = DeliveryService(delivery_settings, archive=mock_archive, relay=mock_relay)

        first = service.build_message(sample_contact)
        second = service.build_message(sample_contact)

        assert first.message_id != second.message_id


class TestDeliver:
    """Tests for the archive-then-relay delivery flow."""

    def test_archives_and_relays_identical_bytes(self, delivery_settings, mock_relay, sample_contact):
        service = DeliveryService(delivery_settings, relay=mock_relay)

        service.deliver(sample_contact)

        archived = list(service._archive.archive_dir.glob("*.eml"))
        assert len(archived) == 1
        outbound = _relayed(mock_relay)
        assert archived[0].read_bytes() == outbound.as_bytes()

    def test_log_names_submitter(self, delivery_settings, mock_relay, sample_contact, caplog):
        service = DeliveryService(delivery_settings, relay=mock_relay)

        with caplog.at_level(logging.INFO, logger="contact_service.delivery"):
            service.deliver(sample_contact)

        assert "submitter=scooby@mystery.van" in caplog.text
        assert "→scooby@mystery.van" not in caplog.text

    def test_archive_happens_before_relay(self, delivery_settings, sample_contact):
        calls = []
        archive = MagicMock()
        archive.send.side_effect = lambda outbound: calls.append(("archive", outbound))
        relay = MagicMock()
        relay.send.side_effect = lambda outbound: calls.append(("relay", outbound))
        service = DeliveryService(delivery_settings, archive=archive, relay=relay)

        service.deliver(sample_contact)

        assert [name for name, _ in calls] == ["archive", "relay"]
        assert calls[0][1] is calls[1][1]

    def test_archive_failure_skips_relay(self, delivery_settings, mock_archive, mock_relay, sample_contact):
        mock_archive.send.side_effect = ArchiveError("disk full", path="/tmp/x.eml")
        service = DeliveryService(delivery_settings, archive=mock_archive, relay=mock_relay)

        with pytest.raises(ArchiveError):
            service.deliver(sample_contact)

        mock_relay.send.assert_not_called()

    def test_missing_archive_dir_skips_relay(self, delivery_settings, mock_relay, sample_contact):
        service = DeliveryService(delivery_settings, relay=mock_relay)
        shutil.rmtree(delivery_settings.archive_dir)

        with pytest.raises(ArchiveError):
            service.deliver(sample_contact)

        mock_relay.send.assert_not_called()

    def test_relay_failure_reported_after_archive(self, delivery_settings, mock_relay, sample_contact):
        mock_relay.send.side_effect = SMTPClientError("Connection refused", is_transient=True)
        service = DeliveryService(delivery_settings, relay=mock_relay)

        with pytest.raises(SMTPClientError):
            service.deliver(sample_contact)

        assert len(list(service._archive.archive_dir.glob("*.eml"))) == 1
        mock_relay.send.assert_called_once()

    def test_refused_recipient_fails_delivery(self, delivery_settings, smtp_config, sample_contact):
        smtp = MagicMock()
        smtp.sendmail.return_value = {"george@example.org": (550, b"No such user")}
        service = DeliveryService(delivery_settings, smtp_config=smtp_config)

        with patch("contact_service.clients.smtp.smtplib.SMTP", return_value=smtp):
            with pytest.raises(SMTPClientError) as exc_info:
                service.deliver(sample_contact)

        assert "george@example.org" in str(exc_info.value)
        assert len(list(service._archive.archive_dir.glob("*.eml"))) == 1

    def test_invalid_sender_touches_no_transport(self, tmp_path, mock_archive, mock_relay, sample_contact):
        settings = DeliverySettings(
            from_address="not-an-address",
            recipients=("bob@example.com",),
            archive_dir=str(tmp_path),
        )
        service = DeliveryService(settings, archive=mock_archive, relay=mock_relay)

        with pytest.raises(AddressParseError) as exc_info:
            service.deliver(sample_contact)

        assert exc_info.value.address == "not-an-address"
        mock_archive.send.assert_not_called()
        mock_relay.send.assert_not_called()

    def test_first_invalid_recipient_reported(self, tmp_path, mock_archive, mock_relay, sample_contact):
        settings = DeliverySettings(
            from_address="contact@example.com",
            recipients=("bob@example.com", "broken@", "also broken"),
            archive_dir=str(tmp_path),
        )
        service = DeliveryService(settings, archive=mock_archive, relay=mock_relay)

        with pytest.raises(AddressParseError) as exc_info:
            service.deliver(sample_contact)

        assert exc_info.value.address == "broken@"
        mock_archive.send.assert_not_called()

    def test_no_recipients(self, tmp_path, mock_archive, mock_relay, sample_contact):
        settings = DeliverySettings(
            from_address="contact@example.com",
            archive_dir=str(tmp_path),
        )
        service = DeliveryService(settings, archive=mock_archive, relay=mock_relay)

        with pytest.raises(MessageAssemblyError):
            service.deliver(sample_contact)

        mock_archive.send.assert_not_called()

    def test_resubmission_sends_twice(self, delivery_settings, mock_relay, sample_contact):
        service = DeliveryService(delivery_settings, relay=mock_relay)

        service.deliver(sample_contact)
        service.deliver(sample_contact)

        assert mock_relay.send.call_count == 2
        assert len(list(service._archive.archive_dir.glob("*.eml"))) == 2

    def test_concurrent_deliveries(self, delivery_settings, mock_relay, sample_contact):
        service = DeliveryService(delivery_settings, relay=mock_relay)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda _: service.deliver(sample_contact), range(20)))

        assert mock_relay.send.call_count == 20
        assert len(list(service._archive.archive_dir.glob("*.eml"))) == 20


class TestFromConfig:
    """Tests for building the service from application settings."""

    def test_from_config(self, tmp_path):
        from contact_service.clients.smtp import SMTPClient
        from contact_service.config import ContactConfig

        config = ContactConfig(
            SMTP_HOST="relay.example.com",
            SMTP_PORT=2525,
            MAIL_FROM="contact@example.com",
            MAIL_RECIPIENTS="bob@example.com,beth@example.com",
            BACKUP_DIR=str(tmp_path / "backup"),
        )

        service = DeliveryService.from_config(config)

        assert service.settings.recipients == ("bob@example.com", "beth@example.com")
        assert (tmp_path / "backup").is_dir()
        assert isinstance(service._relay, SMTPClient)
        assert service._relay.config.host == "relay.example.com"
        assert service._relay.config.port == 2525

    def test_default_sender_delivers(self, tmp_path, monkeypatch, sample_contact):
        """Out-of-the-box MAIL_FROM (contact@localhost) is usable."""
        from contact_service.config import ContactConfig

        monkeypatch.delenv("MAIL_FROM", raising=False)
        config = ContactConfig(
            MAIL_RECIPIENTS="bob@example.com",
            BACKUP_DIR=str(tmp_path / "backup"),
        )
        smtp = MagicMock()
        smtp.sendmail.return_value = {}

        with patch("contact_service.clients.smtp.smtplib.SMTP", return_value=smtp):
            DeliveryService.from_config(config).deliver(sample_contact)

        sender, recipients, payload = smtp.sendmail.call_args.args
        assert sender == "contact@localhost"
        assert recipients == ["bob@example.com"]
        assert _parse(payload)["From"] == "contact@localhost"
        assert len(list((tmp_path / "backup").glob("*.eml"))) == 1
