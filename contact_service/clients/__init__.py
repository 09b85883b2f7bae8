"""Clients module for contact service.

Contains the two message transports: the local file archive and the SMTP relay.
"""

from contact_service.clients.archive import FileArchiveClient
from contact_service.clients.base import MessageTransport
from contact_service.clients.smtp import SMTPClient

__all__ = ["FileArchiveClient", "MessageTransport", "SMTPClient"]
