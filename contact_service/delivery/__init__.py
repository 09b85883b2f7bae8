"""Delivery module for contact service.

Archives and relays validated contacts.
"""

from contact_service.delivery.service import DeliveryService, parse_mailbox

__all__ = ["DeliveryService", "parse_mailbox"]
