"""Transport interface shared by the archive and relay clients."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from contact_service.models.delivery import OutboundMessage


@runtime_checkable
class MessageTransport(Protocol):
    """Anything that can take an assembled message somewhere.

    Implementations must be safe to call from several threads at once and
    raise a DeliveryError subclass on failure.
    """

    def send(self, outbound: OutboundMessage) -> Any:
        """Send (or store) the message.

        Args:
            outbound: Assembled message; use outbound.as_bytes() for the payload.

        Raises:
            DeliveryError: If the message could not be handed over.
        """
        ...
