"""SMTP client for relaying contact emails.

Hands assembled messages to the configured SMTP relay. Each send opens its
own connection so concurrent deliveries never share a socket.

Features:
- Plain connections by default, optional STARTTLS
- Optional authentication
- Transient error detection for operator logging
"""

from __future__ import annotations

import smtplib

from contact_service.config import ContactConfig
from contact_service.core.exceptions import SMTPClientError
from contact_service.core.logger import get_logger
from contact_service.models.delivery import OutboundMessage
from contact_service.models.smtp_config import SMTPConfig

logger = get_logger(__name__)


class SMTPClient:
    """SMTP relay client.

    Submits serialized messages to a relay. The client holds only immutable
    configuration, so one instance can be shared by every request.

    Attributes:
        config: SMTP relay configuration.
    """

    def __init__(self, smtp_config: SMTPConfig | None = None) -> None:
        """Initialize SMTP client.

        Args:
            smtp_config: SMTP configuration (uses ContactConfig if None).
        """
        self.config = smtp_config or ContactConfig().get_smtp_config()

        logger.info(
            f"SMTP Client initialized: {self.config.host}:{self.config.port} "
            f"(tls={self.config.use_tls}, auth={self.config.requires_login})"
        )

    def _connect(self) -> smtplib.SMTP:
        """Open a new connection to the relay.

        Returns:
            Connected (and, if configured, authenticated) SMTP session.

        Raises:
            SMTPClientError: If the connection, STARTTLS or login fails.
        """
        logger.debug(f"Connecting to SMTP: {self.config.host}:{self.config.port}")
        try:
            smtp = smtplib.SMTP(
                self.config.host,
                self.config.port,
                timeout=self.config.timeout,
            )
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to establish SMTP connection: {e}")
            raise SMTPClientError(
                f"Failed to connect to SMTP server "
                f"{self.config.host}:{self.config.port}: {e}",
                is_transient=self._is_transient_error(e),
            ) from e

        try:
            if self.config.use_tls:
                logger.debug("Starting TLS...")
                smtp.starttls()

            if self.config.requires_login:
                logger.debug("Authenticating...")
                smtp.login(self.config.username, self.config.password)
        except (smtplib.SMTPException, OSError) as e:
            self._quit(smtp)
            logger.error(f"SMTP session setup failed: {e}")
            raise SMTPClientError(
                f"Failed to set up SMTP session: {e}",
                is_transient=self._is_transient_error(e),
            ) from e

        return smtp

    @staticmethod
    def _quit(smtp: smtplib.SMTP) -> None:
        """Close an SMTP session, ignoring errors from an already dead socket."""
        try:
            smtp.quit()
        except (smtplib.SMTPException, OSError) as e:
            logger.debug(f"Error closing SMTP connection (non-critical): {e}")
            smtp.close()

    def send(self, outbound: OutboundMessage) -> None:
        """Relay a message.

        Makes exactly one attempt. A refusal of any recipient fails the send.

        Args:
            outbound: Assembled message.

        Raises:
            SMTPClientError: If the relay rejects or cannot receive the message,
                or refuses one or more recipients.
        """
        smtp = self._connect()
        try:
            refused = smtp.sendmail(
                outbound.sender,
                list(outbound.recipients),
                outbound.as_bytes(),
            )
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to relay message {outbound.message_id}: {e}")
            raise SMTPClientError(
                f"Failed to relay message {outbound.message_id}: {e}",
                is_transient=self._is_transient_error(e),
            ) from e
        finally:
            self._quit(smtp)

        if refused:
            details = ", ".join(
                f"{address} ({code})" for address, (code, _) in refused.items()
            )
            logger.error(f"Relay refused recipients of {outbound.message_id}: {details}")
            raise SMTPClientError(
                f"Relay refused recipients: {details}",
                is_transient=all(400 <= code < 500 for code, _ in refused.values()),
            )

        logger.debug(
            f"Message {outbound.message_id} relayed to "
            f"{len(outbound.recipients)} recipient(s)"
        )

    @staticmethod
    def _is_transient_error(error: Exception) -> bool:
        """Determine if error is temporary.

        Args:
            error: Exception to analyze.

        Returns:
            True if error is likely transient.
        """
        if isinstance(error, smtplib.SMTPResponseException):
            # 4xx replies are temporary failures
            return 400 <= error.smtp_code < 500

        error_str = str(error).lower()
        transient_keywords = [
            "timeout",
            "timed out",
            "connection",
            "temporarily",
            "try again",
            "unavailable",
            "refused",
            "reset",
            "broken pipe",
        ]
        return any(keyword in error_str for keyword in transient_keywords)
