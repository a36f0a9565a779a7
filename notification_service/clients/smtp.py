"""SMTP client for notification delivery.

Sends rendered notifications through Gmail or any compatible SMTP server
and reuses the authenticated connection between messages.

Features:
- Connection reuse with automatic refresh
- STARTTLS encryption
- Multipart emails (HTML + plaintext)
- Transient error detection

Author: Plataforma Docente
Version: 1.1.0
"""

from __future__ import annotations

import smtplib
import threading
import time
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from notification_service.config import NotificationConfig
from notification_service.core.exceptions import TransportError
from notification_service.core.logger import get_logger
from notification_service.models.smtp_config import SMTPConfig

logger = get_logger(__name__)


class SMTPClient:
    """SMTP mail transport with connection reuse.

    Implements the MailTransport contract: ``send_email`` either delivers
    the message or raises TransportError. Calls are blocking; the queue
    runs them in a worker thread, so connection state is guarded by a lock.

    Attributes:
        config: SMTP configuration.
    """

    # Seconds of inactivity after which the cached connection is dropped
    CONNECTION_TIMEOUT = 60

    def __init__(self, smtp_config: SMTPConfig | None = None) -> None:
        """Initialize SMTP client.

        Args:
            smtp_config: SMTP configuration (loaded from NotificationConfig if None).
        """
        if smtp_config:
            self.config = smtp_config
        else:
            config_dict = NotificationConfig().get_smtp_config()
            self.config = SMTPConfig(
                host=str(config_dict["host"]),
                port=int(config_dict["port"]),
                username=str(config_dict["username"]),
                password=str(config_dict["password"]),
                from_email=str(config_dict["from_email"]),
                from_name=str(config_dict["from_name"]),
                use_tls=bool(config_dict["use_tls"]),
                timeout=int(config_dict["timeout"]),
            )

        self._connection: smtplib.SMTP | None = None
        self._last_used: float = 0
        self._lock = threading.Lock()

        logger.info(f"SMTP Client initialized: {self.config.host}:{self.config.port}")

    def _get_connection(self) -> smtplib.SMTP:
        """Get the cached SMTP connection or open a new one.

        Callers hold ``_lock``.

        Raises:
            TransportError: If connection cannot be established.
        """
        now = time.time()

        if self._connection:
            if (now - self._last_used) < self.CONNECTION_TIMEOUT:
                try:
                    if self._connection.noop()[0] == 250:
                        self._last_used = now
                        return self._connection
                except (smtplib.SMTPException, OSError):
                    logger.debug("Stale SMTP connection detected, reconnecting...")
            self._close_connection()

        return self._create_connection()

    def _create_connection(self) -> smtplib.SMTP:
        """Open, secure and authenticate a new SMTP connection.

        Raises:
            TransportError: If connection fails.
        """
        try:
            logger.debug(f"Connecting to SMTP: {self.config.host}:{self.config.port}")
            smtp = smtplib.SMTP(
                self.config.host,
                self.config.port,
                timeout=self.config.timeout,
            )

            if self.config.use_tls:
                smtp.starttls()

            if self.config.username:
                smtp.login(self.config.username, self.config.password)

            self._connection = smtp
            self._last_used = time.time()

            logger.debug("SMTP connection established")
            return smtp

        except Exception as e:
            logger.error(f"Failed to establish SMTP connection: {e}")
            raise TransportError(
                f"Failed to connect to SMTP server: {e}",
                is_transient=self._is_transient_error(e),
            ) from e

    def _close_connection(self) -> None:
        """Close existing SMTP connection, ignoring shutdown errors."""
        if self._connection:
            try:
                self._connection.quit()
            except Exception as e:
                logger.debug(f"Error closing SMTP connection (non-critical): {e}")
            finally:
                self._connection = None
                self._last_used = 0

    def build_message(
        self,
        recipients: list[str],
        subject: str,
        body_html: str,
        body_text: str | None = None,
    ) -> MIMEMultipart:
        """Build the multipart message for one notification."""
        msg = MIMEMultipart("alternative")
        msg["From"] = f'"{self.config.from_name}" <{self.config.from_email}>'
        msg["To"] = ", ".join(recipients)
        msg["Subject"] = subject

        if body_text:
            msg.attach(MIMEText(body_text, "plain", "utf-8"))
        msg.attach(MIMEText(body_html, "html", "utf-8"))
        return msg

    def send_email(
        self,
        recipients: list[str] | str,
        subject: str,
        body_html: str,
        body_text: str | None = None,
    ) -> None:
        """Send one notification via SMTP.

        Args:
            recipients: Recipient address or addresses.
            subject: Email subject line.
            body_html: HTML-formatted email body.
            body_text: Plain-text alternative (optional).

        Raises:
            TransportError: If the message could not be delivered.
        """
        if isinstance(recipients, str):
            recipients = [recipients]
        if not recipients:
            raise TransportError("No recipients given")

        try:
            msg = self.build_message(recipients, subject, body_html, body_text)
            self._send_message(msg, recipients)
            logger.info(f"Email sent to {', '.join(recipients)} - Subject: {subject[:50]}")

        except TransportError:
            raise
        except Exception as e:
            logger.error(f"Failed to send email to {', '.join(recipients)}: {e}", exc_info=True)
            raise TransportError(
                f"Failed to send email: {e}",
                is_transient=self._is_transient_error(e),
            ) from e

    def _send_message(self, msg: MIMEMultipart, recipients: list[str]) -> None:
        """Send over the cached connection, reconnecting once if it went stale.

        The lock is held for the whole SMTP transaction so ``close`` waits
        for an in-flight send instead of quitting under it.
        """
        max_tries = 2

        for attempt in range(max_tries):
            with self._lock:
                try:
                    smtp = self._get_connection()
                    smtp.send_message(
                        msg,
                        from_addr=self.config.from_email,
                        to_addrs=recipients,
                    )
                    return

                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"SMTP send failed (try {attempt + 1}/{max_tries}): {e}")
                    self._close_connection()

                    if attempt == max_tries - 1:
                        raise TransportError(
                            f"Failed to send email after {max_tries} tries: {e}",
                            is_transient=self._is_transient_error(e),
                        ) from e

    def validate_connection(self) -> bool:
        """Test SMTP connection and authentication.

        Returns:
            True if connection successful, False otherwise.
        """
        try:
            logger.info("Testing SMTP connection...")
            with self._lock:
                self._get_connection()
            logger.info("SMTP connection test successful")
            return True

        except TransportError as e:
            logger.error(f"SMTP connection test failed: {e}")
            return False

    def send_test_email(self, test_recipient: str) -> bool:
        """Send a test email to verify configuration.

        Returns:
            True if test email sent successfully, False otherwise.
        """
        try:
            self.send_email(
                recipients=[test_recipient],
                subject="Sistema de Gestión Docente - Correo de prueba",
                body_html="<h1>Correo de prueba</h1><p>Las notificaciones funcionan correctamente.</p>",
                body_text="Correo de prueba\n\nLas notificaciones funcionan correctamente.",
            )
            return True

        except TransportError as e:
            logger.error(f"Test email failed: {e}")
            return False

    def close(self) -> None:
        """Close SMTP connection and cleanup resources."""
        with self._lock:
            self._close_connection()
            logger.debug("SMTP client closed")

    @staticmethod
    def _is_transient_error(error: Exception) -> bool:
        """Determine if an error is likely temporary."""
        if isinstance(error, (TimeoutError, ConnectionError, smtplib.SMTPServerDisconnected)):
            return True
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
            "rate limit",
        ]
        return any(keyword in error_str for keyword in transient_keywords)

    def __enter__(self) -> SMTPClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
