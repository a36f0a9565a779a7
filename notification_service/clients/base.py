"""Mail transport contract.

Any object with a matching ``send_email`` can be handed to the
NotificationQueue; SMTPClient is the production implementation.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MailTransport(Protocol):
    """Delivers one rendered message per call.

    Implementations raise TransportError on any failure (network,
    authentication, rate limit, timeout) and enforce their own network
    timeout.
    """

    def send_email(
        self,
        recipients: list[str],
        subject: str,
        body_html: str,
        body_text: str | None = None,
    ) -> None: ...
