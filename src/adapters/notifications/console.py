"""
Console confirmation sender adapter - Implements ConfirmationSender protocol.

This module provides a console-based implementation of the domain's
confirmation port, logging the voucher and links for demo purposes.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleConfirmationSender:
    """
    Implements ConfirmationSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def send_confirmation(
        self, email: str, voucher_code: str, activation_url: str, confirmation_url: str
    ) -> None:
        """
        Log the attendee's voucher and links (simulates email delivery).

        Logged at INFO level so the voucher is visible in container logs.
        """
        logger.info(
            "[CONFIRMATION] Email: %s Voucher: %s Activate: %s Confirmation: %s",
            email,
            voucher_code,
            activation_url,
            confirmation_url,
        )
