"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging verification and reset links for development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints links to stdout.
    """

    def send_verification_link(self, email: str, first_name: str, last_name: str, link: str) -> None:
        """
        Log the verification link (simulates email delivery).

        The link is logged at INFO level to be visible in container logs.
        """
        logger.info("[VERIFICATION] Email: %s Link: %s", email, link)

    def send_password_reset_link(self, email: str, link: str) -> None:
        """Log the password reset link (simulates email delivery)."""
        logger.info("[PASSWORD_RESET] Email: %s Link: %s", email, link)
