"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers HTML messages through an SMTP relay. Port 465 uses implicit TLS,
any other port is upgraded with STARTTLS. Delivery errors propagate to the
caller so the domain can undo the operation that triggered the email.
"""

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify your email"
RESET_SUBJECT = "Reset your password"

_VERIFICATION_TEMPLATE = """
<div>
    <h1>Welcome {first_name} {last_name}</h1>
    <p>Verify your account by following this link:</p>
    <a href="{link}">{link}</a>
    <br><hr>
    <b>Thanks for signing up!</b>
</div>
"""

_RESET_TEMPLATE = """
<div>
    <h1>Change your password by following this link:</h1>
    <a href="{link}">{link}</a>
    <br><hr>
    <b>If you did not request this, please contact us!</b>
</div>
"""


class SmtpEmailSender:
    """Implements EmailSender protocol via smtplib."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        sender: str,
        timeout: float = 20,
    ) -> None:
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._sender = sender
        self._timeout = timeout

    def send_verification_link(self, email: str, first_name: str, last_name: str, link: str) -> None:
        body = _VERIFICATION_TEMPLATE.format(
            first_name=html.escape(first_name),
            last_name=html.escape(last_name),
            link=html.escape(link),
        )
        self.send(email, VERIFICATION_SUBJECT, body)

    def send_password_reset_link(self, email: str, link: str) -> None:
        self.send(email, RESET_SUBJECT, _RESET_TEMPLATE.format(link=html.escape(link)))

    def send(self, to_email: str, subject: str, html_content: str) -> None:
        """
        Send one HTML message.

        Raises:
            smtplib.SMTPException, OSError: If the relay cannot be reached
                or rejects the message
        """
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self._sender
        msg["To"] = to_email
        msg.attach(MIMEText(html_content, "html", "utf-8"))

        if self._port == 465:
            server = smtplib.SMTP_SSL(self._host, self._port, timeout=self._timeout)
        else:
            server = smtplib.SMTP(self._host, self._port, timeout=self._timeout)

        # The socket is open once the constructor returns; close it on any failure below.
        with server:
            if self._port != 465:
                server.ehlo()
                server.starttls()
                server.ehlo()
            if self._user:
                server.login(self._user, self._password)
            server.sendmail(self._sender, [to_email], msg.as_string())

        logger.info("Email '%s' sent to %s", subject, to_email)
