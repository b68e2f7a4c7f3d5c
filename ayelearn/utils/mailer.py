# ayelearn/utils/mailer.py

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr

from ayelearn.core.config import settings

logger = logging.getLogger(__name__)

RESET_EMAIL_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333; text-align: center;">Password Reset Request</h2>
  <p>Hello,</p>
  <p>You have requested to reset your password for the {portal}.</p>
  <p>Click the button below to reset your password:</p>
  <div style="text-align: center; margin: 30px 0;">
    <a href="{link}" style="background: #667eea; color: white; padding: 12px 30px;
       text-decoration: none; border-radius: 5px; display: inline-block;">Reset Password</a>
  </div>
  <p>This link will expire in {minutes} minutes.</p>
  <p>If you didn't request this password reset, please ignore this email.</p>
  <p>Best regards,<br>{app_name} Team</p>
</div>
"""


class Mailer:
    """Thin SMTP client configured from MAIL_* settings."""

    def __init__(self):
        self.host = settings.mail_host
        self.port = settings.mail_port
        self.username = settings.mail_username
        self.password = settings.mail_password
        self.encryption = settings.mail_encryption

    def _connect(self) -> smtplib.SMTP:
        if self.encryption == "ssl":
            return smtplib.SMTP_SSL(
                self.host, self.port, context=ssl.create_default_context(), timeout=10
            )
        server = smtplib.SMTP(self.host, self.port, timeout=10)
        if self.encryption == "tls":
            server.starttls(context=ssl.create_default_context())
        return server

    def send(self, to: str, subject: str, html: str) -> bool:
        """Send an HTML email. Returns False instead of raising on SMTP failures."""
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = formataddr((settings.mail_from_name, settings.mail_from_address))
        message["To"] = to
        message.set_content("Please view this email in an HTML capable client.")
        message.add_alternative(html, subtype="html")

        try:
            with self._connect() as server:
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email sending error to {to}: {e}")
            return False

        logger.info(f"Email '{subject}' sent to {to}")
        return True

    def send_password_reset_email(self, to: str, reset_link: str, portal: str) -> bool:
        html = RESET_EMAIL_HTML.format(
            portal=portal,
            link=reset_link,
            minutes=settings.password_reset_expiration_minutes,
            app_name=settings.app_name,
        )
        return self.send(to, f"Password Reset Request - {portal}", html)


mailer = Mailer()
