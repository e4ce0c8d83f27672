"""Delivery of password reset codes by email."""
import html
import smtplib
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import List, Optional, Protocol

from tocapi.constants import RESET_TOKEN_TTL_MINUTES
from tocapi.stores.base import Account
from tocapi.utils.logger import logger


@dataclass
class NotificationResult:
    """Result of a notification delivery attempt."""
    success: bool
    error: Optional[str] = None


class ResetNotifier(Protocol):
    def send_reset_code(self, account: Account, email: str, token: str) -> NotificationResult:
        ...


def render_reset_email(account: Account, token: str, sender_name: str, ttl_minutes: int = RESET_TOKEN_TTL_MINUTES) -> str:
    """Build the HTML body of a reset code email."""
    greeting = f"<p>Hello {html.escape(account.name)},</p>" if account.name else "<p>Hello,</p>"
    return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h2>Password Reset Request</h2>
            {greeting}
            <p>You requested a password reset. Use this code to reset your password:</p>
            <div style="background-color: #f5f5f5; padding: 20px; text-align: center; font-size: 32px; font-weight: bold; letter-spacing: 4px; margin: 20px 0; border-radius: 8px;">
                {token}
            </div>
            <p>This code will expire in {ttl_minutes} minutes.</p>
            <p>If you didn't request this, please ignore this email.</p>
            <hr style="margin: 30px 0; border: none; border-top: 1px solid #eee;">
            <p style="color: #666; font-size: 12px;">This email was sent by {sender_name}.</p>
        </div>
    """


class SmtpResetNotifier:
    """Sends reset codes through an SMTP relay (Gmail by default)."""

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str],
        password: Optional[str],
        sender_name: str,
        ttl_minutes: int = RESET_TOKEN_TTL_MINUTES,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender_name = sender_name
        self.ttl_minutes = ttl_minutes
        self.timeout = timeout

    def build_message(self, account: Account, email: str, token: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = f'"{self.sender_name}" <{self.username}>'
        message["To"] = email
        message["Subject"] = "Password Reset Code"
        message.set_content(
            f"Your password reset code is {token}. It expires in {self.ttl_minutes} minutes."
        )
        message.add_alternative(
            render_reset_email(account, token, self.sender_name, self.ttl_minutes),
            subtype="html",
        )
        return message

    def send_reset_code(self, account: Account, email: str, token: str) -> NotificationResult:
        """
        Send a reset code email.

        Args:
            account: Account the code was issued for
            email: Recipient address
            token: The reset code

        Returns:
            NotificationResult with success status and error message on failure
        """
        if not self.username:
            return NotificationResult(success=False, error="SMTP username is not configured")

        try:
            message = self.build_message(account, email, token)
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.starttls()
                if self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
            logger.info(f"Sent password reset email to {email}")
            return NotificationResult(success=True)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send password reset email to {email}: {e}", exc_info=True)
            return NotificationResult(success=False, error=str(e))


@dataclass
class SentCode:
    email: str
    token: str
    user_id: str


@dataclass
class InMemoryNotifier:
    """Records reset codes instead of sending them (local development and tests)."""
    sent: List[SentCode] = field(default_factory=list)
    fail_with: Optional[str] = None

    def send_reset_code(self, account: Account, email: str, token: str) -> NotificationResult:
        if self.fail_with:
            return NotificationResult(success=False, error=self.fail_with)
        self.sent.append(SentCode(email=email, token=token, user_id=account.user_id))
        logger.debug(f"Recorded password reset code for {email}")
        return NotificationResult(success=True)
