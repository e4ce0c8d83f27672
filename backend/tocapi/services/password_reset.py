"""Password reset by emailed one-time code.

A reset request always gets the same answer whether or not the email belongs
to an account. Codes live for a fixed TTL, only the latest code per email is
kept, and a code is deleted as soon as it has been used.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol

from tocapi.constants import (
    INVALID_RESET_TOKEN_MESSAGE,
    RESET_REQUEST_ACCEPTED_MESSAGE,
    RESET_SUCCESS_MESSAGE,
    RESET_TOKEN_TTL_MINUTES,
)
from tocapi.services.notifications import ResetNotifier
from tocapi.stores.base import Account, AccountStore, ResetTokenStore
from tocapi.utils.clock import utc_now
from tocapi.utils.exceptions import InvalidTokenError, ValidationError
from tocapi.utils.hashing import generate_reset_token
from tocapi.utils.logger import logger
from tocapi.utils.validation import validate_email, validate_password


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str:
        ...


@dataclass
class ResetRequestResult:
    accepted: bool
    message: str


@dataclass
class ResetResult:
    success: bool
    message: str


class PasswordResetService:
    """Issues, verifies and consumes password reset codes."""

    def __init__(
        self,
        accounts: AccountStore,
        tokens: ResetTokenStore,
        notifier: ResetNotifier,
        hasher: PasswordHasher,
        clock: Callable[[], datetime] = utc_now,
        token_ttl: timedelta = timedelta(minutes=RESET_TOKEN_TTL_MINUTES),
        token_factory: Callable[[], str] = generate_reset_token,
    ):
        self.accounts = accounts
        self.tokens = tokens
        self.notifier = notifier
        self.hasher = hasher
        self.clock = clock
        self.token_ttl = token_ttl
        self.token_factory = token_factory

    def request_reset(self, email: Optional[str]) -> ResetRequestResult:
        """
        Issue a reset code for an email address.

        The response is identical whether or not an account exists, and
        delivery failures are only logged.

        Args:
            email: Email address of the account

        Returns:
            Generic acceptance result

        Raises:
            ValidationError: If the email is missing or malformed
        """
        validate_email(email)
        normalized = email.lower()

        account = self.accounts.find_by_email(normalized)
        if account is None:
            logger.info("Password reset requested for an unknown email")
            return ResetRequestResult(accepted=True, message=RESET_REQUEST_ACCEPTED_MESSAGE)

        token = self.token_factory()
        self.tokens.delete_all_for_email(normalized)
        self.tokens.insert(
            user_id=account.user_id,
            email=normalized,
            token=token,
            expires_at=self.clock() + self.token_ttl,
        )
        logger.info(f"Issued password reset code for user {account.user_id}")

        self._deliver(account, normalized, token)
        return ResetRequestResult(accepted=True, message=RESET_REQUEST_ACCEPTED_MESSAGE)

    def _deliver(self, account: Account, email: str, token: str) -> None:
        # Delivery problems must never change the response of request_reset
        try:
            result = self.notifier.send_reset_code(account, email, token)
        except Exception as e:
            logger.error(f"Password reset email delivery raised for user {account.user_id}: {e}", exc_info=True)
            return

        if result.success:
            logger.info("Password reset email sent successfully")
        else:
            logger.error(f"Failed to send password reset email: {result.error}")

    def verify_and_reset(
        self, email: Optional[str], token: Optional[str], new_password: Optional[str]
    ) -> ResetResult:
        """
        Check a reset code and set a new password.

        The code is deleted only after the password has been stored.

        Args:
            email: Email address the code was sent to
            token: The reset code (case-insensitive)
            new_password: Replacement password

        Returns:
            Success result

        Raises:
            ValidationError: If input is missing or the password is too weak
            InvalidTokenError: If the code is wrong, belongs to another email, or expired
        """
        validate_email(email)
        if not token or not new_password:
            raise ValidationError("Token and new password are required")

        record = self.tokens.find_valid(email.lower(), token.upper(), self.clock())
        if record is None:
            raise InvalidTokenError(INVALID_RESET_TOKEN_MESSAGE)

        validate_password(new_password)

        self.accounts.update_password_hash(record.user_id, self.hasher.hash(new_password))
        self.tokens.delete_by_id(record.id)

        logger.info(f"Password reset completed for user {record.user_id}")
        return ResetResult(success=True, message=RESET_SUCCESS_MESSAGE)

    def purge_expired_tokens(self) -> int:
        """Delete reset codes whose expiry has passed. Returns the number removed."""
        removed = self.tokens.delete_expired(self.clock())
        if removed:
            logger.info(f"Purged {removed} expired password reset tokens")
        return removed
