"""
SQLAlchemy-backed account and reset token stores (Supabase Postgres).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select

from tocapi.database import Database
from tocapi.models import PasswordResetToken, User
from tocapi.stores.base import Account, ResetTokenRecord


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlAccountStore:
    """Accounts stored in the ``users`` table."""

    def __init__(self, database: Database):
        self.database = database

    def find_by_email(self, email: str) -> Optional[Account]:
        with self.database.session() as db:
            user = db.execute(
                select(User).where(User.email == email.lower())
            ).scalar_one_or_none()
            if not user:
                return None
            return Account(
                user_id=str(user.id),
                email=user.email,
                password_hash=user.password_hash,
                name=user.name,
            )

    def update_password_hash(self, user_id: str, password_hash: str) -> None:
        with self.database.session() as db:
            user = db.get(User, uuid.UUID(user_id))
            if not user:
                raise LookupError(f"User not found: {user_id}")
            user.password_hash = password_hash
            db.commit()


class SqlResetTokenStore:
    """Reset codes stored in the ``password_reset_tokens`` table."""

    def __init__(self, database: Database):
        self.database = database

    @staticmethod
    def _to_record(row: PasswordResetToken) -> ResetTokenRecord:
        return ResetTokenRecord(
            id=str(row.id),
            user_id=str(row.user_id),
            email=row.email,
            token=row.token,
            expires_at=_as_utc(row.expires_at),
            created_at=_as_utc(row.created_at),
        )

    def delete_all_for_email(self, email: str) -> None:
        with self.database.session() as db:
            db.execute(delete(PasswordResetToken).where(PasswordResetToken.email == email))
            db.commit()

    def insert(
        self, user_id: str, email: str, token: str, expires_at: datetime
    ) -> ResetTokenRecord:
        with self.database.session() as db:
            row = PasswordResetToken(
                user_id=uuid.UUID(user_id),
                email=email,
                token=token,
                expires_at=expires_at,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._to_record(row)

    def find_valid(
        self, email: str, token: str, now: datetime
    ) -> Optional[ResetTokenRecord]:
        with self.database.session() as db:
            stmt = (
                select(PasswordResetToken)
                .where(
                    PasswordResetToken.email == email,
                    PasswordResetToken.token == token,
                    PasswordResetToken.expires_at > now,
                )
                .order_by(PasswordResetToken.id.desc())
                .limit(1)
            )
            row = db.execute(stmt).scalar_one_or_none()
            return self._to_record(row) if row else None

    def delete_by_id(self, token_id: str) -> None:
        with self.database.session() as db:
            db.execute(delete(PasswordResetToken).where(PasswordResetToken.id == int(token_id)))
            db.commit()

    def delete_expired(self, now: datetime) -> int:
        with self.database.session() as db:
            result = db.execute(
                delete(PasswordResetToken).where(PasswordResetToken.expires_at <= now)
            )
            db.commit()
            return result.rowcount or 0
