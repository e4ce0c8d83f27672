"""
In-memory store implementations for local development and tests.
"""

from __future__ import annotations

import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from tocapi.stores.base import Account, ResetTokenRecord


class InMemoryProjectStore:
    """Project documents held in a dict keyed by (owner_id, project_id)."""

    def __init__(self):
        self.docs: Dict[tuple[str, str], Dict[str, Any]] = {}

    def find(self, owner_id: str, project_id: str) -> Optional[Dict[str, Any]]:
        doc = self.docs.get((owner_id, project_id))
        return copy.deepcopy(doc) if doc else None

    def title_exists(
        self, owner_id: str, title: str, exclude_project_id: Optional[str] = None
    ) -> bool:
        wanted = title.lower()
        for (doc_owner, project_id), doc in self.docs.items():
            if doc_owner != owner_id or project_id == exclude_project_id:
                continue
            if str(doc.get("projectTitle", "")).lower() == wanted:
                return True
        return False

    def project_ids(self, owner_id: str) -> List[str]:
        return [project_id for (doc_owner, project_id) in self.docs if doc_owner == owner_id]

    def insert(self, doc: Dict[str, Any]) -> None:
        self.docs[(doc["userId"], doc["projectId"])] = copy.deepcopy(doc)

    def replace(self, owner_id: str, project_id: str, doc: Dict[str, Any]) -> None:
        if (owner_id, project_id) in self.docs:
            self.docs[(owner_id, project_id)] = copy.deepcopy(doc)

    def list_by_owner(self, owner_id: str) -> List[Dict[str, Any]]:
        docs = [copy.deepcopy(doc) for (doc_owner, _), doc in self.docs.items() if doc_owner == owner_id]
        return sorted(docs, key=lambda doc: doc["createdAt"], reverse=True)

    def delete(self, owner_id: str, project_id: str) -> bool:
        return self.docs.pop((owner_id, project_id), None) is not None


class InMemoryAccountStore:
    """User accounts keyed by lowercase email."""

    def __init__(self):
        self.accounts: Dict[str, Account] = {}

    def add_account(self, email: str, password_hash: str, name: Optional[str] = None) -> Account:
        account = Account(
            user_id=uuid.uuid4().hex,
            email=email.lower(),
            password_hash=password_hash,
            name=name,
        )
        self.accounts[account.email] = account
        return account

    def find_by_email(self, email: str) -> Optional[Account]:
        account = self.accounts.get(email.lower())
        return copy.copy(account) if account else None

    def update_password_hash(self, user_id: str, password_hash: str) -> None:
        for account in self.accounts.values():
            if account.user_id == user_id:
                account.password_hash = password_hash
                return
        raise LookupError(f"Account not found: {user_id}")


class InMemoryResetTokenStore:
    """Password reset tokens keyed by record id."""

    def __init__(self):
        self.tokens: Dict[str, ResetTokenRecord] = {}

    def delete_all_for_email(self, email: str) -> None:
        for token_id in [t.id for t in self.tokens.values() if t.email == email]:
            del self.tokens[token_id]

    def insert(
        self, user_id: str, email: str, token: str, expires_at: datetime
    ) -> ResetTokenRecord:
        record = ResetTokenRecord(
            id=uuid.uuid4().hex,
            user_id=user_id,
            email=email,
            token=token,
            expires_at=expires_at,
            created_at=datetime.now(timezone.utc),
        )
        self.tokens[record.id] = record
        return copy.copy(record)

    def find_valid(
        self, email: str, token: str, now: datetime
    ) -> Optional[ResetTokenRecord]:
        matches = [
            t for t in self.tokens.values()
            if t.email == email and t.token == token and t.expires_at > now
        ]
        if not matches:
            return None
        return copy.copy(max(matches, key=lambda t: t.created_at))

    def delete_by_id(self, token_id: str) -> None:
        self.tokens.pop(token_id, None)

    def delete_expired(self, now: datetime) -> int:
        expired = [t.id for t in self.tokens.values() if t.expires_at <= now]
        for token_id in expired:
            del self.tokens[token_id]
        return len(expired)
