"""
Persistence interfaces used by the services.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol


@dataclass
class Account:
    user_id: str
    email: str
    password_hash: str
    name: Optional[str] = None


@dataclass
class ResetTokenRecord:
    id: str
    user_id: str
    email: str
    token: str
    expires_at: datetime
    created_at: Optional[datetime] = None


class ProjectStore(Protocol):
    """Interface for project documents, keyed by (owner_id, project_id)."""

    def find(self, owner_id: str, project_id: str) -> Optional[Dict[str, Any]]:
        ...

    def title_exists(
        self, owner_id: str, title: str, exclude_project_id: Optional[str] = None
    ) -> bool:
        ...

    def project_ids(self, owner_id: str) -> List[str]:
        ...

    def insert(self, doc: Dict[str, Any]) -> None:
        ...

    def replace(self, owner_id: str, project_id: str, doc: Dict[str, Any]) -> None:
        ...

    def list_by_owner(self, owner_id: str) -> List[Dict[str, Any]]:
        ...

    def delete(self, owner_id: str, project_id: str) -> bool:
        ...


class AccountStore(Protocol):
    """Interface for user accounts."""

    def find_by_email(self, email: str) -> Optional[Account]:
        ...

    def update_password_hash(self, user_id: str, password_hash: str) -> None:
        ...


class ResetTokenStore(Protocol):
    """Interface for password reset tokens."""

    def delete_all_for_email(self, email: str) -> None:
        ...

    def insert(
        self, user_id: str, email: str, token: str, expires_at: datetime
    ) -> ResetTokenRecord:
        ...

    def find_valid(
        self, email: str, token: str, now: datetime
    ) -> Optional[ResetTokenRecord]:
        ...

    def delete_by_id(self, token_id: str) -> None:
        ...

    def delete_expired(self, now: datetime) -> int:
        ...
