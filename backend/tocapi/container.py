"""
Dependency wiring for the services.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from tocapi.config import Settings
from tocapi.database import Database
from tocapi.mongo import MongoConnection
from tocapi.services.notifications import InMemoryNotifier, SmtpResetNotifier
from tocapi.services.password_reset import PasswordResetService
from tocapi.services.projects import ProjectService
from tocapi.stores.memory import InMemoryAccountStore, InMemoryProjectStore, InMemoryResetTokenStore
from tocapi.stores.mongo import MongoProjectStore
from tocapi.stores.sql import SqlAccountStore, SqlResetTokenStore
from tocapi.utils.hashing import BcryptPasswordHasher
from tocapi.utils.logger import logger


class ServiceContainer:
    """
    Builds the services and owns their connections.

    Nothing is connected until ``open()``; ``close()`` releases the MongoDB
    client and the SQLAlchemy engine. Also usable as a context manager.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.database: Optional[Database] = None
        self.mongo: Optional[MongoConnection] = None
        self.projects: Optional[ProjectService] = None
        self.password_reset: Optional[PasswordResetService] = None

    def open(self) -> "ServiceContainer":
        settings = self.settings

        if settings.use_in_memory_backends:
            logger.info("Using in-memory backends")
            project_store = InMemoryProjectStore()
            accounts = InMemoryAccountStore()
            tokens = InMemoryResetTokenStore()
            notifier = InMemoryNotifier()
        else:
            try:
                self.mongo = MongoConnection(
                    settings.mongodb_uri,
                    settings.mongodb_db,
                    settings.mongodb_collection_name,
                ).open()
                project_store = MongoProjectStore(self.mongo.collection)
                project_store.ensure_indexes()

                self.database = Database(settings.database_url, settings.environment)
            except Exception:
                logger.error("Failed to open database backends", exc_info=True)
                self.close()
                raise
            accounts = SqlAccountStore(self.database)
            tokens = SqlResetTokenStore(self.database)
            notifier = SmtpResetNotifier(
                host=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_username,
                password=settings.smtp_password,
                sender_name=settings.smtp_sender_name,
                ttl_minutes=settings.reset_token_ttl_minutes,
            )

        self.projects = ProjectService(project_store)
        self.password_reset = PasswordResetService(
            accounts=accounts,
            tokens=tokens,
            notifier=notifier,
            hasher=BcryptPasswordHasher(rounds=settings.bcrypt_rounds),
            token_ttl=timedelta(minutes=settings.reset_token_ttl_minutes),
        )
        return self

    def close(self) -> None:
        if self.mongo is not None:
            self.mongo.close()
            self.mongo = None
        if self.database is not None:
            self.database.close()
            self.database = None
        self.projects = None
        self.password_reset = None

    def __enter__(self) -> "ServiceContainer":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()
