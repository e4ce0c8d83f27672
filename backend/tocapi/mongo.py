"""MongoDB connection management for project documents."""
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection

from tocapi.utils.logger import logger


class MongoConnection:
    """Owns a MongoClient with an explicit open/close lifecycle."""

    def __init__(
        self,
        uri: str,
        db_name: str,
        collection_name: str = "projects",
        client: Optional[MongoClient] = None,
    ):
        if not uri and client is None:
            raise ValueError("MONGODB_URI is required for MongoConnection")
        self.uri = uri
        self.db_name = db_name
        self.collection_name = collection_name
        self._client = client

    def open(self) -> "MongoConnection":
        if self._client is None:
            logger.info("Initializing MongoDB connection...")
            self._client = MongoClient(self.uri, tz_aware=True)
        return self

    def close(self) -> None:
        if self._client is not None:
            logger.info("Closing MongoDB connection...")
            self._client.close()
            self._client = None

    @property
    def collection(self) -> Collection:
        if self._client is None:
            raise RuntimeError("MongoConnection is not open")
        return self._client[self.db_name][self.collection_name]
