"""
MongoDB-backed project store.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING, IndexModel
from pymongo.collection import Collection


class MongoProjectStore:
    """Project documents in a MongoDB collection, keyed by (userId, projectId)."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        self.collection.create_indexes([
            IndexModel([("userId", ASCENDING), ("projectId", ASCENDING)], unique=True),
            IndexModel([("userId", ASCENDING), ("createdAt", DESCENDING)]),
        ])

    def find(self, owner_id: str, project_id: str) -> Optional[Dict[str, Any]]:
        return self.collection.find_one(
            {"userId": owner_id, "projectId": project_id},
            projection={"_id": False},
        )

    def title_exists(
        self, owner_id: str, title: str, exclude_project_id: Optional[str] = None
    ) -> bool:
        query: Dict[str, Any] = {
            "userId": owner_id,
            "projectTitle": {"$regex": f"^{re.escape(title)}$", "$options": "i"},
        }
        if exclude_project_id:
            query["projectId"] = {"$ne": exclude_project_id}
        return self.collection.find_one(query, projection={"_id": True}) is not None

    def project_ids(self, owner_id: str) -> List[str]:
        cursor = self.collection.find({"userId": owner_id}, projection={"projectId": True, "_id": False})
        return [doc["projectId"] for doc in cursor if "projectId" in doc]

    def insert(self, doc: Dict[str, Any]) -> None:
        # insert_one adds _id to the dict it is given
        self.collection.insert_one(dict(doc))

    def replace(self, owner_id: str, project_id: str, doc: Dict[str, Any]) -> None:
        self.collection.replace_one({"userId": owner_id, "projectId": project_id}, doc)

    def list_by_owner(self, owner_id: str) -> List[Dict[str, Any]]:
        cursor = self.collection.find(
            {"userId": owner_id}, projection={"_id": False}
        ).sort("createdAt", DESCENDING)
        return list(cursor)

    def delete(self, owner_id: str, project_id: str) -> bool:
        result = self.collection.delete_one({"userId": owner_id, "projectId": project_id})
        return result.deleted_count > 0
