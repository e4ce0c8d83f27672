from unittest.mock import MagicMock

import pytest
from pymongo import DESCENDING

from tocapi.mongo import MongoConnection
from tocapi.services.projects import ProjectService
from tocapi.stores.mongo import MongoProjectStore

from conftest import OWNER_ID


@pytest.fixture
def collection():
    return MagicMock()


@pytest.fixture
def store(collection):
    return MongoProjectStore(collection)


class TestMongoProjectStore:
    def test_ensure_indexes(self, store, collection):
        store.ensure_indexes()
        [indexes] = collection.create_indexes.call_args.args
        assert len(indexes) == 2
        assert indexes[0].document["unique"] is True
        assert dict(indexes[0].document["key"]) == {"userId": 1, "projectId": 1}

    def test_find_hides_object_id(self, store, collection):
        collection.find_one.return_value = {"projectId": "1"}
        assert store.find(OWNER_ID, "1") == {"projectId": "1"}
        collection.find_one.assert_called_once_with(
            {"userId": OWNER_ID, "projectId": "1"}, projection={"_id": False}
        )

    def test_title_exists_is_case_insensitive_and_escaped(self, store, collection):
        collection.find_one.return_value = None
        assert store.title_exists(OWNER_ID, "Plan (v2)", exclude_project_id="3") is False

        query = collection.find_one.call_args.args[0]
        assert query["projectTitle"] == {"$regex": r"^Plan\ \(v2\)$", "$options": "i"}
        assert query["projectId"] == {"$ne": "3"}

    def test_title_exists_without_exclusion(self, store, collection):
        collection.find_one.return_value = {"_id": "abc"}
        assert store.title_exists(OWNER_ID, "Alpha") is True
        assert "projectId" not in collection.find_one.call_args.args[0]

    def test_project_ids(self, store, collection):
        collection.find.return_value = [{"projectId": "1"}, {"projectId": "2"}, {}]
        assert store.project_ids(OWNER_ID) == ["1", "2"]

    def test_insert_does_not_mutate_document(self, store, collection):
        doc = {"userId": OWNER_ID, "projectId": "1"}
        store.insert(doc)
        inserted = collection.insert_one.call_args.args[0]
        assert inserted == doc
        assert inserted is not doc

    def test_replace(self, store, collection):
        store.replace(OWNER_ID, "1", {"projectTitle": "New"})
        collection.replace_one.assert_called_once_with(
            {"userId": OWNER_ID, "projectId": "1"}, {"projectTitle": "New"}
        )

    def test_list_sorted_newest_first(self, store, collection):
        cursor = collection.find.return_value
        cursor.sort.return_value = [{"projectId": "2"}, {"projectId": "1"}]

        assert store.list_by_owner(OWNER_ID) == [{"projectId": "2"}, {"projectId": "1"}]
        cursor.sort.assert_called_once_with("createdAt", DESCENDING)

    @pytest.mark.parametrize("deleted, expected", [(1, True), (0, False)])
    def test_delete(self, store, collection, deleted, expected):
        collection.delete_one.return_value.deleted_count = deleted
        assert store.delete(OWNER_ID, "1") is expected

    def test_service_update_replaces_document(self, store, collection, clock):
        collection.find_one.return_value = {
            "userId": OWNER_ID,
            "projectId": "1",
            "projectTitle": "Alpha",
            "status": "draft",
            "createdAt": clock(),
            "updatedAt": clock(),
            "tocData": {"projectTitle": "Alpha", "projectAim": "Aim"},
        }
        service = ProjectService(store, clock=clock)

        service.update_project(OWNER_ID, "1", "Alpha", content={"bigPictureGoal": "Goal"})

        filter_, doc = collection.replace_one.call_args.args
        assert filter_ == {"userId": OWNER_ID, "projectId": "1"}
        assert doc["tocData"]["projectAim"] == "Aim"
        assert doc["tocData"]["bigPictureGoal"] == "Goal"


class TestMongoConnection:
    def test_collection_requires_open(self):
        with pytest.raises(RuntimeError):
            MongoConnection("mongodb://localhost", "toc").collection

    def test_uses_given_client(self):
        client = MagicMock()
        connection = MongoConnection("", "toc", "projects", client=client).open()

        assert connection.collection is client["toc"]["projects"]
        connection.close()
        client.close.assert_called_once()

    def test_uri_required_without_client(self):
        with pytest.raises(ValueError):
            MongoConnection("", "toc")
