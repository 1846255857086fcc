"""End-to-end tests of the protocol service on raw payloads.

These run complete request/response exchanges through the request
model, dispatcher and codec, without any network I/O.
"""

import json
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from catserver.adapters.store.memory import InMemoryCategoryStore
from catserver.core.dispatcher import Dispatcher
from catserver.core.protocol_service import ProtocolService

DATE = 1700000000


@pytest.fixture
def store() -> InMemoryCategoryStore:
    return InMemoryCategoryStore()


@pytest.fixture
def service(store: InMemoryCategoryStore) -> ProtocolService:
    return ProtocolService(Dispatcher(store))


def call(service: ProtocolService, **fields) -> dict:
    response = service.handle(json.dumps(fields).encode())
    return json.loads(response)


class TestEnvelopes:
    def test_missing_method(self, service: ProtocolService) -> None:
        response = call(service, date=DATE, path="/api/categories")
        assert response == {"status": "4 missing method, missing date", "body": None}

    def test_missing_date(self, service: ProtocolService) -> None:
        response = call(service, method="read", path="/api/categories")
        assert response["status"] == "4 missing method, missing date"

    def test_illegal_date(self, service: ProtocolService) -> None:
        response = call(service, method="read", path="/api/categories", date="soon")
        assert response == {"status": "4 illegal date", "body": None}

    def test_date_checked_before_method(self, service: ProtocolService) -> None:
        response = call(service, method="fly", date="soon")
        assert response["status"] == "4 illegal date"

    def test_illegal_method(self, service: ProtocolService) -> None:
        response = call(service, method="fly", date=DATE)
        assert response["status"] == "4 illegal method"

    def test_malformed_payload(self, service: ProtocolService) -> None:
        response = json.loads(service.handle(b"this is not json"))
        assert response["status"].startswith("6 error: ")
        assert response["body"] is None

    def test_echo(self, service: ProtocolService) -> None:
        response = call(service, method="echo", date=DATE, body="hello")
        assert response == {"status": "1 Ok", "body": "hello"}

    def test_read_bad_id(self, service: ProtocolService) -> None:
        response = call(service, method="read", date=DATE, path="/api/categories/abc")
        assert response["status"] == "4 bad request"

    def test_update_and_delete_unknown_id(self, service: ProtocolService) -> None:
        update = call(
            service,
            method="update",
            date=DATE,
            path="/api/categories/9999",
            body=json.dumps({"name": "x"}),
        )
        delete = call(service, method="delete", date=DATE, path="/api/categories/9999")
        assert update["status"] == "5 not found"
        assert delete["status"] == "5 not found"

    def test_oversized_date_is_illegal(self, service: ProtocolService) -> None:
        response = call(service, method="read", path="/api/categories", date="9" * 5000)
        assert response == {"status": "4 illegal date", "body": None}

    @pytest.mark.parametrize("method", ["read", "update", "delete"])
    def test_oversized_id_is_bad_request(self, service: ProtocolService, method: str) -> None:
        response = call(
            service,
            method=method,
            date=DATE,
            path="/api/categories/" + "9" * 5000,
            body=json.dumps({"name": "x"}),
        )
        assert response == {"status": "4 bad request", "body": None}

    def test_unexpected_error_becomes_code_6(self, service: ProtocolService) -> None:
        with patch.object(service.dispatcher, "dispatch", side_effect=RuntimeError("boom")):
            response = call(service, method="read", date=DATE, path="/api/categories")
        assert response == {"status": "6 error: boom", "body": None}


class TestCategoryLifecycle:
    def test_create_read_update_delete(self, service: ProtocolService) -> None:
        created = call(
            service,
            method="create",
            date=DATE,
            path="/api/categories",
            body=json.dumps({"name": "Spices"}),
        )
        assert created["status"] == "2 Created"
        record = json.loads(created["body"])
        assert record == {"cid": 4, "name": "Spices"}

        read = call(service, method="read", date=DATE, path="/api/categories/4")
        assert read["status"] == "1 Ok"
        assert json.loads(read["body"]) == record

        updated = call(
            service,
            method="update",
            date=DATE,
            path="/api/categories/4",
            body=json.dumps({"name": "Herbs"}),
        )
        assert updated == {"status": "3 Updated", "body": "Updated"}

        deleted = call(service, method="delete", date=DATE, path="/api/categories/4")
        assert deleted == {"status": "1 Ok", "body": "Ok"}

        listing = call(service, method="read", date=DATE, path="/api/categories")
        assert [c["cid"] for c in json.loads(listing["body"])] == [1, 2, 3]

    def test_ids_are_not_reused_after_delete(self, service: ProtocolService) -> None:
        call(service, method="delete", date=DATE, path="/api/categories/2")
        created = call(
            service,
            method="create",
            date=DATE,
            path="/api/categories",
            body=json.dumps({"name": "Produce"}),
        )
        assert json.loads(created["body"])["cid"] == 4

        listing = json.loads(call(service, method="read", date=DATE, path="/api/categories")["body"])
        cids = [c["cid"] for c in listing]
        assert len(cids) == len(set(cids))


class TestConcurrency:
    def test_concurrent_creates_get_unique_ids(
        self, service: ProtocolService, store: InMemoryCategoryStore
    ) -> None:
        body = json.dumps({"name": "Concurrent"})
        payload = json.dumps(
            {"method": "create", "date": DATE, "path": "/api/categories", "body": body}
        ).encode()

        with ThreadPoolExecutor(max_workers=16) as pool:
            responses = list(pool.map(lambda _: service.handle(payload), range(200)))

        cids = [json.loads(json.loads(r)["body"])["cid"] for r in responses]
        assert len(set(cids)) == 200
        assert store.count() == 203
