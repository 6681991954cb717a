"""Disease REST resource — status codes, headers and identifier checks.

Invariants:
    - Create with an id → 400 idexists, service never called
    - Update without an id → 400 idnull, service never called
    - Location of a created disease is <api>/diseases/<id>
    - List and search always send X-Total-Count and Link
    - Delete is acknowledged with 200 even for an absent id
    - Ids and page numbers outside SQLite's integer range → 400, never 500
"""

import pytest

from amachou_api.app.core.pagination import MAX_PAGE_NUMBER
from amachou_api.app.services.disease_service import get_disease_service

ALERT = "X-amachouApp-alert"
PARAMS = "X-amachouApp-params"
ERROR = "X-amachouApp-error"


class RecordingService:
    """Stands in for DiseaseService and records every call."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.calls.append(name)
            raise AssertionError(f"service.{name} should not be called")
        return record


@pytest.fixture
def recording_service(app):
    fake = RecordingService()
    app.dependency_overrides[get_disease_service] = lambda: fake
    return fake


def _create(client, name, description=None):
    body = {"name": name}
    if description is not None:
        body["description"] = description
    res = client.post("/api/diseases", json=body)
    assert res.status_code == 201
    return res.json()


# ─── Create ─────────────────────────────────────────────────────


def test_create_returns_201_with_location_and_alert(client):
    res = client.post("/api/diseases", json={"name": "flu"})

    assert res.status_code == 201
    body = res.json()
    assert body == {"id": 1, "name": "flu", "description": None}
    assert res.headers["Location"] == "/api/diseases/1"
    assert res.headers[ALERT] == "amachouApp.disease.created"
    assert res.headers[PARAMS] == "1"


def test_create_location_matches_returned_id(client):
    _create(client, "measles")
    res = client.post("/api/diseases", json={"name": "mumps"})
    assert res.headers["Location"] == f"/api/diseases/{res.json()['id']}"


def test_create_with_id_is_rejected(client, recording_service):
    res = client.post("/api/diseases", json={"id": 7, "name": "flu"})

    assert res.status_code == 400
    assert res.headers["content-type"].startswith("application/problem+json")
    body = res.json()
    assert body["errorKey"] == "idexists"
    assert body["entityName"] == "disease"
    assert body["message"] == "error.idexists"
    assert res.headers[ERROR] == "error.idexists"
    assert res.headers[PARAMS] == "disease"
    assert recording_service.calls == []


def test_create_without_name_is_a_validation_error(client):
    res = client.post("/api/diseases", json={"description": "no name"})

    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "error.validation"
    assert any(err["field"] == "name" for err in body["fieldErrors"])


def test_create_with_blank_name_is_a_validation_error(client):
    res = client.post("/api/diseases", json={"name": "   "})
    assert res.status_code == 400


# ─── Update ─────────────────────────────────────────────────────


def test_update_without_id_is_rejected(client, recording_service):
    res = client.put("/api/diseases", json={"name": "flu"})

    assert res.status_code == 400
    body = res.json()
    assert body["errorKey"] == "idnull"
    assert body["message"] == "error.idnull"
    assert res.headers[ERROR] == "error.idnull"
    assert recording_service.calls == []


def test_update_returns_updated_disease(client):
    created = _create(client, "flu")

    res = client.put(
        "/api/diseases",
        json={"id": created["id"], "name": "influenza", "description": "seasonal"},
    )

    assert res.status_code == 200
    assert res.json() == {"id": created["id"], "name": "influenza", "description": "seasonal"}
    assert res.headers[ALERT] == "amachouApp.disease.updated"
    assert res.headers[PARAMS] == str(created["id"])
    assert client.get(f"/api/diseases/{created['id']}").json()["name"] == "influenza"


def test_update_unknown_id_returns_404(client):
    res = client.put("/api/diseases", json={"id": 999, "name": "ghost"})
    assert res.status_code == 404


# ─── Get / Delete ───────────────────────────────────────────────


def test_get_unknown_id_returns_404(client):
    res = client.get("/api/diseases/42")
    assert res.status_code == 404
    assert res.json()["status"] == 404


def test_get_non_numeric_id_is_rejected(client):
    res = client.get("/api/diseases/abc")
    assert res.status_code == 400


def test_delete_twice_succeeds_both_times(client):
    created = _create(client, "flu")

    first = client.delete(f"/api/diseases/{created['id']}")
    second = client.delete(f"/api/diseases/{created['id']}")

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.headers[ALERT] == "amachouApp.disease.deleted"
    assert first.headers[PARAMS] == str(created["id"])


def test_full_lifecycle(client):
    res = client.post("/api/diseases", json={"name": "flu"})
    assert res.status_code == 201
    assert res.json() == {"id": 1, "name": "flu", "description": None}
    assert res.headers["Location"] == "/api/diseases/1"

    res = client.get("/api/diseases/1")
    assert res.status_code == 200
    assert res.json() == {"id": 1, "name": "flu", "description": None}

    assert client.delete("/api/diseases/1").status_code == 200
    assert client.get("/api/diseases/1").status_code == 404


def test_ids_beyond_sqlite_range_are_rejected(client):
    too_big = 2**63

    assert client.get(f"/api/diseases/{too_big}").status_code == 400
    assert client.delete(f"/api/diseases/{too_big}").status_code == 400
    assert client.get(f"/api/diseases/{-too_big - 1}").status_code == 400

    res = client.put("/api/diseases", json={"id": too_big, "name": "flu"})
    assert res.status_code == 400
    assert res.json()["message"] == "error.validation"


def test_largest_sqlite_id_is_a_plain_404(client):
    assert client.get(f"/api/diseases/{2**63 - 1}").status_code == 404


# ─── List ───────────────────────────────────────────────────────


def test_list_empty_still_has_pagination_headers(client):
    res = client.get("/api/diseases")

    assert res.status_code == 200
    assert res.json() == []
    assert res.headers["X-Total-Count"] == "0"
    assert res.headers["Link"] == (
        '</api/diseases?page=0&size=20>; rel="last",'
        '</api/diseases?page=0&size=20>; rel="first"'
    )


def test_list_pages_through_results(client):
    for name in ("a", "b", "c"):
        _create(client, name)

    first = client.get("/api/diseases", params={"page": 0, "size": 2})
    second = client.get("/api/diseases", params={"page": 1, "size": 2})

    assert [d["name"] for d in first.json()] == ["a", "b"]
    assert [d["name"] for d in second.json()] == ["c"]
    assert first.headers["X-Total-Count"] == "3"
    assert '</api/diseases?page=1&size=2>; rel="next"' in first.headers["Link"]
    assert 'rel="prev"' not in first.headers["Link"]
    assert '</api/diseases?page=0&size=2>; rel="prev"' in second.headers["Link"]
    assert 'rel="next"' not in second.headers["Link"]


def test_list_sorts_by_requested_field(client):
    for name in ("beta", "alpha", "gamma"):
        _create(client, name)

    res = client.get("/api/diseases", params={"sort": "name,desc"})

    assert [d["name"] for d in res.json()] == ["gamma", "beta", "alpha"]


def test_list_ignores_unknown_sort_field(client):
    for name in ("beta", "alpha"):
        _create(client, name)

    res = client.get("/api/diseases", params={"sort": "created_by;drop,desc"})

    assert res.status_code == 200
    assert [d["name"] for d in res.json()] == ["beta", "alpha"]


def test_list_rejects_page_size_above_maximum(client):
    res = client.get("/api/diseases", params={"size": 5000})
    assert res.status_code == 400


def test_list_rejects_page_whose_offset_overflows(client):
    res = client.get("/api/diseases", params={"page": 10**19})
    assert res.status_code == 400


def test_list_accepts_largest_page_number(client):
    res = client.get("/api/diseases", params={"page": MAX_PAGE_NUMBER, "size": 2000})

    assert res.status_code == 200
    assert res.json() == []
    assert res.headers["X-Total-Count"] == "0"


# ─── Search ─────────────────────────────────────────────────────


def test_search_ranks_matches_and_keeps_query_in_links(client):
    flu = _create(client, "flu")
    _create(client, "Avian influenza")
    measles = _create(client, "Measles", "rash and fever")

    res = client.get("/api/_search/diseases", params={"query": "fever flu", "size": 1})

    assert res.status_code == 200
    assert [d["id"] for d in res.json()] == [flu["id"]]
    assert res.headers["X-Total-Count"] == "2"
    link = res.headers["Link"]
    assert '</api/_search/diseases?page=1&size=1&query=fever+flu>; rel="next"' in link
    assert '</api/_search/diseases?page=0&size=1&query=fever+flu>; rel="first"' in link

    second = client.get("/api/_search/diseases", params={"query": "fever flu", "size": 1, "page": 1})
    assert [d["id"] for d in second.json()] == [measles["id"]]


def test_search_prefix_term(client):
    _create(client, "flu")
    influenza = _create(client, "Avian influenza")

    res = client.get("/api/_search/diseases", params={"query": "influ*"})

    assert [d["id"] for d in res.json()] == [influenza["id"]]


def test_search_without_matches_has_pagination_headers(client):
    _create(client, "flu")

    res = client.get("/api/_search/diseases", params={"query": "cholera"})

    assert res.status_code == 200
    assert res.json() == []
    assert res.headers["X-Total-Count"] == "0"
    assert "query=cholera" in res.headers["Link"]


def test_search_does_not_return_deleted_disease(client):
    created = _create(client, "flu")
    client.delete(f"/api/diseases/{created['id']}")

    res = client.get("/api/_search/diseases", params={"query": "flu"})

    assert res.json() == []


def test_search_reflects_updates(client):
    created = _create(client, "flu")
    client.put("/api/diseases", json={"id": created["id"], "name": "cholera"})

    assert client.get("/api/_search/diseases", params={"query": "flu"}).json() == []
    assert len(client.get("/api/_search/diseases", params={"query": "cholera"}).json()) == 1


def test_search_with_more_than_a_thousand_terms(client):
    created = _create(client, "w1150")

    query = " ".join(f"w{i}" for i in range(1200))
    res = client.get("/api/_search/diseases", params={"query": query})

    assert res.status_code == 200
    assert [d["id"] for d in res.json()] == [created["id"]]


def test_search_requires_query(client):
    res = client.get("/api/_search/diseases")
    assert res.status_code == 400


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
