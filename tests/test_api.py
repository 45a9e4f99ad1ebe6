import pytest
from fastapi.testclient import TestClient

from pairmap.api import cables as cables_api
from pairmap.api import circuits as circuits_api
from pairmap.api import project as project_api
from pairmap.api import splices as splices_api
from pairmap.api.deps import get_db
from pairmap.main import app
from pairmap.models.cabling import CableRole
from pairmap.schemas.cabling import CircuitCreate, CircuitMove, SpliceToggle


@pytest.fixture()
def client(db_session):
    def _get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_list_circuits_wires_arguments_in_expected_order(monkeypatch, db_session):
    captured: dict[str, object] = {}

    def _fake_list_response(db, *args):
        captured["db"] = db
        captured["args"] = args
        return {"items": [], "count": 0, "limit": 20, "offset": 5}

    monkeypatch.setattr(circuits_api.circuits_service.circuits, "list_response", _fake_list_response)

    response = circuits_api.list_circuits(cable_id="cable-1", is_spliced=True, limit=20, offset=5, db=db_session)

    assert response["count"] == 0
    assert captured["db"] is db_session
    assert captured["args"] == ("cable-1", True, 20, 5)


def test_list_cables_wires_arguments_in_expected_order(monkeypatch, db_session):
    captured: dict[str, object] = {}

    def _fake_list_response(db, *args):
        captured["args"] = args
        return {"items": [], "count": 0, "limit": 50, "offset": 0}

    monkeypatch.setattr(cables_api.cables_service.cables, "list_response", _fake_list_response)

    cables_api.list_cables(
        role=CableRole.Feed, order_by="name", order_dir="desc", limit=50, offset=0, db=db_session
    )

    assert captured["args"] == (CableRole.Feed, "name", "desc", 50, 0)


def test_circuit_routes_call_services(db_session, feed_cable, distribution_cable):
    circuits_api.create_circuit(CircuitCreate(cable_id=feed_cable.id, circuit_id="pon,1-24"), db=db_session)
    first = circuits_api.create_circuit(
        CircuitCreate(cable_id=distribution_cable.id, circuit_id="lg,1-2"), db=db_session
    )
    second = circuits_api.create_circuit(
        CircuitCreate(cable_id=distribution_cable.id, circuit_id="pon,5-8"), db=db_session
    )

    moved = circuits_api.move_circuit(str(second.id), CircuitMove(direction="up"), db=db_session)
    assert (moved.pair_start, moved.pair_end) == (1, 4)

    spliced = circuits_api.toggle_circuit_splice(str(second.id), SpliceToggle(spliced=True), db=db_session)
    assert (spliced.feed_pair_start, spliced.feed_pair_end) == (5, 8)

    segments = circuits_api.get_circuit_segments(str(first.id), db=db_session)
    assert segments[0]["pair_start"] == 5

    rows = splices_api.list_spliced_circuits(cable_id=None, db=db_session)
    assert [row["circuit"].id for row in rows] == [second.id]

    health = project_api.get_project_health(db=db_session)
    assert health["ok"] is True


def test_http_cable_and_circuit_flow(client):
    response = client.post(
        "/cables", json={"name": "F1", "pair_count": 12, "role": "Feed", "circuit_ids": ["pon,1-8"]}
    )
    assert response.status_code == 201
    feed = response.json()
    assert feed["binder_size"] == 25

    response = client.post("/circuits", json={"cable_id": feed["id"], "circuit_id": "lg 1 4"})
    assert response.status_code == 201
    assert response.json()["circuit_id"] == "lg,1-4"
    assert (response.json()["pair_start"], response.json()["pair_end"]) == (9, 12)

    summary = client.get(f"/cables/{feed['id']}/summary").json()
    assert summary["capacity"]["passed"] is True
    assert [row["circuit"]["circuit_id"] for row in summary["circuits"]] == ["pon,1-8", "lg,1-4"]

    listed = client.get("/circuits", params={"cable_id": feed["id"]}).json()
    assert listed["count"] == 2


def test_http_invalid_circuit_id_is_400(client):
    cable = client.post("/cables", json={"name": "D1", "pair_count": 50, "role": "Distribution"}).json()
    response = client.post("/circuits", json={"cable_id": cable["id"], "circuit_id": "pon,8-1"})
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_circuit_id"


def test_http_overlap_is_409(client):
    cable = client.post(
        "/cables", json={"name": "D1", "pair_count": 50, "role": "Distribution", "circuit_ids": ["pon,1-8"]}
    ).json()
    response = client.post("/circuits", json={"cable_id": cable["id"], "circuit_id": "pon,8-12"})
    assert response.status_code == 409
    body = response.json()
    assert body["code"] == "circuit_overlap"
    assert "pon,1-8" in body["message"]


def test_http_feed_conflict_is_409(client):
    client.post("/cables", json={"name": "F1", "pair_count": 50, "role": "Feed", "circuit_ids": ["pon,1-24"]})
    client.post(
        "/cables", json={"name": "D-one", "pair_count": 50, "role": "Distribution", "circuit_ids": ["pon,1-8"]}
    )
    client.post(
        "/cables", json={"name": "D-two", "pair_count": 50, "role": "Distribution", "circuit_ids": ["pon,8-12"]}
    )
    spliced = client.get("/circuits", params={"is_spliced": False}).json()["items"]
    by_label = {item["circuit_id"]: item for item in spliced}

    assert client.post(f"/circuits/{by_label['pon,1-8']['id']}/splice", json={"spliced": True}).status_code == 200
    response = client.post(f"/circuits/{by_label['pon,8-12']['id']}/splice", json={"spliced": True})
    assert response.status_code == 409
    assert response.json()["code"] == "feed_pair_conflict"


def test_http_no_matching_feed_is_409(client):
    dist = client.post(
        "/cables", json={"name": "D1", "pair_count": 50, "role": "Distribution", "circuit_ids": ["pon,1-8"]}
    ).json()
    circuit = client.get("/circuits", params={"cable_id": dist["id"]}).json()["items"][0]
    response = client.post(f"/circuits/{circuit['id']}/splice", json={"spliced": True})
    assert response.status_code == 409
    assert response.json()["message"] == 'Could not find a Feed circuit with prefix "pon" that contains the range 1-8'


def test_http_rejects_client_supplied_pair_range(client):
    cable = client.post("/cables", json={"name": "D1", "pair_count": 50, "role": "Distribution"}).json()
    response = client.post(
        "/circuits", json={"cable_id": cable["id"], "circuit_id": "pon,1-8", "pair_start": 40}
    )
    assert response.status_code == 422


def test_http_missing_cable_is_404(client):
    assert client.get("/cables/not-a-uuid").status_code == 404


def test_http_project_export_import(client):
    client.post("/cables", json={"name": "F1", "pair_count": 50, "role": "Feed", "circuit_ids": ["pon,1-24"]})
    exported = client.get("/project/export")
    assert exported.status_code == 200
    assert exported.headers["content-disposition"].startswith('attachment; filename="pair-splice-project-')
    snapshot = exported.json()

    assert client.delete("/project").status_code == 204
    assert client.get("/cables").json()["count"] == 0

    result = client.post("/project/import", json=snapshot)
    assert result.json() == {"cables": 1, "circuits": 1, "splices": 0}
    assert client.get("/project/health").json() == {"ok": True, "dangling_references": []}


def test_http_splice_patch_null_keeps_stored_range(client):
    feed = client.post("/cables", json={"name": "F1", "pair_count": 50, "role": "Feed"}).json()
    dist = client.post("/cables", json={"name": "D1", "pair_count": 50, "role": "Distribution"}).json()
    splice = client.post(
        "/splices",
        json={
            "source_cable_id": feed["id"],
            "source_pair_start": 1,
            "source_pair_end": 8,
            "destination_cable_id": dist["id"],
            "destination_pair_start": 1,
            "destination_pair_end": 8,
            "pon_start": 1,
            "pon_end": 8,
        },
    ).json()

    response = client.patch(f"/splices/{splice['id']}", json={"source_pair_start": None})
    assert response.status_code == 200
    assert response.json()["source_pair_start"] == 1

    response = client.patch(f"/splices/{splice['id']}", json={"pon_end": None})
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_splice_range"


def test_http_import_rejects_duplicate_ids(client):
    cable_id = "5b0a7f0e-8a43-4d47-9b1c-0d3c7e7b2a11"
    snapshot = {
        "cables": [
            {"id": cable_id, "name": "F1", "pair_count": 50, "role": "Feed"},
            {"id": cable_id, "name": "F2", "pair_count": 50, "role": "Feed"},
        ],
        "circuits": [],
    }
    response = client.post("/project/import", json=snapshot)
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_snapshot"
