"""
Mock Prover Blueprint tests: mock_routes.py, app.py

Flask 테스트 클라이언트와 TinyDB MemoryStorage 로 엔드포인트를 확인한다.
"""
import pytest
from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from app import create_app, open_db


@pytest.fixture
def client():
    app = create_app(TinyDB(storage=MemoryStorage))
    app.config["TESTING"] = True
    return app.test_client()


def run(client, name, **payload):
    return client.post(f"/mock/run/{name}", json=payload)


class TestCircuits:
    def test_list(self, client):
        resp = client.get("/mock/circuits")
        assert resp.status_code == 200
        data = resp.get_json()
        assert [c["name"] for c in data] == ["factor", "fibonacci", "standard_plonk", "cubic"]
        factor = data[0]
        assert factor["params"] == ["a", "b"]
        assert factor["example_public_inputs"] == [143]

    def test_index(self, client):
        assert client.get("/").status_code == 200


class TestRun:
    def test_satisfied(self, client):
        resp = run(client, "factor", witness={"a": 11, "b": 13}, public_inputs=[143])
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["name"] == "factor"
        assert data["k"] == 4
        assert data["satisfied"] is True
        assert data["failures"] == []
        assert data["trace"]["n"] == 16

    def test_defaults_to_example(self, client):
        data = run(client, "cubic").get_json()
        assert data["satisfied"] is True

    def test_wrong_public_input(self, client):
        data = run(client, "factor", witness={"a": "11", "b": "13"}, public_inputs=["144"]).get_json()
        assert data["satisfied"] is False
        assert len(data["failures"]) == 1
        failure = data["failures"][0]
        assert failure["kind"] == "instance_mismatch"
        assert (failure["expected"], failure["found"], failure["index"]) == (144, 143, 0)
        assert failure["message"]

    def test_standard_plonk_second_index(self, client):
        data = run(
            client, "standard_plonk",
            witness={"x": 5, "y": 9, "constant": 7}, public_inputs=[7, 2031],
        ).get_json()
        assert [(f["kind"], f["index"]) for f in data["failures"]] == [("instance_mismatch", 1)]

    def test_custom_k(self, client):
        data = run(client, "fibonacci", k=5).get_json()
        assert data["k"] == 5
        assert data["trace"]["n"] == 32

    def test_not_enough_rows(self, client):
        resp = run(client, "fibonacci", witness={"n": 20}, public_inputs=[1], k=4)
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    @pytest.mark.parametrize("payload", [
        {"witness": {"a": "eleven"}},
        {"witness": {"z": 1}},
        {"witness": [1, 2]},
        {"public_inputs": "143"},
        {"k": 0},
        {"k": "4"},
    ])
    def test_bad_payload(self, client, payload):
        resp = client.post("/mock/run/factor", json=payload)
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    def test_unknown_circuit(self, client):
        assert run(client, "sha256").status_code == 404


class TestStoredRuns:
    def test_last_run(self, client):
        run(client, "factor", witness={"a": 11, "b": 13}, public_inputs=[144])
        resp = client.get("/mock/run/factor")
        assert resp.status_code == 200
        assert resp.get_json()["satisfied"] is False

    def test_last_run_overwritten(self, client):
        run(client, "factor", public_inputs=[144])
        run(client, "factor", public_inputs=[143])
        assert client.get("/mock/run/factor").get_json()["satisfied"] is True

    def test_no_run_yet(self, client):
        assert client.get("/mock/run/cubic").status_code == 404

    def test_unknown_circuit(self, client):
        assert client.get("/mock/run/sha256").status_code == 404

    def test_reset(self, client):
        run(client, "factor")
        run(client, "cubic")
        assert client.post("/mock/reset").get_json() == {"ok": True}
        assert client.get("/mock/run/factor").status_code == 404
        assert client.get("/mock/run/cubic").status_code == 404


class TestOpenDb:
    def test_memory(self):
        db = open_db(":memory:")
        db.insert({"type": "x"})
        assert len(db) == 1

    def test_file(self, tmp_path):
        path = tmp_path / "db.json"
        db = open_db(str(path))
        db.insert({"type": "x"})
        db.close()
        assert path.exists()
