"""
Flask API tests: setup → trim → polynomials → commit → open → check.
"""

import pytest

from app import create_app


@pytest.fixture
def client():
    app = create_app({"DB_PATH": None, "DEFAULT_SEED": 7, "TESTING": True})
    with app.test_client() as c:
        yield c


def _setup(client, max_degree=6, degree_bounds=None):
    r = client.post("/pcs/setup", json={"max_degree": max_degree, "seed": 11})
    assert r.status_code == 200
    r = client.post("/pcs/trim", json={"supported_degree": max_degree, "degree_bounds": degree_bounds or []})
    assert r.status_code == 200
    return r.get_json()


class TestSetupRoutes:
    def test_setup_and_trim(self, client):
        data = _setup(client, 6, [3])
        assert data["max_degree"] == 6
        assert data["supported_degree"] == 6
        assert data["enforced_degree_bounds"] == [3]
        assert list(data["shift_powers"]) == ["3"]

    def test_setup_limit(self, client):
        r = client.post("/pcs/setup", json={"max_degree": 1000})
        assert r.status_code == 400

    def test_trim_before_setup(self, client):
        r = client.post("/pcs/trim", json={"supported_degree": 2})
        assert r.status_code == 409

    def test_trim_too_large(self, client):
        client.post("/pcs/setup", json={"max_degree": 4})
        r = client.post("/pcs/trim", json={"supported_degree": 5})
        assert r.status_code == 400
        assert r.get_json()["kind"] == "TrimmingDegreeTooLarge"


class TestPolynomialRoutes:
    def test_add_and_list(self, client):
        r = client.post("/pcs/polynomials", json={"label": "p1", "coeffs": [1, 2, 3], "degree_bound": 2})
        assert r.status_code == 201
        body = r.get_json()
        assert body["degree"] == 2
        assert body["is_hiding"] is False
        listed = client.get("/pcs/polynomials").get_json()["polynomials"]
        assert [p["label"] for p in listed] == ["p1"]
        assert listed[0]["coeffs"] == ["1", "2", "3"]

    def test_missing_fields(self, client):
        r = client.post("/pcs/polynomials", json={"label": "p1"})
        assert r.status_code == 400

    def test_duplicate_label_rejected_at_commit(self, client):
        _setup(client, 4)
        client.post("/pcs/polynomials", json={"label": "a", "coeffs": [1]})
        client.post("/pcs/polynomials", json={"label": "a", "coeffs": [2]})
        r = client.post("/pcs/commit", json={})
        assert r.status_code == 400
        assert r.get_json()["kind"] == "DuplicateLabel"


class TestProtocolRoutes:
    def test_full_flow(self, client):
        _setup(client, 6, [3])
        client.post("/pcs/polynomials", json={"label": "a", "coeffs": [1, 2, 3]})
        client.post("/pcs/polynomials", json={"label": "b", "coeffs": [4, 5], "degree_bound": 3, "hiding_bound": 1})

        r = client.post("/pcs/commit", json={})
        assert r.status_code == 200
        comms = r.get_json()["commitments"]
        assert [c["label"] for c in comms] == ["a", "b"]
        assert comms[0]["size_in_bytes"] == 65
        assert comms[1]["size_in_bytes"] == 129
        assert len(bytes.fromhex(comms[1]["bytes"])) == 129

        r = client.post("/pcs/open", json={"point": 2})
        assert r.status_code == 200
        opened = r.get_json()
        assert opened["values"]["a"] == "17"
        assert opened["values"]["b"] == "14"
        assert opened["size_in_bytes"] == 97

        r = client.post("/pcs/check", json={})
        assert r.get_json()["result"] is True

        r = client.post("/pcs/check", json={"values": {"a": 18}})
        assert r.get_json()["result"] is False

        state = client.get("/pcs/state").get_json()
        assert state["polynomials"] == ["a", "b"]
        assert state["opened_at"] == "2"

    def test_open_before_commit(self, client):
        _setup(client, 4)
        client.post("/pcs/polynomials", json={"label": "a", "coeffs": [1]})
        r = client.post("/pcs/open", json={"point": 3})
        assert r.status_code == 409

    def test_clear(self, client):
        _setup(client, 2)
        client.post("/pcs/clear")
        state = client.get("/pcs/state").get_json()
        assert state["max_degree"] is None
        assert state["polynomials"] == []

    def test_hiding_commit_without_seed(self):
        app = create_app({"DB_PATH": None, "TESTING": True})
        with app.test_client() as unseeded:
            _setup(unseeded, 4)
            unseeded.post("/pcs/polynomials", json={"label": "h", "coeffs": [3, 1], "hiding_bound": 1})
            r = unseeded.post("/pcs/commit", json={})
            assert r.status_code == 200
            r = unseeded.post("/pcs/open", json={"point": 5})
            assert r.get_json()["size_in_bytes"] == 97
            assert unseeded.post("/pcs/check", json={}).get_json()["result"] is True


class TestBoundValidation:
    def test_string_bounds_are_coerced(self, client):
        _setup(client, 4, [2])
        r = client.post("/pcs/polynomials", json={"label": "p", "coeffs": [1, 1], "degree_bound": "2", "hiding_bound": "1"})
        assert r.status_code == 201
        assert r.get_json()["polynomial"]["hiding_bound"] == 1
        assert client.post("/pcs/commit", json={}).status_code == 200

    @pytest.mark.parametrize("field, value", [
        ("hiding_bound", "one"),
        ("degree_bound", [2]),
    ])
    def test_non_integer_bound(self, client, field, value):
        r = client.post("/pcs/polynomials", json={"label": "p", "coeffs": [1], field: value})
        assert r.status_code == 400

    def test_non_integer_coeffs(self, client):
        r = client.post("/pcs/polynomials", json={"label": "p", "coeffs": ["x"]})
        assert r.status_code == 400

    def test_negative_hiding_bound(self, client):
        _setup(client, 4)
        client.post("/pcs/polynomials", json={"label": "p", "coeffs": [1], "hiding_bound": -1})
        r = client.post("/pcs/commit", json={})
        assert r.status_code == 400
        assert r.get_json()["kind"] == "HidingBoundIsZero"
