import pytest
from fastapi.testclient import TestClient

from lindenmayer.web.app import create_app


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


class TestPresetEndpoints:
    def test_list(self, client: TestClient) -> None:
        response = client.get("/api/presets")
        assert response.status_code == 200
        names = [entry["name"] for entry in response.json()]
        assert "ball" in names
        assert len(names) == 10

    def test_generation_string(self, client: TestClient) -> None:
        response = client.get("/api/presets/ball", params={"generations": 3})
        assert response.status_code == 200
        body = response.json()
        assert body["string"] == "ABBCBCAC"
        assert body["generation"] == 3
        assert body["axiom"] == "A"
        assert body["rules"] == ["A => AB", "B => BC", "C => AC"]

    def test_default_generation(self, client: TestClient) -> None:
        body = client.get("/api/presets/ball").json()
        assert body["generation"] == 4

    def test_deep_generations_allowed_while_short(self, client: TestClient) -> None:
        response = client.get("/api/presets/ball", params={"generations": 12})
        assert response.status_code == 200
        assert response.json()["length"] == 4096

    def test_oversized_generation_rejected(self, client: TestClient) -> None:
        # quadratic_koch passes 700k symbols at generation 4.
        assert client.get("/api/presets/quadratic_koch", params={"generations": 8}).status_code == 422
        assert client.get("/api/presets/quadratic_koch/svg", params={"generations": 4}).status_code == 422
        assert client.get("/api/presets/quadratic_koch", params={"generations": 3}).status_code == 200

    def test_svg(self, client: TestClient) -> None:
        response = client.get("/api/presets/quadratic_koch/svg", params={"generations": 1})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert "<line" in response.text

    def test_unknown_preset(self, client: TestClient) -> None:
        assert client.get("/api/presets/fern").status_code == 404
        assert client.get("/api/presets/fern/svg").status_code == 404
        assert client.post("/api/presets/fern/step").status_code == 404
        assert client.post("/api/presets/fern/reset").status_code == 404


class TestStepping:
    def test_step_renders_one_generation_behind(self, client: TestClient) -> None:
        first = client.post("/api/presets/ball/step").json()
        assert first == {"rendered_generation": 0, "grammar_generation": 1, "length": 1}
        second = client.post("/api/presets/ball/step").json()
        assert second == {"rendered_generation": 1, "grammar_generation": 2, "length": 2}

    def test_sessions_are_per_preset(self, client: TestClient) -> None:
        client.post("/api/presets/ball/step")
        other = client.post("/api/presets/tree/step").json()
        assert other["rendered_generation"] == 0

    def test_step_stops_at_length_cap(self) -> None:
        client = TestClient(create_app(max_length=10))
        lengths = [client.post("/api/presets/ball/step").json()["length"] for _ in range(3)]
        assert lengths == [1, 2, 4]
        # The next evolution would produce 16 symbols.
        assert client.post("/api/presets/ball/step").status_code == 422
        assert client.post("/api/presets/ball/reset").status_code == 200
        assert client.post("/api/presets/ball/step").json()["rendered_generation"] == 0

    def test_reset(self, client: TestClient) -> None:
        client.post("/api/presets/ball/step")
        client.post("/api/presets/ball/step")
        assert client.post("/api/presets/ball/reset").json() == {"name": "ball", "reset": True}
        again = client.post("/api/presets/ball/step").json()
        assert again["rendered_generation"] == 0
