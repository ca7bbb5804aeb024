from fastapi.testclient import TestClient


def test_root_responds(client: TestClient) -> None:
    """Verify the root endpoint describes the API."""
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["docs"] == "/docs"


def test_health(client: TestClient) -> None:
    r = client.get("/health")
    assert r.json() == {"status": "ok"}
