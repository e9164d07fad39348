# tests/test_health.py
from fastapi import status


def test_health(client) -> None:
    r = client.get("/health")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"status": "ok"}


def test_root_describes_service(client) -> None:
    """The root endpoint advertises the API name and docs location."""
    r = client.get("/")
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert body["docs"] == "/docs"
    assert "version" in body
