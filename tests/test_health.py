"""
Tests for health checks and the shared error envelope.
"""


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["timestamp"].endswith("Z")


def test_detailed_health(client):
    response = client.get("/health/detailed")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["checks"]["database"]["status"] == "healthy"
    assert body["checks"]["storage"]["status"] == "healthy"


def test_unknown_route(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "message": "Route not found",
        "path": "/api/does-not-exist",
    }


def test_invalid_json_body(client):
    response = client.post(
        "/api/jobs",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
