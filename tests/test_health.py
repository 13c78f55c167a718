from unittest import mock


def test_health(client, settings):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] == settings.service_name
    assert body["timestamp"]


def test_ready_with_database(client):
    response = client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "mongodb": "connected"}


def test_not_ready_without_database(client):
    with mock.patch("placement_api.main.test_mongo_connection", return_value=False):
        response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["mongodb"] == "disconnected"
