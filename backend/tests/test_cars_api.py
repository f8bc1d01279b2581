"""
Tests for the car status API endpoint
"""
from datetime import timedelta
from unittest.mock import Mock

import pytest

from carstatus.api.routes.cars import get_car_status_service
from carstatus.core.exceptions import DataAccessError


def _leaves(value):
    if isinstance(value, dict):
        for item in value.values():
            yield from _leaves(item)
    else:
        yield value


def test_get_status_success(client, teslamate, now):
    teslamate.car(1, name="Test Tesla", model="3")
    teslamate.position(1, date=now - timedelta(minutes=2), odometer=12345.6, battery_level=85)
    teslamate.charging_process(1)

    response = client.get("/api/v1/cars/1/status")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"data"}
    data = body["data"]
    assert data["car"] == {"car_id": 1, "car_name": "Test Tesla"}
    assert data["status"]["state"] == "online"
    assert data["status"]["odometer"] == 12345.6
    assert data["status"]["battery_details"]["battery_level"] == 85
    assert data["status"]["charging_details"]["plugged_in"] is True
    assert data["status"]["charging_details"]["charging_state"] == "charging"
    assert data["units"] == {"unit_of_length": "km", "unit_of_pressure": "bar",
                             "unit_of_temperature": "C"}
    assert None not in list(_leaves(data))


def test_get_status_bare_car(client, teslamate):
    teslamate.car(7)

    response = client.get("/api/v1/cars/7/status")

    assert response.status_code == 200
    status = response.json()["data"]["status"]
    assert status["display_name"] == "Car 7"
    assert status["state"] == "unknown"
    assert status["car_status"]["healthy"] is True
    assert status["charging_details"]["charging_state"] == "disconnected"


def test_get_status_in_miles(client, teslamate, now):
    teslamate.car(1)
    teslamate.settings(unit_of_length="mi")
    teslamate.position(1, date=now, odometer=100.0, speed=100)

    data = client.get("/api/v1/cars/1/status").json()["data"]

    assert round(data["status"]["odometer"], 3) == 62.137
    assert data["status"]["driving_details"]["speed"] == 62
    assert data["units"]["unit_of_length"] == "mi"


def test_get_status_unknown_car(client):
    response = client.get("/api/v1/cars/999/status")

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "Failed to retrieve car status"
    assert "999" in body["detail"]
    assert "data" not in body


def test_get_status_non_numeric_id(client, teslamate):
    teslamate.car(1)

    response = client.get("/api/v1/cars/abc/status")

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "Failed to retrieve car status"
    assert "ID 0" in body["detail"]


def test_get_status_database_failure(client):
    from main import app

    failing = Mock()
    failing.get_status.side_effect = DataAccessError("database error: connection refused", car_id=1)
    app.dependency_overrides[get_car_status_service] = lambda: failing

    response = client.get("/api/v1/cars/1/status")

    assert response.status_code == 404
    assert response.json() == {
        "error": "Failed to retrieve car status",
        "detail": "database error: connection refused",
    }


def test_request_id_is_echoed(client, teslamate):
    teslamate.car(1)

    response = client.get("/api/v1/cars/1/status", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    generated = client.get("/api/v1/cars/1/status")
    assert generated.headers["X-Request-ID"]


@pytest.mark.parametrize("raw_id", ["1_0", "١٠", "+ 10"])
def test_loose_integer_spellings_do_not_resolve(client, teslamate, raw_id):
    teslamate.car(10, name="Ten")

    response = client.get(f"/api/v1/cars/{raw_id}/status")

    assert response.status_code == 404
    assert "ID 0" in response.json()["detail"]


def test_out_of_range_id_returns_error_envelope(client):
    response = client.get("/api/v1/cars/99999999999999999999/status")

    assert response.status_code == 404
    assert response.json() == {
        "error": "Failed to retrieve car status",
        "detail": "car with ID 0 does not exist",
    }


def test_error_envelope_documented_under_configured_status():
    from carstatus.core.config import get_settings
    from main import app

    responses = app.openapi()["paths"]["/api/v1/cars/{car_id}/status"]["get"]["responses"]

    assert str(get_settings().error_status_code) in responses
