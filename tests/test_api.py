# tests/test_api.py
import inspect
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from plant_monitor.main import app
from plant_monitor.models import ServoLogRecord, ServoLogData
from plant_monitor.routers import set_plant_monitor
from plant_monitor.routers.data import get_data_history
from plant_monitor.routers.logs import get_logs

from conftest import FULL_LINE


def post_line(client, line):
    return client.post("/data", json={"data": line})


# =============================================================================
# POST /data, GET /data
# =============================================================================

def test_post_data_then_get_current(client):
    response = post_line(client, FULL_LINE)

    assert response.status_code == 200
    assert response.json() == {"status": "success", "message": "Data received"}

    current = client.get("/data").json()
    assert current["moisture"] == 1234
    assert current["moistureStatus"] == "DRY"
    assert current["light"] == 3456
    assert current["lightStatus"] == "BRIGHT"
    assert current["water"] == 789
    assert current["waterStatus"] == "MEDIUM"
    assert current["temperature"] == 25.0
    assert current["humidity"] == 60.0
    assert current["servo"] == 90
    assert current["raw"] == FULL_LINE
    assert "timestamp" in current


def test_get_data_before_any_report(client):
    current = client.get("/data").json()

    assert current["raw"] == ""
    for key in ("moisture", "moistureStatus", "light", "lightStatus", "water",
                "waterStatus", "temperature", "humidity", "servo"):
        assert current[key] is None


def test_second_report_clears_missing_fields(client):
    post_line(client, FULL_LINE)
    post_line(client, "Temp:25.0,Humid:60.0")

    current = client.get("/data").json()

    assert current["temperature"] == 25.0
    assert current["humidity"] == 60.0
    assert current["moisture"] is None
    assert current["moistureStatus"] is None
    assert current["light"] is None
    assert current["water"] is None
    assert current["servo"] is None


def test_unparseable_value_is_null_and_request_succeeds(client):
    response = post_line(client, "Moisture:abc,DRY,Temp:21.5")

    assert response.status_code == 200
    current = client.get("/data").json()
    assert current["moisture"] is None
    assert current["moistureStatus"] == "DRY"
    assert current["temperature"] == 21.5


def test_oversized_numbers_are_served_as_null(client, monitor):
    response = post_line(client, "Moisture:" + "9" * 5000 + ",DRY,Temp:25.0,Servo:90")

    assert response.status_code == 200
    current = client.get("/data").json()
    assert current["moisture"] is None
    assert current["moistureStatus"] == "DRY"
    assert current["temperature"] == 25.0
    assert current["servo"] == 90
    assert monitor.history.logs(type="error") == []

    stored = client.get("/data/history").json()
    assert stored[0]["moisture"] is None
    assert stored[0]["servo"] == 90


def test_history_and_logs_handlers_run_off_the_event_loop():
    # They make blocking sqlite calls, so they must be plain functions
    assert not inspect.iscoroutinefunction(get_data_history)
    assert not inspect.iscoroutinefunction(get_logs)


def test_post_data_writes_history_and_sensor_log(client, monitor):
    post_line(client, FULL_LINE)

    assert monitor.history.history()[0].raw == FULL_LINE
    sensor_logs = monitor.history.logs(type="sensor")
    assert len(sensor_logs) == 1
    assert sensor_logs[0].data.raw == FULL_LINE


def test_durable_failure_still_reports_success(client, monitor, monkeypatch):
    def broken(reading):
        raise OSError("database unavailable")

    monkeypatch.setattr(monitor.history, "append_reading", broken)

    response = post_line(client, FULL_LINE)

    assert response.status_code == 200
    assert response.json()["status"] == "success"
    current = client.get("/data").json()
    assert current["moisture"] == 1234
    assert current["raw"] == FULL_LINE
    assert monitor.history.logs(type="error")[0].message == "Error saving sensor data to database"


def test_internal_error_returns_500(client, monitor, monkeypatch):
    def broken(raw, on_parse_error=None):
        raise RuntimeError("store exploded")

    monkeypatch.setattr(monitor.readings, "ingest", broken)

    response = post_line(client, FULL_LINE)

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "store exploded"}
    assert monitor.history.logs(type="error")[0].message == "Error processing data request"


def test_post_data_requires_data_string(client):
    assert client.post("/data", json={}).status_code == 422
    assert client.post("/data", json={"data": ["not", "a", "string"]}).status_code == 422


def test_monitor_not_started():
    set_plant_monitor(None)

    response = TestClient(app).get("/data")

    assert response.status_code == 500
    assert response.json()["detail"] == "Server not fully started yet"


# =============================================================================
# SERVO
# =============================================================================

def test_servo_command_is_delivered_once(client):
    response = client.post("/servo", json={"position": 90})

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "message": "Servo position request received",
        "position": 90,
    }

    assert client.get("/servo-check").json() == {"status": "success", "position": 90}
    assert client.get("/servo-check").json() == {"status": "no_request"}


def test_servo_check_with_nothing_pending(client):
    assert client.get("/servo-check").json() == {"status": "no_request"}


def test_servo_position_zero(client):
    client.post("/servo", json={"position": 0})

    assert client.get("/servo-check").json() == {"status": "success", "position": 0}


def test_latest_servo_command_wins(client):
    client.post("/servo", json={"position": 30})
    client.post("/servo", json={"position": 150})

    assert client.get("/servo-check").json()["position"] == 150


@pytest.mark.parametrize("position", [200, -1, 180.5, "90", None, True, [90]])
def test_invalid_servo_position_is_rejected(client, monitor, position):
    response = client.post("/servo", json={"position": position})

    assert response.status_code == 400
    assert "between 0 and 180" in response.json()["detail"]
    assert monitor.mailbox.poll_and_clear() is None
    assert monitor.history.logs(type="servo") == []


def test_servo_missing_position(client, monitor):
    response = client.post("/servo", json={})

    assert response.status_code == 400
    assert monitor.mailbox.poll_and_clear() is None


def test_servo_command_is_logged(client, monitor, tmp_path):
    client.post("/servo", json={"position": 45})

    record = monitor.history.logs(type="servo")[0]
    assert record.message == "Servo position set to 45"
    assert record.data.position == 45
    assert list((tmp_path / "logs").glob("servo_control_*.log"))


# =============================================================================
# HISTORY
# =============================================================================

def test_history_returns_latest_first(client):
    for moisture in range(5):
        post_line(client, f"Moisture:{moisture},DRY")

    response = client.get("/data/history", params={"limit": 2, "skip": 0})

    assert response.status_code == 200
    body = response.json()
    assert [r["moisture"] for r in body] == [4, 3]
    assert body[0]["moistureStatus"] == "DRY"


def test_history_defaults_and_lenient_params(client):
    for moisture in range(3):
        post_line(client, f"Moisture:{moisture}")

    assert len(client.get("/data/history").json()) == 3
    assert len(client.get("/data/history", params={"limit": "abc"}).json()) == 3
    assert len(client.get("/data/history", params={"limit": "0"}).json()) == 3
    assert [r["moisture"] for r in client.get("/data/history", params={"skip": "-4"}).json()] == [2, 1, 0]
    assert [r["moisture"] for r in client.get("/data/history", params={"skip": "1"}).json()] == [1, 0]


def test_history_empty(client):
    response = client.get("/data/history")

    assert response.status_code == 200
    assert response.json() == []


# =============================================================================
# LOGS
# =============================================================================

def test_logs_filtering(client, monitor):
    base = datetime(2024, 5, 1, tzinfo=timezone.utc)
    for day in range(3):
        monitor.history.append_log(ServoLogRecord(
            timestamp=base + timedelta(days=day),
            message=f"Servo position set to {day}",
            data=ServoLogData(position=day),
        ))
    post_line(client, "Temp:20")

    response = client.get("/logs", params={
        "type": "servo",
        "startDate": "2024-05-02",
        "endDate": "2024-05-03T00:00:00Z",
    })

    assert response.status_code == 200
    body = response.json()
    assert [r["data"]["position"] for r in body] == [2, 1]
    assert all(r["type"] == "servo" for r in body)


def test_logs_contains_each_kind(client):
    post_line(client, "Temp:20")
    client.post("/servo", json={"position": 10})

    body = client.get("/logs").json()

    assert [r["type"] for r in body] == ["servo", "sensor"]
    assert body[1]["message"] == "Sensor data received"
    assert body[1]["data"] == {"raw": "Temp:20"}


def test_error_logs_use_camel_case(client, monitor):
    monitor.recorder.record_error("Something broke", RuntimeError("nope"))

    body = client.get("/logs", params={"type": "error"}).json()

    assert body[0]["data"]["errorMessage"] == "nope"


def test_logs_empty_and_limit(client):
    assert client.get("/logs").json() == []

    for position in range(4):
        client.post("/servo", json={"position": position})

    assert len(client.get("/logs", params={"limit": 2}).json()) == 2


def test_logs_invalid_date(client):
    response = client.get("/logs", params={"startDate": "yesterday"})

    assert response.status_code == 400


# =============================================================================
# ROOT
# =============================================================================

def test_root_and_health(client):
    assert client.get("/").json()["name"] == "Plant Monitor API"
    assert client.get("/health").json()["status"] == "healthy"
