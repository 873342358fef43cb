# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from plant_monitor.main import app
from plant_monitor.routers import set_plant_monitor
from plant_monitor.services import PlantMonitor, HistoryStore


FULL_LINE = "Moisture:1234,DRY,Light:3456,BRIGHT,Water:789,MEDIUM,Temp:25.0,Humid:60.0,Servo:90"


@pytest.fixture(scope="function")
def monitor(tmp_path):
    """A fresh PlantMonitor writing to a temporary folder."""
    return PlantMonitor(
        db_path=tmp_path / "plant_monitor.db",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture(scope="function")
def history(tmp_path):
    return HistoryStore(tmp_path / "history.db")


@pytest.fixture(scope="function")
def client(monitor):
    """Test client wired to the temporary monitor (lifespan is not run)."""
    set_plant_monitor(monitor)
    yield TestClient(app)
    set_plant_monitor(None)
