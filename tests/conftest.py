import os
import tempfile
from typing import Generator

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("RATE_LIMITING_ENABLED", "false")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="roomboard-logs-"))
os.environ.setdefault("DATA_FILE", os.path.join(tempfile.mkdtemp(prefix="roomboard-data-"), "bookings.json"))

from roomboard.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from roomboard.grid import GridGeometry  # noqa: E402
from roomboard.scheduling import BookingScheduler  # noqa: E402
from roomboard.store import JsonFileBookingStore  # noqa: E402
from services.bookings.app import app as bookings_app  # noqa: E402
from services.bookings.app import bookings_cache, get_scheduler  # noqa: E402


@pytest.fixture()
def store(tmp_path) -> JsonFileBookingStore:
    return JsonFileBookingStore(tmp_path / "bookings.json")


@pytest.fixture()
def scheduler(store) -> BookingScheduler:
    return BookingScheduler(store, geometry=GridGeometry())


@pytest.fixture()
def bookings_client(scheduler) -> Generator[TestClient, None, None]:
    bookings_app.dependency_overrides[get_scheduler] = lambda: scheduler
    bookings_cache.invalidate()
    with TestClient(bookings_app) as client:
        yield client
    bookings_app.dependency_overrides.pop(get_scheduler, None)
    bookings_cache.invalidate()
