from __future__ import annotations

import itertools
from datetime import datetime

import pytest

from crewsite.attendance.document_repository import DocumentAttendanceRepository
from crewsite.attendance.ledger import AttendanceLedger
from crewsite.geofence.model import Coordinate, SiteGeofence
from crewsite.store.memory_store import InMemoryDocumentStore


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def vancouver_fence() -> SiteGeofence:
    return SiteGeofence(
        site_id="cambie-marine",
        center=Coordinate(49.2827, -123.1207),
        radius_meters=200,
        name="Cambie & Marine Siding",
    )


@pytest.fixture
def on_site() -> Coordinate:
    return Coordinate(49.2828, -123.1208)


@pytest.fixture
def off_site() -> Coordinate:
    return Coordinate(49.3000, -123.1207)


@pytest.fixture
def ledger(store, fixed_now) -> AttendanceLedger:
    ids = (f"rec-{n}" for n in itertools.count(1))
    return AttendanceLedger(DocumentAttendanceRepository(store), id_factory=lambda: next(ids), clock=lambda: fixed_now)
