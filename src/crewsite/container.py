from __future__ import annotations

from dataclasses import dataclass

from .attendance.document_repository import DocumentAttendanceRepository
from .attendance.ledger import AttendanceLedger
from .core.constants import DEFAULT_RADIUS_METERS
from .database.connection import DatabaseConnection, DBConfig
from .database.mysql_document_store import MySQLDocumentStore
from .payroll.service import PayrollService
from .sites.repository import SiteRepository
from .store.document_store import DocumentStore
from .store.memory_store import InMemoryDocumentStore
from .workers.repository import PayProfileRepository


@dataclass(frozen=True)
class Container:
    store: DocumentStore

    attendance_repo: DocumentAttendanceRepository
    sites_repo: SiteRepository
    profiles_repo: PayProfileRepository

    ledger: AttendanceLedger
    payroll_service: PayrollService


def build_store(*, backend: str, db_config: dict | None = None) -> DocumentStore:
    if backend == "memory":
        return InMemoryDocumentStore()
    if backend == "mysql":
        return MySQLDocumentStore(DatabaseConnection(DBConfig.from_dict(db_config or {})))
    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")


def build_container(*, store: DocumentStore, default_radius_meters: float = DEFAULT_RADIUS_METERS) -> Container:
    attendance_repo = DocumentAttendanceRepository(store)
    sites_repo = SiteRepository(store, default_radius_meters=default_radius_meters)
    profiles_repo = PayProfileRepository(store)

    ledger = AttendanceLedger(attendance_repo)
    payroll_service = PayrollService(attendance_repo, profiles_repo, store)

    return Container(
        store=store,
        attendance_repo=attendance_repo,
        sites_repo=sites_repo,
        profiles_repo=profiles_repo,
        ledger=ledger,
        payroll_service=payroll_service,
    )
