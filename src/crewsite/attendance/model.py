from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import parse_iso_datetime, to_naive_local
from ..core.enums import VerificationStatus
from ..geofence.model import Coordinate


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one shift of one worker at one site."""

    id: str
    worker_id: str
    site_id: str
    clock_in_at: datetime
    clock_in_location: Coordinate
    verification_status: VerificationStatus
    distance_at_clock_in_meters: float
    clock_out_at: Optional[datetime] = None
    clock_out_location: Optional[Coordinate] = None
    photo_url: Optional[str] = None
    note: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.clock_out_at is None

    @property
    def shift_date(self) -> date:
        return self.clock_in_at.date()

    @property
    def verified(self) -> bool:
        return self.verification_status == VerificationStatus.VERIFIED

    def closed(self, *, at: datetime, location: Coordinate) -> "AttendanceRecord":
        return replace(self, clock_out_at=at, clock_out_location=location)

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "worker_id": self.worker_id,
            "site_id": self.site_id,
            "clock_in_at": self.clock_in_at.isoformat(),
            "clock_in_location": self.clock_in_location.to_dict(),
            "clock_out_at": self.clock_out_at.isoformat() if self.clock_out_at else None,
            "clock_out_location": self.clock_out_location.to_dict() if self.clock_out_location else None,
            "verification_status": self.verification_status.value,
            "distance_at_clock_in_meters": self.distance_at_clock_in_meters,
            "photo_url": self.photo_url,
            "note": self.note,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "AttendanceRecord":
        return cls(
            id=str(doc["id"]),
            worker_id=str(doc["worker_id"]),
            site_id=str(doc["site_id"]),
            clock_in_at=to_naive_local(parse_iso_datetime(doc["clock_in_at"])),
            clock_in_location=Coordinate.from_dict(doc["clock_in_location"]),
            clock_out_at=to_naive_local(parse_iso_datetime(doc["clock_out_at"])) if doc.get("clock_out_at") else None,
            clock_out_location=Coordinate.from_dict(doc["clock_out_location"]) if doc.get("clock_out_location") else None,
            verification_status=VerificationStatus(doc["verification_status"]),
            distance_at_clock_in_meters=float(doc["distance_at_clock_in_meters"]),
            photo_url=doc.get("photo_url"),
            note=doc.get("note"),
        )
