from __future__ import annotations

from dataclasses import dataclass

from ..common.validators import require_non_empty, require_positive


@dataclass(frozen=True)
class WorkerPayProfile:
    worker_id: str
    display_name: str
    hourly_rate: float

    def __post_init__(self):
        require_non_empty(self.worker_id, "worker_id")
        require_positive(self.hourly_rate, "hourly_rate")
