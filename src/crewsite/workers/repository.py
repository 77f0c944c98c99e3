from __future__ import annotations

from typing import Iterable, Optional

from ..store import paths
from ..store.document_store import DocumentStore
from .model import WorkerPayProfile


class PayProfileRepository:
    """Pay-profile provider: worker id -> WorkerPayProfile."""

    def __init__(self, store: DocumentStore):
        self._store = store

    def get(self, worker_id: str) -> Optional[WorkerPayProfile]:
        doc = self._store.get(paths.worker_profile(worker_id))
        if not doc:
            return None
        return WorkerPayProfile(
            worker_id=worker_id,
            display_name=doc.get("full_name", ""),
            hourly_rate=float(doc["hourly_rate"]),
        )

    def profiles_for(self, worker_ids: Iterable[str]) -> dict[str, WorkerPayProfile]:
        """Profiles in the requested order; unknown ids are left out."""
        out: dict[str, WorkerPayProfile] = {}
        for worker_id in worker_ids:
            if worker_id in out:
                continue
            profile = self.get(worker_id)
            if profile:
                out[worker_id] = profile
        return out

    def save(self, profile: WorkerPayProfile) -> None:
        self._store.put(
            paths.worker_profile(profile.worker_id),
            {"full_name": profile.display_name, "hourly_rate": profile.hourly_rate},
        )
