from __future__ import annotations

from ..core.constants import DEFAULT_RADIUS_METERS
from ..core.exceptions import SiteNotFound
from ..geofence.model import Coordinate, SiteGeofence
from ..store import paths
from ..store.document_store import DocumentStore


class SiteRepository:
    """Read side of the site/management collaborator: site id -> geofence."""

    def __init__(self, store: DocumentStore, *, default_radius_meters: float = DEFAULT_RADIUS_METERS):
        self._store = store
        self._default_radius = float(default_radius_meters)

    def get_fence(self, site_id: str) -> SiteGeofence:
        doc = self._store.get(paths.site(site_id))
        if not doc:
            raise SiteNotFound(site_id)
        radius = doc.get("radius")
        return SiteGeofence(
            site_id=site_id,
            center=Coordinate.from_dict(doc["location"]),
            radius_meters=float(radius) if radius is not None else self._default_radius,
            name=doc.get("name", ""),
        )

    def save(self, fence: SiteGeofence) -> None:
        self._store.put(
            paths.site(fence.site_id),
            {"name": fence.name, "location": fence.center.to_dict(), "radius": fence.radius_meters},
        )
