"""Seed a demo site and pay profiles into the configured document store."""

from __future__ import annotations

import importlib

from dotenv import load_dotenv

from crewsite.container import build_container, build_store
from crewsite.geofence.model import Coordinate, SiteGeofence
from crewsite.settings import get_settings_module
from crewsite.workers.model import WorkerPayProfile

DEMO_SITES = [
    SiteGeofence(site_id="cambie-marine", center=Coordinate(49.2827, -123.1207), radius_meters=200, name="Cambie & Marine"),
]

DEMO_PROFILES = [
    WorkerPayProfile(worker_id="w-ana", display_name="Ana Torres", hourly_rate=25.0),
    WorkerPayProfile(worker_id="w-bo", display_name="Bo Chen", hourly_rate=30.0),
]


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    store = build_store(backend=settings.STORE_BACKEND, db_config=settings.DB_CONFIG)
    container = build_container(store=store, default_radius_meters=settings.DEFAULT_RADIUS_METERS)

    for fence in DEMO_SITES:
        container.sites_repo.save(fence)
    for profile in DEMO_PROFILES:
        container.profiles_repo.save(profile)

    print(f"OK: Seeded {len(DEMO_SITES)} site(s) and {len(DEMO_PROFILES)} pay profile(s) -> {settings.STORE_BACKEND}")


if __name__ == "__main__":
    main()
