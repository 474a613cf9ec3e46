#!/usr/bin/env python3
"""Manual check that the configured geocoding and routing providers are reachable."""

import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from location_engine.config import settings
from location_engine.models.domain import Coordinates
from location_engine.services.geocoding.dispatcher import get_geocoding_provider
from location_engine.services.routing.dispatcher import get_routing_provider
from location_engine.services.routing.osrm_client import check_health


def main():
    print("=" * 60)
    print("Location Provider Connection Test")
    print("=" * 60)
    print()

    print(f"1. Geocoding '{settings.geocoding_provider}'...")
    geocoder = get_geocoding_provider(settings)
    validation = geocoder.geocode("Monas, Jakarta")
    if not validation.is_valid:
        print(f"   [ERROR] {validation.error}")
        return 1
    print(f"   [OK] {validation.address.full_address} -> {validation.address.coordinates}")
    print(f"   [OK] {len(validation.suggestions)} suggestion(s), confidence {validation.confidence}")
    print()

    print(f"2. Routing '{settings.routing_provider}'...")
    if settings.routing_provider == "osrm" and not check_health():
        print(f"   [ERROR] OSRM at {settings.osrm_base_url} is not responding")
        return 1
    router = get_routing_provider(settings)
    info = router.route(Coordinates(lat=-6.2, lng=106.816), Coordinates(lat=-6.917, lng=107.619))
    if info is None:
        print("   [ERROR] No route returned for Jakarta -> Bandung")
        return 1
    print(f"   [OK] {info.distance_km:.1f} km, {info.duration_min} min, {len(info.route)} geometry points")
    print()
    print("All providers reachable.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
