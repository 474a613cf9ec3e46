#!/usr/bin/env python3
"""Helper script to check and create the .env file for the location engine."""

from pathlib import Path
import os
import sys

TEMPLATE = """# Supabase Configuration (service areas, tenant travel settings, cache)
# Get these from: https://supabase.com/dashboard → Your Project → Settings → API
LOCATION_SUPABASE_URL=https://your-project-id.supabase.co
LOCATION_SUPABASE_KEY=your-service-role-key-here

# Providers: nominatim/osrm are the free defaults; google and mapbox are not implemented
LOCATION_GEOCODING_PROVIDER=nominatim
LOCATION_ROUTING_PROVIDER=osrm
# LOCATION_API_KEYS={"google": "...", "mapbox": "..."}
LOCATION_DEFAULT_COUNTRY=ID
LOCATION_DEFAULT_LANGUAGE=id

# Self-hosted endpoints (optional)
# LOCATION_NOMINATIM_BASE_URL=https://nominatim.openstreetmap.org
# LOCATION_OSRM_BASE_URL=http://localhost:5000

# Cache
LOCATION_CACHE_ENABLED=true
LOCATION_CACHE_TTL=3600
"""


def _mask(value: str, keep: int = 20) -> str:
    return value[:keep] + "..." if len(value) > keep else value


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Location Engine Environment Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        print(f"❌ .env file NOT found at: {env_file}")
        print("Creating template .env file...")
        with open(env_file, "w", encoding="utf-8") as f:
            f.write(TEMPLATE)
        print(f"✅ Created .env file at: {env_file}")
        print("⚠️  Please edit .env and add your Supabase credentials!")
        return

    print(f"✅ Found .env file at: {env_file}")
    print()

    for name in ("LOCATION_SUPABASE_URL", "LOCATION_SUPABASE_KEY"):
        value = os.getenv(name)
        if value:
            print(f"✅ {name} (from environment): {_mask(value)}")
        else:
            print(f"❌ {name} not found in environment")
    print()

    print("Testing config loading...")
    try:
        sys.path.insert(0, str(project_root / "src"))
        from location_engine.config import settings

        print(f"   geocoding provider: {settings.geocoding_provider}")
        print(f"   routing provider:   {settings.routing_provider}")
        print(f"   default country:    {settings.default_country}")
        print(f"   cache enabled:      {settings.cache_enabled} (ttl {settings.cache_ttl}s)")
        print()
        if settings.supabase_url and settings.supabase_key:
            print("✅ SUCCESS: Supabase is configured!")
        else:
            print("❌ ERROR: Supabase is NOT configured")
            print("Make sure variables start with the LOCATION_ prefix and restart the backend.")
    except Exception as e:
        print(f"❌ Error loading config: {e}")
        print("Make sure you're running this from the project root directory")


if __name__ == "__main__":
    main()
