"""Script to load safe-zone polygons into the PostGIS geofences table.

Usage:
    python scripts/seed_geofences.py zones.geojson
    python scripts/seed_geofences.py zones.geojson --replace
"""

import argparse
import asyncio
import json
import sys

from sqlalchemy import text

from safetrack.config import get_settings
from safetrack.database import create_engine_from_settings
from safetrack.services.geofence_service import load_geojson_features, parse_geofence_features

UPSERT_GEOFENCE = text(
    """
    INSERT INTO geofences (name, area)
    VALUES (
        :name,
        ST_Multi(ST_SetSRID(ST_GeomFromGeoJSON(:geometry), 4326))::geography
    )
    ON CONFLICT (name) DO UPDATE SET area = EXCLUDED.area
    """
)


async def seed_geofences(path: str, replace: bool = False) -> int:
    """Insert or update every polygon feature of a GeoJSON file."""
    zones = parse_geofence_features(load_geojson_features(path))
    engine = create_engine_from_settings(get_settings())

    try:
        async with engine.begin() as conn:
            if replace:
                await conn.execute(text("DELETE FROM geofences"))
            for name, geometry in zones:
                await conn.execute(
                    UPSERT_GEOFENCE,
                    {"name": name, "geometry": json.dumps(geometry)},
                )
    finally:
        await engine.dispose()

    return len(zones)


def main() -> None:
    """Parse arguments and seed the table."""
    parser = argparse.ArgumentParser(description="Load geofences from a GeoJSON file.")
    parser.add_argument("path", help="GeoJSON FeatureCollection of Polygon/MultiPolygon zones")
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Delete existing geofences before loading",
    )
    args = parser.parse_args()

    try:
        count = asyncio.run(seed_geofences(args.path, replace=args.replace))
    except (OSError, ValueError) as e:
        print(f"✗ Seeding failed: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"✓ Loaded {count} geofence(s)")


if __name__ == "__main__":
    main()
