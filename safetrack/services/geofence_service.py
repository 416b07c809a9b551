"""Geofence lookups: which safe zones cover a coordinate."""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from safetrack.core.geo import covers

logger = structlog.get_logger(__name__)


class GeofenceRepository(ABC):
    """Source of safe-zone polygons."""

    @abstractmethod
    async def find_covering(
        self,
        db: AsyncSession,
        latitude: float,
        longitude: float,
    ) -> list[str]:
        """
        Find the geofences covering a point, boundary included.

        Args:
            db: Database session
            latitude: Point latitude in degrees
            longitude: Point longitude in degrees

        Returns:
            Names of all covering geofences, empty when the point is outside every zone
        """


class PostGISGeofenceRepository(GeofenceRepository):
    """Geofences stored as PostGIS geography polygons."""

    COVERING_QUERY = text(
        """
        SELECT name
        FROM geofences
        WHERE ST_Covers(area, ST_MakePoint(:longitude, :latitude)::geography)
        ORDER BY name
        """
    )

    async def find_covering(
        self,
        db: AsyncSession,
        latitude: float,
        longitude: float,
    ) -> list[str]:
        result = await db.execute(
            self.COVERING_QUERY,
            {"longitude": longitude, "latitude": latitude},
        )
        return [row.name for row in result]


def parse_geofence_features(features: list[dict[str, Any]]) -> list[tuple[str, dict[str, Any]]]:
    """
    Extract (name, geometry) pairs from GeoJSON features.

    The name comes from ``properties.name``, then the feature ``id``.

    Raises:
        ValueError: If a feature has no polygon geometry
    """
    zones = []
    for index, feature in enumerate(features):
        geometry = feature.get("geometry") or {}
        if geometry.get("type") not in ("Polygon", "MultiPolygon"):
            raise ValueError(f"Geofence feature {index} is not a Polygon or MultiPolygon")
        properties = feature.get("properties") or {}
        name = properties.get("name") or feature.get("id") or f"zone-{index}"
        zones.append((str(name), geometry))
    return zones


def load_geojson_features(path: str | Path) -> list[dict[str, Any]]:
    """Read the features of a FeatureCollection, or a single Feature, from disk."""
    document = json.loads(Path(path).read_text(encoding="utf-8"))
    if document.get("type") == "FeatureCollection":
        return document.get("features", [])
    return [document]


class GeoJSONGeofenceRepository(GeofenceRepository):
    """Geofences held in memory from GeoJSON features."""

    def __init__(self, features: list[dict[str, Any]]):
        """
        Initialize from GeoJSON features.

        Raises:
            ValueError: If a feature has no polygon geometry
        """
        self._zones = parse_geofence_features(features)

    @classmethod
    def from_file(cls, path: str | Path) -> "GeoJSONGeofenceRepository":
        """Load geofences from a GeoJSON file."""
        features = load_geojson_features(path)
        logger.info("geofences_loaded", path=str(path), count=len(features))
        return cls(features)

    @property
    def names(self) -> list[str]:
        """Names of all loaded geofences."""
        return [name for name, _ in self._zones]

    async def find_covering(
        self,
        db: AsyncSession,
        latitude: float,
        longitude: float,
    ) -> list[str]:
        return sorted(
            name for name, geometry in self._zones if covers(geometry, latitude, longitude)
        )
