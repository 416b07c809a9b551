"""Location ingest with geofence evaluation."""

from dataclasses import dataclass, field
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from safetrack.core.exceptions import InvalidInputException
from safetrack.models.locations import location_history
from safetrack.services.alert_service import AlertDispatcher, GeofenceAlert
from safetrack.services.geofence_service import GeofenceRepository

logger = structlog.get_logger(__name__)


@dataclass
class LocationIngestResult:
    """Stored report plus the outcome of the geofence check."""

    report: dict
    zone_status: str
    zones: list[str] = field(default_factory=list)
    # Set when the point is outside every zone; delivered after the response
    alert: GeofenceAlert | None = None


class LocationService:
    """Service for storing location reports and checking them against geofences."""

    def __init__(self, geofences: GeofenceRepository, alerts: AlertDispatcher):
        """Initialize service with a geofence source and an alert dispatcher."""
        self.geofences = geofences
        self.alerts = alerts

    async def ingest(
        self,
        db: AsyncSession,
        tourist_id: int | None,
        latitude: float | None,
        longitude: float | None,
        timestamp: datetime | None,
    ) -> LocationIngestResult:
        """
        Store a location report, then check it against the current geofences.

        The report is committed before the geofence check runs, and a failed
        lookup does not change the outcome of the write. Out-of-zone alerts are
        returned for the caller to hand to ``deliver_alert`` once the response
        is sent.

        Args:
            db: Database session
            tourist_id: Reporting tourist
            latitude: Latitude in degrees
            longitude: Longitude in degrees
            timestamp: Event time reported by the device

        Returns:
            The stored report and its zone status

        Raises:
            InvalidInputException: If any field is missing
        """
        if tourist_id is None or latitude is None or longitude is None or timestamp is None:
            raise InvalidInputException("Missing required location data.")

        query = (
            location_history.insert()
            .values(
                tourist_id=tourist_id,
                latitude=latitude,
                longitude=longitude,
                timestamp=timestamp,
            )
            .returning(location_history)
        )
        result = await db.execute(query)
        report = dict(result.mappings().one())
        await db.commit()

        logger.info("location_ingested", tourist_id=tourist_id, report_id=report["id"])

        try:
            zones = await self.geofences.find_covering(db, latitude, longitude)
        except Exception as e:
            await db.rollback()
            logger.error(
                "geofence_evaluation_failed",
                tourist_id=tourist_id,
                report_id=report["id"],
                error=str(e),
                exc_info=True,
            )
            return LocationIngestResult(report=report, zone_status="unknown")

        if zones:
            logger.info("tourist_inside_safe_zone", tourist_id=tourist_id, zone=zones[0])
            return LocationIngestResult(report=report, zone_status="inside", zones=zones)

        alert = GeofenceAlert(
            tourist_id=tourist_id,
            latitude=latitude,
            longitude=longitude,
            timestamp=timestamp,
        )
        logger.info("geofence_alert_pending", tourist_id=tourist_id, report_id=report["id"])

        return LocationIngestResult(report=report, zone_status="outside", alert=alert)

    async def deliver_alert(self, alert: GeofenceAlert) -> bool:
        """Deliver an out-of-zone alert; failures are logged, never raised."""
        return await self.alerts.dispatch(alert)
