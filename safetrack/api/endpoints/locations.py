"""Location endpoints."""

from fastapi import APIRouter, BackgroundTasks, status

from safetrack.dependencies import DatabaseSession, LocationServiceDep
from safetrack.schemas.locations import LocationCreate, LocationRecord, LocationResponse

router = APIRouter(tags=["Locations"])


@router.post(
    "/location",
    response_model=LocationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report a tourist's location",
)
async def report_location(
    request: LocationCreate,
    db: DatabaseSession,
    location_service: LocationServiceDep,
    background_tasks: BackgroundTasks,
) -> LocationResponse:
    """
    Store a coordinate report and check it against the safe zones.

    The report is stored whatever the geofence outcome. When the point lies
    outside every zone, the alert is delivered after the response is sent,
    so a slow or failing notification channel never delays the 201.
    """
    result = await location_service.ingest(
        db,
        tourist_id=request.tourist_id,
        latitude=request.latitude,
        longitude=request.longitude,
        timestamp=request.timestamp,
    )

    if result.alert is not None:
        background_tasks.add_task(location_service.deliver_alert, result.alert)

    return LocationResponse(
        message="Location data received successfully.",
        location=LocationRecord.model_validate(result.report),
        zone_status=result.zone_status,
    )
