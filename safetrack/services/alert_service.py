"""Out-of-zone alert delivery."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

import httpx
import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class GeofenceAlert:
    """A tourist reported a position outside every safe zone."""

    tourist_id: int
    latitude: float
    longitude: float
    timestamp: datetime

    @property
    def message(self) -> str:
        """Human-readable alert text."""
        return (
            f"ALERT! Tourist ID {self.tourist_id} is outside of any defined safe zone "
            f"at ({self.latitude}, {self.longitude})."
        )


class AlertSender(ABC):
    """Delivery channel for geofence alerts."""

    @abstractmethod
    async def send(self, alert: GeofenceAlert) -> None:
        """Deliver one alert; raise on failure."""

    async def aclose(self) -> None:
        """Release any resources held by the sender."""


class LogAlertSender(AlertSender):
    """Record alerts in the service log only."""

    async def send(self, alert: GeofenceAlert) -> None:
        logger.warning(
            "geofence_alert_logged",
            tourist_id=alert.tourist_id,
            alert_message=alert.message,
        )


class NotificationServiceAlertSender(AlertSender):
    """Deliver alerts to the notification service's inbox for the tourist."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Accept": "application/json"},
            timeout=timeout,
        )

    async def send(self, alert: GeofenceAlert) -> None:
        """
        Create a notification for the tourist.

        Raises:
            httpx.HTTPStatusError: If the notification service rejects the alert
            httpx.RequestError: If the notification service cannot be reached
        """
        response = await self._client.post(
            "/notifications",
            json={"userId": alert.tourist_id, "message": alert.message},
        )
        response.raise_for_status()

        logger.info(
            "geofence_alert_delivered",
            tourist_id=alert.tourist_id,
            status_code=response.status_code,
        )

    async def aclose(self) -> None:
        await self._client.aclose()


class AlertDispatcher:
    """Best-effort alert emission that never fails the caller."""

    def __init__(self, sender: AlertSender):
        """Initialize dispatcher with a delivery channel."""
        self.sender = sender

    async def dispatch(self, alert: GeofenceAlert) -> bool:
        """
        Emit an alert, isolating any delivery failure.

        Args:
            alert: Alert to deliver

        Returns:
            True if the sender accepted the alert, False if delivery failed
        """
        logger.warning(
            "tourist_outside_safe_zone",
            tourist_id=alert.tourist_id,
            latitude=alert.latitude,
            longitude=alert.longitude,
        )

        try:
            await self.sender.send(alert)
        except Exception as e:
            logger.error(
                "alert_delivery_failed",
                tourist_id=alert.tourist_id,
                error=str(e),
                exc_info=True,
            )
            return False

        return True

    async def aclose(self) -> None:
        """Close the underlying sender."""
        await self.sender.aclose()


def build_alert_sender(notification_service_url: str | None, timeout: float = 5.0) -> AlertSender:
    """Pick the alert channel: the notification service when configured, the log otherwise."""
    if notification_service_url:
        return NotificationServiceAlertSender(notification_service_url, timeout=timeout)
    return LogAlertSender()
