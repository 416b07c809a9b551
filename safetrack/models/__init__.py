"""Database models.

The PostGIS ``geofences`` table is managed by migrations and queried with
raw SQL, so it has no table definition here.
"""

from safetrack.models.locations import location_history
from safetrack.models.notifications import notifications
from safetrack.models.users import users

__all__ = [
    "location_history",
    "notifications",
    "users",
]
