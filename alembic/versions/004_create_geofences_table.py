"""Create PostGIS geofences table

Revision ID: 004
Revises: 003
Create Date: 2026-10-01 00:30:00.000000

"""

from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create geofences table with a geography polygon column."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "postgis"')

    op.execute(
        """
        CREATE TABLE geofences (
            id SERIAL PRIMARY KEY,
            name TEXT NOT NULL UNIQUE,
            area GEOGRAPHY(MULTIPOLYGON, 4326) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        """
    )

    # Spatial index for ST_Covers lookups
    op.execute("CREATE INDEX idx_geofences_area ON geofences USING GIST (area)")


def downgrade() -> None:
    """Drop geofences table."""
    op.execute("DROP INDEX IF EXISTS idx_geofences_area")
    op.execute("DROP TABLE IF EXISTS geofences")
