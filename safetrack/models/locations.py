"""Location history model definition using SQLAlchemy Core."""

from sqlalchemy import Column, DateTime, Float, Index, Integer, MetaData, Table, func

metadata = MetaData()

location_history = Table(
    "location_history",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    # Not a foreign key: tourists are not validated for existence
    Column("tourist_id", Integer, nullable=False),
    Column("latitude", Float(precision=53), nullable=False),
    Column("longitude", Float(precision=53), nullable=False),
    # Client-supplied event time
    Column("timestamp", DateTime(timezone=True), nullable=False),
    # Ingestion time
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Index("idx_location_history_tourist_id", "tourist_id"),
)
