"""Coordinate store: the `weather` table behind the cache.

Lookups are a bounding-box range query rather than an exact key match,
because the provider snaps coordinates to its own grid. Inserts always
append; rows only ever leave the table through `delete_expired`.
"""

import logging

from sqlalchemy import Column, Float, Index, Integer, create_engine, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from errors import StorageError
from models import WeatherRecord

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.5

Base = declarative_base()


class WeatherRow(Base):
    __tablename__ = "weather"

    id = Column(Integer, primary_key=True, autoincrement=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    temperature = Column(Float, nullable=False)
    created_at = Column(Integer, nullable=False)

    __table_args__ = (
        Index("idx_weather_location", "latitude", "longitude"),
        Index("idx_weather_created_at", "created_at"),
    )

    def to_record(self) -> WeatherRecord:
        return WeatherRecord(
            id=self.id,
            latitude=self.latitude,
            longitude=self.longitude,
            temperature=self.temperature,
            created_at=self.created_at,
        )


class CoordinateStore:
    def __init__(self, engine):
        self._engine = engine
        self._session = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, url: str) -> "CoordinateStore":
        """Build a store from a SQLAlchemy URL.

        In-memory SQLite gets a single shared connection so the request
        threadpool and the evictor thread all see the same database.
        """
        if url.startswith("sqlite"):
            kwargs: dict = {"connect_args": {"check_same_thread": False}}
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
            engine = create_engine(url, **kwargs)
        else:
            engine = create_engine(url, pool_pre_ping=True)
        return cls(engine)

    def create_schema(self) -> None:
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise StorageError(f"failed to create weather table: {e}") from e

    def find_near(
        self, lat: float, lon: float, tolerance: float = DEFAULT_TOLERANCE
    ) -> list[WeatherRecord]:
        """All records strictly inside the tolerance box around (lat, lon), unordered."""
        stmt = select(WeatherRow).where(
            WeatherRow.latitude > lat - tolerance,
            WeatherRow.latitude < lat + tolerance,
            WeatherRow.longitude > lon - tolerance,
            WeatherRow.longitude < lon + tolerance,
        )
        try:
            with self._session() as session:
                rows = session.scalars(stmt).all()
                return [row.to_record() for row in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"failed to retrieve data: {e}") from e

    def insert(self, record: WeatherRecord) -> WeatherRecord:
        row = WeatherRow(
            latitude=record.latitude,
            longitude=record.longitude,
            temperature=record.temperature,
            created_at=record.created_at,
        )
        try:
            with self._session() as session, session.begin():
                session.add(row)
        except SQLAlchemyError as e:
            raise StorageError(f"failed to store data: {e}") from e
        return row.to_record()

    def delete_expired(self, cutoff: int, max_batch: int) -> int:
        """Delete at most `max_batch` rows with created_at <= cutoff. Returns the count."""
        expired = select(WeatherRow.id).where(WeatherRow.created_at <= cutoff).limit(max_batch)
        stmt = (
            delete(WeatherRow)
            .where(WeatherRow.id.in_(expired))
            .execution_options(synchronize_session=False)
        )
        try:
            with self._session() as session, session.begin():
                result = session.execute(stmt)
                return result.rowcount or 0
        except SQLAlchemyError as e:
            raise StorageError(f"failed to clean expired records: {e}") from e

    def count(self) -> int:
        try:
            with self._session() as session:
                return session.scalar(select(func.count()).select_from(WeatherRow)) or 0
        except SQLAlchemyError as e:
            raise StorageError(f"failed to count records: {e}") from e

    def dispose(self) -> None:
        self._engine.dispose()
