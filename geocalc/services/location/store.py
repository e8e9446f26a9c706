"""
Coordinate and distance storage for persons and venues

Raw SQL through SQLAlchemy text(), one short transaction per call.
Reads return typed schemas; writes are idempotent (plain UPDATE for
coordinates, INSERT ... ON CONFLICT for distances).
"""

import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from geocalc.database import Database
from geocalc.errors import MissingCoordinateError, NotFoundError, PersistenceError
from geocalc.schemas import Coordinates, PersonAddress, VenueAddress

logger = logging.getLogger(__name__)


class LocationStore:
    def __init__(self, db: Database):
        self.db = db

    # =========================================================================
    # INTERNAL
    # =========================================================================

    def _fetch_one(self, sql: str, params: dict):
        try:
            with self.db.connect() as conn:
                return conn.execute(text(sql), params).mappings().first()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Database read failed: {e}") from e

    def _write(self, sql: str, params: dict) -> int:
        try:
            with self.db.begin() as conn:
                return conn.execute(text(sql), params).rowcount
        except SQLAlchemyError as e:
            raise PersistenceError(f"Database write failed: {e}") from e

    @staticmethod
    def _parse_coordinates(kind: str, entity_id: int, lat_lng: Optional[str]) -> Coordinates:
        if lat_lng is None or not str(lat_lng).strip():
            raise MissingCoordinateError(
                f"{kind} {entity_id} has no coordinates. Run '{kind.lower()}' geocoding first."
            )
        try:
            return Coordinates.parse_lat_lng(str(lat_lng))
        except ValueError as e:
            raise PersistenceError(f"{kind} {entity_id} has malformed coordinates '{lat_lng}'") from e

    # =========================================================================
    # PERSON
    # =========================================================================

    def get_person_address(self, person_id: int) -> PersonAddress:
        logger.info(f"Fetching address for person ID: {person_id}")
        row = self._fetch_one("""
            SELECT person_id, address_line1, address_line2, postal_code, postal_city
            FROM person
            WHERE person_id = :id
        """, {"id": person_id})
        if row is None:
            raise NotFoundError(f"Person with ID {person_id} not found")
        return PersonAddress(**row)

    def get_person_coordinates(self, person_id: int) -> Coordinates:
        logger.info(f"Fetching coordinates for person ID: {person_id}")
        row = self._fetch_one(
            "SELECT lat_lng FROM person WHERE person_id = :id", {"id": person_id}
        )
        if row is None:
            raise NotFoundError(f"Person with ID {person_id} not found")
        return self._parse_coordinates("Person", person_id, row["lat_lng"])

    def update_person_coordinates(self, person_id: int, lat: float, lng: float, place_id: str = ""):
        lat_lng = Coordinates(lat=lat, lng=lng).as_lat_lng()
        logger.info(f"Updating coordinates for person ID: {person_id}")
        self._write("""
            UPDATE person
            SET lat_lng = :lat_lng,
                place_id = :place_id,
                recalc_coordinates = false
            WHERE person_id = :id
        """, {"lat_lng": lat_lng, "place_id": place_id or "", "id": person_id})
        logger.info(f"Updated person {person_id} coordinates: {lat_lng}")

    # =========================================================================
    # VENUE
    # =========================================================================

    def get_venue_address(self, venue_id: int) -> VenueAddress:
        logger.info(f"Fetching address for venue ID: {venue_id}")
        row = self._fetch_one("""
            SELECT venue_id, address_line1, address_line2, postal_code, postal_city
            FROM venue
            WHERE venue_id = :id
        """, {"id": venue_id})
        if row is None:
            raise NotFoundError(f"Venue with ID {venue_id} not found")
        return VenueAddress(**row)

    def get_venue_coordinates(self, venue_id: int) -> Coordinates:
        logger.info(f"Fetching coordinates for venue ID: {venue_id}")
        row = self._fetch_one(
            "SELECT lat_lng FROM venue WHERE venue_id = :id", {"id": venue_id}
        )
        if row is None:
            raise NotFoundError(f"Venue with ID {venue_id} not found")
        return self._parse_coordinates("Venue", venue_id, row["lat_lng"])

    def update_venue_coordinates(self, venue_id: int, lat: float, lng: float, place_id: str = ""):
        lat_lng = Coordinates(lat=lat, lng=lng).as_lat_lng()
        logger.info(f"Updating coordinates for venue ID: {venue_id}")
        self._write("""
            UPDATE venue
            SET lat_lng = :lat_lng,
                place_id = :place_id
            WHERE venue_id = :id
        """, {"lat_lng": lat_lng, "place_id": place_id or "", "id": venue_id})
        logger.info(f"Updated venue {venue_id} coordinates: {lat_lng}")

    # =========================================================================
    # PERSON -> VENUE DISTANCE
    # =========================================================================

    def save_person_venue_distance(self, person_id: int, venue_id: int, meters: int, seconds: int):
        logger.info(f"Saving distance for person {person_id} to venue {venue_id}")
        self._write("""
            INSERT INTO person_venue (person_id, venue_id, meters, seconds)
            VALUES (:person_id, :venue_id, :meters, :seconds)
            ON CONFLICT (person_id, venue_id) DO UPDATE
            SET meters = EXCLUDED.meters,
                seconds = EXCLUDED.seconds
        """, {"person_id": person_id, "venue_id": venue_id, "meters": meters, "seconds": seconds})
        logger.info(f"Saved distance data: {meters}m, {seconds}s")
