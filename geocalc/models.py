"""
SQLAlchemy models for GeoCalc

The person and venue tables are owned by the external record system;
this service only reads addresses and writes coordinates. Coordinates are
stored as a single composite "lat,lng" text column next to the provider
place id. person_venue holds the derived driving distance per pair.
"""

from sqlalchemy import Column, Integer, String, Boolean, PrimaryKeyConstraint

from geocalc.database import Base


class Person(Base):
    """Person with a postal address"""
    __tablename__ = "person"

    person_id = Column(Integer, primary_key=True)
    address_line1 = Column(String(255))
    address_line2 = Column(String(255))
    postal_code = Column(String(20))
    postal_city = Column(String(100))
    lat_lng = Column(String(64))                 # "55.6761,12.5683", NULL until geocoded
    place_id = Column(String(255))
    recalc_coordinates = Column(Boolean, default=False)


class Venue(Base):
    """Venue with a postal address"""
    __tablename__ = "venue"

    venue_id = Column(Integer, primary_key=True)
    address_line1 = Column(String(255))
    address_line2 = Column(String(255))
    postal_code = Column(String(20))
    postal_city = Column(String(100))
    lat_lng = Column(String(64))
    place_id = Column(String(255))


class PersonVenue(Base):
    """Driving distance from a person to a venue (upserted per pair)"""
    __tablename__ = "person_venue"
    __table_args__ = (PrimaryKeyConstraint("person_id", "venue_id"),)

    person_id = Column(Integer, nullable=False)
    venue_id = Column(Integer, nullable=False)
    meters = Column(Integer)
    seconds = Column(Integer)
