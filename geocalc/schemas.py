"""
Pydantic Schemas for GeoCalc
Covers: request payload, addresses, coordinates, and provider results.

Field names are snake_case in Python and camelCase on the wire
(populate_by_name lets both be used when building objects).
"""

import math
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


def _fixed_point(value: float) -> str:
    """Shortest round-trip digits, never in exponent form (5e-05 -> 0.00005)"""
    return format(Decimal(repr(value)), "f")


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True)


# =============================================================================
# REQUEST
# =============================================================================

class CalculationRequest(CamelModel):
    """Incoming payload. Only presence is checked here; routing lives in the handler."""
    type: Optional[str] = None
    person_id: Optional[int] = None
    venue_id1: Optional[int] = None
    venue_id2: Optional[int] = None
    recalc_fees: Optional[Any] = Field(default=None, alias="recalc_fees")   # accepted, not used by any handler


# =============================================================================
# ADDRESSES
# =============================================================================

class Address(CamelModel):
    """Postal address fields shared by persons and venues"""
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    postal_code: Optional[str] = None
    postal_city: Optional[str] = None


class PersonAddress(Address):
    person_id: int


class VenueAddress(Address):
    venue_id: int


EntityAddress = Union[PersonAddress, VenueAddress]


# =============================================================================
# COORDINATES & PROVIDER RESULTS
# =============================================================================

class Coordinates(CamelModel):
    lat: float
    lng: float

    @field_validator("lat", "lng")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("coordinate must be a finite number")
        return v

    @classmethod
    def parse_lat_lng(cls, value: str) -> "Coordinates":
        """Parse the stored composite 'lat,lng' text"""
        parts = value.split(",")
        if len(parts) != 2:
            raise ValueError(f"Expected 'lat,lng', got '{value}'")
        return cls(lat=float(parts[0].strip()), lng=float(parts[1].strip()))

    def as_lat_lng(self) -> str:
        return f"{_fixed_point(self.lat)},{_fixed_point(self.lng)}"


class GeocodeResult(Coordinates):
    place_id: str = ""


class DistanceResult(CamelModel):
    distance_meters: int
    duration_seconds: int
    distance_text: str = ""
    duration_text: str = ""
