"""
Geocoding Service for Location Services

Provider: Google Geocoding API (requires API key from Secrets Manager)

Address strings are built in a fixed order the provider parses well:
    line 1, line 2, postal code, city, country
Empty parts are skipped. Only the first result is used.
"""

import logging

from geocalc.config import DEFAULT_COUNTRY
from geocalc.errors import GeocodeError
from geocalc.schemas import Address, GeocodeResult
from geocalc.services.location.google_client import GoogleMapsClient

logger = logging.getLogger(__name__)


def format_address(address: Address, country: str = DEFAULT_COUNTRY) -> str:
    """
    Join the address parts into one search string.

    >>> format_address(Address(address_line1="Main St 1", postal_code="2100", postal_city="Copenhagen"))
    'Main St 1, 2100, Copenhagen, Denmark'
    """
    parts = [
        address.address_line1,
        address.address_line2,
        address.postal_code,
        address.postal_city,
        country,
    ]
    return ", ".join(p.strip() for p in parts if p and p.strip())


class GeocodingClient(GoogleMapsClient):
    error_cls = GeocodeError
    label = "Geocoding"

    def __init__(self, http, secrets, url: str, country: str = DEFAULT_COUNTRY):
        super().__init__(http, secrets, url)
        self.country = country

    def geocode_address(self, address: Address) -> GeocodeResult:
        query_address = format_address(address, self.country)
        logger.info(f"Geocoding address: {query_address}")

        data = self._get_json({"address": query_address})

        status = data.get("status")
        if status != "OK":
            raise GeocodeError(f"Geocoding failed with status: {status}")

        results = data.get("results") or []
        if not results:
            raise GeocodeError("Geocoding failed: no results found for address")

        first = results[0]
        try:
            location = first["geometry"]["location"]
            result = GeocodeResult(
                lat=location["lat"],
                lng=location["lng"],
                place_id=first.get("place_id") or "",
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise GeocodeError(f"Geocoding failed: malformed result ({e})") from e

        logger.info(f"Geocoding successful: lat={result.lat}, lng={result.lng}, placeId={result.place_id}")
        return result
