"""
Driving distance via the Google Distance Matrix API

One origin, one destination per call. Distance is meters, duration is
seconds, both taken from rows[0].elements[0].
"""

import logging

from geocalc.errors import DistanceError
from geocalc.schemas import Coordinates, DistanceResult
from geocalc.services.location.google_client import GoogleMapsClient

logger = logging.getLogger(__name__)


class DistanceMatrixClient(GoogleMapsClient):
    error_cls = DistanceError
    label = "Distance calculation"

    def calculate_distance(self, origin: Coordinates, destination: Coordinates) -> DistanceResult:
        logger.info(f"Calculating distance from ({origin.as_lat_lng()}) to ({destination.as_lat_lng()})")

        data = self._get_json({
            "origins": origin.as_lat_lng(),
            "destinations": destination.as_lat_lng(),
        })

        status = data.get("status")
        if status != "OK":
            raise DistanceError(f"Distance calculation failed with status: {status}")

        rows = data.get("rows") or []
        elements = (rows[0].get("elements") or []) if rows and isinstance(rows[0], dict) else []
        if not elements:
            raise DistanceError("Distance calculation failed: no distance results found")

        element = elements[0] if isinstance(elements[0], dict) else {}
        if element.get("status") != "OK":
            raise DistanceError(f"Distance calculation failed: element status {element.get('status')}")

        try:
            result = DistanceResult(
                distance_meters=element["distance"]["value"],
                duration_seconds=element["duration"]["value"],
                distance_text=element["distance"].get("text", ""),
                duration_text=element["duration"].get("text", ""),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DistanceError(f"Distance calculation failed: malformed element ({e})") from e

        logger.info(f"Distance calculation successful: {result.distance_text} ({result.duration_text})")
        return result
