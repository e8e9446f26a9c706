"""
GeoCalc Lambda entry point

Four calculation types, selected by exact match on payload["type"]:

    person        geocode a person's address, store coordinates + place id
    venue         geocode a venue's address (venueId1, else venueId2)
    person_venue  driving distance person -> venue, upserted to person_venue
    venue_venue   driving distance venue -> venue, returned only

Every failure is turned into the same 500 envelope; nothing is retried.
Each handler writes at most once, as its last step.
"""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import pydantic

from geocalc.config import Settings
from geocalc.context import AppContext
from geocalc.errors import GeoCalcError, ValidationError
from geocalc.logging_setup import configure_logging
from geocalc.schemas import CalculationRequest

logger = logging.getLogger(__name__)


def format_utc_iso(dt: datetime) -> str:
    """ISO 8601 with millisecond precision and a Z suffix."""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_payload(event: Any) -> CalculationRequest:
    """
    Pull the calculation payload out of a Lambda event.

    API Gateway puts it in event["body"] as a JSON string; direct
    invocations pass the payload itself as the event.
    """
    if not isinstance(event, dict):
        raise ValidationError("Event must be a JSON object")

    payload = event
    body = event.get("body")
    if body:
        if isinstance(body, (str, bytes)):
            try:
                payload = json.loads(body)
            except ValueError as e:
                raise ValidationError(f"Request body is not valid JSON: {e}") from e
        else:
            payload = body

    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    try:
        return CalculationRequest(**payload)
    except pydantic.ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise ValidationError(f"Invalid parameter(s): {fields}") from e


class Dispatcher:
    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.handlers: Dict[str, Callable[[CalculationRequest], dict]] = {
            "person": self.handle_person,
            "venue": self.handle_venue,
            "person_venue": self.handle_person_venue,
            "venue_venue": self.handle_venue_venue,
        }

    # =========================================================================
    # ENVELOPE
    # =========================================================================

    def dispatch(self, event: Any) -> dict:
        started = time.monotonic()
        logger.info(f"GeoCalc started at {format_utc_iso(datetime.now(timezone.utc))}")

        try:
            request = parse_payload(event)
            logger.info(
                f"Processing calculation type: {request.type} "
                f"(personId={request.person_id}, venueId1={request.venue_id1}, "
                f"venueId2={request.venue_id2}, recalc_fees={request.recalc_fees})"
            )
            if not request.type:
                raise ValidationError("Missing required parameter: type")
            handler = self.handlers.get(request.type)
            if handler is None:
                raise ValidationError(f"Unknown calculation type: {request.type}")

            result = handler(request)

        except GeoCalcError as e:
            logger.error(f"Calculation failed ({e.kind}): {e}", exc_info=True)
            return self._failure(str(e), e.kind, started)
        except Exception as e:
            logger.exception(f"Calculation failed with unexpected error: {e}")
            return self._failure(f"Internal error: {e}", "internal", started)

        duration = self._elapsed_ms(started)
        logger.info(f"Calculation completed: type={request.type} duration={duration}ms")
        return {
            "statusCode": 200,
            "body": json.dumps({
                "success": True,
                "type": request.type,
                "result": result,
                "duration": duration,
                "timestamp": format_utc_iso(datetime.now(timezone.utc)),
            }),
        }

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.monotonic() - started) * 1000)

    def _failure(self, message: str, kind: str, started: float) -> dict:
        return {
            "statusCode": 500,
            "body": json.dumps({
                "success": False,
                "error": message,
                "errorType": kind,
                "duration": self._elapsed_ms(started),
                "timestamp": format_utc_iso(datetime.now(timezone.utc)),
            }),
        }

    # =========================================================================
    # HANDLERS
    # =========================================================================

    def handle_person(self, request: CalculationRequest) -> dict:
        person_id = request.person_id
        if not person_id:
            raise ValidationError("Missing required parameter: personId")
        logger.info(f"Processing person geocoding for person {person_id}")

        address = self.ctx.store.get_person_address(person_id)
        geocoded = self.ctx.geocoder.geocode_address(address)
        self.ctx.store.update_person_coordinates(person_id, geocoded.lat, geocoded.lng, geocoded.place_id)

        return {
            "personId": person_id,
            "address": address.to_json_dict(),
            "coordinates": geocoded.to_json_dict(),
        }

    def handle_venue(self, request: CalculationRequest) -> dict:
        venue_id = request.venue_id1 or request.venue_id2
        if not venue_id:
            raise ValidationError("Missing required parameter: venueId")
        logger.info(f"Processing venue geocoding for venue {venue_id}")

        address = self.ctx.store.get_venue_address(venue_id)
        geocoded = self.ctx.geocoder.geocode_address(address)
        self.ctx.store.update_venue_coordinates(venue_id, geocoded.lat, geocoded.lng, geocoded.place_id)

        return {
            "venueId": venue_id,
            "address": address.to_json_dict(),
            "coordinates": geocoded.to_json_dict(),
        }

    def handle_person_venue(self, request: CalculationRequest) -> dict:
        person_id = request.person_id
        venue_id = request.venue_id1 or request.venue_id2
        if not person_id or not venue_id:
            raise ValidationError("Missing required parameters: personId and venueId")
        logger.info(f"Processing person-venue distance for person {person_id} and venue {venue_id}")

        person_coords = self.ctx.store.get_person_coordinates(person_id)
        venue_coords = self.ctx.store.get_venue_coordinates(venue_id)
        distance = self.ctx.distances.calculate_distance(person_coords, venue_coords)
        self.ctx.store.save_person_venue_distance(
            person_id, venue_id, distance.distance_meters, distance.duration_seconds
        )

        return {
            "personId": person_id,
            "venueId": venue_id,
            "personCoordinates": person_coords.to_json_dict(),
            "venueCoordinates": venue_coords.to_json_dict(),
            "distance": distance.to_json_dict(),
        }

    def handle_venue_venue(self, request: CalculationRequest) -> dict:
        venue_id1, venue_id2 = request.venue_id1, request.venue_id2
        if not venue_id1 or not venue_id2:
            raise ValidationError("Missing required parameters: venueId1 and venueId2")
        logger.info(f"Processing venue-venue distance for venues {venue_id1} and {venue_id2}")

        venue1_coords = self.ctx.store.get_venue_coordinates(venue_id1)
        venue2_coords = self.ctx.store.get_venue_coordinates(venue_id2)
        distance = self.ctx.distances.calculate_distance(venue1_coords, venue2_coords)

        return {
            "venueId1": venue_id1,
            "venueId2": venue_id2,
            "venue1Coordinates": venue1_coords.to_json_dict(),
            "venue2Coordinates": venue2_coords.to_json_dict(),
            "distance": distance.to_json_dict(),
        }


# =============================================================================
# PROCESS ENTRY POINT
# =============================================================================

_dispatcher: Optional[Dispatcher] = None


def get_dispatcher() -> Dispatcher:
    """Build the process context on the first (cold) invocation."""
    global _dispatcher
    if _dispatcher is None:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        _dispatcher = Dispatcher(AppContext.from_settings(settings))
    return _dispatcher


def shutdown():
    """Release the database pool and HTTP client."""
    global _dispatcher
    if _dispatcher is not None:
        _dispatcher.ctx.close()
        _dispatcher = None


def _startup_failure(message: str, kind: str) -> dict:
    return {
        "statusCode": 500,
        "body": json.dumps({
            "success": False,
            "error": message,
            "errorType": kind,
            "duration": 0,
            "timestamp": format_utc_iso(datetime.now(timezone.utc)),
        }),
    }


def lambda_handler(event, context):
    # startup errors happen before a dispatcher exists
    try:
        dispatcher = get_dispatcher()
    except GeoCalcError as e:
        logger.error(f"Startup failed: {e}")
        return _startup_failure(str(e), e.kind)
    except Exception as e:
        logger.exception(f"Startup failed with unexpected error: {e}")
        return _startup_failure(f"Internal error: {e}", "internal")
    return dispatcher.dispatch(event)
