"""
Error taxonomy for GeoCalc

Every failure carries a `kind` discriminant that ends up in the
response envelope as `errorType`.
"""


class GeoCalcError(Exception):
    """Base class for all handled failures."""

    kind = "internal"


class ConfigError(GeoCalcError):
    """Invalid or missing configuration."""

    kind = "config"


class ValidationError(GeoCalcError):
    """Bad or missing request input."""

    kind = "validation"


class NotFoundError(GeoCalcError):
    """Entity row does not exist."""

    kind = "not_found"


class MissingCoordinateError(GeoCalcError):
    """Entity exists but has not been geocoded yet."""

    kind = "missing_coordinates"


class PersistenceError(GeoCalcError):
    """Storage fault."""

    kind = "persistence"


class UpstreamError(GeoCalcError):
    """Failure talking to an external collaborator."""

    kind = "upstream"


class CredentialError(UpstreamError):
    kind = "credential"


class GeocodeError(UpstreamError):
    kind = "geocode"


class DistanceError(UpstreamError):
    kind = "distance"
