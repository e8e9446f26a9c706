"""
Process-scoped collaborators

Built once per process (per warm Lambda container) and handed to the
Dispatcher. Owns the pooled database engine, the HTTP client, and the
cached API key; close() releases the first two.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from geocalc.config import Settings
from geocalc.database import Database
from geocalc.services.credentials import SecretsProvider
from geocalc.services.location.distance_matrix import DistanceMatrixClient
from geocalc.services.location.geocoding import GeocodingClient
from geocalc.services.location.store import LocationStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    db: Database
    http: httpx.Client
    secrets: SecretsProvider
    store: LocationStore = field(init=False)
    geocoder: GeocodingClient = field(init=False)
    distances: DistanceMatrixClient = field(init=False)

    def __post_init__(self):
        self.store = LocationStore(self.db)
        self.geocoder = GeocodingClient(
            self.http, self.secrets, self.settings.geocode_url, country=self.settings.geocode_country
        )
        self.distances = DistanceMatrixClient(self.http, self.secrets, self.settings.distance_matrix_url)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        db: Optional[Database] = None,
        http: Optional[httpx.Client] = None,
        secrets: Optional[SecretsProvider] = None,
    ) -> "AppContext":
        return cls(
            settings=settings,
            db=db or Database(settings.database_url, pool_size=settings.db_pool_size),
            http=http or httpx.Client(),
            secrets=secrets or SecretsProvider(settings.google_secret_name, settings.aws_region),
        )

    def close(self):
        logger.info("Shutting down: closing HTTP client and database pool")
        self.http.close()
        self.db.close()
