"""
Shared GET helper for the Google Maps web services

Both the geocoder and the distance matrix call one JSON GET endpoint with
the API key as a query parameter. Transport and decode failures are
raised as the caller's error type.
"""

import logging
from typing import Type

import httpx

from geocalc.errors import UpstreamError
from geocalc.services.credentials import SecretsProvider

logger = logging.getLogger(__name__)


class GoogleMapsClient:
    error_cls: Type[UpstreamError] = UpstreamError
    label = "Google"

    def __init__(self, http: httpx.Client, secrets: SecretsProvider, url: str):
        self.http = http
        self.secrets = secrets
        self.url = url

    def _get_json(self, params: dict) -> dict:
        # key is fetched before any request so credential failures surface as-is
        query = dict(params, key=self.secrets.get_api_key())
        try:
            response = self.http.get(self.url, params=query)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            # the URL carries the key, so neither str(e) nor the chained traceback is kept
            raise self.error_cls(f"{self.label} request failed: HTTP {e.response.status_code}") from None
        except httpx.HTTPError as e:
            raise self.error_cls(f"{self.label} request failed: {type(e).__name__}: {e}") from e
        except ValueError as e:
            raise self.error_cls(f"{self.label} returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise self.error_cls(f"{self.label} returned unexpected payload")
        return data
