"""
Google Maps API key from AWS Secrets Manager

The secret value is JSON; the key may sit under any of ACCEPTED_KEY_FIELDS.
Fetched once per SecretsProvider and kept in memory for the life of the
process (one provider per warm Lambda container).
"""

import json
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from geocalc.errors import CredentialError

logger = logging.getLogger(__name__)

ACCEPTED_KEY_FIELDS = ("apiKey", "key", "GOOGLE_MAPS_API_KEY")


class SecretsProvider:
    def __init__(self, secret_name: str, region: str, client: Optional[Any] = None):
        self.secret_name = secret_name
        self.region = region
        self._client = client
        self._api_key: Optional[str] = None

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("secretsmanager", region_name=self.region)
        return self._client

    def get_api_key(self) -> str:
        if self._api_key:
            logger.debug("Using cached Google API key")
            return self._api_key

        logger.info(f"Fetching Google API key from Secrets Manager: {self.secret_name}")
        try:
            response = self.client.get_secret_value(SecretId=self.secret_name)
        except (ClientError, BotoCoreError) as e:
            raise CredentialError(f"Failed to get Google API key: {e}") from e

        secret_string = response.get("SecretString")
        if not secret_string:
            raise CredentialError("Failed to get Google API key: secret string is empty")

        try:
            secret = json.loads(secret_string)
        except ValueError as e:
            raise CredentialError(f"Failed to get Google API key: secret is not valid JSON ({e})") from e

        if not isinstance(secret, dict):
            raise CredentialError("Failed to get Google API key: secret is not a JSON object")

        api_key = next((secret[f] for f in ACCEPTED_KEY_FIELDS if secret.get(f)), None)
        if not api_key:
            raise CredentialError("Failed to get Google API key: API key not found in secret")

        self._api_key = str(api_key)
        logger.info("Retrieved Google API key")
        return self._api_key
