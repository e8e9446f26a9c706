from __future__ import annotations

import json

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from geocalc.config import Settings
from geocalc.context import AppContext
from geocalc.database import Database
from geocalc.handler import Dispatcher
from geocalc.services.credentials import SecretsProvider

API_KEY = "test-google-key"


class FakeSecretsClient:
    def __init__(self, secret_string: str | None = None):
        self.secret_string = json.dumps({"apiKey": API_KEY}) if secret_string is None else secret_string
        self.calls: list[str] = []

    def get_secret_value(self, SecretId: str):
        self.calls.append(SecretId)
        return {"Name": SecretId, "SecretString": self.secret_string}


class FakeGoogle:
    """Scripted responses for the geocode and distance matrix endpoints."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.geocode_payload: dict = {"status": "ZERO_RESULTS", "results": []}
        self.distance_payload: dict = {"status": "OK", "rows": []}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/geocode/json"):
            return httpx.Response(200, json=self.geocode_payload)
        if request.url.path.endswith("/distancematrix/json"):
            return httpx.Response(200, json=self.distance_payload)
        return httpx.Response(404, json={})

    def set_geocode(self, lat: float, lng: float, place_id: str | None = None):
        result = {"geometry": {"location": {"lat": lat, "lng": lng}}}
        if place_id is not None:
            result["place_id"] = place_id
        self.geocode_payload = {"status": "OK", "results": [result]}

    def set_distance(self, meters: int, seconds: int):
        self.distance_payload = {
            "status": "OK",
            "rows": [{
                "elements": [{
                    "status": "OK",
                    "distance": {"value": meters, "text": f"{meters / 1000:.1f} km"},
                    "duration": {"value": seconds, "text": f"{seconds // 60} mins"},
                }]
            }],
        }

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database = Database("sqlite://", engine=engine)
    database.create_schema()
    yield database
    database.close()


@pytest.fixture
def seed(db):
    """Insert rows through the ORM models: seed(Person(...), Venue(...))."""

    def _seed(*rows):
        with Session(db.engine) as session:
            session.add_all(rows)
            session.commit()

    return _seed


@pytest.fixture
def fetch(db):
    def _fetch(model, **pk):
        with Session(db.engine) as session:
            row = session.get(model, pk if len(pk) > 1 else next(iter(pk.values())))
            if row is not None:
                session.expunge(row)
            return row

    return _fetch


@pytest.fixture
def google():
    return FakeGoogle()


@pytest.fixture
def secrets_client():
    return FakeSecretsClient()


@pytest.fixture
def ctx(db, google, secrets_client):
    settings = Settings()
    context = AppContext.from_settings(
        settings,
        db=db,
        http=httpx.Client(transport=httpx.MockTransport(google.handler)),
        secrets=SecretsProvider(settings.google_secret_name, settings.aws_region, client=secrets_client),
    )
    yield context
    context.http.close()


@pytest.fixture
def dispatcher(ctx):
    return Dispatcher(ctx)
