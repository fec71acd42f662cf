"""Shared fixtures: the API wired to an in-memory fake of the EHR backend."""

from __future__ import annotations

import json
import os
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("EHR_BASE_URL", "https://ehr.test")
os.environ.setdefault("EHR_API_KEY", "test-api-key")

from practiceboard.api.config import APIConfig, get_config  # noqa: E402
from practiceboard.api.main import create_app  # noqa: E402
from practiceboard.ehr.client import EHRClient, get_client  # noqa: E402
from practiceboard.ehr.oauth import OAuthClient, get_oauth_client  # noqa: E402
from practiceboard.ehr.settings import EHRSettings  # noqa: E402

FHIR = "/apiportal/ema/fhir/v2"


class FakeBackend:
    """Canned responses keyed by (method, path); records every request."""

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, object]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, json_body: object = None):
        self.routes[(method, path)] = (status, json_body if json_body is not None else {})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"resourceType": "OperationOutcome"})
        status, body = self.routes[key]
        return httpx.Response(status, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last.content)

    def last_form(self) -> dict[str, str]:
        return {k: v[0] for k, v in parse_qs(self.last.content.decode()).items()}


@pytest.fixture
def settings() -> EHRSettings:
    return EHRSettings(
        base_url="https://ehr.test",
        api_key="test-api-key",
        client_id="dashboard",
        client_secret="s3cret",
        redirect_uri="http://localhost:8000/api/auth/callback",
        password_auth_url="https://ehr.test/oauth/password",
    )


@pytest.fixture
def config() -> APIConfig:
    return APIConfig(cookie_secure=False)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def app(settings, config, backend):
    app = create_app(config)
    transport = httpx.MockTransport(backend.handler)
    app.dependency_overrides[get_client] = lambda: EHRClient(settings, transport=transport)
    app.dependency_overrides[get_oauth_client] = lambda: OAuthClient(
        settings, transport=transport
    )
    app.dependency_overrides[get_config] = lambda: config
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def authed_client(app) -> TestClient:
    client = TestClient(app)
    client.cookies.set("access_token", "user-token")
    return client


def searchset(*resources: dict) -> dict:
    return {
        "resourceType": "Bundle",
        "type": "searchset",
        "total": len(resources),
        "entry": [{"resource": r} for r in resources],
    }
