# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/thalamus_client

import json
from typing import Any

import httpx
import pytest

from thalamus_client.config import ThalamusConfig

ENV_VARS = (
    "THALAMUS_CLIENT_ID",
    "THALAMUS_CLIENT_SECRET",
    "THALAMUS_REDIRECT_URI",
    "THALAMUS_BASE_URL",
    "THALAMUS_DEFAULT_SCOPES",
    "THALAMUS_HTTP_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Removes THALAMUS_* variables from the environment so that pydantic-settings
    only sees what each test passes explicitly.
    """
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class FakeThalamus:
    """
    Records requests and answers them with a queued (or a default) response.
    Use `transport` for facades and `client()` for components.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[httpx.Response | Exception] = []
        self.default: httpx.Response | Exception = httpx.Response(200, json={})
        self.transport = httpx.MockTransport(self._handle)

    def respond(
        self, status_code: int = 200, json_data: Any | None = None, content: bytes | None = None
    ) -> "FakeThalamus":
        if content is not None:
            self._responses.append(httpx.Response(status_code, content=content))
        elif json_data is not None:
            self._responses.append(httpx.Response(status_code, json=json_data))
        else:
            self._responses.append(httpx.Response(status_code))
        return self

    def fail(self, exc: Exception) -> "FakeThalamus":
        self._responses.append(exc)
        return self

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self._responses.pop(0) if self._responses else self.default
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def fake_server() -> FakeThalamus:
    return FakeThalamus()


@pytest.fixture
def http_client(fake_server: FakeThalamus) -> httpx.AsyncClient:
    return fake_server.client()


@pytest.fixture
def config() -> ThalamusConfig:
    return ThalamusConfig(
        client_id="test-client",
        client_secret="test-secret",
        redirect_uri="https://app.example.com/auth/callback",
        base_url="https://auth.example.com",
    )


@pytest.fixture
def token_payload() -> dict[str, Any]:
    return {
        "access_token": "at_123",
        "token_type": "Bearer",
        "expires_in": 3600,
        "refresh_token": "rt_456",
        "scope": "openid profile email",
    }
