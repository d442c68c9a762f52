# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/thalamus_client

from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from thalamus_client.config import ThalamusConfig
from thalamus_client.exceptions import ThalamusError
from thalamus_client.models import IntrospectionResponse, UserInfo
from thalamus_client.tokens import TokenIntrospection

if TYPE_CHECKING:
    from conftest import FakeThalamus

AGENT_INTROSPECTION: dict[str, Any] = {
    "active": True,
    "scope": "api:read",
    "client_id": "agent-client",
    "sub": "agent|42",
    "exp": 1760000000,
    "iat": 1759990000,
    "agent_type": "supervised",
    "delegated_by": "user|7",
    "delegation_chain": ["user|7", "agent|41"],
    "delegation_depth": 2,
    "task_id": "task-99",
    "max_operations": 10,
    "operations_remaining": 3,
    "expires_on_completion": True,
    "intent_description": "Summarize inbox",
    "x_custom": {"nested": [1, 2]},
}


@pytest.fixture
def introspection(config: ThalamusConfig, http_client: httpx.AsyncClient) -> TokenIntrospection:
    return TokenIntrospection(config, http_client)


class TestIntrospect:
    @pytest.mark.asyncio
    async def test_full_response_passed_through(
        self, introspection: TokenIntrospection, fake_server: "FakeThalamus"
    ) -> None:
        fake_server.respond(200, AGENT_INTROSPECTION)

        result = await introspection.introspect("at_123")

        assert isinstance(result, IntrospectionResponse)
        assert result.active is True
        assert result.delegation_chain == ["user|7", "agent|41"]
        assert result.model_dump(exclude_unset=True) == AGENT_INTROSPECTION

        request = fake_server.last_request
        assert request.method == "POST"
        assert str(request.url) == "https://auth.example.com/oauth/introspect"
        assert request.headers["Content-Type"] == "application/json"
        assert fake_server.last_json() == {"token": "at_123"}

    @pytest.mark.asyncio
    async def test_inactive(self, introspection: TokenIntrospection, fake_server: "FakeThalamus") -> None:
        fake_server.respond(200, {"active": False})
        result = await introspection.introspect("at_old")
        assert result.active is False
        assert result.sub is None

    @pytest.mark.asyncio
    async def test_http_failure_raises(self, introspection: TokenIntrospection, fake_server: "FakeThalamus") -> None:
        fake_server.respond(401, {"error": "invalid_client", "error_description": "Unknown client"})
        with pytest.raises(ThalamusError, match="Unknown client") as exc:
            await introspection.introspect("at_123")
        assert exc.value.status_code == 401

    @pytest.mark.asyncio
    async def test_non_boolean_active_rejected(
        self, introspection: TokenIntrospection, fake_server: "FakeThalamus"
    ) -> None:
        fake_server.respond(200, {"active": "true"})
        with pytest.raises(ThalamusError, match="Invalid response") as exc:
            await introspection.introspect("at_123")
        assert exc.value.status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields",
        [
            {"exp": 1760000000.5},
            {"delegated_by": {"user_id": "u7", "type": "human"}},
            {"delegation_chain": [{"id": "u7"}]},
            {"agent_type": None, "task_id": 42},
            {"scope": ["api:read"], "expires_on_completion": "yes"},
        ],
    )
    async def test_unusual_field_shapes_passed_through(
        self, introspection: TokenIntrospection, fake_server: "FakeThalamus", fields: dict[str, Any]
    ) -> None:
        payload = {"active": True, **fields}
        fake_server.respond(200, payload)
        fake_server.respond(200, payload)

        result = await introspection.introspect("at_123")

        assert result.active is True
        assert result.model_dump(exclude_unset=True) == payload
        assert await introspection.validate("at_123") is True


class TestUserInfo:
    @pytest.mark.asyncio
    async def test_success(self, introspection: TokenIntrospection, fake_server: "FakeThalamus") -> None:
        payload = {"sub": "user|7", "email": "alice@example.com", "name": "Alice", "locale": "en"}
        fake_server.respond(200, payload)

        user = await introspection.get_user_info("at_123")

        assert isinstance(user, UserInfo)
        assert user.sub == "user|7"
        assert user.email == "alice@example.com"
        assert user.model_dump(exclude_unset=True) == payload

        request = fake_server.last_request
        assert request.method == "GET"
        assert str(request.url) == "https://auth.example.com/oauth/userinfo"
        assert request.headers["Authorization"] == "Bearer at_123"
        assert request.content == b""

    @pytest.mark.asyncio
    async def test_unauthorized(self, introspection: TokenIntrospection, fake_server: "FakeThalamus") -> None:
        fake_server.respond(401, content=b"")
        with pytest.raises(ThalamusError, match="HTTP 401"):
            await introspection.get_user_info("at_bad")

    @pytest.mark.asyncio
    async def test_missing_sub(self, introspection: TokenIntrospection, fake_server: "FakeThalamus") -> None:
        fake_server.respond(200, {"email": "alice@example.com"})
        with pytest.raises(ThalamusError, match="Invalid response") as exc:
            await introspection.get_user_info("at_123")
        assert exc.value.status_code == 200

    @pytest.mark.asyncio
    async def test_unusual_claim_shapes_passed_through(
        self, introspection: TokenIntrospection, fake_server: "FakeThalamus"
    ) -> None:
        payload = {"sub": "user|7", "email_verified": "true", "picture": None, "name": {"given": "Alice"}}
        fake_server.respond(200, payload)

        user = await introspection.get_user_info("at_123")

        assert user.model_dump(exclude_unset=True) == payload


class TestValidate:
    @pytest.mark.asyncio
    async def test_active(self, introspection: TokenIntrospection, fake_server: "FakeThalamus") -> None:
        fake_server.respond(200, AGENT_INTROSPECTION)
        assert await introspection.validate("at_123") is True

    @pytest.mark.asyncio
    async def test_inactive(self, introspection: TokenIntrospection, fake_server: "FakeThalamus") -> None:
        fake_server.respond(200, {"active": False})
        assert await introspection.validate("at_123") is False

    @pytest.mark.asyncio
    async def test_missing_active(self, introspection: TokenIntrospection, fake_server: "FakeThalamus") -> None:
        fake_server.respond(200, {"scope": "openid"})
        assert await introspection.validate("at_123") is False

    @pytest.mark.asyncio
    async def test_http_error(self, introspection: TokenIntrospection, fake_server: "FakeThalamus") -> None:
        fake_server.respond(500, {"message": "boom"})
        assert await introspection.validate("at_123") is False

    @pytest.mark.asyncio
    async def test_network_error(self, introspection: TokenIntrospection, fake_server: "FakeThalamus") -> None:
        fake_server.fail(httpx.ConnectError("unreachable"))
        assert await introspection.validate("at_123") is False

    @pytest.mark.asyncio
    async def test_parse_error(self, introspection: TokenIntrospection, fake_server: "FakeThalamus") -> None:
        fake_server.respond(200, content=b"{not json")
        assert await introspection.validate("at_123") is False

    @pytest.mark.asyncio
    async def test_introspect_raises(self, introspection: TokenIntrospection) -> None:
        with patch.object(introspection, "introspect", AsyncMock(side_effect=RuntimeError("unexpected"))):
            assert await introspection.validate("at_123") is False


@pytest.mark.asyncio
async def test_endpoints_use_normalized_base_url(fake_server: "FakeThalamus", http_client: httpx.AsyncClient) -> None:
    config = ThalamusConfig(
        client_id="cid", redirect_uri="https://app.example.com/cb", base_url="https://auth.example.com/"
    )
    introspection = TokenIntrospection(config, http_client)
    fake_server.respond(200, {"active": True})
    fake_server.respond(200, {"sub": "u"})

    await introspection.introspect("t")
    await introspection.get_user_info("t")

    assert [str(r.url) for r in fake_server.requests] == [
        "https://auth.example.com/oauth/introspect",
        "https://auth.example.com/oauth/userinfo",
    ]
