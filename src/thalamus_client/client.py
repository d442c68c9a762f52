# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/thalamus_client

"""
ThalamusClient facades wiring the configuration into the authorization and introspection components.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import anyio
import httpx
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

from thalamus_client.auth import AuthorizationFlow, Scope, build_authorization_url
from thalamus_client.config import ThalamusConfig
from thalamus_client.models import IntrospectionResponse, TokenResponse, TokenTypeHint, UserInfo
from thalamus_client.tokens import TokenIntrospection

T = TypeVar("T")


class ThalamusClientAsync:
    """
    Async Thalamus client (The Core).
    Handles resources via async context manager.

    Attributes:
        auth (AuthorizationFlow): OAuth2 authorization and token grants.
        tokens (TokenIntrospection): Token introspection and userinfo.
    """

    def __init__(
        self,
        config: ThalamusConfig,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the ThalamusClientAsync.

        Args:
            config: The configuration object. Shared by reference with both components.
            client: External async client (optional). It is never closed by this object.
            transport: Transport for the internally created client (ignored when `client` is given).
        """
        self._config = config
        self._internal_client = client is None

        if client is not None:
            self._client = client
        else:
            self._client = httpx.AsyncClient(transport=transport, timeout=config.http_timeout)
            # Instrument the client for distributed tracing
            HTTPXClientInstrumentor().instrument_client(self._client)

        self.auth = AuthorizationFlow(config, self._client)
        self.tokens = TokenIntrospection(config, self._client)

    async def __aenter__(self) -> "ThalamusClientAsync":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Closes the HTTP client if it was created here."""
        if self._internal_client:
            await self._client.aclose()

    def get_config(self) -> ThalamusConfig:
        """Returns a copy of the configuration; changes to it never reach the components."""
        return self._config.model_copy(deep=True)


class ThalamusClient:
    """
    Sync facade for ThalamusClientAsync.

    Each network call runs `anyio.run()` with a short-lived async client, so an
    instance can be shared between threads.
    """

    def __init__(self, config: ThalamusConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._config = config
        self._transport = transport
        self.auth = AuthorizationFlowSync(self)
        self.tokens = TokenIntrospectionSync(self)

    def get_config(self) -> ThalamusConfig:
        """Returns a copy of the configuration; changes to it never reach the components."""
        return self._config.model_copy(deep=True)

    def _run(self, call: Callable[[ThalamusClientAsync], Awaitable[T]]) -> T:
        async def runner() -> T:
            async with ThalamusClientAsync(self._config, transport=self._transport) as client:
                return await call(client)

        return anyio.run(runner)


class AuthorizationFlowSync:
    """Blocking counterpart of AuthorizationFlow."""

    def __init__(self, owner: ThalamusClient) -> None:
        self._owner = owner

    def build_authorization_url(
        self,
        *,
        scope: Scope | None = None,
        state: str | None = None,
        response_type: str = "code",
        code_challenge: str | None = None,
        code_challenge_method: str | None = None,
    ) -> str:
        return build_authorization_url(
            self._owner._config,
            scope=scope,
            state=state,
            response_type=response_type,
            code_challenge=code_challenge,
            code_challenge_method=code_challenge_method,
        )

    def exchange_code(self, code: str, *, code_verifier: str | None = None) -> TokenResponse:
        return self._owner._run(lambda c: c.auth.exchange_code(code, code_verifier=code_verifier))

    def get_client_credentials_token(self, *, scope: Scope | None = None) -> TokenResponse:
        return self._owner._run(lambda c: c.auth.get_client_credentials_token(scope=scope))

    def refresh_token(self, refresh_token: str) -> TokenResponse:
        return self._owner._run(lambda c: c.auth.refresh_token(refresh_token))

    def revoke_token(self, token: str, token_type_hint: TokenTypeHint | str | None = None) -> None:
        self._owner._run(lambda c: c.auth.revoke_token(token, token_type_hint))


class TokenIntrospectionSync:
    """Blocking counterpart of TokenIntrospection."""

    def __init__(self, owner: ThalamusClient) -> None:
        self._owner = owner

    def introspect(self, token: str) -> IntrospectionResponse:
        return self._owner._run(lambda c: c.tokens.introspect(token))

    def get_user_info(self, access_token: str) -> UserInfo:
        return self._owner._run(lambda c: c.tokens.get_user_info(access_token))

    def validate(self, token: str) -> bool:
        return self._owner._run(lambda c: c.tokens.validate(token))
