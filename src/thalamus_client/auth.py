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
AuthorizationFlow component for the OAuth2 authorization code, client credentials,
refresh and revocation grants.
"""

import secrets
from collections.abc import Sequence
from typing import Any
from urllib.parse import urlencode

import httpx
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from thalamus_client.config import ThalamusConfig
from thalamus_client.models import DEFAULT_SCOPES, TokenResponse, TokenTypeHint
from thalamus_client.transport import request_json, request_model
from thalamus_client.utils.logger import logger

tracer = trace.get_tracer(__name__)

Scope = str | Sequence[str]


def generate_state() -> str:
    """
    Generates a CSRF `state` value: 32 random bytes, hex-encoded (64 characters).
    """
    return secrets.token_hex(32)


def join_scope(scope: Scope) -> str:
    """
    Normalizes a scope given as a string or a sequence of names to its space-separated wire form.
    """
    if isinstance(scope, str):
        return scope
    return " ".join(scope)


def build_authorization_url(
    config: ThalamusConfig,
    *,
    scope: Scope | None = None,
    state: str | None = None,
    response_type: str = "code",
    code_challenge: str | None = None,
    code_challenge_method: str | None = None,
) -> str:
    """
    Builds the URL to redirect the user to for login. No network call is made.

    Args:
        config: The client configuration.
        scope: Scopes to request. Defaults to `config.default_scopes`, else openid, profile and email.
        state: CSRF state. A fresh random value is generated when omitted.
        response_type: OAuth2 response type. Defaults to "code".
        code_challenge: PKCE code challenge, passed through as-is.
        code_challenge_method: PKCE challenge method (e.g. "S256"), passed through as-is.

    Returns:
        str: `{base_url}/oauth/authorize?...` with a form-encoded query string.
    """
    if scope is None:
        scope = config.default_scopes or DEFAULT_SCOPES
    if state is None:
        state = generate_state()

    params = {
        "response_type": response_type,
        "client_id": config.client_id,
        "redirect_uri": config.redirect_uri,
        "scope": join_scope(scope),
        "state": state,
    }
    if code_challenge is not None:
        params["code_challenge"] = code_challenge
    if code_challenge_method is not None:
        params["code_challenge_method"] = code_challenge_method

    return f"{config.base_url}/oauth/authorize?{urlencode(params)}"


class AuthorizationFlow:
    """
    Performs the OAuth2 grants against the Thalamus token endpoint family.

    Every method is a single request/response cycle; nothing is cached or retried.

    Attributes:
        config (ThalamusConfig): The client configuration (read-only).
        client (httpx.AsyncClient): The HTTP client used for requests.
    """

    def __init__(self, config: ThalamusConfig, client: httpx.AsyncClient) -> None:
        """
        Initialize the AuthorizationFlow.

        Args:
            config: The client configuration.
            client: The async HTTP client to use for requests.
        """
        self.config = config
        self.client = client

    @property
    def token_endpoint(self) -> str:
        return f"{self.config.base_url}/oauth/token"

    @property
    def revocation_endpoint(self) -> str:
        return f"{self.config.base_url}/oauth/revoke"

    def build_authorization_url(
        self,
        *,
        scope: Scope | None = None,
        state: str | None = None,
        response_type: str = "code",
        code_challenge: str | None = None,
        code_challenge_method: str | None = None,
    ) -> str:
        """
        Builds the authorization redirect URL. See `build_authorization_url`.
        """
        return build_authorization_url(
            self.config,
            scope=scope,
            state=state,
            response_type=response_type,
            code_challenge=code_challenge,
            code_challenge_method=code_challenge_method,
        )

    def _client_auth(self) -> dict[str, str]:
        body = {"client_id": self.config.client_id}
        if self.config.client_secret is not None:
            body["client_secret"] = self.config.client_secret.get_secret_value()
        return body

    async def exchange_code(self, code: str, *, code_verifier: str | None = None) -> TokenResponse:
        """
        Exchanges an authorization code for tokens.

        Args:
            code: The authorization code received on the redirect URI.
            code_verifier: The PKCE verifier matching the challenge sent on authorization.

        Returns:
            TokenResponse: The tokens issued by the server.

        Raises:
            ThalamusError: If the server rejects the request or answers with an invalid body.
        """
        body: dict[str, Any] = {
            "grant_type": "authorization_code",
            "code": code,
            **self._client_auth(),
            "redirect_uri": self.config.redirect_uri,
        }
        if code_verifier is not None:
            body["code_verifier"] = code_verifier

        return await self._request_token(body)

    async def get_client_credentials_token(self, *, scope: Scope | None = None) -> TokenResponse:
        """
        Obtains a machine-to-machine token with the client credentials grant.

        Args:
            scope: Scopes to request. Defaults to `config.default_scopes`. Omitted from the request when empty.

        Returns:
            TokenResponse: The token issued by the server.

        Raises:
            ThalamusError: If the server rejects the request or answers with an invalid body.
        """
        if scope is None:
            scope = self.config.default_scopes or ()

        body: dict[str, Any] = {"grant_type": "client_credentials", **self._client_auth()}
        joined = join_scope(scope)
        if joined:
            body["scope"] = joined

        return await self._request_token(body)

    async def refresh_token(self, refresh_token: str) -> TokenResponse:
        """
        Exchanges a refresh token for a new access token.

        Args:
            refresh_token: The refresh token previously issued.

        Returns:
            TokenResponse: The new tokens.

        Raises:
            ThalamusError: If the server rejects the request or answers with an invalid body.
        """
        body = {"grant_type": "refresh_token", "refresh_token": refresh_token, **self._client_auth()}
        return await self._request_token(body)

    async def revoke_token(self, token: str, token_type_hint: TokenTypeHint | str | None = None) -> None:
        """
        Revokes an access or refresh token.

        Args:
            token: The token to revoke.
            token_type_hint: "access_token" or "refresh_token" (optional).

        Raises:
            ValueError: If the hint is not a known token type.
            ThalamusError: If the server rejects the request.
        """
        body = {"token": token}
        if token_type_hint is not None:
            try:
                body["token_type_hint"] = TokenTypeHint(token_type_hint).value
            except ValueError:
                raise ValueError(
                    f"Invalid token_type_hint {token_type_hint!r}. Must be 'access_token' or 'refresh_token'."
                ) from None

        with tracer.start_as_current_span("thalamus.revoke_token") as span:
            try:
                await request_json(self.client, "POST", self.revocation_endpoint, json_body=body)
            except Exception as e:
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise
            logger.debug("Token revoked.")
            span.set_status(Status(StatusCode.OK))

    async def _request_token(self, body: dict[str, Any]) -> TokenResponse:
        """
        POSTs a grant to the token endpoint and parses the TokenResponse.
        """
        grant_type = body["grant_type"]
        with tracer.start_as_current_span(f"thalamus.token.{grant_type}") as span:
            span.set_attribute("oauth.grant_type", grant_type)
            try:
                tokens = await request_model(self.client, TokenResponse, "POST", self.token_endpoint, json_body=body)
            except Exception as e:
                logger.warning(f"Token request ({grant_type}) failed: {e}")
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

            logger.debug(f"Token issued ({grant_type}), expires in {tokens.expires_in}s.")
            span.set_status(Status(StatusCode.OK))
            return tokens
