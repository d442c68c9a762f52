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
TokenIntrospection component for token introspection, userinfo and validity checks.
"""

from typing import Any

import httpx
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from thalamus_client.config import ThalamusConfig
from thalamus_client.models import IntrospectionResponse, UserInfo
from thalamus_client.transport import ModelT, request_model
from thalamus_client.utils.logger import logger

tracer = trace.get_tracer(__name__)


class TokenIntrospection:
    """
    Queries the Thalamus introspection and userinfo endpoints.

    Attributes:
        config (ThalamusConfig): The client configuration (read-only).
        client (httpx.AsyncClient): The HTTP client used for requests.
    """

    def __init__(self, config: ThalamusConfig, client: httpx.AsyncClient) -> None:
        self.config = config
        self.client = client

    @property
    def introspection_endpoint(self) -> str:
        return f"{self.config.base_url}/oauth/introspect"

    @property
    def userinfo_endpoint(self) -> str:
        return f"{self.config.base_url}/oauth/userinfo"

    async def introspect(self, token: str) -> IntrospectionResponse:
        """
        Introspects a token to check whether it is active and read its metadata.

        Args:
            token: The access or refresh token.

        Returns:
            IntrospectionResponse: The full introspection record, not just `active`.

        Raises:
            ThalamusError: If the server rejects the request or answers with an invalid body.
        """
        with tracer.start_as_current_span("thalamus.introspect") as span:
            result = await self._fetch(
                span, IntrospectionResponse, "POST", self.introspection_endpoint, json_body={"token": token}
            )
            span.set_attribute("oauth.token.active", result.active)
            return result

    async def get_user_info(self, access_token: str) -> UserInfo:
        """
        Fetches the OpenID Connect profile of the user owning the access token.

        Args:
            access_token: A valid access token.

        Returns:
            UserInfo: The user's profile.

        Raises:
            ThalamusError: If the server rejects the request or answers with an invalid body.
        """
        with tracer.start_as_current_span("thalamus.userinfo") as span:
            return await self._fetch(
                span,
                UserInfo,
                "GET",
                self.userinfo_endpoint,
                headers={"Authorization": f"Bearer {access_token}"},
            )

    async def validate(self, token: str) -> bool:
        """
        Returns True only if the token introspects as active.

        Never raises: any failure (network, HTTP status, invalid body) yields False.
        """
        try:
            result = await self.introspect(token)
        except Exception as e:
            logger.debug(f"Token validation failed: {type(e).__name__}: {e}")
            return False
        return result.active is True

    async def _fetch(
        self,
        span: trace.Span,
        model: type[ModelT],
        method: str,
        url: str,
        **kwargs: Any,
    ) -> ModelT:
        try:
            result = await request_model(self.client, model, method, url, **kwargs)
        except Exception as e:
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise
        span.set_status(Status(StatusCode.OK))
        return result
