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
Data models for the thalamus-client package.

Response models keep unknown fields, so whatever the server sends is passed through untouched.
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool

DEFAULT_SCOPES: tuple[str, ...] = ("openid", "profile", "email")


class TokenTypeHint(StrEnum):
    ACCESS_TOKEN = "access_token"
    REFRESH_TOKEN = "refresh_token"


class TokenResponse(BaseModel):
    """
    Response from the token endpoint.

    Attributes:
        access_token (str): The access token issued by the authorization server.
        token_type (str): The type of the token ("Bearer").
        expires_in (int): The lifetime in seconds of the access token.
        refresh_token (str | None): The refresh token, if issued.
        scope (str | None): Space-separated granted scopes, if reported.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(..., ge=0)
    refresh_token: str | None = None
    scope: str | None = None


class IntrospectionResponse(BaseModel):
    """
    Response from the introspection endpoint.

    `active` is the only validated field. Every other field, including the agent and
    delegation metadata, is forwarded exactly as the server sent it.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    active: StrictBool = False
    scope: Any = None
    client_id: Any = None
    user_id: Any = None
    username: Any = None
    email: Any = None
    organization_id: Any = None
    tenant_id: Any = None
    token_type: Any = None
    exp: Any = None
    iat: Any = None
    sub: Any = None

    agent_type: Any = None
    delegated_by: Any = None
    delegation_chain: Any = None
    delegation_depth: Any = None
    task_id: Any = None
    max_operations: Any = None
    operations_remaining: Any = None
    expires_on_completion: Any = None
    intent_description: Any = None


class UserInfo(BaseModel):
    """
    OpenID Connect userinfo record. Only `sub` is checked; profile claims are passed through.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    sub: str
    email: Any = None
    email_verified: Any = None
    name: Any = None
    given_name: Any = None
    family_name: Any = None
    picture: Any = None
    organization_id: Any = None
