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
Configuration for the thalamus-client package.
"""

import re
from typing import Annotated, Any

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from thalamus_client.exceptions import ConfigurationError

REQUIRED_FIELDS = ("client_id", "redirect_uri", "base_url")


class ThalamusConfig(BaseSettings):
    """
    Configuration settings for a Thalamus OAuth2 client.

    Immutable once constructed. Values can be passed directly or loaded from
    `THALAMUS_*` environment variables.

    Attributes:
        client_id (str): The public OAuth2 client identifier.
        client_secret (SecretStr | None): The client secret, required only for confidential clients.
        redirect_uri (str): The redirect URI registered with the server.
        base_url (str): The Thalamus base URL (e.g. https://auth.example.com), without trailing slash.
        default_scopes (tuple[str, ...] | None): Scopes used when a call does not pass any.
        http_timeout (float | None): Timeout for internally created HTTP clients. None disables it.
    """

    model_config = SettingsConfigDict(
        env_prefix="THALAMUS_",
        case_sensitive=False,
        frozen=True,
    )

    client_id: str
    client_secret: SecretStr | None = None
    redirect_uri: str
    base_url: str
    default_scopes: Annotated[tuple[str, ...] | None, NoDecode] = None
    http_timeout: float | None = Field(
        default=None, description="Timeout in seconds for internally created HTTP clients."
    )

    @model_validator(mode="before")
    @classmethod
    def require_fields(cls, data: Any) -> Any:
        """
        Fails fast when a required field is absent or blank.

        Raises:
            ConfigurationError: Naming the first missing field.
        """
        if isinstance(data, dict):
            for name in REQUIRED_FIELDS:
                value = data.get(name)
                if value is None or (isinstance(value, str) and not value.strip()):
                    raise ConfigurationError(f"{name} is required")
        return data

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """
        Removes one trailing slash so paths can be appended without producing `//`.
        """
        v = v.strip()
        v = v[:-1] if v.endswith("/") else v
        if not v:
            raise ConfigurationError("base_url is required")
        return v

    @field_validator("default_scopes", mode="before")
    @classmethod
    def split_scopes(cls, v: Any) -> Any:
        """
        Accepts scopes as a space- or comma-separated string (the environment variable form).
        """
        if isinstance(v, str):
            return tuple(s for s in re.split(r"[\s,]+", v) if s)
        return v
