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
Python client for the Thalamus OAuth2 / OpenID Connect authorization server.
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .auth import AuthorizationFlow, build_authorization_url, generate_state
from .client import ThalamusClient, ThalamusClientAsync
from .config import ThalamusConfig
from .exceptions import ConfigurationError, OversizedResponseError, ThalamusClientError, ThalamusError
from .models import IntrospectionResponse, TokenResponse, TokenTypeHint, UserInfo
from .tokens import TokenIntrospection

__all__ = [
    "AuthorizationFlow",
    "ConfigurationError",
    "IntrospectionResponse",
    "OversizedResponseError",
    "ThalamusClient",
    "ThalamusClientAsync",
    "ThalamusClientError",
    "ThalamusConfig",
    "ThalamusError",
    "TokenIntrospection",
    "TokenResponse",
    "TokenTypeHint",
    "UserInfo",
    "build_authorization_url",
    "generate_state",
]
