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
JSON request helpers shared by the authorization and introspection components.
"""

import json
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from thalamus_client.exceptions import OversizedResponseError, ThalamusError
from thalamus_client.utils.logger import logger

MAX_RESPONSE_BYTES = 1_000_000

ModelT = TypeVar("ModelT", bound=BaseModel)


async def read_limited(response: httpx.Response, limit: int = MAX_RESPONSE_BYTES) -> bytes:
    """
    Reads a streamed response body, refusing anything larger than `limit` bytes.

    Args:
        response: A response opened with `client.stream(...)`.
        limit: Maximum accepted body size in bytes.

    Returns:
        bytes: The full body.

    Raises:
        OversizedResponseError: If the declared or actual size exceeds the limit.
    """
    content_length = response.headers.get("Content-Length")
    if content_length and content_length.isdigit() and int(content_length) > limit:
        raise OversizedResponseError("Response too large")

    content = bytearray()
    async for chunk in response.aiter_bytes():
        content.extend(chunk)
        if len(content) > limit:
            raise OversizedResponseError("Response too large")
    return bytes(content)


async def _send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    json_body: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> tuple[int, Any]:
    async with client.stream(method, url, json=json_body, headers=headers) as response:
        content = await read_limited(response)

    logger.debug(f"{method} {url} -> {response.status_code}")

    if not response.is_success:
        raise ThalamusError.from_body(response.status_code, content)

    if not content.strip():
        return response.status_code, None

    try:
        return response.status_code, json.loads(content)
    except ValueError as e:
        raise ThalamusError.invalid_response(e, status_code=response.status_code) from e


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    json_body: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> Any:
    """
    Sends a request and decodes the JSON response.

    Network failures (httpx.TransportError) are not caught and reach the caller as raised by httpx.

    Args:
        client: The async HTTP client to use.
        method: HTTP method.
        url: Absolute URL.
        json_body: Body to send as JSON (sets `Content-Type: application/json`).
        headers: Extra request headers.

    Returns:
        Any: The decoded JSON body, or None for an empty body.

    Raises:
        ThalamusError: On a non-2xx status or an undecodable 2xx body.
        OversizedResponseError: If the body exceeds MAX_RESPONSE_BYTES.
    """
    _, data = await _send(client, method, url, json_body=json_body, headers=headers)
    return data


async def request_model(
    client: httpx.AsyncClient,
    model: type[ModelT],
    method: str,
    url: str,
    *,
    json_body: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> ModelT:
    """
    Like `request_json`, but validates the body into `model`.

    Raises:
        ThalamusError: Also when a 2xx body does not match `model`; `status_code` is the response status.
    """
    status_code, data = await _send(client, method, url, json_body=json_body, headers=headers)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ThalamusError.invalid_response(e, status_code=status_code) from e
