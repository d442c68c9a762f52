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
Custom exceptions for the thalamus-client package.
"""

import json
from typing import Any


class ThalamusClientError(Exception):
    """Base exception for all thalamus-client errors."""


class ConfigurationError(ThalamusClientError):
    """
    Raised when a required configuration field is missing or empty.

    Deliberately not a ValueError, so pydantic re-raises it untouched from inside a validator.
    """


class OversizedResponseError(ThalamusClientError):
    """Raised when an HTTP response is too large."""


class ThalamusError(ThalamusClientError):
    """
    Raised when the Thalamus server answers with a non-2xx status, or with a body that cannot be parsed.

    Attributes:
        message (str): Human-readable message.
        status_code (int | None): The HTTP status code of the response.
        error (str | None): The OAuth2 error code supplied by the server (e.g. "invalid_grant").
        error_description (str | None): The server-supplied error description.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error: str | None = None,
        error_description: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error
        self.error_description = error_description

    def __repr__(self) -> str:
        return (
            f"ThalamusError(message={self.message!r}, status_code={self.status_code!r}, "
            f"error={self.error!r}, error_description={self.error_description!r})"
        )

    @classmethod
    def from_body(cls, status_code: int, content: bytes) -> "ThalamusError":
        """
        Builds an error from a failed HTTP response.

        The message is the body's `error_description`, else its `message`, else `HTTP {status}`.
        A body that is not a JSON object is treated as empty.

        Args:
            status_code: The HTTP status code.
            content: The raw response body.

        Returns:
            ThalamusError: The shaped error, ready to be raised.
        """
        data: dict[str, Any] = {}
        try:
            parsed = json.loads(content) if content else {}
        except ValueError:
            parsed = {}
        if isinstance(parsed, dict):
            data = parsed

        message = data.get("error_description") or data.get("message") or f"HTTP {status_code}"
        return cls(
            str(message),
            status_code=status_code,
            error=data.get("error"),
            error_description=data.get("error_description"),
        )

    @classmethod
    def invalid_response(cls, exc: Exception, status_code: int | None = None) -> "ThalamusError":
        """
        Builds the error for a 2xx body that cannot be decoded or validated.

        Validation details name the offending fields only, never their values, so tokens stay out of logs.
        """
        errors = getattr(exc, "errors", None)
        if callable(errors):
            detail = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
                for err in errors(include_input=False, include_url=False)
            )
        else:
            detail = str(exc)
        return cls(f"Invalid response from Thalamus: {detail}", status_code=status_code)
