from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

This module defines the exceptions raised by the structured chat client.
"""


class ClientError(Exception):
    """Base exception for all strictchat errors."""

    pass


class ConfigurationError(ClientError):
    pass


class TransportError(ClientError):
    """
    The HTTP exchange itself failed (network, TLS, timeout).
    The underlying `httpx` error is kept on `cause`.
    """

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class MalformedResponseError(ClientError):
    """
    The response body matched neither the success nor the error envelope,
    or a success envelope was structurally unusable (no choices, or a
    message that is neither an answer nor a refusal).
    """

    pass


class UpstreamApiError(ClientError):
    """The provider answered with an error envelope."""

    def __init__(
        self,
        message: str,
        *,
        error_type: str | None = None,
        param: str | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.param = param
        self.code = code

    def __str__(self) -> str:
        return f"Upstream API error: {self.message}"


class ModelRefusalError(ClientError):
    """The model declined to answer. Never retried."""

    def __init__(self, refusal: str) -> None:
        super().__init__(refusal)
        self.refusal = refusal

    def __str__(self) -> str:
        return f"LLM refusal: {self.refusal}"


class PayloadDecodeError(ClientError):
    """
    The answer payload could not be turned into the target shape, either
    because its physical encoding is not accepted or because its content
    does not fit.
    """

    pass
