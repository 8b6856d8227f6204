from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Typed chat-completion client with strict JSON schema response formats.
"""

from .client import StructuredChatClient
from .config import ClientConfig
from .decoding import classify_message, decode_payload, decode_response, parse_envelope
from .errors import (
    ClientError,
    ConfigurationError,
    MalformedResponseError,
    ModelRefusalError,
    PayloadDecodeError,
    TransportError,
    UpstreamApiError,
)
from .observability import ClientLifecycleEvent, ClientObserver
from .schema import compile_schema, schema_name_for, strictify
from .shapes import (
    ArrayShape,
    BooleanShape,
    EnumShape,
    IntegerShape,
    ModelShape,
    NumberShape,
    ObjectShape,
    OptionalShape,
    Shape,
    ShapeValidationError,
    StringShape,
    UnionShape,
    as_shape,
)
from .types import (
    Answer,
    ChatRequest,
    Choice,
    CompletionFailure,
    CompletionSuccess,
    Message,
    Refusal,
)

__all__ = [
    "StructuredChatClient",
    "ClientConfig",
    "compile_schema",
    "schema_name_for",
    "strictify",
    "parse_envelope",
    "classify_message",
    "decode_payload",
    "decode_response",
    "ClientError",
    "ConfigurationError",
    "TransportError",
    "MalformedResponseError",
    "UpstreamApiError",
    "ModelRefusalError",
    "PayloadDecodeError",
    "ClientLifecycleEvent",
    "ClientObserver",
    "Shape",
    "ShapeValidationError",
    "StringShape",
    "NumberShape",
    "IntegerShape",
    "BooleanShape",
    "EnumShape",
    "ArrayShape",
    "OptionalShape",
    "UnionShape",
    "ObjectShape",
    "ModelShape",
    "as_shape",
    "Message",
    "ChatRequest",
    "Answer",
    "Refusal",
    "Choice",
    "CompletionSuccess",
    "CompletionFailure",
]
