from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Response decoding for structured chat completions.

Classification runs as an ordered list of structural checks, each producing
one tagged variant:
  1. body -> CompletionSuccess, else CompletionFailure, else malformed
  2. first choice message -> Answer or Refusal
  3. answer payload (string / object / array) -> target shape
"""

import json
from typing import Any

from .errors import (
    MalformedResponseError,
    ModelRefusalError,
    PayloadDecodeError,
    UpstreamApiError,
)
from .shapes import ShapeValidationError, as_shape
from .types import (
    Answer,
    Choice,
    CompletionFailure,
    CompletionSuccess,
    JSONValue,
    MessageOutcome,
    Refusal,
    ResponseEnvelope,
)
from .utils import clamp_str

ANSWER_KEY = "content"
REFUSAL_KEY = "refusal"
_PREVIEW_CHARS = 200


def _is_success_envelope(obj: Any) -> bool:
    if not isinstance(obj, dict):
        return False
    choices = obj.get("choices")
    if not isinstance(choices, list):
        return False
    return all(
        isinstance(choice, dict) and isinstance(choice.get("message"), dict)
        for choice in choices
    )


def _is_error_envelope(obj: Any) -> bool:
    if not isinstance(obj, dict):
        return False
    error = obj.get("error")
    return isinstance(error, dict) and isinstance(error.get("message"), str)


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def parse_envelope(raw_body: bytes | str) -> ResponseEnvelope:
    """
    Classify a raw response body.

    The success shape is checked before the error shape; a body matching
    neither raises `MalformedResponseError`.
    """
    try:
        obj = json.loads(raw_body)
    except (ValueError, TypeError, RecursionError) as e:
        preview = raw_body.decode("utf-8", "replace") if isinstance(raw_body, bytes) else str(raw_body)
        raise MalformedResponseError(
            f"Response body is not valid JSON: {clamp_str(preview, _PREVIEW_CHARS)}"
        ) from e

    if _is_success_envelope(obj):
        choices = [
            Choice(
                message=choice["message"],
                index=choice["index"] if isinstance(choice.get("index"), int) else i,
            )
            for i, choice in enumerate(obj["choices"])
        ]
        return CompletionSuccess(choices=choices, model=_opt_str(obj.get("model")), raw=obj)

    if _is_error_envelope(obj):
        error = obj["error"]
        return CompletionFailure(
            message=error["message"],
            error_type=_opt_str(error.get("type")),
            param=_opt_str(error.get("param")),
            code=_opt_str(error.get("code")),
            raw=obj,
        )

    raise MalformedResponseError(
        "Response body matched neither the completion nor the error envelope: "
        f"{clamp_str(json.dumps(obj, ensure_ascii=True, default=str), _PREVIEW_CHARS)}"
    )


def classify_message(message: dict[str, Any]) -> MessageOutcome:
    """
    Split a message into `Answer` or `Refusal`.

    A key counts as present only with a non-null value, since providers send
    `"refusal": null` next to real content.
    """
    has_answer = message.get(ANSWER_KEY) is not None
    has_refusal = message.get(REFUSAL_KEY) is not None

    if has_answer and has_refusal:
        raise MalformedResponseError("Message carries both content and refusal")
    if has_answer:
        return Answer(payload=message[ANSWER_KEY])
    if has_refusal:
        refusal = message[REFUSAL_KEY]
        if not isinstance(refusal, str):
            raise MalformedResponseError("Refusal must be a string")
        return Refusal(text=refusal)
    raise MalformedResponseError("Message carries neither content nor refusal")


def first_message(envelope: CompletionSuccess) -> MessageOutcome:
    if not envelope.choices:
        raise MalformedResponseError("Completion response contained no choices")
    return classify_message(envelope.choices[0].message)


def decode_payload(payload: JSONValue, target: Any) -> Any:
    """
    Decode an answer payload into `target`.

    Accepts a JSON-encoded string, a native object or a native array; all
    three decode the same way once the JSON value is in hand.
    """
    shape = as_shape(target)

    if isinstance(payload, str):
        try:
            value = json.loads(payload)
        except (ValueError, RecursionError) as e:
            raise PayloadDecodeError(
                f"Answer content is not valid JSON: {clamp_str(payload, _PREVIEW_CHARS)}"
            ) from e
    elif isinstance(payload, (dict, list)):
        value = payload
    else:
        raise PayloadDecodeError(
            f"Answer content must be a string, object or array, got {type(payload).__name__}"
        )

    try:
        return shape.validate(value)
    except ShapeValidationError as e:
        raise PayloadDecodeError(f"Answer does not match {shape.type_name}: {e}") from e


def decode_response(raw_body: bytes | str, target: Any) -> Any:
    """
    Full decode of one response body into `target`.

    Raises `UpstreamApiError`, `ModelRefusalError`, `MalformedResponseError`
    or `PayloadDecodeError`; nothing is retried.
    """
    envelope = parse_envelope(raw_body)

    if isinstance(envelope, CompletionFailure):
        raise UpstreamApiError(
            envelope.message,
            error_type=envelope.error_type,
            param=envelope.param,
            code=envelope.code,
        )

    outcome = first_message(envelope)
    if isinstance(outcome, Refusal):
        raise ModelRefusalError(outcome.text)
    return decode_payload(outcome.payload, target)
