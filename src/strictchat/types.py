from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

This module defines the request and response envelope types exchanged with a
chat-completion endpoint.
"""

from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias


JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]
JSONSchema: TypeAlias = dict[str, JSONValue]

Role = Literal["system", "user"]


@dataclass(frozen=True, slots=True)
class Message:
    role: Role
    content: str

    def to_payload(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True, slots=True)
class ChatRequest:
    """
    Outbound request envelope. Built fresh for every call and never retained.
    """

    model: str
    messages: list[Message]
    schema: JSONSchema
    schema_name: str
    strict: bool = True

    def to_payload(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [m.to_payload() for m in self.messages],
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": self.schema_name,
                    "strict": self.strict,
                    "schema": self.schema,
                },
            },
        }


@dataclass(frozen=True, slots=True)
class Answer:
    """Message carrying the answer payload in whatever encoding it arrived."""

    payload: JSONValue
    kind: Literal["answer"] = "answer"


@dataclass(frozen=True, slots=True)
class Refusal:
    text: str
    kind: Literal["refusal"] = "refusal"


MessageOutcome: TypeAlias = Answer | Refusal


@dataclass(frozen=True, slots=True)
class Choice:
    message: JSONObject
    index: int = 0


@dataclass(frozen=True, slots=True)
class CompletionSuccess:
    choices: list[Choice] = field(default_factory=list)
    model: str | None = None
    raw: JSONObject = field(default_factory=dict)
    kind: Literal["success"] = "success"


@dataclass(frozen=True, slots=True)
class CompletionFailure:
    message: str
    error_type: str | None = None
    param: str | None = None
    code: str | None = None
    raw: JSONObject = field(default_factory=dict)
    kind: Literal["error"] = "error"


ResponseEnvelope: TypeAlias = CompletionSuccess | CompletionFailure
