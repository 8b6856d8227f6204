from __future__ import annotations

"""
Typed observability primitives for structured chat calls.
"""

from dataclasses import dataclass
from typing import Awaitable, Literal, Protocol


ClientLifecycleEventType = Literal[
    "request_start",
    "request_success",
    "request_error",
]


@dataclass(frozen=True, slots=True)
class ClientLifecycleEvent:
    """
    One lifecycle event emitted around a single `call`.

    Observer callbacks are best-effort only; their failures never reach the
    caller.
    """

    event_type: ClientLifecycleEventType
    request_id: str
    model: str
    schema_name: str
    status_code: int | None = None
    latency_ms: float | None = None
    error_class: str | None = None
    error_message: str | None = None


class ClientObserver(Protocol):
    """Observer callback protocol used by `StructuredChatClient`."""

    def __call__(self, event: ClientLifecycleEvent) -> None | Awaitable[None]:
        ...
