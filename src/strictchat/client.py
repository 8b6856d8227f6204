from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Structured chat-completion client.

One `call` is one request/response cycle:
  - compile a strict schema for the requested shape
  - POST the request envelope through `httpx`
  - classify and decode the reply (see `decoding.py`)

The client keeps no per-call state, so one instance can serve concurrent
calls.
"""

import inspect
import time
from typing import Any, Awaitable, cast

import httpx

from .config import ClientConfig
from .decoding import decode_response
from .errors import ClientError, TransportError
from .observability import ClientLifecycleEvent, ClientObserver
from .schema import compile_schema, schema_name_for
from .shapes import as_shape
from .types import ChatRequest, Message
from .utils import new_request_id, run_sync


class StructuredChatClient:
    """
    Client for chat-completion endpoints with `json_schema` response formats.

    Pass an `httpx.AsyncClient` to reuse connections across calls; it is
    never closed here. Without one, each call opens and closes its own.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        observers: list[ClientObserver] | None = None,
    ) -> None:
        self.config = config or ClientConfig.from_env()
        self.config.validate()
        self._http_client = http_client
        self._observers = list(observers or [])

    @classmethod
    def from_env(
        cls,
        *,
        http_client: httpx.AsyncClient | None = None,
        observers: list[ClientObserver] | None = None,
    ) -> "StructuredChatClient":
        return cls(ClientConfig.from_env(), http_client=http_client, observers=observers)

    def with_system_role(self, role: str) -> "StructuredChatClient":
        """Return a copy of this client that sends `role` as the system message."""
        return type(self)(
            self.config.with_system_role(role),
            http_client=self._http_client,
            observers=self._observers,
        )

    def build_messages(self, prompt: str) -> list[Message]:
        messages: list[Message] = []
        if self.config.system_role is not None:
            messages.append(Message(role="system", content=self.config.system_role))
        messages.append(Message(role="user", content=prompt))
        return messages

    def build_request(self, prompt: str, response_model: Any) -> ChatRequest:
        """Build the request envelope for `prompt` without sending it."""
        shape = as_shape(response_model)
        return ChatRequest(
            model=self.config.model,
            messages=self.build_messages(prompt),
            schema=compile_schema(shape, empty_required=self.config.emit_empty_required),
            schema_name=schema_name_for(shape),
            strict=self.config.strict,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    async def call(self, prompt: str, response_model: Any) -> Any:
        """
        Send `prompt` and decode the answer into `response_model`.

        `response_model` is a pydantic model (or any type pydantic can adapt)
        or a declarative `Shape`. Raises a `ClientError` subclass for
        transport failures, upstream errors, refusals and undecodable answers.
        """
        shape = as_shape(response_model)
        req = self.build_request(prompt, shape)
        request_id = new_request_id()

        await self._emit_lifecycle_event(
            event_type="request_start",
            request_id=request_id,
            schema_name=req.schema_name,
        )

        started_at = time.monotonic()
        status_code: int | None = None
        try:
            response = await self._send(req)
            status_code = response.status_code
            result = decode_response(response.content, shape)
        except ClientError as e:
            await self._emit_lifecycle_event(
                event_type="request_error",
                request_id=request_id,
                schema_name=req.schema_name,
                status_code=status_code,
                latency_ms=(time.monotonic() - started_at) * 1000.0,
                error=e,
            )
            raise

        await self._emit_lifecycle_event(
            event_type="request_success",
            request_id=request_id,
            schema_name=req.schema_name,
            status_code=status_code,
            latency_ms=(time.monotonic() - started_at) * 1000.0,
        )
        return result

    def call_sync(self, prompt: str, response_model: Any) -> Any:
        return run_sync(self.call(prompt, response_model))

    async def _send(self, req: ChatRequest) -> httpx.Response:
        """POST the envelope. Any status code is returned; the decoder classifies the body."""
        payload = req.to_payload()
        try:
            if self._http_client is not None:
                return await self._http_client.post(
                    self.config.endpoint,
                    json=payload,
                    headers=self._headers(),
                    timeout=self.config.timeout_s,
                )

            async with httpx.AsyncClient(timeout=self.config.timeout_s) as client:
                return await client.post(
                    self.config.endpoint,
                    json=payload,
                    headers=self._headers(),
                )
        except httpx.HTTPError as e:
            raise TransportError(
                f"HTTP request to {self.config.endpoint} failed: {type(e).__name__}: {e}",
                cause=e,
            ) from e

    async def _emit_lifecycle_event(
        self,
        *,
        event_type: str,
        request_id: str,
        schema_name: str,
        status_code: int | None = None,
        latency_ms: float | None = None,
        error: Exception | None = None,
    ) -> None:
        """Emit one lifecycle event to observers, swallowing observer failures."""
        if not self._observers:
            return

        event = ClientLifecycleEvent(
            event_type=cast(Any, event_type),
            request_id=request_id,
            model=self.config.model,
            schema_name=schema_name,
            status_code=status_code,
            latency_ms=latency_ms,
            error_class=type(error).__name__ if error is not None else None,
            error_message=str(error) if error is not None else None,
        )

        for observer in self._observers:
            try:
                result = observer(event)
                if inspect.isawaitable(result):
                    await cast(Awaitable[Any], result)
            except Exception:
                continue
