from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Small helpers shared by the client and the decoder.
"""
import asyncio
import uuid


def clamp_str(s: str, max_chars: int) -> str:
    if len(s) <= max_chars:
        return s
    return s[:max_chars] + "…"


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex}"


def run_sync(coro):
    """
    Run an async coroutine from sync context.
    If already inside a running event loop, raise a clear error.
    """
    try:
        # If this succeeds, we're inside a running event loop context.
        asyncio.get_running_loop()
    except RuntimeError:
        # No running loop in this thread => safe to use asyncio.run
        return asyncio.run(coro)

    # Close the coroutine so it does not warn about never being awaited.
    coro.close()
    raise RuntimeError(
        "Cannot use *_sync methods inside a running event loop. Use async methods instead."
    )
