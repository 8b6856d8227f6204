from __future__ import annotations
import os

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

"""
from dataclasses import dataclass, replace

from .errors import ConfigurationError

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o-2024-08-06"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass(frozen=True, slots=True)
class ClientConfig:
    # Upstream
    endpoint: str = DEFAULT_ENDPOINT
    model: str = DEFAULT_MODEL
    api_key: str | None = None

    # Prompting
    system_role: str | None = None

    # Transport
    timeout_s: float = 60.0

    # Schema behavior
    strict: bool = True
    # Objects without properties get `required: []` when set, no key otherwise.
    emit_empty_required: bool = True

    @staticmethod
    def from_env() -> "ClientConfig":
        try:
            timeout_s = float(os.getenv("STRICTCHAT_TIMEOUT_S", "60"))
        except ValueError as e:
            raise ConfigurationError("STRICTCHAT_TIMEOUT_S must be a number") from e

        return ClientConfig(
            endpoint=os.getenv("STRICTCHAT_ENDPOINT", DEFAULT_ENDPOINT),
            model=os.getenv("STRICTCHAT_MODEL", DEFAULT_MODEL),
            api_key=os.getenv("STRICTCHAT_API_KEY"),
            system_role=os.getenv("STRICTCHAT_SYSTEM_ROLE"),
            timeout_s=timeout_s,
            strict=_env_flag("STRICTCHAT_STRICT", True),
            emit_empty_required=_env_flag("STRICTCHAT_EMIT_EMPTY_REQUIRED", True),
        )

    def with_system_role(self, role: str | None) -> "ClientConfig":
        return replace(self, system_role=role)

    def validate(self) -> None:
        if not self.endpoint or not self.endpoint.strip():
            raise ConfigurationError("endpoint must be non-empty")
        if not self.model or not self.model.strip():
            raise ConfigurationError("model must be non-empty")
        if self.timeout_s <= 0:
            raise ConfigurationError("timeout_s must be > 0")
        if self.system_role is not None and not self.system_role.strip():
            raise ConfigurationError("system_role must be non-empty when provided")
