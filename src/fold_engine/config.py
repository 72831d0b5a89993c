"""Editor configuration, optionally seeded from ``FOLD_ENGINE_*`` variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from fold_engine.buffer.history import DEFAULT_HISTORY_LIMIT
from fold_engine.runtime.telemetry import ENV_PREFIX, env_flag

DEFAULT_DEBOUNCE_MS = 1000
DEFAULT_TAB_WIDTH = 2
DEFAULT_MAX_SUGGESTIONS = 20


@dataclass(frozen=True)
class EditorConfig:
    language: str = "javascript"
    history_limit: int = DEFAULT_HISTORY_LIMIT
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    tab_text: str = " " * DEFAULT_TAB_WIDTH
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS
    auto_close: bool = True
    use_system_clipboard: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EditorConfig":
        env = os.environ if environ is None else environ
        defaults = cls()
        tab_width = _int(env, "TAB_WIDTH", DEFAULT_TAB_WIDTH, minimum=1)
        return cls(
            language=env.get(f"{ENV_PREFIX}LANGUAGE", defaults.language),
            history_limit=_int(env, "HISTORY_LIMIT", defaults.history_limit, minimum=1),
            debounce_ms=_int(env, "DEBOUNCE_MS", defaults.debounce_ms, minimum=0),
            tab_text=" " * tab_width,
            max_suggestions=_int(
                env, "MAX_SUGGESTIONS", defaults.max_suggestions, minimum=1
            ),
            auto_close=env_flag("AUTO_CLOSE", defaults.auto_close, env),
            use_system_clipboard=env_flag(
                "SYSTEM_CLIPBOARD", defaults.use_system_clipboard, env
            ),
        )

    def with_overrides(self, **changes: object) -> "EditorConfig":
        return replace(self, **changes)


def _int(env: Mapping[str, str], name: str, fallback: int, *, minimum: int) -> int:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return fallback
    try:
        value = int(raw)
    except ValueError:
        return fallback
    return value if value >= minimum else fallback


__all__ = ["EditorConfig", "DEFAULT_DEBOUNCE_MS", "DEFAULT_MAX_SUGGESTIONS"]
