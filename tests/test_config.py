import pytest

from fold_engine.config import EditorConfig
from fold_engine.runtime.telemetry import env_flag


def test_defaults() -> None:
    config = EditorConfig()

    assert config.language == "javascript"
    assert config.history_limit == 100
    assert config.debounce_ms == 1000
    assert config.tab_text == "  "
    assert config.max_suggestions == 20
    assert config.auto_close
    assert config.use_system_clipboard


def test_from_env_reads_prefixed_values() -> None:
    config = EditorConfig.from_env(
        {
            "FOLD_ENGINE_LANGUAGE": "python",
            "FOLD_ENGINE_HISTORY_LIMIT": "10",
            "FOLD_ENGINE_DEBOUNCE_MS": "250",
            "FOLD_ENGINE_TAB_WIDTH": "4",
            "FOLD_ENGINE_MAX_SUGGESTIONS": "5",
            "FOLD_ENGINE_AUTO_CLOSE": "off",
            "FOLD_ENGINE_SYSTEM_CLIPBOARD": "0",
        }
    )

    assert config == EditorConfig(
        language="python",
        history_limit=10,
        debounce_ms=250,
        tab_text="    ",
        max_suggestions=5,
        auto_close=False,
        use_system_clipboard=False,
    )


@pytest.mark.parametrize(
    "name, value",
    [
        ("FOLD_ENGINE_HISTORY_LIMIT", "lots"),
        ("FOLD_ENGINE_HISTORY_LIMIT", "0"),
        ("FOLD_ENGINE_DEBOUNCE_MS", "-1"),
        ("FOLD_ENGINE_TAB_WIDTH", "0"),
        ("FOLD_ENGINE_AUTO_CLOSE", "maybe"),
    ],
)
def test_invalid_values_fall_back(name: str, value: str) -> None:
    assert EditorConfig.from_env({name: value}) == EditorConfig()


def test_from_env_uses_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FOLD_ENGINE_DEBOUNCE_MS", "50")

    assert EditorConfig.from_env().debounce_ms == 50


def test_with_overrides_returns_copy() -> None:
    base = EditorConfig()

    changed = base.with_overrides(language="css")

    assert changed.language == "css"
    assert base.language == "javascript"


@pytest.mark.parametrize(
    "raw, expected",
    [(" YES ", True), ("off", False), ("maybe", True)],
)
def test_env_flag_reads_explicit_mapping(raw: str, expected: bool) -> None:
    assert env_flag("AUTO_CLOSE", True, {"FOLD_ENGINE_AUTO_CLOSE": raw}) is expected
    assert env_flag("AUTO_CLOSE", False, {}) is False
