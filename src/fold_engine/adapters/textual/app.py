"""Executable Textual app that hosts a folding editor session."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use fold_engine.adapters.textual.app"
    ) from exc

from fold_engine.buffer import BufferMirror, Selection, SuggestionState
from fold_engine.config import EditorConfig
from fold_engine.runtime import telemetry
from fold_engine.session import EditorSession
from fold_engine.syntax.tokenizer import TEXT, Token

from .controller import TextualEditorAdapter, TextualUIHooks

TOKEN_STYLES = {
    "comment": "italic grey50",
    "string": "green",
    "keyword": "bold magenta",
    "number": "cyan",
    "operator": "yellow",
    "tag": "bold blue",
    "attribute": "bright_cyan",
    "punctuation": "grey70",
}

SAMPLE_TEXT = """function greet(name) {
  if (!name) {
    return "hello";
  }
  return `hello ${name}`;
}
"""


@dataclass
class UIState:
    display_text: str = ""
    tokens: Sequence[Token] = ()
    selection: Selection = field(default_factory=Selection)
    status_text: str = ""


def render_overlay(state: UIState) -> Text:
    """Styled rich text for the display buffer, with the selection reversed."""

    text = Text(state.display_text, no_wrap=True)
    for token in state.tokens:
        style = TOKEN_STYLES.get(token.kind)
        if style and token.kind != TEXT:
            text.stylize(style, token.start, token.end)

    start, end = state.selection.ordered()
    if start != end:
        text.stylize("reverse", start, end)
        return text
    if start < len(state.display_text) and state.display_text[start] != "\n":
        text.stylize("reverse", start, start + 1)
        return text
    return text[:start] + Text(" ", style="reverse") + text[start:]


class FoldEngineApp(App[None]):
    """Minimal Textual UI embedding a folding editor session."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#suggestions {
		height: auto;
		max-height: 6;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        text: str = SAMPLE_TEXT,
        config: Optional[EditorConfig] = None,
    ) -> None:
        super().__init__()
        self._state = UIState()
        self._initial_text = text
        self._config = config or EditorConfig.from_env()
        self.session: EditorSession | None = None
        self.adapter: TextualEditorAdapter | None = None
        self._buffer_widget: Static | None = None
        self._suggestion_widget: Static | None = None
        self._status_widget: Static | None = None
        self._logger = telemetry.get_logger("fold_engine.textual")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._suggestion_widget = Static("", id="suggestions")
        self._status_widget = Static("", id="status-line")
        yield self._suggestion_widget
        yield self._status_widget
        yield Footer()

    async def on_mount(self) -> None:
        self.session = EditorSession(
            self._initial_text, config=self._config, name="textual"
        )
        hooks = TextualUIHooks(
            update_display=self._update_display,
            update_overlay=self._update_overlay,
            update_status=self._update_status,
            update_suggestions=self._update_suggestions,
            set_caret=self._set_caret,
            handle_event=self._handle_event,
            log=self._log_line,
        )
        self.adapter = TextualEditorAdapter(self.session, hooks)
        self.adapter.process_pending()
        self.set_interval(0.1, self._process_timers)

    async def on_unmount(self) -> None:
        if self.session:
            self.session.close()

    def _process_timers(self) -> None:
        if self.adapter:
            self.adapter.process_timers()

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key == "ctrl+q":
            return
        result = self.adapter.handle_textual_key(event.key, character=event.character)
        if result.consumed:
            event.prevent_default()
            event.stop()
        self.adapter.process_pending()

    def _update_display(self, mirror: BufferMirror) -> None:
        self._state.display_text = mirror.display_text
        folded = list(mirror.folded_lines)
        self.sub_title = f"{mirror.language} v{mirror.version} folded={folded}"

    def _update_overlay(self, tokens: Sequence[Token]) -> None:
        self._state.tokens = tuple(tokens)

    def _set_caret(self, selection: Selection) -> None:
        self._state.selection = selection
        if self._buffer_widget:
            self._buffer_widget.update(render_overlay(self._state))

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _update_suggestions(self, suggestions: SuggestionState) -> None:
        if not self._suggestion_widget:
            return
        if not suggestions.visible:
            self._suggestion_widget.update("")
            return
        lines = Text()
        for index, item in enumerate(suggestions.items):
            style = "reverse" if index == suggestions.index else ""
            lines.append(f"{item}\n", style=style)
        self._suggestion_widget.update(lines)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "folds.changed":
            self._update_status(f"folded {payload}")

    def _log_line(self, line: str) -> None:
        self._logger.debug(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the fold engine Textual demo.")
    parser.add_argument("path", nargs="?", help="File to open (default: sample text)")
    parser.add_argument(
        "--language",
        help="Language id or alias (default: from FOLD_ENGINE_LANGUAGE or the file suffix)",
    )
    parser.add_argument(
        "--telemetry-preset",
        choices=("development", "production", "performance"),
        help="Telemetry preset to activate before the app starts",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.telemetry_preset:
        telemetry.configure(preset=args.telemetry_preset)

    config = EditorConfig.from_env()
    text = SAMPLE_TEXT
    if args.path:
        path = Path(args.path)
        text = path.read_text(encoding="utf-8")
        if not args.language and path.suffix:
            config = config.with_overrides(language=path.suffix.lstrip("."))
    if args.language:
        config = config.with_overrides(language=args.language)

    app = FoldEngineApp(text=text, config=config)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
