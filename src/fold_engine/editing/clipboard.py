"""Clipboard backends: the system clipboard via pyperclip, or process memory."""

from __future__ import annotations

from typing import Protocol

import pyperclip

from fold_engine.buffer.sync import ClipboardUnavailableError


class Clipboard(Protocol):
    def read(self) -> str:
        ...

    def write(self, text: str) -> None:
        ...


class MemoryClipboard:
    """Session-local clipboard, used when the system one is disabled."""

    def __init__(self, text: str = "") -> None:
        self.text = text

    def read(self) -> str:
        return self.text

    def write(self, text: str) -> None:
        self.text = text


class SystemClipboard:
    """pyperclip-backed clipboard; failures surface as ClipboardUnavailableError."""

    def read(self) -> str:
        try:
            return pyperclip.paste()
        except pyperclip.PyperclipException as exc:
            raise ClipboardUnavailableError(str(exc)) from exc

    def write(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            raise ClipboardUnavailableError(str(exc)) from exc


def default_clipboard(use_system: bool) -> Clipboard:
    return SystemClipboard() if use_system else MemoryClipboard()


__all__ = ["Clipboard", "MemoryClipboard", "SystemClipboard", "default_clipboard"]
