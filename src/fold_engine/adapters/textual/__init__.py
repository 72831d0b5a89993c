"""Textual adapter for fold_engine."""

from .controller import KeyResult, TextualEditorAdapter, TextualUIHooks

__all__ = ["KeyResult", "TextualEditorAdapter", "TextualUIHooks"]
