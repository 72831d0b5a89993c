"""Key bindings that map normalized key tokens onto session commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Dict, Iterable, Iterator, Mapping, Optional

from fold_engine.folding.mapper import map_display_line_index
from fold_engine.runtime.telemetry import span

if TYPE_CHECKING:  # pragma: no cover
    from fold_engine.session import EditorSession

SUGGESTIONS_VISIBLE = "suggestions_visible"

_MODIFIER_ORDER = ("ctrl", "alt", "shift")


def key_to_token(key: str, modifiers: Iterable[str] = ()) -> str:
    """Normalize ``key`` plus modifiers to a token such as ``"ctrl+shift+z"``.

    Textual already reports combined keys (``"ctrl+z"``); those are split and
    merged with any explicit modifiers so both spellings resolve alike.
    """

    parts = [part for part in key.lower().split("+") if part] or [key.lower()]
    base = parts[-1]
    mods = {mod.strip().lower() for mod in (*parts[:-1], *modifiers) if mod.strip()}
    if "meta" in mods:
        mods.discard("meta")
        mods.add("alt")
    ordered = [mod for mod in _MODIFIER_ORDER if mod in mods]
    ordered.extend(sorted(mods.difference(_MODIFIER_ORDER)))
    return "+".join([*ordered, base])


@dataclass(frozen=True, slots=True)
class ActionRef:
    """A named session command."""

    id: str
    handler: Callable[["EditorSession"], object]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    def __call__(self, session: "EditorSession") -> object:
        return self.handler(session)


@dataclass(frozen=True, slots=True)
class KeyBinding:
    """Associates a key token with an action, optionally gated on flags."""

    token: str
    action_id: str
    when: Mapping[str, bool] = field(default_factory=dict)
    description: str = ""

    def __post_init__(self) -> None:
        if not self.token:
            raise ValueError("binding token cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        object.__setattr__(self, "token", key_to_token(self.token))
        object.__setattr__(self, "when", MappingProxyType(dict(self.when)))

    def allows(self, flags: Mapping[str, bool]) -> bool:
        return all(
            bool(flags.get(flag, False)) is expected
            for flag, expected in self.when.items()
        )

    @property
    def specificity(self) -> int:
        return len(self.when)


class KeymapRegistry:
    """Owns actions and the bindings that trigger them."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, list[KeyBinding]] = {}
        self._logger_name = logger_name

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if not replace and action.id in self._actions:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Action '{action_id}' is not registered") from exc

    def register_binding(self, binding: KeyBinding) -> KeyBinding:
        """Add ``binding``, replacing any binding with the same token and gate."""

        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"token": binding.token, "action_id": binding.action_id},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Binding '{binding.token}' references unknown action '{binding.action_id}'"
                )
            bucket = self._bindings.setdefault(binding.token, [])
            bucket[:] = [item for item in bucket if dict(item.when) != dict(binding.when)]
            bucket.append(binding)
            return binding

    def unregister_binding(
        self, token: str, *, when: Optional[Mapping[str, bool]] = None
    ) -> list[KeyBinding]:
        key = key_to_token(token)
        bucket = self._bindings.get(key, [])
        gate = dict(when or {})
        removed = [item for item in bucket if dict(item.when) == gate]
        self._bindings[key] = [item for item in bucket if item not in removed]
        return removed

    def iter_bindings(self) -> Iterator[KeyBinding]:
        for bucket in self._bindings.values():
            yield from bucket

    def resolve(
        self, token: str, flags: Mapping[str, bool] = MappingProxyType({})
    ) -> Optional[KeyBinding]:
        """Most specific binding for ``token`` whose gate matches ``flags``."""

        candidates = [
            binding
            for binding in self._bindings.get(key_to_token(token), [])
            if binding.allows(flags)
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda binding: binding.specificity)

    def dispatch(
        self,
        session: "EditorSession",
        token: str,
        flags: Mapping[str, bool] = MappingProxyType({}),
    ) -> Optional[KeyBinding]:
        binding = self.resolve(token, flags)
        if binding is None:
            return None
        self.get_action(binding.action_id)(session)
        return binding


def _toggle_fold_at_caret(session: "EditorSession") -> bool:
    line, _column = map_display_line_index(session.projection, session.selection.end)
    return session.toggle_fold_at_display_line(line)


DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef("history.undo", lambda s: s.undo(), "Undo"),
    ActionRef("history.redo", lambda s: s.redo(), "Redo"),
    ActionRef("clipboard.cut", lambda s: s.cut(), "Cut selection or line"),
    ActionRef("clipboard.copy", lambda s: s.copy(), "Copy selection or line"),
    ActionRef("clipboard.paste", lambda s: s.paste(), "Paste from clipboard"),
    ActionRef("edit.toggle_comment", lambda s: s.toggle_comment(), "Toggle comment"),
    ActionRef("edit.tab", lambda s: s.insert_tab(), "Insert indentation"),
    ActionRef("edit.delete_backward", lambda s: s.delete_backward(), "Delete backward"),
    ActionRef("edit.delete_forward", lambda s: s.delete_forward(), "Delete forward"),
    ActionRef("fold.toggle_at_caret", _toggle_fold_at_caret, "Toggle fold at caret"),
    ActionRef("fold.all", lambda s: s.fold_all(), "Fold every range"),
    ActionRef("fold.none", lambda s: s.unfold_all(), "Unfold every range"),
    ActionRef("suggest.request", lambda s: s.request_suggestions(), "Show suggestions"),
    ActionRef("suggest.next", lambda s: s.next_suggestion(), "Next suggestion"),
    ActionRef("suggest.previous", lambda s: s.previous_suggestion(), "Previous suggestion"),
    ActionRef("suggest.accept", lambda s: s.accept_suggestion(), "Accept suggestion"),
    ActionRef("suggest.dismiss", lambda s: s.dismiss_suggestions(), "Dismiss suggestions"),
)

_WHILE_SUGGESTING = {SUGGESTIONS_VISIBLE: True}

DEFAULT_BINDINGS: tuple[KeyBinding, ...] = (
    KeyBinding("ctrl+z", "history.undo"),
    KeyBinding("ctrl+y", "history.redo"),
    KeyBinding("ctrl+shift+z", "history.redo"),
    KeyBinding("ctrl+x", "clipboard.cut"),
    KeyBinding("ctrl+c", "clipboard.copy"),
    KeyBinding("ctrl+v", "clipboard.paste"),
    KeyBinding("ctrl+/", "edit.toggle_comment"),
    KeyBinding("ctrl+slash", "edit.toggle_comment"),
    KeyBinding("tab", "edit.tab"),
    KeyBinding("backspace", "edit.delete_backward"),
    KeyBinding("delete", "edit.delete_forward"),
    KeyBinding("ctrl+k", "fold.toggle_at_caret"),
    KeyBinding("ctrl+space", "suggest.request"),
    KeyBinding("down", "suggest.next", when=_WHILE_SUGGESTING),
    KeyBinding("up", "suggest.previous", when=_WHILE_SUGGESTING),
    KeyBinding("enter", "suggest.accept", when=_WHILE_SUGGESTING),
    KeyBinding("tab", "suggest.accept", when=_WHILE_SUGGESTING),
    KeyBinding("escape", "suggest.dismiss", when=_WHILE_SUGGESTING),
)


def load_default_keymaps(registry: KeymapRegistry) -> KeymapRegistry:
    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=True)
    for binding in DEFAULT_BINDINGS:
        registry.register_binding(binding)
    return registry


def register_binding(
    registry: KeymapRegistry,
    token: str,
    action_id: str,
    *,
    when: Optional[Mapping[str, bool]] = None,
    description: str = "",
) -> KeyBinding:
    """Bind ``token`` to an already registered action, overriding defaults."""

    return registry.register_binding(
        KeyBinding(token, action_id, when=dict(when or {}), description=description)
    )


__all__ = [
    "ActionRef",
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "KeyBinding",
    "KeymapRegistry",
    "SUGGESTIONS_VISIBLE",
    "key_to_token",
    "load_default_keymaps",
    "register_binding",
]
