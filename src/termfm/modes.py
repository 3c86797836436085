"""
Interaction modes and the key bindings that move between them.

Exactly one mode is active. The three prompt modes own the free-text input
buffer; while one of them is active every key except commit and cancel is
buffer input, so navigation cannot move the cursor off the prompt's target.
"""

from dataclasses import dataclass
from enum import Enum

INPUT_CHAR_LIMIT = 250


class Mode(Enum):
    BROWSE = "browse"
    RENAME_PROMPT = "rename"
    MOVE_PROMPT = "move"
    DELETE_CONFIRM = "delete"
    HELP = "help"

    @property
    def is_prompt(self) -> bool:
        return self in PROMPT_MODES


PROMPT_MODES = frozenset({Mode.RENAME_PROMPT, Mode.MOVE_PROMPT, Mode.DELETE_CONFIRM})

PLACEHOLDERS = {
    Mode.RENAME_PROMPT: "newfilename.ex",
    Mode.MOVE_PROMPT: "/usr/share/",
    Mode.DELETE_CONFIRM: "[y/n]",
}

PROMPT_LABELS = {
    Mode.RENAME_PROMPT: "Rename to:",
    Mode.MOVE_PROMPT: "Move to:",
    Mode.DELETE_CONFIRM: "Delete?",
}


class PromptAction(Enum):
    COMMIT = "commit"
    CANCEL = "cancel"
    EDIT = "edit"


@dataclass(frozen=True)
class KeyMap:
    """Textual key names for every reserved binding."""

    quit: tuple[str, ...] = ("ctrl+c",)
    browse_quit: tuple[str, ...] = ("q",)
    up: tuple[str, ...] = ("up", "k")
    down: tuple[str, ...] = ("down", "j")
    select: tuple[str, ...] = ("enter", "space", "right", "l")
    parent: tuple[str, ...] = ("backspace", "left", "h")
    rename: tuple[str, ...] = ("r",)
    move: tuple[str, ...] = ("m",)
    delete: tuple[str, ...] = ("d",)
    help: tuple[str, ...] = ("question_mark", "i")
    refresh: tuple[str, ...] = ("f5",)
    preview: tuple[str, ...] = ("p",)
    cancel: tuple[str, ...] = ("escape",)
    commit: tuple[str, ...] = ("enter",)


class ModeMachine:
    """Decides which mode a key leads to and how prompt keys edit the buffer."""

    def __init__(self, keymap: KeyMap | None = None):
        self.keymap = keymap or KeyMap()
        self._browse_targets = {}
        for mode, keys in (
            (Mode.RENAME_PROMPT, self.keymap.rename),
            (Mode.MOVE_PROMPT, self.keymap.move),
            (Mode.DELETE_CONFIRM, self.keymap.delete),
            (Mode.HELP, self.keymap.help),
        ):
            for key in keys:
                self._browse_targets[key] = mode

    def browse_transition(self, key: str, has_selection: bool) -> Mode | None:
        """Mode entered from Browse by ``key``, or None if the key is not a mode key."""
        target = self._browse_targets.get(key)
        if target is None:
            return None
        if target.is_prompt and not has_selection:
            return None
        return target

    def prompt_action(self, key: str) -> PromptAction:
        if key in self.keymap.cancel:
            return PromptAction.CANCEL
        if key in self.keymap.commit:
            return PromptAction.COMMIT
        return PromptAction.EDIT

    def edit(self, buffer: str, key: str, character: str | None) -> str:
        if key == "backspace":
            return buffer[:-1]
        if key == "ctrl+u":
            return ""
        if character and character.isprintable() and len(buffer) < INPUT_CHAR_LIMIT:
            return buffer + character
        return buffer
