"""Keyboard reference shown in Help mode."""

from rich.text import Text

from .modes import KeyMap

KEY_LABELS = {
    "question_mark": "?",
    "ctrl+c": "Ctrl+C",
    "ctrl+u": "Ctrl+U",
    "escape": "Esc",
    "enter": "Enter",
    "space": "Space",
    "backspace": "Backspace",
    "up": "↑",
    "down": "↓",
    "left": "←",
    "right": "→",
    "f5": "F5",
}


def key_label(keys: tuple[str, ...]) -> str:
    return " / ".join(KEY_LABELS.get(key, key.upper() if len(key) == 1 else key) for key in keys)


def shortcut_sections(keymap: KeyMap) -> list[tuple[str, list[tuple[str, str]]]]:
    return [
        ("Navigation", [
            (key_label(keymap.up), "Move up"),
            (key_label(keymap.down), "Move down"),
            (key_label(keymap.select), "Open directory / preview file"),
            (key_label(keymap.preview), "Preview file or directory contents"),
            (key_label(keymap.parent), "Go up one level"),
            (key_label(keymap.refresh), "Refresh"),
        ]),
        ("File Actions", [
            (key_label(keymap.rename), "Rename"),
            (key_label(keymap.move), "Move"),
            (key_label(keymap.delete), "Delete (confirm with y)"),
        ]),
        ("Prompt", [
            (key_label(keymap.commit), "Confirm"),
            (key_label(keymap.cancel), "Cancel"),
            ("Ctrl+U", "Clear input"),
        ]),
        ("App", [
            (key_label(keymap.help), "Show this help"),
            (key_label(keymap.browse_quit + keymap.quit), "Quit"),
        ]),
    ]


def help_text(keymap: KeyMap) -> Text:
    text = Text("termfm - Keyboard Shortcuts\n\n", style="bold")
    for section, items in shortcut_sections(keymap):
        text.append(f"{section}\n", style="bold underline")
        for keys, desc in items:
            text.append(f"  {keys:<22}", style="bold")
            text.append(f"  {desc}\n")
        text.append("\n")
    text.append("Press any key to close.", style="dim")
    return text
