"""
Render adapter: model snapshot in, frame of Rich renderables out.

Nothing here touches the filesystem or keeps state; the app calls
``render`` after every processed event and paints the result.
"""

from dataclasses import dataclass
from datetime import datetime

from rich.console import Group, RenderableType
from rich.syntax import Syntax
from rich.text import Text

from .controller import Model
from .entries import Entry, Listing
from .help import help_text
from .modes import PLACEHOLDERS, PROMPT_LABELS, KeyMap, Mode

LOGO = " FM "
BUSY_MARKER = "working…"
NAME_COLUMN_LIMIT = 30

FILE_ICONS = {
    ".py": "🐍", ".js": "🟨", ".ts": "🔷", ".html": "🌐", ".css": "🎨",
    ".json": "📋", ".md": "📝", ".txt": "📄", ".pdf": "📕",
    ".png": "🖼", ".jpg": "🖼", ".jpeg": "🖼", ".gif": "🖼", ".svg": "🖼",
    ".mp3": "🎵", ".wav": "🎵", ".flac": "🎵",
    ".mp4": "🎬", ".mkv": "🎬", ".avi": "🎬",
    ".zip": "🗜", ".tar": "🗜", ".gz": "🗜", ".rar": "🗜",
    ".exe": "⚙", ".sh": "⚙", ".bat": "⚙",
    ".db": "🗄", ".sqlite": "🗄",
    ".rs": "🦀", ".go": "🐹", ".c": "🔧", ".cpp": "🔧",
}


@dataclass(frozen=True)
class Frame:
    path_bar: Text
    listing: Text
    preview: RenderableType
    status: Text


# ─────────────────────────── Helpers ────────────────────────────

def human_size(size: int) -> str:
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} PB"


def format_modified(timestamp: float) -> str:
    try:
        return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M")
    except (OverflowError, OSError, ValueError):
        return "-"


def entry_icon(entry: Entry) -> str:
    if entry.is_dir:
        return "📁"
    return FILE_ICONS.get(entry.suffix, "📄")


def pane_width(total_width: int) -> int:
    """Inner width of the listing pane: half the screen minus its border."""
    return max(1, total_width // 2 - 2)


# ─────────────────────────── Panes ────────────────────────────

def render_row(entry: Entry, width: int, show_icons: bool = True) -> Text:
    size = "-" if entry.is_dir else human_size(entry.size)
    label = Text(f"{entry_icon(entry)} {entry.name}" if show_icons else entry.name)
    if entry.is_dir:
        label.stylize("bold")
    label.truncate(max(1, width - len(size) - 1), overflow="ellipsis", pad=True)
    label.append(" " + size, style="dim")
    return label


def render_listing(model: Model, show_icons: bool = True) -> Text:
    listing = model.listing
    if not listing.entries:
        return Text("Directory is empty", style="dim italic")

    width = pane_width(model.viewport.width)
    text = Text()
    for n, row in enumerate(model.viewport.visible(len(listing))):
        line = render_row(listing[row], width, show_icons)
        if row == model.cursor:
            line.stylize("bold reverse")
        if n:
            text.append("\n")
        text.append_text(line)
    return text


def render_info(model: Model) -> Text:
    entry = model.selected
    if entry is None:
        return Text("")
    info = (
        f"Name:     {entry.name}\n"
        f"Path:     {model.selected_path}\n"
        f"Type:     {'Directory' if entry.is_dir else 'Symlink' if entry.is_symlink else 'File'}\n"
        f"Size:     {'-' if entry.is_dir else human_size(entry.size)}\n"
        f"Perms:    {entry.mode}\n"
        f"Modified: {format_modified(entry.modified)}"
    )
    return Text(info)


def render_directory_preview(listing: Listing, width: int, height: int, show_icons: bool = True) -> Text:
    if not listing.entries:
        return Text("Directory is empty", style="dim italic")
    rows = [render_row(entry, width, show_icons) for entry in listing.entries[:height]]
    return Text("\n").join(rows)


def render_preview(
    model: Model, keymap: KeyMap, highlight: bool = True, show_icons: bool = True
) -> RenderableType:
    if model.mode is Mode.HELP:
        return help_text(keymap)
    preview = model.preview
    if preview is None or preview.path != model.selected_path:
        return render_info(model)
    if preview.listing is not None:
        width = pane_width(model.viewport.width)
        return render_directory_preview(preview.listing, width, model.viewport.height, show_icons)
    if preview.binary:
        return Text(f"{preview.path.name}: binary file, no preview", style="dim italic")

    body: RenderableType
    if highlight:
        lexer = Syntax.guess_lexer(str(preview.path), preview.text)
        body = Syntax(preview.text, lexer, line_numbers=True, word_wrap=False)
    else:
        body = Text(preview.text)
    if preview.truncated:
        return Group(body, Text("… truncated", style="dim italic"))
    return body


def status_info(model: Model) -> str:
    if model.mode.is_prompt:
        value = model.input_buffer or PLACEHOLDERS[model.mode]
        return f"{PROMPT_LABELS[model.mode]} ❯ {value}"
    if model.failure is not None:
        return f"⚠  {model.failure.describe()}"
    if model.notice:
        return model.notice
    entry = model.selected
    if entry is None:
        return ""
    size = "-" if entry.is_dir else human_size(entry.size)
    return f"{size} {entry.mode} {model.selected_path}"


def render_status(model: Model) -> Text:
    entry = model.selected
    name = Text(entry.name if entry else "N/A")
    name.truncate(NAME_COLUMN_LIMIT, overflow="ellipsis")
    total = len(model.listing)
    count = f" {model.cursor + 1}/{total} " if entry else " 0/0 "

    info = status_info(model)
    if model.busy:
        info = f"{BUSY_MARKER} {info}".rstrip()

    left = Text.assemble(" ", name, " ", style="bold reverse")
    right = Text.assemble((count, "reverse"), (LOGO, "bold reverse"))
    middle = Text(f" {info}", style="bold" if model.mode.is_prompt else "")
    if model.failure is not None and not model.mode.is_prompt:
        middle.stylize("red")
    middle.truncate(max(0, model.viewport.width - left.cell_len - right.cell_len), overflow="ellipsis", pad=True)
    return Text.assemble(left, middle, right)


def render(model: Model, keymap: KeyMap | None = None, show_icons: bool = True, highlight: bool = True) -> Frame:
    return Frame(
        path_bar=Text(f" 📂  {model.listing.path}"),
        listing=render_listing(model, show_icons),
        preview=render_preview(model, keymap or KeyMap(), highlight, show_icons),
        status=render_status(model),
    )
