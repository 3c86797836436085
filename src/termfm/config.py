"""JSON settings file.

Missing, unreadable or malformed config falls back to defaults; values of
the wrong type are ignored key by key.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "termfm"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    start_dir: str = "."
    show_icons: bool = True
    show_hidden: bool = False
    enable_logging: bool = False
    enable_mousewheel: bool = True
    syntax_highlight: bool = True
    preview_max_bytes: int = 64 * 1024

    def start_path(self) -> Path:
        if self.start_dir == "~":
            return Path.home()
        return Path(self.start_dir).expanduser()


def load_config(path: Path | None = None) -> dict[str, object]:
    """Return the raw config object, or an empty dict when it cannot be read."""
    config_path = path or CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    config_path = path or CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def ensure_config(path: Path | None = None) -> None:
    """Write the default settings when no config file exists yet."""
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        save_config(asdict(Settings()), config_path)


def settings_from_dict(data: dict[str, object]) -> Settings:
    settings = Settings()
    values = {}
    for f in fields(Settings):
        value = data.get(f.name)
        default = getattr(settings, f.name)
        # bool is a subclass of int; keep the two apart.
        if value is None or type(value) is not type(default):
            if value is not None:
                logger.warning("ignoring config key %r: expected %s", f.name, type(default).__name__)
            continue
        values[f.name] = value
    if values.get("preview_max_bytes", 1) <= 0:
        values.pop("preview_max_bytes")
    return replace(settings, **values)


def load_settings(path: Path | None = None) -> Settings:
    return settings_from_dict(load_config(path))
