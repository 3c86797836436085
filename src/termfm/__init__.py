"""termfm - terminal file browser built with Textual."""

__version__ = "0.3.0"


def main(argv=None) -> int:
    from .cli import main as _main

    return _main(argv)


__all__ = ["main", "__version__"]
