#!/usr/bin/env python3
"""modaledit - A modal text editor for the terminal."""

from __future__ import annotations

import argparse
import logging
import sys

from .config import VIM_KEYMAP_SETTINGS_KEY, get_config_dir


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modaledit",
        description="A modal (vim-style) text editor for the terminal",
    )
    parser.add_argument("path", nargs="?", help="File to open")
    parser.add_argument(
        "--keymap",
        metavar="NAME_OR_PATH",
        help="Custom vim keymap (name under ~/.modaledit/keymaps or a JSON file path)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Write engine debug logging to modaledit.log in the config directory",
    )
    return parser


def configure_logging(debug: bool) -> None:
    """Send debug logging to a file; the terminal belongs to the UI."""
    if not debug:
        return
    log_dir = get_config_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(log_dir / "modaledit.log"),
        level=logging.DEBUG,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(args.debug)
    except OSError as exc:
        print(f"[modaledit] Failed to set up debug log: {exc}", file=sys.stderr)

    # Import lazily to speed up --help
    from .core.keymap_manager import KeymapManager
    from .ui import ModalEditApp

    manager = KeymapManager()
    settings = manager.initialize()
    if args.keymap:
        manager.load_custom_keymap({**settings, VIM_KEYMAP_SETTINGS_KEY: args.keymap})

    try:
        app = ModalEditApp(path=args.path)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"[modaledit] Failed to open '{args.path}': {exc}", file=sys.stderr)
        return 1

    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
