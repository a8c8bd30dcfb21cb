"""
View and initialize kicad-geometry configuration.

Usage:
    kicad-geometry config --show      Effective configuration with sources
    kicad-geometry config --init      Write a template .kicad-geometry.toml
    kicad-geometry config --paths     Config file locations
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from kicad_geometry.config import (
    CONFIG_FILENAMES,
    USER_CONFIG_PATH,
    Config,
    generate_template,
    get_config_paths,
)


def add_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--show", action="store_true", help="Show effective configuration")
    group.add_argument("--init", action="store_true", help="Create a template config file")
    group.add_argument("--paths", action="store_true", help="Show config file paths")
    parser.add_argument(
        "--user",
        action="store_true",
        help="With --init, write the user config instead of the project file",
    )


def run(args: argparse.Namespace, config: Config) -> int:
    if args.init:
        return _init_config(args.user)
    if args.paths:
        return _show_paths()
    return _show_config(config)


def _show_config(config: Config) -> int:
    print("# Effective kicad-geometry configuration")
    current = None
    for section, key, value in config.items():
        if section != current:
            print(f"\n[{section}]")
            current = section
        source = config.get_source(f"{section}.{key}")
        print(f"{key} = {value!r}  # {source}")
    return 0


def _init_config(user: bool) -> int:
    path = USER_CONFIG_PATH if user else Path.cwd() / CONFIG_FILENAMES[0]
    if path.exists():
        print(f"Error: {path} already exists", file=sys.stderr)
        return 1
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(generate_template(), encoding="utf-8")
    print(f"Created {path}")
    return 0


def _show_paths() -> int:
    for name, path in get_config_paths().items():
        status = "found" if path and path.exists() else "not found"
        print(f"{name}: {path or '-'} ({status})")
    return 0
