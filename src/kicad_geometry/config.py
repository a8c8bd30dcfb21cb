"""
Configuration file support for kicad-geometry.

Settings are loaded hierarchically from:
1. Project config: .kicad-geometry.toml or kicad-geometry.toml in the
   project tree (searched upward from the working directory)
2. User config: ~/.config/kicad-geometry/config.toml

Project config overrides user config, which overrides built-in defaults.
CLI flags override both.
"""

from __future__ import annotations

import sys
import warnings
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from kicad_geometry.exceptions import ConfigurationError
from kicad_geometry.geometry.fonts import FONT_SCALE
from kicad_geometry.geometry.outline import JUNCTION_DIAMETER, NO_CONNECT_SIZE
from kicad_geometry.netlist.netlist import DEFAULT_EXCLUDED_PREFIXES, DEFAULT_POWER_PREFIX

CONFIG_FILENAMES = [".kicad-geometry.toml", "kicad-geometry.toml"]

USER_CONFIG_PATH = Path.home() / ".config" / "kicad-geometry" / "config.toml"

SECTIONS = ("defaults", "outline", "text", "netlist")


@dataclass
class DefaultsConfig:
    """Default options for CLI commands."""

    format: str = "table"
    verbose: bool = False


@dataclass
class OutlineConfig:
    """Sizes used by the outline engine."""

    junction_diameter: float = JUNCTION_DIAMETER
    no_connect_size: float = NO_CONNECT_SIZE


@dataclass
class TextConfig:
    """Text measurement settings."""

    font_face: str = ""
    font_scale: float = FONT_SCALE


@dataclass
class NetlistConfig:
    """Netlist extraction settings."""

    excluded_prefixes: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_PREFIXES))
    power_prefix: str = DEFAULT_POWER_PREFIX
    sort_pins: bool = False


@dataclass
class Config:
    """Merged configuration from all sources."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    outline: OutlineConfig = field(default_factory=OutlineConfig)
    text: TextConfig = field(default_factory=TextConfig)
    netlist: NetlistConfig = field(default_factory=NetlistConfig)

    # Which file each setting came from, keyed "section.key"
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Optional[Path] = None) -> Config:
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: cwd)

        Raises:
            ConfigurationError: If a config file is unreadable or invalid
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: Dict[str, str] = {}

        for path in (USER_CONFIG_PATH, _find_project_config(start_dir)):
            if path is not None and path.exists():
                _merge_config(config, _load_toml_file(path), str(path), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Source file of a "section.key" setting, or "default"."""
        return self._sources.get(key, "default")

    def items(self):
        """Yield (section, key, value) for every setting."""
        for section in SECTIONS:
            section_obj = getattr(self, section)
            for f in fields(section_obj):
                yield section, f.name, getattr(section_obj, f.name)


def _find_project_config(start_dir: Path) -> Optional[Path]:
    """
    Find a project config by walking up the directory tree.

    Stops at a directory containing .git, or at the filesystem root.
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            "Invalid TOML in config file",
            context={"file": str(path), "error": str(e)},
        ) from e
    except OSError as e:
        raise ConfigurationError(
            "Cannot read config file", context={"file": str(path), "error": str(e)}
        ) from e


def _merge_config(
    config: Config, data: Dict[str, Any], source: str, sources: Dict[str, str]
) -> None:
    """
    Merge raw TOML data into ``config``, recording the source of each key.

    Unknown sections and keys are reported with ``warnings.warn``.
    """
    for key in data:
        if key not in SECTIONS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    for section in SECTIONS:
        section_data = data.get(section)
        if not isinstance(section_data, dict):
            continue

        section_obj = getattr(config, section)
        known = {f.name for f in fields(section_obj)}
        _warn_unknown_keys(section_data, known, section, source)

        for key, value in section_data.items():
            if key in known:
                setattr(section_obj, key, value)
                sources[f"{section}.{key}"] = source


def _warn_unknown_keys(data: Dict[str, Any], known: set, section: str, source: str) -> None:
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def get_config_paths() -> Dict[str, Optional[Path]]:
    """Config file locations: the project file found from cwd, and the user file."""
    return {
        "project": _find_project_config(Path.cwd()),
        "user": USER_CONFIG_PATH,
    }


def generate_template() -> str:
    """Template config file with every option commented out."""
    return f"""# kicad-geometry configuration file
# Place as .kicad-geometry.toml in the project root or at
# ~/.config/kicad-geometry/config.toml for user defaults

[defaults]
# Output format for CLI commands: table, json
# format = "table"

# Enable verbose logging by default
# verbose = false

[outline]
# Junction diameter (mm) used when a junction declares none
# junction_diameter = {JUNCTION_DIAMETER}

# Half-size (mm) of the no-connect marker
# no_connect_size = {NO_CONNECT_SIZE}

[text]
# Font file used for text measurement; empty uses Pillow's bundled font
# font_face = ""

# Pixels per mm when measuring glyphs
# font_scale = {FONT_SCALE}

[netlist]
# Symbols whose lib_id starts with one of these have no pins on nets
# excluded_prefixes = ["Mechanical:"]

# lib_id prefix of power symbols; their Value names the net
# power_prefix = "power:"

# Order generated net names by reference and pin number
# sort_pins = false
"""
