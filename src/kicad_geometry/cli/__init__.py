"""
Command-line interface for kicad-geometry.

    kicad-geometry nets <schematic>          - List nets and their members
    kicad-geometry pins <schematic> <ref>    - Sheet positions of a symbol's pins
    kicad-geometry bbox <schematic>          - Bounding box of the sheet contents
    kicad-geometry config                    - Show or create configuration

Examples:
    kicad-geometry nets amp.kicad_sch --net GND
    kicad-geometry pins amp.kicad_sch U1 1 2 3 --format json
    kicad-geometry bbox amp.kicad_sch --items
    kicad-geometry config --init
"""

import argparse
import logging
from typing import List, Optional

from kicad_geometry import __version__
from kicad_geometry.config import Config
from kicad_geometry.exceptions import KiCadGeometryError
from kicad_geometry.logging import enable_verbose

from . import bbox_cmd, config_cmd, nets_cmd, pins_cmd
from .utils import print_error

__all__ = ["main"]

logger = logging.getLogger(__name__)

COMMANDS = {
    "nets": (nets_cmd, "List nets in a schematic"),
    "pins": (pins_cmd, "Show sheet positions of symbol pins"),
    "bbox": (bbox_cmd, "Bounding box of a schematic"),
    "config": (config_cmd, "View and initialize configuration"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kicad-geometry",
        description="KiCad schematic geometry and connectivity",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"kicad-geometry {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging and tracebacks")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    for name, (module, help_text) in COMMANDS.items():
        module.add_arguments(subparsers.add_parser(name, help=help_text))
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the kicad-geometry CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    verbose = args.verbose
    try:
        config = Config.load()
        verbose = verbose or config.defaults.verbose
        if verbose:
            enable_verbose("DEBUG")
        logger.debug("Running %s", args.command)

        module, _ = COMMANDS[args.command]
        return module.run(args, config)
    except KiCadGeometryError as e:
        print_error(e, verbose=verbose)
        return 1
