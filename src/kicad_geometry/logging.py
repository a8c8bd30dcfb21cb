"""
Logging configuration for kicad-geometry.

The library logs under the ``kicad_geometry`` logger and is silent unless
a handler is attached, either by the application or with
``enable_verbose()``.
"""

import logging
from typing import Optional

_logger = logging.getLogger("kicad_geometry")
_logger.addHandler(logging.NullHandler())

DEFAULT_FORMAT = "[%(levelname)s] %(message)s"


def enable_verbose(level: str = "INFO", format: Optional[str] = None) -> None:
    """Log to stderr at ``level``.

    Args:
        level: Logging level - "DEBUG", "INFO", "WARNING", "ERROR"
        format: Optional custom format string

    Example:
        enable_verbose("DEBUG")
        netlist = extract_netlist(sch)   # logs pin resolution and groups
        disable_verbose()
    """
    _logger.setLevel(getattr(logging, level.upper()))

    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level.upper()))
    handler.setFormatter(logging.Formatter(format or DEFAULT_FORMAT))
    _logger.addHandler(handler)


def disable_verbose() -> None:
    """Remove the stderr handler and restore the WARNING level."""
    _logger.setLevel(logging.WARNING)
    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)
