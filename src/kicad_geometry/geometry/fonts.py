"""
Text measurement.

Outline computation needs the rendered size of label and property text.
The measurement service is passed explicitly to the outline engine;
``PillowTextMetrics`` measures with FreeType through Pillow.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol, Tuple

from PIL import ImageFont

from kicad_geometry.exceptions import FontError

logger = logging.getLogger(__name__)

# Font sizes in KiCad files are in mm; glyphs are measured at this many
# pixels per mm and the pixel extent is used as mm.
FONT_SCALE = 1.333333


class TextMetrics(Protocol):
    """Anything that can report the (width, height) of a string in mm."""

    def measure(self, text: str, face: Optional[str], size: float) -> Tuple[float, float]:
        ...


class PillowTextMetrics:
    """
    Measure text with Pillow's FreeType bindings.

    Height is ``size * scale`` per line. Width is the advance width of
    the longest line at a pixel size of ``size * scale``. Fonts are cached
    per instance.

    Args:
        default_face: Font file (or name FreeType can locate) used when the
            text does not name a face. Pillow's bundled font when None.
        scale: Pixel scale applied to font sizes
        strict: Raise FontError for a face that cannot be loaded instead of
            measuring with the default face
    """

    def __init__(
        self,
        default_face: Optional[str] = None,
        scale: float = FONT_SCALE,
        strict: bool = False,
    ):
        self.default_face = default_face or None
        self.scale = scale
        self.strict = strict
        self._fonts: Dict[Tuple[Optional[str], float], ImageFont.FreeTypeFont] = {}

    def font(self, face: Optional[str], px: float):
        key = (face, px)
        if key not in self._fonts:
            self._fonts[key] = self._load(face, px)
            logger.debug("Loaded font %s at %.3fpx", face or "<default>", px)
        return self._fonts[key]

    def _load(self, face: Optional[str], px: float):
        if not face:
            return ImageFont.load_default(size=px)
        try:
            return ImageFont.truetype(face, size=px)
        except OSError as e:
            if self.strict or face == self.default_face:
                raise FontError(
                    "Cannot load font face",
                    context={"face": face, "size": px},
                    suggestions=["Install the font or set text.font_face in the config"],
                ) from e
            logger.warning("Font %r not available, measuring with the default face", face)
            return self.font(self.default_face, px)

    def measure(self, text: str, face: Optional[str], size: float) -> Tuple[float, float]:
        px = size * self.scale
        font = self.font(face or self.default_face, px)
        lines = text.split("\n")
        width = max(font.getlength(line) for line in lines)
        return float(width), px * len(lines)
