"""
Length units for HTML/CSS values.

Handles parsing of ``120px``, ``10pt``, ``5em``, ``20%`` and friends, and the
conversions serializers need (points, pixels, twips, half-points, EMU).
"""

from __future__ import annotations

import re
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DPI = 96
EMU_PER_INCH = 914400
TWIPS_PER_POINT = 20
# font size the relative units (em, ex) are measured against
BASE_FONT_SIZE_PT = 12.0

ABSOLUTE_UNITS = ("px", "pt", "cm", "mm", "in", "pc")
RELATIVE_UNITS = ("em", "ex")
PERCENT = "%"

_POINTS_PER_UNIT = {
    "px": 72.0 / DPI,
    "pt": 1.0,
    "cm": 72.0 / 2.54,
    "mm": 72.0 / 25.4,
    "in": 72.0,
    "pc": 12.0,
    "em": BASE_FONT_SIZE_PT,
    "ex": BASE_FONT_SIZE_PT / 2,
}

_UNIT_PATTERN = re.compile(
    r"^\s*([+-]?(?:\d+\.?\d*|\.\d+))\s*(px|pt|cm|mm|in|pc|em|ex|%)?\s*$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Unit:
    """
    A numeric magnitude with its unit type.

    ``type`` is one of the absolute or relative unit names, ``"%"``, or ``None``
    when the value was not specified or could not be parsed.
    """

    type: Optional[str] = None
    value: float = 0.0

    @classmethod
    def parse(cls, text: Optional[str], default_type: str = "px") -> "Unit":
        """
        Parse a CSS length.

        A bare number takes ``default_type``. Anything malformed (including
        keywords such as ``auto``) yields :data:`EMPTY_UNIT`.
        """
        if text is None:
            return EMPTY_UNIT
        match = _UNIT_PATTERN.match(text)
        if not match:
            if text.strip():
                logger.debug(f"Invalid unit value: {text!r}")
            return EMPTY_UNIT
        value = float(match.group(1))
        unit_type = (match.group(2) or default_type).lower()
        return cls(type=unit_type, value=value)

    @property
    def is_valid(self) -> bool:
        return self.type is not None

    @property
    def is_absolute(self) -> bool:
        return self.type in ABSOLUTE_UNITS

    @property
    def is_relative(self) -> bool:
        return self.type in RELATIVE_UNITS

    @property
    def is_percentage(self) -> bool:
        return self.type == PERCENT

    def to_points(self) -> Optional[float]:
        """Value in points, or ``None`` for percentages and invalid units."""
        factor = _POINTS_PER_UNIT.get(self.type or "")
        if factor is None:
            return None
        return self.value * factor

    def to_pixels(self) -> Optional[int]:
        points = self.to_points()
        if points is None:
            return None
        return int(round(points * DPI / 72.0))

    def to_twips(self) -> Optional[int]:
        points = self.to_points()
        if points is None:
            return None
        return int(round(points * TWIPS_PER_POINT))

    def to_half_points(self) -> Optional[int]:
        points = self.to_points()
        if points is None:
            return None
        return int(round(points * 2))

    def to_emu(self) -> Optional[int]:
        points = self.to_points()
        if points is None:
            return None
        return int(round(points * EMU_PER_INCH / 72.0))

    def __str__(self) -> str:
        if not self.is_valid:
            return "unset"
        value = int(self.value) if float(self.value).is_integer() else self.value
        return f"{value}{self.type}"


EMPTY_UNIT = Unit()


def pixels(value: float) -> Unit:
    return Unit("px", float(value))


def points(value: float) -> Unit:
    return Unit("pt", float(value))
