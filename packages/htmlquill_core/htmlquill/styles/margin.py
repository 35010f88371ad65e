"""Margin (and padding) values with CSS four-side expansion."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .units import EMPTY_UNIT, Unit


@dataclass(frozen=True)
class Margin:
    """Four independent side lengths."""

    top: Unit = EMPTY_UNIT
    right: Unit = EMPTY_UNIT
    bottom: Unit = EMPTY_UNIT
    left: Unit = EMPTY_UNIT

    @classmethod
    def parse(cls, text: Optional[str]) -> "Margin":
        """
        Parse a shorthand of 1 to 4 lengths.

        ``4px`` sets every side, ``4px 8px`` sets vertical/horizontal,
        ``1px 2px 3px`` sets top/horizontal/bottom, four values go clockwise from
        the top. Any invalid token invalidates the whole shorthand.
        """
        if not text:
            return EMPTY_MARGIN
        tokens = text.split()
        if not 1 <= len(tokens) <= 4:
            return EMPTY_MARGIN
        units = [Unit.parse(token) for token in tokens]
        if not all(unit.is_valid for unit in units):
            return EMPTY_MARGIN

        if len(units) == 1:
            top = right = bottom = left = units[0]
        elif len(units) == 2:
            top = bottom = units[0]
            right = left = units[1]
        elif len(units) == 3:
            top, right, bottom = units
            left = right
        else:
            top, right, bottom, left = units
        return cls(top=top, right=right, bottom=bottom, left=left)

    @property
    def is_valid(self) -> bool:
        """True when at least one side is specified."""
        return any(side.is_valid for side in (self.top, self.right, self.bottom, self.left))

    def with_side(self, side: str, unit: Unit) -> "Margin":
        return replace(self, **{side: unit})


EMPTY_MARGIN = Margin()

SIDES = ("top", "right", "bottom", "left")
