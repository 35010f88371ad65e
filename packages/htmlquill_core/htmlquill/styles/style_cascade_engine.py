"""Style cascade engine for nested inline formatting."""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, Iterable, Tuple

from .run_style import EMPTY_RUN_STYLE, RunStyle

_FIELD_NAMES = tuple(f.name for f in fields(RunStyle))


class StyleCascadeEngine:
    """Compose the effective run style from the formatting deltas in scope."""

    def __init__(self) -> None:
        self._cache: Dict[Tuple[RunStyle, ...], RunStyle] = {}

    # ------------------------------------------------------------------
    def cascade(self, deltas: Iterable[RunStyle]) -> RunStyle:
        """
        Merge deltas ordered from the outermost to the innermost scope.

        Each property comes from the innermost delta that defines it; a property
        no delta defines stays ``None``.
        """
        key = tuple(delta for delta in deltas if not delta.is_empty)
        if not key:
            return EMPTY_RUN_STYLE
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        style = EMPTY_RUN_STYLE
        for delta in key:
            style = self.merge_style_properties(style, delta)
        self._cache[key] = style
        return style

    # ------------------------------------------------------------------
    def merge_style_properties(self, base_style: RunStyle, override_style: RunStyle) -> RunStyle:
        if override_style.is_empty:
            return base_style
        values: Dict[str, Any] = {}
        for name in _FIELD_NAMES:
            value = getattr(override_style, name)
            values[name] = value if value is not None else getattr(base_style, name)
        return RunStyle(**values)

    # ------------------------------------------------------------------
    def clear_cache(self) -> None:
        self._cache.clear()
