"""Paragraph model for the HTML document tree."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..styles.paragraph_style import EMPTY_PARAGRAPH_STYLE, ParagraphStyle
from .base import Models
from .run import Run


class Paragraph(Models):
    """Represents a paragraph: ordered runs plus block properties."""

    def __init__(
        self,
        style: ParagraphStyle = EMPTY_PARAGRAPH_STYLE,
        preserve_space: bool = False,
        source_tag: Optional[str] = None,
    ):
        super().__init__(source_tag=source_tag)
        self.style: ParagraphStyle = style
        # set inside <pre>: whitespace is kept verbatim
        self.preserve_space: bool = preserve_space

    @property
    def runs(self) -> List[Run]:
        return [child for child in self.children if isinstance(child, Run)]

    def add_run(self, run: Run) -> Run:
        """Add run to paragraph."""
        if not isinstance(run, Run):
            raise TypeError(f"Paragraph can only contain runs, got {type(run)!r}")
        self.children.append(run)
        return run

    def remove_run(self, run: Run) -> bool:
        return self.remove_child(run)

    @property
    def last_run(self) -> Optional[Run]:
        return self.children[-1] if self.children else None

    def strip_trailing_whitespace(self) -> None:
        """Drop trailing whitespace-only runs and right-trim the last text run."""
        while self.children and self.children[-1].is_whitespace:
            self.children.pop()
        last = self.last_run
        if last is not None and not last.is_break and not last.is_image:
            last.text = last.text.rstrip(" ")

    def strip_whitespace(self) -> None:
        """Drop whitespace-only runs and spaces at both ends of the paragraph."""
        while self.children and self.children[0].is_whitespace:
            self.children.pop(0)
        first = self.children[0] if self.children else None
        if first is not None and not first.is_break and not first.is_image:
            first.text = first.text.lstrip(" ")
        self.strip_trailing_whitespace()

    def is_empty(self) -> bool:
        """A paragraph is empty when no run carries text, a break or an image."""
        return not any(run.is_break or run.is_image or run.text for run in self.children)

    def get_text(self) -> str:
        return "".join(run.get_text() for run in self.children)

    @property
    def alignment(self) -> Optional[str]:
        return self.style.alignment

    def _attributes_dict(self) -> Dict[str, Any]:
        return self.style.to_dict()

    def __repr__(self) -> str:
        return f"Paragraph(runs={len(self.children)}, text={self.get_text()[:30]!r})"
