"""Body model: the root container of block nodes."""

from __future__ import annotations

from typing import List, Tuple, Type

from .base import Models


class Body(Models):
    """Ordered container of block nodes (paragraphs and tables)."""

    def _allowed_types(self) -> Tuple[Type[Models], ...]:
        from .paragraph import Paragraph
        from .table import Table

        return (Paragraph, Table)

    def add_model(self, model: Models) -> Models:
        if not isinstance(model, Models):
            raise TypeError(f"{type(self).__name__} can only contain Models instances, got {type(model)!r}")
        if not isinstance(model, self._allowed_types()):
            allowed = ", ".join(t.__name__ for t in self._allowed_types())
            raise TypeError(f"Unsupported model type {type(model).__name__}; allowed: {allowed}")
        return self.add_child(model)

    def add_paragraph(self, paragraph: Models) -> Models:
        return self.add_model(paragraph)

    def add_table(self, table: Models) -> Models:
        return self.add_model(table)

    # ------------------------------------------------------------------
    @property
    def blocks(self) -> List[Models]:
        return list(self.children)

    def get_paragraphs(self) -> List[Models]:
        from .paragraph import Paragraph

        return list(self.iter_children(Paragraph))

    def get_tables(self) -> List[Models]:
        from .table import Table

        return list(self.iter_children(Table))

    def is_empty(self) -> bool:
        return not self.children

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self):
        return iter(self.children)
