"""
Base model class for the HTML document tree.

Nodes own their children; there is no parent back-reference. ``source_tag``
records the name of the tag a node was created for, for diagnostics only.
"""

from __future__ import annotations

import uuid
import logging
from abc import ABC
from typing import Any, Dict, Iterator, List, Optional, Type

logger = logging.getLogger(__name__)


class Models(ABC):
    """Abstract base class for document nodes with tree helpers."""

    def __init__(self, source_tag: Optional[str] = None):
        self.children: List["Models"] = []
        self.id: str = str(uuid.uuid4())
        self.source_tag: Optional[str] = source_tag

    def add_child(self, model: "Models") -> "Models":
        """Add child model to this model."""
        if model not in self.children:
            self.children.append(model)
        return model

    def remove_child(self, model: "Models") -> bool:
        """Remove a direct child; returns False when it is not a child."""
        for index, child in enumerate(self.children):
            if child is model:
                del self.children[index]
                return True
        return False

    def iter_children(self, type_filter: Optional[Type["Models"]] = None) -> Iterator["Models"]:
        """Iterate over children, optionally filtered by type."""
        for child in self.children:
            if type_filter is None or isinstance(child, type_filter):
                yield child

    def get_text(self) -> str:
        """Get text content from model."""
        return "\n".join(text for text in (child.get_text() for child in self.children) if text)

    def flatten(self) -> List["Models"]:
        """Flatten structure for text search."""
        result: List[Models] = [self]
        for child in self.children:
            result.extend(child.flatten())
        return result

    def find_by_id(self, target_id: str) -> Optional["Models"]:
        """Find child model by ID."""
        if self.id == target_id:
            return self
        for child in self.children:
            found = child.find_by_id(target_id)
            if found is not None:
                return found
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        result: Dict[str, Any] = {"type": self.__class__.__name__.lower()}
        if self.source_tag:
            result["source_tag"] = self.source_tag
        result.update(self._attributes_dict())
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result

    def _attributes_dict(self) -> Dict[str, Any]:
        return {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id[:8]}..., children={len(self.children)})"
