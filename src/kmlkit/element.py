"""
ElementNode: the output tree of an encode pass.

An ElementNode is built append-only by the entities being encoded and
then handed to a writer backend. It is never mutated after the encode
pass completes.

ORDERING RULE:
    Attributes and children keep their insertion order. Field order is
    part of the format, so this is an ordered sequence, not a set.

UNIQUENESS RULE:
    Setting the same attribute key twice is a defect in an entity's
    write logic and raises DuplicateAttributeError.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from kmlkit.errors import DuplicateAttributeError


def format_value(value: Any) -> str:
    """Render a field value as element text."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class ElementNode:
    """
    One markup element.

    Properties:
        name:       Qualified element name (e.g. "Link", "gx:x")
        attributes: Ordered, unique-keyed attribute values
        children:   Ordered child nodes
        text:       Optional text content
    """

    def __init__(self, name: str, text: Optional[str] = None):
        self.name = name
        self.text = text
        self._attributes: Dict[str, str] = {}
        self._children: List[ElementNode] = []

    def __repr__(self) -> str:
        return f"ElementNode({self.name!r}, attributes={self._attributes!r}, children={len(self._children)})"

    @property
    def attributes(self) -> Dict[str, str]:
        return dict(self._attributes)

    @property
    def children(self) -> List["ElementNode"]:
        return list(self._children)

    def set_attribute(self, key: str, value: Any) -> None:
        if key in self._attributes:
            raise DuplicateAttributeError(self.name, key)
        self._attributes[key] = format_value(value)

    def add_child(self, node: "ElementNode") -> "ElementNode":
        self._children.append(node)
        return node

    def add_simple_child(self, name: str, value: Any, default: Any = None) -> Optional["ElementNode"]:
        """
        Append <name>value</name> unless the value is elided.

        A value is elided when it is None or equals the declared default.
        Returns the new child, or None when elided.
        """
        if value is None:
            return None
        if default is not None and value == default:
            return None
        return self.add_child(ElementNode(name, text=format_value(value)))

    # ------------------------------------------------------------------
    # Read helpers (for writers and tests)
    # ------------------------------------------------------------------

    def find(self, name: str) -> Optional["ElementNode"]:
        """Return the first direct child with the given name."""
        for child in self._children:
            if child.name == name:
                return child
        return None

    def child_names(self) -> List[str]:
        return [child.name for child in self._children]

    def iter(self) -> Iterator["ElementNode"]:
        """Depth-first walk, self included."""
        yield self
        for child in self._children:
            yield from child.iter()


__all__ = ["ElementNode", "format_value"]
