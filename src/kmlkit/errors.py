"""
Structural errors raised by the KMLKit object model.

Malformed field values never raise (they fall back to their declared
default). Only defects in the shape of a tree do.
"""
from __future__ import annotations


class KMLStructureError(Exception):
    """Base class for structural defects in an element tree."""
    pass


class DuplicateAttributeError(KMLStructureError):
    """Raised when an ElementNode attribute key is set twice."""

    def __init__(self, element: str, key: str):
        self.element = element
        self.key = key
        super().__init__(f"Attribute '{key}' already set on <{element}>")


class UnknownElementError(KMLStructureError):
    """Raised when a child element has no declared entity type."""

    def __init__(self, name: str, parent: str | None = None):
        self.name = name
        self.parent = parent
        where = f" inside <{parent}>" if parent else ""
        super().__init__(f"Unsupported element <{name}>{where}")
