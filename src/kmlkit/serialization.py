"""
Serialization driver for KMLKit entities.

Decode: ElementDescriptor tree -> entity graph
Encode: entity graph -> ElementNode tree

Also provides lossless JSON/YAML projections via an intermediate dict
representation of element trees. The dict structure is kept stable and
explicit:

    {"name": "Link",
     "attributes": {"id": "l1"},
     "text": None,
     "children": [{"name": "href", "attributes": {}, "text": "...", "children": []}]}

ERROR POLICY:
    Malformed field values and unknown simple fields never fail here.
    Unknown composite elements and children a parent cannot own raise
    UnknownElementError.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Type

import yaml

from kmlkit.element import ElementNode
from kmlkit.errors import UnknownElementError
from kmlkit.model import (
    Document,
    Entity,
    Icon,
    Link,
    NetworkLink,
    Schema,
    SimpleArrayField,
    SimpleField,
)

logger = logging.getLogger(__name__)


# Element name -> entity type used when recursing into children.
ELEMENT_TYPES: Dict[str, Type[Entity]] = {
    "Document": Document,
    "Schema": Schema,
    "SimpleField": SimpleField,
    "gx:SimpleArrayField": SimpleArrayField,
    "SimpleArrayField": SimpleArrayField,
    "NetworkLink": NetworkLink,
    "Link": Link,
    "Url": Link,  # pre-2.1 name of a NetworkLink's Link
    "Icon": Icon,
}


@dataclass
class ElementDescriptor:
    """
    One parsed element, as supplied by a markup parser.

    Properties:
        name:       Element name, optionally prefixed ("gx:x")
        attributes: Raw attribute values
        children:   Child descriptors in document order
        text:       Text content, if any
    """

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["ElementDescriptor"] = field(default_factory=list)
    text: Optional[str] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children


def resolve_type(name: str, registry: Mapping[str, Type[Entity]] = ELEMENT_TYPES) -> Optional[Type[Entity]]:
    """Look up an element name, falling back to its local name."""
    if name in registry:
        return registry[name]
    if ":" in name:
        return registry.get(name.split(":", 1)[1])
    return None


def decode_attributes(attributes: Mapping[str, Any], entity_type: Type[Entity]) -> Entity:
    """Construct an entity from a flat attribute map."""
    return entity_type.from_attributes(attributes)


def decode(
    descriptor: ElementDescriptor,
    entity_type: Optional[Type[Entity]] = None,
    registry: Mapping[str, Type[Entity]] = ELEMENT_TYPES,
) -> Entity:
    """
    Decode a descriptor tree into an entity graph.

    Args:
        descriptor: Root element descriptor
        entity_type: Concrete type for the root (looked up by name if None)
        registry: Element name -> entity type table

    Returns:
        The root entity

    Raises:
        UnknownElementError: If an element has no declared type, or a
            parent cannot own the decoded child
    """
    if entity_type is None:
        entity_type = resolve_type(descriptor.name, registry)
        if entity_type is None:
            raise UnknownElementError(descriptor.name)

    entity = entity_type.from_attributes(descriptor.attributes)

    for child in descriptor.children:
        child_type = resolve_type(child.name, registry)
        if child_type is not None:
            entity.add_child(decode(child, child_type, registry))
        elif child.is_leaf:
            entity.set_field(child.name, child.text if child.text is not None else "")
        else:
            raise UnknownElementError(child.name, descriptor.name)

    return entity


def encode(entity: Entity) -> ElementNode:
    """
    Encode an entity graph into an ElementNode tree.

    The entity's write chain runs first (base type fields before derived
    type fields), then owned children are encoded in stored order.
    """
    element = ElementNode(entity.element_name)
    entity.write(element)
    for child in entity.children():
        element.add_child(encode(child))
    return element


# =============================================================================
# DICT / JSON / YAML
# =============================================================================


def element_to_dict(node: ElementNode) -> Dict[str, Any]:
    return {
        "name": node.name,
        "attributes": node.attributes,
        "text": node.text,
        "children": [element_to_dict(c) for c in node.children],
    }


def descriptor_from_dict(d: Dict[str, Any]) -> ElementDescriptor:
    return ElementDescriptor(
        name=d["name"],
        attributes={k: str(v) for k, v in (d.get("attributes") or {}).items()},
        children=[descriptor_from_dict(c) for c in d.get("children") or []],
        text=d.get("text"),
    )


def descriptor_from_element(node: ElementNode) -> ElementDescriptor:
    """View an encoded tree as parser input (used for in-memory round trips)."""
    return ElementDescriptor(
        name=node.name,
        attributes=node.attributes,
        children=[descriptor_from_element(c) for c in node.children],
        text=node.text,
    )


def entity_to_dict(entity: Entity) -> Dict[str, Any]:
    return element_to_dict(encode(entity))


def entity_from_dict(d: Dict[str, Any], entity_type: Optional[Type[Entity]] = None) -> Entity:
    return decode(descriptor_from_dict(d), entity_type)


def entity_to_json(entity: Entity) -> str:
    return json.dumps(entity_to_dict(entity))


def entity_from_json(s: str, entity_type: Optional[Type[Entity]] = None) -> Entity:
    d = json.loads(s)
    return entity_from_dict(d, entity_type)


def entity_to_yaml(entity: Entity) -> str:
    return yaml.safe_dump(entity_to_dict(entity), sort_keys=False)


def entity_from_yaml(s: str, entity_type: Optional[Type[Entity]] = None) -> Entity:
    d = yaml.safe_load(s)
    return entity_from_dict(d, entity_type)


def roundtrip(entity: Entity) -> Entity:
    """decode(encode(entity)), using the entity's own type for the root."""
    logger.debug("Round-tripping <%s>", entity.element_name)
    return decode(descriptor_from_element(encode(entity)), type(entity))


__all__ = [
    "ELEMENT_TYPES",
    "ElementDescriptor",
    "resolve_type",
    "decode_attributes",
    "decode",
    "encode",
    "element_to_dict",
    "descriptor_from_dict",
    "descriptor_from_element",
    "entity_to_dict",
    "entity_from_dict",
    "entity_to_json",
    "entity_from_json",
    "entity_to_yaml",
    "entity_from_yaml",
    "roundtrip",
]
