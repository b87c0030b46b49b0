"""
Core KML Model Objects

Defines the entity types of the KMLKit object model:
    - KMLObject (id / targetId carrier)
    - BasicLink, Link, Icon (resource references)
    - SimpleField, SimpleArrayField (schema field declarations)
    - Schema, NetworkLink, Document (containers)

Every entity type owns a table of the fields it introduces (OWN_FIELDS)
and implements three narrow per-level steps:

    hydrate(attributes)   base type first, then own fields
    write(element)        base type first, then own fields
    field_setters()       own (name, setter) pairs, then the base type's

Each step calls super() explicitly and then handles only its own table,
so a derived type extends its base type's behaviour and never replaces
it. Tables are referenced by class name (Link.OWN_FIELDS, not
self.OWN_FIELDS) so each level only ever touches its own fields.

ARCHITECTURAL RULE:
    Entities know nothing about XML text, files or networks.
    They read attribute maps and append to ElementNodes. That's all.
"""
from __future__ import annotations

import logging
from abc import ABC
from dataclasses import dataclass, field
from typing import Any, ClassVar, List, Mapping, Optional, Tuple

from kmlkit.coercion import to_float, to_url
from kmlkit.element import ElementNode
from kmlkit.enums import (
    REFRESH_MODE,
    SIMPLE_FIELD_TYPE,
    VIEW_REFRESH_MODE,
    RefreshMode,
    SimpleFieldType,
    ViewRefreshMode,
)
from kmlkit.errors import UnknownElementError
from kmlkit.fields import (
    Field,
    Setter,
    bool_field,
    enum_field,
    field_setters,
    float_field,
    hydrate_fields,
    text_field,
    url_field,
    write_fields,
)

logger = logging.getLogger(__name__)


@dataclass
class Entity(ABC):
    """
    Base class for every element of the object model.

    This class carries no fields. It anchors the three cooperative
    chains and provides the generic operations built on them.
    """

    element_name: ClassVar[str] = ""
    OWN_FIELDS: ClassVar[Tuple[Field, ...]] = ()

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, Any]):
        """Construct an entity and run its full hydrate chain."""
        entity = cls()
        entity.hydrate(attributes)
        return entity

    def hydrate(self, attributes: Mapping[str, Any]) -> None:
        pass

    def write(self, element: ElementNode) -> None:
        pass

    def field_setters(self) -> List[Tuple[str, Setter]]:
        return []

    def set_field(self, name: str, value: Any) -> bool:
        """
        Set one field by its vocabulary name.

        Derived-type setters are tried before base-type setters. A
        namespaced name ("gx:x") falls back to its local name ("x").
        Unknown names are ignored.

        Returns:
            True if some type in the chain declared the field
        """
        setters = self.field_setters()
        candidates = [name]
        if ":" in name:
            candidates.append(name.split(":", 1)[1])
        for candidate in candidates:
            for field_name, setter in setters:
                if field_name == candidate:
                    setter(value)
                    return True
        logger.debug("Ignoring unknown field %r on <%s>", name, self.element_name)
        return False

    def children(self) -> List["Entity"]:
        """Owned child entities, in output order."""
        return []

    def add_child(self, child: "Entity") -> None:
        raise UnknownElementError(child.element_name, self.element_name)


@dataclass
class KMLObject(Entity):
    """
    Abstract KML Object.

    Properties:
        id:        Document-unique identifier (XML attribute)
        target_id: id of an object this one updates (XML attribute)
    """

    element_name: ClassVar[str] = "Object"
    OWN_FIELDS: ClassVar[Tuple[Field, ...]] = (
        text_field("id", "id", as_attribute=True),
        text_field("targetId", "target_id", as_attribute=True),
    )

    id: Optional[str] = None
    target_id: Optional[str] = None

    def hydrate(self, attributes: Mapping[str, Any]) -> None:
        super().hydrate(attributes)
        hydrate_fields(self, attributes, KMLObject.OWN_FIELDS)

    def write(self, element: ElementNode) -> None:
        super().write(element)
        write_fields(self, element, KMLObject.OWN_FIELDS)

    def field_setters(self) -> List[Tuple[str, Setter]]:
        return field_setters(self, KMLObject.OWN_FIELDS) + super().field_setters()


# =============================================================================
# RESOURCE REFERENCES
# =============================================================================


@dataclass
class BasicLink(KMLObject):
    """A bare resource reference: just an href."""

    element_name: ClassVar[str] = "Link"
    OWN_FIELDS: ClassVar[Tuple[Field, ...]] = (
        url_field("href", "href"),
    )

    href: Optional[str] = None

    def __post_init__(self) -> None:
        self.href = to_url(self.href)

    def hydrate(self, attributes: Mapping[str, Any]) -> None:
        super().hydrate(attributes)
        hydrate_fields(self, attributes, BasicLink.OWN_FIELDS)

    def write(self, element: ElementNode) -> None:
        super().write(element)
        write_fields(self, element, BasicLink.OWN_FIELDS)

    def field_setters(self) -> List[Tuple[str, Setter]]:
        return field_setters(self, BasicLink.OWN_FIELDS) + super().field_setters()


@dataclass
class Link(BasicLink):
    """
    Location of a KML file, image or model, plus its refresh policy.

    Two independent refresh policies exist:
        time-based:   refresh_mode / refresh_interval
        camera-based: view_refresh_mode / view_refresh_time

    Properties:
        refresh_mode:      Time-based refresh policy (default onChange)
        refresh_interval:  Seconds between refreshes for onInterval
        view_refresh_mode: Camera-based refresh policy (default never)
        view_refresh_time: Seconds to wait after the camera stops
        view_bound_scale:  Scale applied to the BBOX sent to the server
        view_format:       Query string template appended to href.
                           An empty string is meaningful (append nothing).
        http_query:        Extra query parameters ([clientVersion] etc.)
    """

    OWN_FIELDS: ClassVar[Tuple[Field, ...]] = (
        enum_field("refreshMode", "refresh_mode", REFRESH_MODE, RefreshMode.ON_CHANGE),
        float_field("refreshInterval", "refresh_interval", 4.0),
        enum_field("viewRefreshMode", "view_refresh_mode", VIEW_REFRESH_MODE, ViewRefreshMode.NEVER),
        float_field("viewRefreshTime", "view_refresh_time", 4.0),
        float_field("viewBoundScale", "view_bound_scale", 1.0),
        text_field("viewFormat", "view_format"),
        text_field("httpQuery", "http_query"),
    )

    refresh_mode: RefreshMode = RefreshMode.ON_CHANGE
    refresh_interval: float = 4.0
    view_refresh_mode: ViewRefreshMode = ViewRefreshMode.NEVER
    view_refresh_time: float = 4.0
    view_bound_scale: float = 1.0
    view_format: Optional[str] = None
    http_query: Optional[str] = None

    def hydrate(self, attributes: Mapping[str, Any]) -> None:
        super().hydrate(attributes)
        hydrate_fields(self, attributes, Link.OWN_FIELDS)

    def write(self, element: ElementNode) -> None:
        super().write(element)
        write_fields(self, element, Link.OWN_FIELDS)

    def field_setters(self) -> List[Tuple[str, Setter]]:
        return field_setters(self, Link.OWN_FIELDS) + super().field_setters()


@dataclass
class IconFrame:
    """Sub-region of an icon palette image, in pixels."""

    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0


@dataclass
class Icon(Link):
    """
    Image used by an overlay or icon style.

    Properties:
        frame:
            Optional palette sub-region. When present, all four of
            gx:x, gx:y, gx:w, gx:h are written together. When None,
            none of them are.
    """

    element_name: ClassVar[str] = "Icon"
    FRAME_KEYS: ClassVar[Tuple[str, ...]] = ("x", "y", "w", "h")

    frame: Optional[IconFrame] = None

    def _set_coordinate(self, key: str, raw: Any) -> None:
        if self.frame is None:
            self.frame = IconFrame()
        setattr(self.frame, key, to_float(raw, 0.0))

    def hydrate(self, attributes: Mapping[str, Any]) -> None:
        super().hydrate(attributes)
        for key in Icon.FRAME_KEYS:
            for name in (f"gx:{key}", key):
                if name in attributes:
                    self._set_coordinate(key, attributes[name])
                    break

    def write(self, element: ElementNode) -> None:
        super().write(element)
        if self.frame is not None:
            for key in Icon.FRAME_KEYS:
                element.add_simple_child(f"gx:{key}", getattr(self.frame, key))

    def field_setters(self) -> List[Tuple[str, Setter]]:
        def make_setter(key: str) -> Setter:
            return lambda raw: self._set_coordinate(key, raw)
        own = [(key, make_setter(key)) for key in Icon.FRAME_KEYS]
        return own + super().field_setters()


# =============================================================================
# SCHEMA DECLARATIONS
# =============================================================================


@dataclass
class SimpleField(Entity):
    """
    Declares one typed field of a custom Schema.

    Properties:
        name:         Field name (XML attribute, always written)
        type:         Value type (XML attribute, always written)
        uom:          Optional unit-of-measure reference (XML attribute)
        display_name: Optional name shown to the user
    """

    element_name: ClassVar[str] = "SimpleField"
    OWN_FIELDS: ClassVar[Tuple[Field, ...]] = (
        enum_field("type", "type", SIMPLE_FIELD_TYPE, SimpleFieldType.STRING, as_attribute=True, required=True),
        text_field("name", "name", as_attribute=True, required=True),
        url_field("uom", "uom", as_attribute=True),
        text_field("displayName", "display_name"),
    )

    name: str = ""
    type: SimpleFieldType = SimpleFieldType.STRING
    uom: Optional[str] = None
    display_name: Optional[str] = None

    def __post_init__(self) -> None:
        self.uom = to_url(self.uom)

    is_array: ClassVar[bool] = False

    def hydrate(self, attributes: Mapping[str, Any]) -> None:
        super().hydrate(attributes)
        hydrate_fields(self, attributes, SimpleField.OWN_FIELDS)

    def write(self, element: ElementNode) -> None:
        super().write(element)
        write_fields(self, element, SimpleField.OWN_FIELDS)

    def field_setters(self) -> List[Tuple[str, Setter]]:
        return field_setters(self, SimpleField.OWN_FIELDS) + super().field_setters()


@dataclass
class SimpleArrayField(SimpleField):
    """A SimpleField whose values are sequences (gx extension)."""

    element_name: ClassVar[str] = "gx:SimpleArrayField"
    is_array: ClassVar[bool] = True


# =============================================================================
# CONTAINERS
# =============================================================================


@dataclass
class Schema(KMLObject):
    """
    A custom data schema: an ordered list of field declarations.

    Field order is render order, so simple_fields is kept as declared.
    """

    element_name: ClassVar[str] = "Schema"
    OWN_FIELDS: ClassVar[Tuple[Field, ...]] = (
        text_field("name", "name", as_attribute=True),
    )

    name: Optional[str] = None
    simple_fields: List[SimpleField] = field(default_factory=list)

    def hydrate(self, attributes: Mapping[str, Any]) -> None:
        super().hydrate(attributes)
        hydrate_fields(self, attributes, Schema.OWN_FIELDS)

    def write(self, element: ElementNode) -> None:
        super().write(element)
        write_fields(self, element, Schema.OWN_FIELDS)

    def field_setters(self) -> List[Tuple[str, Setter]]:
        return field_setters(self, Schema.OWN_FIELDS) + super().field_setters()

    def children(self) -> List[Entity]:
        return list(self.simple_fields)

    def add_child(self, child: Entity) -> None:
        if not isinstance(child, SimpleField):
            super().add_child(child)
            return
        self.simple_fields.append(child)

    def get_field(self, name: str) -> Optional[SimpleField]:
        """
        Retrieve a field declaration by name.

        Returns:
            SimpleField or None if not found
        """
        for simple_field in self.simple_fields:
            if simple_field.name == name:
                return simple_field
        return None


@dataclass
class NetworkLink(KMLObject):
    """
    References a remote or local KML file through a Link.

    Properties:
        name:               Display name
        refresh_visibility: Reset visibility on refresh (default False)
        fly_to_view:        Fly to the linked view on refresh (default False)
        link:               The Link being followed
    """

    element_name: ClassVar[str] = "NetworkLink"
    OWN_FIELDS: ClassVar[Tuple[Field, ...]] = (
        text_field("name", "name"),
        bool_field("refreshVisibility", "refresh_visibility", False),
        bool_field("flyToView", "fly_to_view", False),
    )

    name: Optional[str] = None
    refresh_visibility: bool = False
    fly_to_view: bool = False
    link: Optional[Link] = None

    def hydrate(self, attributes: Mapping[str, Any]) -> None:
        super().hydrate(attributes)
        hydrate_fields(self, attributes, NetworkLink.OWN_FIELDS)

    def write(self, element: ElementNode) -> None:
        super().write(element)
        write_fields(self, element, NetworkLink.OWN_FIELDS)

    def field_setters(self) -> List[Tuple[str, Setter]]:
        return field_setters(self, NetworkLink.OWN_FIELDS) + super().field_setters()

    def children(self) -> List[Entity]:
        return [self.link] if self.link is not None else []

    def add_child(self, child: Entity) -> None:
        # Icon is a Link but is not valid here
        if type(child) is not Link:
            super().add_child(child)
            return
        self.link = child


@dataclass
class Document(KMLObject):
    """
    Root container.

    Schemas are written before features, each group in stored order.
    """

    element_name: ClassVar[str] = "Document"
    OWN_FIELDS: ClassVar[Tuple[Field, ...]] = (
        text_field("name", "name"),
    )

    name: Optional[str] = None
    schemas: List[Schema] = field(default_factory=list)
    features: List[NetworkLink] = field(default_factory=list)

    def hydrate(self, attributes: Mapping[str, Any]) -> None:
        super().hydrate(attributes)
        hydrate_fields(self, attributes, Document.OWN_FIELDS)

    def write(self, element: ElementNode) -> None:
        super().write(element)
        write_fields(self, element, Document.OWN_FIELDS)

    def field_setters(self) -> List[Tuple[str, Setter]]:
        return field_setters(self, Document.OWN_FIELDS) + super().field_setters()

    def children(self) -> List[Entity]:
        return [*self.schemas, *self.features]

    def add_child(self, child: Entity) -> None:
        if isinstance(child, Schema):
            self.schemas.append(child)
        elif isinstance(child, NetworkLink):
            self.features.append(child)
        else:
            super().add_child(child)

    def get_schema(self, schema_id: str) -> Optional[Schema]:
        for schema in self.schemas:
            if schema.id == schema_id:
                return schema
        return None


__all__ = [
    "Entity",
    "KMLObject",
    "BasicLink",
    "Link",
    "IconFrame",
    "Icon",
    "SimpleField",
    "SimpleArrayField",
    "Schema",
    "NetworkLink",
    "Document",
]
