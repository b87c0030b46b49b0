"""
Field declarations.

A Field ties a vocabulary name (e.g. "refreshInterval") to a Python
attribute (e.g. refresh_interval), a coercion, and a declared default.
Each entity type lists the fields it introduces in a class-level tuple;
the helpers here hydrate, write and expose setters for one such tuple.

Placement:
    as_attribute=False  ->  <name>value</name> child element
    as_attribute=True   ->  name="value" on the entity's own element
    required=True       ->  written even when equal to the default
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from kmlkit.coercion import Coercion, to_bool, to_float, to_text, to_url
from kmlkit.element import ElementNode, format_value
from kmlkit.enums import EnumCodec

Setter = Callable[[Any], None]


@dataclass(frozen=True)
class Field:
    name: str
    attr: str
    coerce: Coercion
    default: Any = None
    as_attribute: bool = False
    render: Optional[Callable[[Any], str]] = None
    required: bool = False

    def read(self, raw: Any) -> Any:
        return self.coerce(raw, self.default)

    def is_default(self, value: Any) -> bool:
        if value is None:
            return True
        if self.required:
            return False
        return self.default is not None and value == self.default

    def to_text(self, value: Any) -> str:
        if self.render is not None:
            return self.render(value)
        return format_value(value)

    def write(self, entity: Any, element: ElementNode) -> None:
        value = getattr(entity, self.attr)
        if value is not None:
            # written values must read back unchanged
            value = self.read(value)
        if self.is_default(value):
            return
        if self.as_attribute:
            element.set_attribute(self.name, self.to_text(value))
        else:
            element.add_child(ElementNode(self.name, text=self.to_text(value)))


def text_field(name: str, attr: str, as_attribute: bool = False, required: bool = False) -> Field:
    return Field(name, attr, to_text, None, as_attribute, required=required)


def url_field(name: str, attr: str, as_attribute: bool = False) -> Field:
    return Field(name, attr, to_url, None, as_attribute)


def float_field(name: str, attr: str, default: float) -> Field:
    return Field(name, attr, to_float, default)


def bool_field(name: str, attr: str, default: bool) -> Field:
    return Field(name, attr, to_bool, default)


def enum_field(
    name: str,
    attr: str,
    codec: EnumCodec,
    default: Any,
    as_attribute: bool = False,
    required: bool = False,
) -> Field:
    return Field(name, attr, codec.coerce, default, as_attribute, render=codec.to_token, required=required)


def hydrate_fields(entity: Any, attributes: Mapping[str, Any], fields: Sequence[Field]) -> None:
    """Apply every declared field present in the attribute map."""
    for f in fields:
        if f.name in attributes:
            setattr(entity, f.attr, f.read(attributes[f.name]))


def write_fields(entity: Any, element: ElementNode, fields: Sequence[Field]) -> None:
    """Append every non-default field, in declaration order."""
    for f in fields:
        f.write(entity, element)


def field_setters(entity: Any, fields: Sequence[Field]) -> List[Tuple[str, Setter]]:
    def make_setter(f: Field) -> Setter:
        return lambda raw: setattr(entity, f.attr, f.read(raw))
    return [(f.name, make_setter(f)) for f in fields]


__all__ = [
    "Field",
    "Setter",
    "text_field",
    "url_field",
    "float_field",
    "bool_field",
    "enum_field",
    "hydrate_fields",
    "write_fields",
    "field_setters",
]
