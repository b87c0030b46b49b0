"""
lxml backend for KMLKit element trees.

Converts ElementNode trees into namespaced KML text, and parses KML
text into ElementDescriptor trees for the serialization driver.

Element names carry their prefix ("gx:x"). This module maps the "gx"
prefix to the Google extension namespace and everything else to the
KML 2.2 namespace.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Type, Union

from lxml import etree
from lxml.builder import ElementMaker

from kmlkit.element import ElementNode
from kmlkit.model import Entity
from kmlkit.serialization import ElementDescriptor, decode, encode

logger = logging.getLogger(__name__)

KML_NS = "http://www.opengis.net/kml/2.2"
GX_NS = "http://www.google.com/kml/ext/2.2"
NSMAP = {None: KML_NS, "gx": GX_NS}

_DECLARED_ENCODING = re.compile(r"""\s*<\?xml[^>]*?encoding=["']([A-Za-z0-9._-]+)["']""")

E = ElementMaker(namespace=KML_NS, nsmap=NSMAP)

_PREFIXES = {"gx": GX_NS}
_NAMESPACES = {GX_NS: "gx"}


@dataclass
class WriterOptions:
    """
    Output settings for to_string().

    Properties:
        pretty_print:   Indent nested elements
        xml_declaration: Emit <?xml ...?> header
        encoding:       Output encoding declared in the header
        wrap_in_kml:    Wrap the tree in a <kml> root element
    """

    pretty_print: bool = True
    xml_declaration: bool = True
    encoding: str = "UTF-8"
    wrap_in_kml: bool = True


def _tag(name: str) -> str:
    prefix, _, local = name.rpartition(":")
    return f"{{{_PREFIXES.get(prefix, KML_NS)}}}{local}"


def to_etree(node: ElementNode, parent: Optional[etree._Element] = None) -> etree._Element:
    """
    Build an lxml element from an ElementNode tree.

    The root declares both namespaces; descendants inherit them.
    """
    if parent is None:
        el = etree.Element(_tag(node.name), nsmap=NSMAP)
    else:
        el = etree.SubElement(parent, _tag(node.name))
    for key, value in node.attributes.items():
        el.set(key, value)
    if node.text is not None:
        el.text = node.text
    for child in node.children:
        to_etree(child, el)
    return el


def to_string(node: ElementNode, options: Optional[WriterOptions] = None) -> str:
    options = options or WriterOptions()
    if options.wrap_in_kml:
        root = E.kml()
        to_etree(node, root)
    else:
        root = to_etree(node)
    return etree.tostring(
        root,
        pretty_print=options.pretty_print,
        xml_declaration=options.xml_declaration,
        encoding=options.encoding,
    ).decode(options.encoding)


def _qualified_name(tag: str) -> str:
    qname = etree.QName(tag)
    prefix = _NAMESPACES.get(qname.namespace)
    return f"{prefix}:{qname.localname}" if prefix else qname.localname


def from_etree(el: etree._Element) -> ElementDescriptor:
    """Convert an lxml element into an ElementDescriptor tree."""
    children = [from_etree(c) for c in el if isinstance(c.tag, str)]
    text = el.text
    if children and text is not None and not text.strip():
        text = None
    return ElementDescriptor(
        name=_qualified_name(el.tag),
        attributes={etree.QName(k).localname: v for k, v in el.attrib.items()},
        children=children,
        text=text,
    )


def _declared_encoding(text: str) -> str:
    match = _DECLARED_ENCODING.match(text)
    return match.group(1) if match else "utf-8"


def parse_string(text: Union[str, bytes]) -> ElementDescriptor:
    """
    Parse KML text into a descriptor tree.

    Text is encoded with the encoding named in its XML declaration
    (UTF-8 when there is none). Bytes are handed to lxml as they are.

    A <kml> root with a single feature is unwrapped to that feature.
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
    if isinstance(text, str):
        text = text.encode(_declared_encoding(text))
    root = etree.fromstring(text, parser)
    descriptor = from_etree(root)
    if descriptor.name == "kml" and len(descriptor.children) == 1:
        descriptor = descriptor.children[0]
    return descriptor


def entity_to_kml(entity: Entity, options: Optional[WriterOptions] = None) -> str:
    return to_string(encode(entity), options)


def entity_from_kml(text: Union[str, bytes], entity_type: Optional[Type[Entity]] = None) -> Entity:
    descriptor = parse_string(text)
    logger.debug("Decoding <%s> from KML text", descriptor.name)
    return decode(descriptor, entity_type)


__all__ = [
    "KML_NS",
    "GX_NS",
    "WriterOptions",
    "to_etree",
    "to_string",
    "from_etree",
    "parse_string",
    "entity_to_kml",
    "entity_from_kml",
]
