"""Writer/reader backends for KMLKit element trees (XML via lxml)."""

from .xml_writer import (
    GX_NS,
    KML_NS,
    WriterOptions,
    entity_from_kml,
    entity_to_kml,
    parse_string,
    to_string,
)

__all__ = [
    "GX_NS",
    "KML_NS",
    "WriterOptions",
    "entity_from_kml",
    "entity_to_kml",
    "parse_string",
    "to_string",
]
