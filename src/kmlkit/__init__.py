"""
KMLKit Object Model Package

Typed Python objects for KML documents.

Every element type knows how to:
    - hydrate itself from a parsed attribute map
    - append its fields to an ElementNode (base type first)

Parsing and writing actual XML text is delegated to the backends
package. The model itself does no I/O.
"""

__version__ = "0.1.0"
