"""
Example document builder for demos and tests.

Builds a Document with one custom Schema and a few NetworkLinks that
exercise the refresh policies of Link.
"""
from kmlkit.enums import RefreshMode, SimpleFieldType, ViewRefreshMode
from kmlkit.model import (
    Document,
    Link,
    NetworkLink,
    Schema,
    SimpleArrayField,
    SimpleField,
)


def build_example_document(link_count: int = 3, base_url: str = "http://example.com/tiles") -> Document:
    doc = Document(id="doc", name="Example Tiles")

    schema = Schema(id="TrailHeadTypeId", name="TrailHeadType")
    schema.simple_fields = [
        SimpleField(name="TrailHeadName", type=SimpleFieldType.STRING, display_name="<b>Trail Head Name</b>"),
        SimpleField(name="TrailLength", type=SimpleFieldType.DOUBLE, uom="http://example.com/units#km"),
        SimpleField(name="ElevationGain", type=SimpleFieldType.INT),
        SimpleArrayField(name="heartrate", type=SimpleFieldType.INT, display_name="Heart Rate"),
    ]
    doc.schemas = [schema]

    for i in range(1, link_count + 1):
        # Odd tiles refresh on a timer, even tiles when the camera stops
        if i % 2:
            link = Link(
                href=f"{base_url}/{i}.kml",
                refresh_mode=RefreshMode.ON_INTERVAL,
                refresh_interval=30.0 * i,
            )
        else:
            link = Link(
                href=f"{base_url}/{i}.kml",
                view_refresh_mode=ViewRefreshMode.ON_STOP,
                view_refresh_time=2.0,
                view_format="BBOX=[bboxWest],[bboxSouth],[bboxEast],[bboxNorth]",
            )
        doc.features.append(NetworkLink(id=f"tile{i}", name=f"Tile {i}", fly_to_view=(i == 1), link=link))

    return doc
