"""
Test the example document builder used by the demo.
"""

from kmlkit.enums import RefreshMode, ViewRefreshMode
from kmlkit.examples import build_example_document
from kmlkit.serialization import roundtrip


def test_example_document_structure():
    doc = build_example_document(link_count=3)

    assert doc.name == "Example Tiles"
    assert len(doc.schemas) == 1
    assert len(doc.features) == 3

    schema = doc.get_schema("TrailHeadTypeId")
    assert schema is not None
    assert schema.get_field("heartrate").is_array

    # Odd tiles refresh on a timer, even tiles on camera stop
    first, second = doc.features[0].link, doc.features[1].link
    assert first.refresh_mode == RefreshMode.ON_INTERVAL
    assert first.refresh_interval == 30.0
    assert second.view_refresh_mode == ViewRefreshMode.ON_STOP


def test_example_document_roundtrip():
    doc = build_example_document(link_count=5)
    assert roundtrip(doc) == doc
