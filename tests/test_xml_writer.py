"""
Tests for the lxml backend.

Covers namespace mapping of gx: names, writer options, parsing KML text
into descriptors, and full text round trips.
"""

import pytest
from lxml import etree

from kmlkit.backends import GX_NS, KML_NS, WriterOptions, entity_from_kml, entity_to_kml, parse_string, to_string
from kmlkit.backends.xml_writer import to_etree
from kmlkit.enums import RefreshMode, SimpleFieldType
from kmlkit.examples import build_example_document
from kmlkit.model import Icon, IconFrame, Link, Schema, SimpleArrayField, SimpleField
from kmlkit.serialization import encode

SAMPLE = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2" xmlns:gx="http://www.google.com/kml/ext/2.2">
  <NetworkLink id="nl1">
    <!-- comments are dropped -->
    <name>Tiles</name>
    <flyToView>1</flyToView>
    <Link>
      <href>http://x/y.kml</href>
      <refreshMode>onInterval</refreshMode>
      <refreshInterval>30</refreshInterval>
      <someFutureField>ignored</someFutureField>
    </Link>
  </NetworkLink>
</kml>
"""


class TestToEtree:
    """Test ElementNode -> lxml conversion."""

    def test_kml_namespace(self):
        el = to_etree(encode(Link(href="http://a/b")))
        assert el.tag == f"{{{KML_NS}}}Link"
        assert el[0].tag == f"{{{KML_NS}}}href"
        assert el[0].text == "http://a/b"

    def test_gx_namespace(self):
        el = to_etree(encode(Icon(frame=IconFrame(x=1.0))))
        tags = [etree.QName(c).localname for c in el]
        namespaces = {etree.QName(c).namespace for c in el}
        assert tags == ["x", "y", "w", "h"]
        assert namespaces == {GX_NS}

    def test_attributes(self):
        el = to_etree(encode(SimpleField(name="n", type=SimpleFieldType.INT)))
        assert el.get("type") == "int"
        assert el.get("name") == "n"


class TestToString:
    """Test text output."""

    def test_wrapped_in_kml_root(self):
        text = to_string(encode(Link(href="http://a/b")))
        assert text.startswith("<?xml")
        root = etree.fromstring(text.encode("utf-8"))
        assert root.tag == f"{{{KML_NS}}}kml"

    def test_options(self):
        options = WriterOptions(pretty_print=False, xml_declaration=False, wrap_in_kml=False)
        text = to_string(encode(Link(href="http://a/b")), options)
        assert text.startswith("<Link")
        assert "\n" not in text
        assert "<href>http://a/b</href>" in text
        assert etree.fromstring(text.encode("utf-8")).tag == f"{{{KML_NS}}}Link"

    def test_escaping(self):
        text = entity_to_kml(Link(http_query="a=1&b=<2>"))
        assert "a=1&amp;b=&lt;2&gt;" in text


class TestParseString:
    """Test KML text -> descriptors."""

    def test_unwraps_kml_root(self):
        descriptor = parse_string(SAMPLE)
        assert descriptor.name == "NetworkLink"
        assert descriptor.attributes == {"id": "nl1"}
        assert [c.name for c in descriptor.children] == ["name", "flyToView", "Link"]

    def test_container_text_dropped(self):
        descriptor = parse_string(SAMPLE)
        assert descriptor.text is None
        assert descriptor.children[0].text == "Tiles"

    def test_gx_prefix_restored(self):
        text = entity_to_kml(Schema(simple_fields=[SimpleArrayField(name="hr")]))
        descriptor = parse_string(text)
        assert descriptor.children[0].name == "gx:SimpleArrayField"


class TestKmlRoundTrip:
    """Test full text round trips."""

    def test_decode_sample(self):
        nl = entity_from_kml(SAMPLE)
        assert nl.id == "nl1"
        assert nl.name == "Tiles"
        assert nl.fly_to_view is True
        assert nl.link == Link(href="http://x/y.kml", refresh_mode=RefreshMode.ON_INTERVAL, refresh_interval=30.0)

    def test_example_document(self):
        doc = build_example_document(link_count=4)
        assert entity_from_kml(entity_to_kml(doc)) == doc

    def test_icon_frame(self):
        icon = Icon(href="palette.png", frame=IconFrame(32.0, 64.0, 32.0, 32.0))
        assert entity_from_kml(entity_to_kml(icon)) == icon

    def test_empty_view_format(self):
        link = Link(href="http://a/b", view_format="")
        assert entity_from_kml(entity_to_kml(link)) == link

    @pytest.mark.parametrize("encoding", ["ISO-8859-1", "UTF-8"])
    def test_declared_encoding_respected(self, encoding):
        """Text written with a non-UTF-8 encoding reads back unchanged."""
        link = Link(href="http://a/b", view_format="caf\u00e9")
        text = entity_to_kml(link, WriterOptions(encoding=encoding))
        assert entity_from_kml(text) == link

    def test_bytes_input(self):
        link = Link(href="http://a/b", view_format="caf\u00e9")
        data = entity_to_kml(link, WriterOptions(encoding="ISO-8859-1")).encode("ISO-8859-1")
        assert entity_from_kml(data) == link
