#!/usr/bin/env python3
"""
Demo: encode an example document to KML and YAML, then decode it back.
"""

from kmlkit.backends import entity_from_kml, entity_to_kml
from kmlkit.examples import build_example_document
from kmlkit.serialization import entity_from_yaml, entity_to_yaml


def main():
    doc = build_example_document(link_count=3)

    print("=" * 80)
    print("KML OUTPUT")
    print("=" * 80)
    kml_text = entity_to_kml(doc)
    print(kml_text)

    print("=" * 80)
    print("YAML OUTPUT")
    print("=" * 80)
    yaml_text = entity_to_yaml(doc)
    print(yaml_text)

    from_kml = entity_from_kml(kml_text)
    from_yaml = entity_from_yaml(yaml_text)

    print("=" * 80)
    print(f"KML round trip lossless:  {from_kml == doc}")
    print(f"YAML round trip lossless: {from_yaml == doc}")
    print("=" * 80)


if __name__ == "__main__":
    main()
