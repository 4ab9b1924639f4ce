"""
ElementTree helpers shared by the part writers.

Tags and attributes are written with their OpenDocument prefix
(``"draw:frame"``) and expanded to Clark notation here, so writer code reads
like the XML it produces.
"""

import xml.etree.ElementTree as ET
from typing import Any, Dict, Optional

from odpwriter.models import px_to_cm

ODF_VERSION = "1.2"
PRESENTATION_MIME = "application/vnd.oasis.opendocument.presentation"
CHART_MIME = "application/vnd.oasis.opendocument.chart"

NAMESPACES = {
    "office": "urn:oasis:names:tc:opendocument:xmlns:office:1.0",
    "style": "urn:oasis:names:tc:opendocument:xmlns:style:1.0",
    "text": "urn:oasis:names:tc:opendocument:xmlns:text:1.0",
    "table": "urn:oasis:names:tc:opendocument:xmlns:table:1.0",
    "draw": "urn:oasis:names:tc:opendocument:xmlns:drawing:1.0",
    "fo": "urn:oasis:names:tc:opendocument:xmlns:xsl-fo-compatible:1.0",
    "xlink": "http://www.w3.org/1999/xlink",
    "dc": "http://purl.org/dc/elements/1.1/",
    "meta": "urn:oasis:names:tc:opendocument:xmlns:meta:1.0",
    "presentation": "urn:oasis:names:tc:opendocument:xmlns:presentation:1.0",
    "svg": "urn:oasis:names:tc:opendocument:xmlns:svg-compatible:1.0",
    "chart": "urn:oasis:names:tc:opendocument:xmlns:chart:1.0",
    "config": "urn:oasis:names:tc:opendocument:xmlns:config:1.0",
    "manifest": "urn:oasis:names:tc:opendocument:xmlns:manifest:1.0",
}

for _prefix, _uri in NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)


def q(name: str) -> str:
    """``"draw:frame"`` -> ``"{urn:...drawing:1.0}frame"``."""
    prefix, _, local = name.partition(":")
    if not local:
        return name
    return f"{{{NAMESPACES[prefix]}}}{local}"


def _attrib(attrib: Optional[Dict[str, Any]]) -> Dict[str, str]:
    if not attrib:
        return {}
    return {q(k): str(v) for k, v in attrib.items() if v is not None}


def element(tag: str, attrib: Optional[Dict[str, Any]] = None, text: Optional[str] = None) -> ET.Element:
    elem = ET.Element(q(tag), _attrib(attrib))
    if text is not None:
        elem.text = text
    return elem


def sub(parent: ET.Element, tag: str, attrib: Optional[Dict[str, Any]] = None,
        text: Optional[str] = None) -> ET.Element:
    elem = ET.SubElement(parent, q(tag), _attrib(attrib))
    if text is not None:
        elem.text = text
    return elem


def cm(px: float) -> str:
    """Length attribute value in centimetres."""
    return f"{px_to_cm(px):g}cm"


def to_bytes(root: ET.Element) -> bytes:
    """Serialize a document root with an XML declaration."""
    return ET.tostring(root, encoding="UTF-8", xml_declaration=True)
