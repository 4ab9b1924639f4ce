"""
Part writer: styles

Writes styles.xml: the page layout carrying the slide size and the master
page every slide in content.xml refers to.
"""

from typing import List

from odpwriter.base import PartWriter
from odpwriter.parts.content import MASTER_PAGE_NAME
from odpwriter.parts.xml_utils import ODF_VERSION, cm, element, sub, to_bytes

PAGE_LAYOUT_NAME = "PM1"


class StylesWriter(PartWriter):
    """Serialize page layout and master page to styles.xml."""

    name = "styles"
    order = 40
    description = "Page layout and master page (styles.xml)"

    requires: List[str] = []
    parts: List[str] = ["styles.xml"]

    def render(self, archive, presentation, drawings, charts):
        layout = presentation.layout
        orientation = "landscape" if layout.width >= layout.height else "portrait"

        root = element("office:document-styles", {"office:version": ODF_VERSION})
        styles = sub(root, "office:styles")
        default = sub(styles, "style:default-style", {"style:family": "graphic"})
        sub(default, "style:graphic-properties", {"draw:stroke": "none", "draw:fill": "none"})

        automatic = sub(root, "office:automatic-styles")
        page_layout = sub(automatic, "style:page-layout", {"style:name": PAGE_LAYOUT_NAME})
        sub(page_layout, "style:page-layout-properties", {
            "fo:margin-top": "0cm",
            "fo:margin-bottom": "0cm",
            "fo:margin-left": "0cm",
            "fo:margin-right": "0cm",
            "fo:page-width": cm(layout.width),
            "fo:page-height": cm(layout.height),
            "style:print-orientation": orientation,
        })

        master = sub(root, "office:master-styles")
        sub(master, "style:master-page", {
            "style:name": MASTER_PAGE_NAME,
            "style:page-layout-name": PAGE_LAYOUT_NAME,
        })

        archive.write_entry("styles.xml", to_bytes(root))
        return archive
