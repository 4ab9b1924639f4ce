"""
Part writer: meta

Writes meta.xml from the presentation's DocumentProperties. Empty
properties are left out; the generator is always written.
"""

from typing import List

from odpwriter.base import PartWriter
from odpwriter.parts.xml_utils import ODF_VERSION, element, sub, to_bytes
from odpwriter.version import get_generator


class MetaWriter(PartWriter):
    """Serialize document properties to meta.xml."""

    name = "meta"
    order = 20
    description = "Document properties (meta.xml)"

    requires: List[str] = []
    parts: List[str] = ["meta.xml"]

    def render(self, archive, presentation, drawings, charts):
        props = presentation.properties

        root = element("office:document-meta", {"office:version": ODF_VERSION})
        meta = sub(root, "office:meta")
        sub(meta, "meta:generator", text=get_generator())

        for tag, value in (
            ("dc:title", props.title),
            ("dc:subject", props.subject),
            ("dc:description", props.description),
            ("meta:keyword", props.keywords),
            ("meta:initial-creator", props.creator),
            ("dc:creator", props.last_modified_by),
            ("meta:creation-date", props.created),
            ("dc:date", props.modified),
        ):
            if value:
                sub(meta, tag, text=value)

        for label, value in (("Category", props.category), ("Company", props.company)):
            if value:
                sub(meta, "meta:user-defined", {"meta:name": label}, text=value)

        archive.write_entry("meta.xml", to_bytes(root))
        return archive
