"""
Part writer: manifest

Writes META-INF/manifest.xml listing every entry already in the archive,
plus one directory entry per embedded chart object. It reads the archive's
entry list, so it runs after every other built-in writer.
"""

from pathlib import PurePosixPath
from typing import List

from odpwriter.base import PartWriter
from odpwriter.models import mime_type_for
from odpwriter.parts.xml_utils import CHART_MIME, ODF_VERSION, PRESENTATION_MIME, element, sub, to_bytes

MANIFEST_ENTRY = "META-INF/manifest.xml"


def media_type_for_entry(name: str) -> str:
    if name.endswith(".xml"):
        return "text/xml"
    return mime_type_for(PurePosixPath(name).suffix)


class ManifestWriter(PartWriter):
    """List the package contents in META-INF/manifest.xml."""

    name = "manifest"
    order = 100
    description = "Package manifest, written last"

    requires: List[str] = ["content", "pictures", "objects_chart"]
    parts: List[str] = [MANIFEST_ENTRY]

    def render(self, archive, presentation, drawings, charts):
        object_dirs = {entry.object_name: entry for entry in charts}

        root = element("manifest:manifest", {"manifest:version": ODF_VERSION})
        sub(root, "manifest:file-entry", {
            "manifest:full-path": "/",
            "manifest:version": ODF_VERSION,
            "manifest:media-type": PRESENTATION_MIME,
        })

        listed_dirs = set()
        for name in archive.names():
            if name == "mimetype" or name.startswith("META-INF/"):
                continue

            top = name.split("/", 1)[0]
            if top in object_dirs and top not in listed_dirs:
                sub(root, "manifest:file-entry", {
                    "manifest:full-path": f"{top}/",
                    "manifest:version": ODF_VERSION,
                    "manifest:media-type": CHART_MIME,
                })
                listed_dirs.add(top)

            sub(root, "manifest:file-entry", {
                "manifest:full-path": name,
                "manifest:media-type": media_type_for_entry(name),
            })

        archive.write_entry(MANIFEST_ENTRY, to_bytes(root))
        return archive
