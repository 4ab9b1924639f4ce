"""
Part writer: thumbnail

Copies the presentation's preview image to Thumbnails/thumbnail.png.
Presentations without a thumbnail produce no entry.
"""

from pathlib import Path
from typing import List

from odpwriter.base import PartWriter

THUMBNAIL_ENTRY = "Thumbnails/thumbnail.png"


class ThumbnailWriter(PartWriter):
    """Embed the preview image, if any."""

    name = "thumbnail"
    order = 70
    description = "Preview image for file browsers"

    requires: List[str] = []
    parts: List[str] = [THUMBNAIL_ENTRY]

    def render(self, archive, presentation, drawings, charts):
        if not presentation.thumbnail_path:
            return archive

        source = Path(presentation.thumbnail_path)
        if self.disk_caching.enabled:
            archive.write_file(THUMBNAIL_ENTRY, source, compress=False)
        else:
            archive.write_entry(THUMBNAIL_ENTRY, source.read_bytes(), compress=False)
        return archive
