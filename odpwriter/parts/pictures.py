"""
Part writer: pictures

Embeds the binary content of every registered drawing under the name the
drawing registry assigns (Pictures/imageN.ext, Media/mediaN.ext).

With disk caching enabled, contents never pass through memory as a whole:
file-backed drawings are streamed from their source, in-memory images are
spooled to a temporary file in the caching directory first. Both paths
produce the same archive bytes.
"""

import logging
import os
import tempfile
from typing import List

from odpwriter.base import PartWriter
from odpwriter.models import Drawing

logger = logging.getLogger(__name__)

CACHE_PREFIX = "odpcache"


class PicturesWriter(PartWriter):
    """Write Pictures/* and Media/* entries."""

    name = "pictures"
    order = 50
    description = "Embedded images and media from the drawing registry"

    requires: List[str] = []
    parts: List[str] = ["Pictures/", "Media/"]

    def render(self, archive, presentation, drawings, charts):
        for drawing in drawings:
            entry = drawings.entry_name(drawing)
            if self.disk_caching.enabled:
                self._write_cached(archive, entry, drawing)
            else:
                archive.write_entry(entry, drawing.contents())
        return archive

    def _write_cached(self, archive, entry: str, drawing: Drawing) -> None:
        source = drawing.source_path()
        if source is not None:
            archive.write_file(entry, source)
            return

        fd, spool = tempfile.mkstemp(prefix=CACHE_PREFIX, dir=self.disk_caching.directory)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(drawing.contents())
            archive.write_file(entry, spool)
        finally:
            os.remove(spool)
        logger.debug(f"[{self.name}] {entry} spooled through {spool}")
