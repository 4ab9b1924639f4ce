"""
Part writer: mimetype

Writes the package media type. OpenDocument readers sniff it from the
first entry of the ZIP, so it must be written first and stored
uncompressed.
"""

import logging
from typing import List

from odpwriter.base import PartWriter
from odpwriter.parts.xml_utils import PRESENTATION_MIME

logger = logging.getLogger(__name__)


class MimetypeWriter(PartWriter):
    """Write the uncompressed ``mimetype`` entry."""

    name = "mimetype"
    order = 0
    description = "Package media type, first and uncompressed"

    requires: List[str] = []
    parts: List[str] = ["mimetype"]

    def render(self, archive, presentation, drawings, charts):
        if archive.names():
            logger.warning(
                f"[{self.name}] mimetype is not the first entry (after {archive.names()[-1]}); "
                "some readers will not recognize the package"
            )
        archive.write_entry("mimetype", PRESENTATION_MIME.encode("ascii"), compress=False)
        return archive
