"""
Part writer: content

Writes content.xml: one ``draw:page`` per slide, each shape as a frame.

    RichText     -> draw:frame/draw:text-box/text:p
    Image        -> draw:frame/draw:image   (href from the drawing registry)
    Media        -> draw:frame/draw:plugin  (href from the drawing registry)
    Chart        -> draw:frame/draw:object  (href "./Object N")
    Table        -> draw:frame/table:table
    Group        -> draw:g (children rendered recursively)

Every chart, including charts inside groups, is registered in the chart
accumulator here; the chart object and manifest writers read it later.

Drawings are only embedded when the registry knows them. Drawings inside a
group nested in another group are not collected, so their frames are
skipped with a warning.
"""

import logging
import xml.etree.ElementTree as ET
from typing import List

from odpwriter.base import PartWriter
from odpwriter.charts import ChartAccumulator
from odpwriter.drawings import DrawingRegistry
from odpwriter.models import Chart, Drawing, Group, Media, RichText, Shape, Slide, Table
from odpwriter.parts.xml_utils import ODF_VERSION, cm, element, sub, to_bytes

logger = logging.getLogger(__name__)

MASTER_PAGE_NAME = "Default"


class ContentWriter(PartWriter):
    """Serialize slides and shapes to content.xml."""

    name = "content"
    order = 10
    description = "Slides and shapes (content.xml); registers charts"

    requires: List[str] = []
    parts: List[str] = ["content.xml"]

    def render(self, archive, presentation, drawings, charts):
        self._skipped = 0
        root = element("office:document-content", {"office:version": ODF_VERSION})
        sub(root, "office:automatic-styles")
        body = sub(root, "office:body")
        office_presentation = sub(body, "office:presentation")

        for index, slide in enumerate(presentation.slides):
            self._write_slide(office_presentation, slide, index, drawings, charts)

        archive.write_entry("content.xml", to_bytes(root))

        if self._skipped:
            logger.warning(f"[{self.name}] Skipped {self._skipped} unregistered drawings")
        logger.debug(
            f"[{self.name}] {presentation.slide_count} slides, {len(charts)} charts registered"
        )
        return archive

    # ------------------------------------------------------------------
    # Slides
    # ------------------------------------------------------------------

    def _write_slide(self, parent: ET.Element, slide: Slide, index: int,
                     drawings: DrawingRegistry, charts: ChartAccumulator) -> None:
        page = sub(parent, "draw:page", {
            "draw:name": slide.name or f"page{index + 1}",
            "draw:master-page-name": MASTER_PAGE_NAME,
        })
        for shape in slide.shapes:
            self._write_shape(page, shape, index, drawings, charts)

        if slide.notes:
            notes = sub(page, "presentation:notes")
            frame = sub(notes, "draw:frame", {"presentation:class": "notes"})
            box = sub(frame, "draw:text-box")
            for line in slide.notes.split("\n"):
                sub(box, "text:p", text=line)

    def _write_shape(self, parent: ET.Element, shape: Shape, slide_index: int,
                     drawings: DrawingRegistry, charts: ChartAccumulator) -> None:
        if shape.is_group:
            self._write_group(parent, shape, slide_index, drawings, charts)
        elif shape.is_table:
            self._write_table(parent, shape)
        elif shape.is_drawing:
            self._write_drawing(parent, shape, drawings)
        elif isinstance(shape, Chart):
            self._write_chart(parent, shape, slide_index, charts)
        elif isinstance(shape, RichText):
            self._write_text(parent, shape)
        else:
            logger.warning(f"[{self.name}] Unsupported shape {type(shape).__name__}, skipped")

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------

    @staticmethod
    def _frame(parent: ET.Element, shape: Shape) -> ET.Element:
        return sub(parent, "draw:frame", {
            "draw:name": shape.name or None,
            "svg:x": cm(shape.offset_x),
            "svg:y": cm(shape.offset_y),
            "svg:width": cm(shape.width),
            "svg:height": cm(shape.height),
        })

    def _write_text(self, parent: ET.Element, shape: RichText) -> None:
        frame = self._frame(parent, shape)
        box = sub(frame, "draw:text-box")
        for paragraph in shape.paragraphs:
            sub(box, "text:p", text=paragraph)

    def _write_drawing(self, parent: ET.Element, shape: Drawing, drawings: DrawingRegistry) -> None:
        if shape not in drawings:
            self._skipped += 1
            logger.debug(f"[{self.name}] Drawing {shape.name!r} is not registered, frame skipped")
            return

        href = drawings.entry_name(shape)
        frame = self._frame(parent, shape)
        if isinstance(shape, Media):
            plugin = sub(frame, "draw:plugin", {
                "xlink:href": href,
                "xlink:type": "simple",
                "xlink:show": "embed",
                "xlink:actuate": "onLoad",
                "draw:mime-type": shape.mime_type,
            })
            sub(plugin, "draw:param", {"draw:name": "Loop", "draw:value": "false"})
        else:
            sub(frame, "draw:image", {
                "xlink:href": href,
                "xlink:type": "simple",
                "xlink:show": "embed",
                "xlink:actuate": "onLoad",
            })
        if shape.description:
            sub(frame, "svg:desc", text=shape.description)

    def _write_chart(self, parent: ET.Element, shape: Chart, slide_index: int,
                     charts: ChartAccumulator) -> None:
        entry = charts.register(shape, slide=slide_index + 1)
        frame = self._frame(parent, shape)
        sub(frame, "draw:object", {
            "xlink:href": f"./{entry.object_name}",
            "xlink:type": "simple",
            "xlink:show": "embed",
            "xlink:actuate": "onLoad",
        })
        if shape.title:
            sub(frame, "svg:title", text=shape.title)

    def _write_table(self, parent: ET.Element, shape: Table) -> None:
        frame = self._frame(parent, shape)
        table = sub(frame, "table:table", {"table:name": shape.name or None})
        columns = shape.column_count
        if columns:
            sub(table, "table:table-column", {"table:number-columns-repeated": columns})

        rows = list(shape.rows)
        if shape.first_row_header and rows:
            header = sub(table, "table:table-header-rows")
            self._write_row(header, rows.pop(0), columns)
        for row in rows:
            self._write_row(table, row, columns)

    @staticmethod
    def _write_row(parent: ET.Element, row: List[str], columns: int) -> None:
        tr = sub(parent, "table:table-row")
        for col in range(columns):
            cell = sub(tr, "table:table-cell", {"office:value-type": "string"})
            if col < len(row):
                sub(cell, "text:p", text=row[col])

    def _write_group(self, parent: ET.Element, shape: Group, slide_index: int,
                     drawings: DrawingRegistry, charts: ChartAccumulator) -> None:
        group = sub(parent, "draw:g", {"draw:name": shape.name or None})
        for child in shape.shapes:
            self._write_shape(group, child, slide_index, drawings, charts)
