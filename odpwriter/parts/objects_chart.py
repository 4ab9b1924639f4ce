"""
Part writer: objects_chart

Writes one embedded chart object per chart registered by the content
writer:

    Object N/content.xml   chart:chart with plot area, series and a local
                           data table the series ranges point into

Each chart entry in the accumulator is updated with the number of series
and categories written.
"""

import logging
import xml.etree.ElementTree as ET
from typing import List

from odpwriter.base import PartWriter
from odpwriter.models import Chart, ChartType
from odpwriter.parts.xml_utils import ODF_VERSION, cm, element, sub, to_bytes

logger = logging.getLogger(__name__)

LOCAL_TABLE = "local-table"


def column_letter(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA."""
    letters = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


class ObjectsChartWriter(PartWriter):
    """Write Object N/content.xml for every registered chart."""

    name = "objects_chart"
    order = 60
    description = "Embedded chart objects"

    requires: List[str] = ["content"]
    parts: List[str] = ["Object "]

    def render(self, archive, presentation, drawings, charts):
        for entry in charts:
            chart = entry.chart
            archive.write_entry(entry.part_name, to_bytes(self._chart_document(chart)))
            charts.update(
                chart,
                part_name=entry.part_name,
                series_count=len(chart.series),
                category_count=len(chart.categories),
            )
        if len(charts):
            logger.debug(f"[{self.name}] Wrote {len(charts)} chart objects")
        return archive

    def _chart_document(self, chart: Chart) -> ET.Element:
        root = element("office:document-content", {"office:version": ODF_VERSION})
        body = sub(root, "office:body")
        office_chart = sub(body, "office:chart")
        chart_class = f"chart:{_chart_class(chart.chart_type)}"
        chart_el = sub(office_chart, "chart:chart", {
            "chart:class": chart_class,
            "svg:width": cm(chart.width),
            "svg:height": cm(chart.height),
        })

        if chart.title:
            title = sub(chart_el, "chart:title")
            sub(title, "text:p", text=chart.title)
        sub(chart_el, "chart:legend", {"chart:legend-position": "end"})

        categories = chart.categories
        last_row = len(categories) + 1
        plot = sub(chart_el, "chart:plot-area")

        if chart.chart_type != ChartType.PIE:
            x_axis = sub(plot, "chart:axis", {"chart:dimension": "x", "chart:name": "primary-x"})
            sub(x_axis, "chart:categories", {
                "table:cell-range-address": f"{LOCAL_TABLE}.$A$2:.$A${last_row}",
            })
            sub(plot, "chart:axis", {"chart:dimension": "y", "chart:name": "primary-y"})

        for index, series in enumerate(chart.series):
            col = column_letter(index + 1)
            sub(plot, "chart:series", {
                "chart:class": chart_class,
                "chart:values-cell-range-address": f"{LOCAL_TABLE}.${col}$2:.${col}${last_row}",
                "chart:label-cell-address": f"{LOCAL_TABLE}.${col}$1",
            })

        self._data_table(chart_el, chart, categories)
        return root

    @staticmethod
    def _data_table(parent: ET.Element, chart: Chart, categories: List[str]) -> None:
        table = sub(parent, "table:table", {"table:name": LOCAL_TABLE})
        header_cols = sub(table, "table:table-header-columns")
        sub(header_cols, "table:table-column")
        cols = sub(table, "table:table-columns")
        if chart.series:
            sub(cols, "table:table-column", {"table:number-columns-repeated": len(chart.series)})

        header_rows = sub(table, "table:table-header-rows")
        header = sub(header_rows, "table:table-row")
        sub(header, "table:table-cell")
        for series in chart.series:
            cell = sub(header, "table:table-cell", {"office:value-type": "string"})
            sub(cell, "text:p", text=series.name)

        rows = sub(table, "table:table-rows")
        for category in categories:
            row = sub(rows, "table:table-row")
            cell = sub(row, "table:table-cell", {"office:value-type": "string"})
            sub(cell, "text:p", text=category)
            for series in chart.series:
                value = series.values.get(category)
                if value is None:
                    sub(row, "table:table-cell")
                    continue
                cell = sub(row, "table:table-cell", {
                    "office:value-type": "float",
                    "office:value": f"{value:g}",
                })
                sub(cell, "text:p", text=f"{value:g}")


def _chart_class(chart_type: ChartType) -> str:
    return {
        ChartType.BAR: "bar",
        ChartType.LINE: "line",
        ChartType.PIE: "circle",
        ChartType.AREA: "area",
    }[chart_type]
