"""
Chart accumulator shared by the part writers of a single save.

The content writer registers every chart it places on a slide; later
writers (chart objects, manifest) read the entries and may add metadata.
Entries are only ever added or updated during a run, and the whole
accumulator is dropped when the save returns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from odpwriter.models import Chart


@dataclass
class ChartEntry:
    """Metadata recorded for one chart."""
    chart: Chart
    number: int                         # 1-based, in registration order
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def object_name(self) -> str:
        """Name of the embedded chart object directory."""
        return f"Object {self.number}"

    @property
    def part_name(self) -> str:
        return f"{self.object_name}/content.xml"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "object_name": self.object_name,
            "title": self.chart.title,
            "metadata": self.metadata,
        }


class ChartAccumulator:
    """Chart identity -> ChartEntry, in registration order."""

    def __init__(self):
        self._entries: Dict[int, ChartEntry] = {}

    def register(self, chart: Chart, **metadata: Any) -> ChartEntry:
        """Register a chart (idempotent) and merge metadata into its entry."""
        entry = self._entries.get(id(chart))
        if entry is None or entry.chart is not chart:
            entry = ChartEntry(chart=chart, number=len(self._entries) + 1)
            self._entries[id(chart)] = entry
        entry.metadata.update(metadata)
        return entry

    def get(self, chart: Chart) -> Optional[ChartEntry]:
        entry = self._entries.get(id(chart))
        if entry is None or entry.chart is not chart:
            return None
        return entry

    def update(self, chart: Chart, **metadata: Any) -> ChartEntry:
        """Add metadata to an already registered chart."""
        entry = self.get(chart)
        if entry is None:
            raise KeyError(f"Chart not registered: {chart.title or chart.name!r}")
        entry.metadata.update(metadata)
        return entry

    def entries(self) -> List[ChartEntry]:
        return list(self._entries.values())

    def __contains__(self, chart: object) -> bool:
        entry = self._entries.get(id(chart))
        return entry is not None and entry.chart is chart

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ChartEntry]:
        return iter(self.entries())
