"""
Drawing collection and registry.

collect_drawings() flattens the shape tree into the ordered list of shapes
whose binary content is embedded in the package. DrawingRegistry turns that
list into a stable identity -> index mapping, built once per save before any
part writer runs.

Group flattening is exactly one level deep: the children of a top-level
group are collected, the children of a group nested inside a group are not.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Sequence, Tuple

from odpwriter.errors import DrawingNotFoundError
from odpwriter.models import Drawing, Presentation, Shape, ShapeType

logger = logging.getLogger(__name__)


def _is_embeddable(shape: Shape) -> bool:
    return shape.is_drawing and not shape.is_table


def collect_drawings(presentation: Presentation) -> List[Drawing]:
    """
    Collect every embeddable drawing in document order.

    Slides are visited in order, shapes in declaration order. A group
    contributes its immediate drawing children; groups nested inside a
    group are skipped.

    Args:
        presentation: Presentation to traverse (not modified)

    Returns:
        Drawings in slide-then-shape order, possibly empty. The same object
        appears once per occurrence.
    """
    drawings: List[Drawing] = []

    for slide in presentation.slides:
        for shape in slide.shapes:
            if _is_embeddable(shape):
                drawings.append(shape)
            elif shape.is_group:
                for child in shape.shapes:
                    if _is_embeddable(child):
                        drawings.append(child)

    logger.debug(f"[drawings] Collected {len(drawings)} drawings from {presentation.slide_count} slides")
    return drawings


class DrawingRegistry:
    """
    Identity-keyed index of the drawings embedded in a package.

    Indices are dense and follow first occurrence. A drawing reused on
    several slides is registered once. The registry is read-only once
    built.

    Example:
        registry = DrawingRegistry.build(collect_drawings(presentation))
        registry.index_of(image)       # 0
        registry.entry_name(image)     # "Pictures/image1.png"
    """

    def __init__(self):
        self._entries: Dict[int, Tuple[int, Drawing]] = {}
        self._ordered: List[Drawing] = []

    @classmethod
    def build(cls, drawings: Sequence[Drawing]) -> DrawingRegistry:
        registry = cls()
        for drawing in drawings:
            key = id(drawing)
            if key in registry._entries:
                continue
            registry._entries[key] = (len(registry._ordered), drawing)
            registry._ordered.append(drawing)
        logger.debug(
            f"[drawings] Registry built: {len(registry._ordered)} distinct of {len(drawings)} collected"
        )
        return registry

    def index_of(self, drawing: Drawing) -> int:
        """Index of a registered drawing; DrawingNotFoundError otherwise."""
        entry = self._entries.get(id(drawing))
        if entry is None or entry[1] is not drawing:
            raise DrawingNotFoundError(drawing)
        return entry[0]

    def entry_name(self, drawing: Drawing) -> str:
        """Archive path of the drawing's binary content."""
        number = self.index_of(drawing) + 1
        if drawing.shape_type == ShapeType.MEDIA:
            return f"Media/media{number}.{drawing.extension}"
        return f"Pictures/image{number}.{drawing.extension}"

    def __contains__(self, drawing: object) -> bool:
        entry = self._entries.get(id(drawing))
        return entry is not None and entry[1] is drawing

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self) -> Iterator[Drawing]:
        return iter(list(self._ordered))

    def __repr__(self) -> str:
        return f"<DrawingRegistry size={len(self._ordered)}>"
