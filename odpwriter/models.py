"""
Presentation object model consumed by the odpwriter pipeline.

The save pipeline treats these objects as read-only. It needs three things
from a shape: whether it can carry embedded binary content (``is_drawing``),
whether it is tabular (``is_table``) and whether it groups other shapes
(``is_group``). Everything else is consumed by the individual part writers.

Shapes compare by identity (``eq=False``): two images with the same bytes
are two distinct drawings and each gets its own entry in the package.

Geometry is expressed in pixels at 96 dpi; part writers convert to
centimetres when serializing.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


PIXELS_PER_INCH = 96
CM_PER_INCH = 2.54


def px_to_cm(value: float) -> float:
    """Convert pixels (96 dpi) to centimetres, rounded for stable output."""
    return round(value * CM_PER_INCH / PIXELS_PER_INCH, 3)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ShapeType(str, Enum):
    """Serialized discriminator of shape kinds."""
    TEXT = "text"
    IMAGE = "image"
    MEMORY_IMAGE = "memory_image"
    MEDIA = "media"
    CHART = "chart"
    TABLE = "table"
    GROUP = "group"


class ChartType(str, Enum):
    """Chart classes supported by the chart object writer."""
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    AREA = "area"


_MIME_BY_EXTENSION = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "svg": "image/svg+xml",
    "tif": "image/tiff",
    "tiff": "image/tiff",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "mp4": "video/mp4",
    "avi": "video/x-msvideo",
    "wmv": "video/x-ms-wmv",
}

_EXTENSION_BY_MIME = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/bmp": "bmp",
    "image/svg+xml": "svg",
    "image/tiff": "tif",
}


def mime_type_for(extension: str) -> str:
    """Media type for a file extension (``application/octet-stream`` if unknown)."""
    return _MIME_BY_EXTENSION.get(extension.lower().lstrip("."), "application/octet-stream")


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Shape:
    """Base shape: name and geometry."""
    name: str = ""
    offset_x: int = 0
    offset_y: int = 0
    width: int = 0
    height: int = 0

    shape_type = None

    @property
    def is_drawing(self) -> bool:
        return False

    @property
    def is_table(self) -> bool:
        return False

    @property
    def is_group(self) -> bool:
        return False

    def _geometry_dict(self) -> Dict[str, Any]:
        return {
            "type": self.shape_type.value,
            "name": self.name,
            "offset_x": self.offset_x,
            "offset_y": self.offset_y,
            "width": self.width,
            "height": self.height,
        }

    @staticmethod
    def _geometry_kwargs(d: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "name": d.get("name", ""),
            "offset_x": d.get("offset_x", 0),
            "offset_y": d.get("offset_y", 0),
            "width": d.get("width", 0),
            "height": d.get("height", 0),
        }

    def to_dict(self) -> Dict[str, Any]:
        return self._geometry_dict()


@dataclass(eq=False)
class RichText(Shape):
    """Text box holding one string per paragraph."""
    paragraphs: List[str] = field(default_factory=list)

    shape_type = ShapeType.TEXT

    def to_dict(self) -> Dict[str, Any]:
        d = self._geometry_dict()
        d["paragraphs"] = list(self.paragraphs)
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> RichText:
        paragraphs = d.get("paragraphs")
        if paragraphs is None:
            text = d.get("text", "")
            paragraphs = text.split("\n") if text else []
        return cls(paragraphs=list(paragraphs), **cls._geometry_kwargs(d))


@dataclass(eq=False)
class Drawing(Shape):
    """Shape embedding a binary file (image or media) in the package."""
    description: str = ""

    @property
    def is_drawing(self) -> bool:
        return True

    @property
    def extension(self) -> str:
        raise NotImplementedError

    @property
    def mime_type(self) -> str:
        return mime_type_for(self.extension)

    def contents(self) -> bytes:
        """Raw bytes stored in the package."""
        raise NotImplementedError

    def source_path(self) -> Optional[Path]:
        """File on disk holding the contents, if any."""
        return None


@dataclass(eq=False)
class Image(Drawing):
    """Image read from a file on disk."""
    path: str = ""

    shape_type = ShapeType.IMAGE

    @property
    def extension(self) -> str:
        return Path(self.path).suffix.lstrip(".").lower()

    def contents(self) -> bytes:
        return Path(self.path).read_bytes()

    def source_path(self) -> Optional[Path]:
        return Path(self.path)

    def to_dict(self) -> Dict[str, Any]:
        d = self._geometry_dict()
        d["path"] = self.path
        d["description"] = self.description
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Image:
        return cls(
            path=d["path"],
            description=d.get("description", ""),
            **cls._geometry_kwargs(d),
        )


@dataclass(eq=False)
class MemoryImage(Drawing):
    """Image held in memory (generated or downloaded)."""
    data: bytes = b""
    image_mime_type: str = "image/png"

    shape_type = ShapeType.MEMORY_IMAGE

    @property
    def extension(self) -> str:
        return _EXTENSION_BY_MIME.get(self.image_mime_type, "bin")

    @property
    def mime_type(self) -> str:
        return self.image_mime_type

    def contents(self) -> bytes:
        return self.data

    def to_dict(self) -> Dict[str, Any]:
        d = self._geometry_dict()
        d["data"] = base64.b64encode(self.data).decode("ascii")
        d["mime_type"] = self.image_mime_type
        d["description"] = self.description
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> MemoryImage:
        return cls(
            data=base64.b64decode(d.get("data", "")),
            image_mime_type=d.get("mime_type", "image/png"),
            description=d.get("description", ""),
            **cls._geometry_kwargs(d),
        )


@dataclass(eq=False)
class Media(Drawing):
    """Audio or video clip read from disk."""
    path: str = ""

    shape_type = ShapeType.MEDIA

    @property
    def extension(self) -> str:
        return Path(self.path).suffix.lstrip(".").lower()

    def contents(self) -> bytes:
        return Path(self.path).read_bytes()

    def source_path(self) -> Optional[Path]:
        return Path(self.path)

    def to_dict(self) -> Dict[str, Any]:
        d = self._geometry_dict()
        d["path"] = self.path
        d["description"] = self.description
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Media:
        return cls(
            path=d["path"],
            description=d.get("description", ""),
            **cls._geometry_kwargs(d),
        )


@dataclass
class Series:
    """One data series of a chart; ``values`` maps category -> value in order."""
    name: str
    values: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "values": [[k, v] for k, v in self.values.items()]}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Series:
        raw = d.get("values", {})
        if isinstance(raw, dict):
            values = {str(k): float(v) for k, v in raw.items()}
        else:
            values = {str(k): float(v) for k, v in raw}
        return cls(name=d.get("name", ""), values=values)


@dataclass(eq=False)
class Chart(Shape):
    """Chart rendered as an embedded chart object."""
    title: str = ""
    chart_type: ChartType = ChartType.BAR
    series: List[Series] = field(default_factory=list)

    shape_type = ShapeType.CHART

    @property
    def categories(self) -> List[str]:
        """Union of series categories, in first-seen order."""
        seen: Dict[str, None] = {}
        for s in self.series:
            for key in s.values:
                seen.setdefault(key, None)
        return list(seen)

    def to_dict(self) -> Dict[str, Any]:
        d = self._geometry_dict()
        d["title"] = self.title
        d["chart_type"] = self.chart_type.value
        d["series"] = [s.to_dict() for s in self.series]
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Chart:
        return cls(
            title=d.get("title", ""),
            chart_type=ChartType(d.get("chart_type", "bar")),
            series=[Series.from_dict(s) for s in d.get("series", [])],
            **cls._geometry_kwargs(d),
        )


@dataclass(eq=False)
class Table(Shape):
    """Table of plain-text cells."""
    rows: List[List[str]] = field(default_factory=list)
    first_row_header: bool = True

    shape_type = ShapeType.TABLE

    @property
    def is_table(self) -> bool:
        return True

    @property
    def column_count(self) -> int:
        return max((len(r) for r in self.rows), default=0)

    def to_dict(self) -> Dict[str, Any]:
        d = self._geometry_dict()
        d["rows"] = [list(r) for r in self.rows]
        d["first_row_header"] = self.first_row_header
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Table:
        return cls(
            rows=[[str(c) for c in r] for r in d.get("rows", [])],
            first_row_header=d.get("first_row_header", True),
            **cls._geometry_kwargs(d),
        )


@dataclass(eq=False)
class Group(Shape):
    """Container of shapes moved and scaled together."""
    shapes: List[Shape] = field(default_factory=list)

    shape_type = ShapeType.GROUP

    @property
    def is_group(self) -> bool:
        return True

    def add_shape(self, shape: Shape) -> Shape:
        self.shapes.append(shape)
        return shape

    def to_dict(self) -> Dict[str, Any]:
        d = self._geometry_dict()
        d["shapes"] = [s.to_dict() for s in self.shapes]
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Group:
        return cls(
            shapes=[shape_from_dict(s) for s in d.get("shapes", [])],
            **cls._geometry_kwargs(d),
        )


_SHAPE_CLASSES = {
    ShapeType.TEXT: RichText,
    ShapeType.IMAGE: Image,
    ShapeType.MEMORY_IMAGE: MemoryImage,
    ShapeType.MEDIA: Media,
    ShapeType.CHART: Chart,
    ShapeType.TABLE: Table,
    ShapeType.GROUP: Group,
}


def shape_from_dict(d: Dict[str, Any]) -> Shape:
    """Build a shape from its dictionary form, dispatching on ``type``."""
    try:
        shape_type = ShapeType(d.get("type", "text"))
    except ValueError:
        raise ValueError(f"Unknown shape type {d.get('type')!r}") from None
    return _SHAPE_CLASSES[shape_type].from_dict(d)


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

@dataclass
class DocumentProperties:
    """Descriptive metadata written to meta.xml. Dates are ISO 8601 strings."""
    creator: str = ""
    last_modified_by: str = ""
    created: str = ""
    modified: str = ""
    title: str = ""
    description: str = ""
    subject: str = ""
    keywords: str = ""
    category: str = ""
    company: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "creator": self.creator,
            "last_modified_by": self.last_modified_by,
            "created": self.created,
            "modified": self.modified,
            "title": self.title,
            "description": self.description,
            "subject": self.subject,
            "keywords": self.keywords,
            "category": self.category,
            "company": self.company,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> DocumentProperties:
        # YAML leaves empty keys as None
        return cls(**{
            k: "" if d.get(k) is None else str(d[k])
            for k in cls().to_dict()
        })


@dataclass
class DocumentLayout:
    """Slide size."""
    name: str = "screen16x9"
    width: int = 960
    height: int = 540

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> DocumentLayout:
        return cls(
            name=d.get("name", "screen16x9"),
            width=d.get("width", 960),
            height=d.get("height", 540),
        )


@dataclass
class Slide:
    """One slide: ordered shapes plus optional speaker notes."""
    name: str = ""
    shapes: List[Shape] = field(default_factory=list)
    notes: str = ""

    def add_shape(self, shape: Shape) -> Shape:
        self.shapes.append(shape)
        return shape

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "shapes": [s.to_dict() for s in self.shapes],
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Slide:
        return cls(
            name=d.get("name", ""),
            shapes=[shape_from_dict(s) for s in d.get("shapes", [])],
            notes=d.get("notes", ""),
        )


@dataclass
class Presentation:
    """A presentation document: slides, metadata and layout."""
    slides: List[Slide] = field(default_factory=list)
    properties: DocumentProperties = field(default_factory=DocumentProperties)
    layout: DocumentLayout = field(default_factory=DocumentLayout)
    thumbnail_path: Optional[str] = None

    @property
    def slide_count(self) -> int:
        return len(self.slides)

    def get_slide(self, index: int) -> Slide:
        return self.slides[index]

    def create_slide(self, name: str = "") -> Slide:
        slide = Slide(name=name or f"Slide {len(self.slides) + 1}")
        self.slides.append(slide)
        return slide

    def iter_shapes(self):
        """Yield (slide_index, shape) for top-level shapes in document order."""
        for index, slide in enumerate(self.slides):
            for shape in slide.shapes:
                yield index, shape

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "properties": self.properties.to_dict(),
            "layout": self.layout.to_dict(),
            "slides": [s.to_dict() for s in self.slides],
        }
        if self.thumbnail_path is not None:
            d["thumbnail_path"] = self.thumbnail_path
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Presentation:
        return cls(
            slides=[Slide.from_dict(s) for s in d.get("slides", [])],
            properties=DocumentProperties.from_dict(d.get("properties") or {}),
            layout=DocumentLayout.from_dict(d.get("layout") or {}),
            thumbnail_path=d.get("thumbnail_path"),
        )
