"""
Pytest Configuration and Fixtures
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from odpwriter.config import WriterConfig, set_config
from odpwriter.models import (
    Chart,
    ChartType,
    DocumentProperties,
    Group,
    Image,
    MemoryImage,
    Presentation,
    RichText,
    Series,
    Slide,
    Table,
)
from odpwriter.registry import PartWriterRegistry

# Smallest byte string a reader would sniff as PNG; the writer never decodes it
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + bytes(range(32))

ENV_VARS = (
    "ODPWRITER_DISK_CACHING",
    "ODPWRITER_DISK_CACHE_DIR",
    "ODPWRITER_TEMP_DIR",
    "ODPWRITER_COMPRESSION",
    "ODPWRITER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate tests from ODPWRITER_* variables and the global config."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    set_config(None)
    yield
    set_config(None)
    PartWriterRegistry.reset()


@pytest.fixture
def config(tmp_path: Path) -> WriterConfig:
    """Default config staging stream targets under tmp_path."""
    cfg = WriterConfig()
    cfg.temp.directory = str(tmp_path)
    return cfg


@pytest.fixture
def png_file(tmp_path: Path) -> Path:
    path = tmp_path / "logo.png"
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def scenario_presentation(png_file: Path) -> Presentation:
    """
    Two slides: slide 1 holds an image and a table, slide 2 a group holding
    an image and a chart.
    """
    first = Image(name="logo", path=str(png_file), width=200, height=200)
    second = Image(name="inner", path=str(png_file), width=100, height=100)
    chart = Chart(
        name="sales",
        title="Sales",
        chart_type=ChartType.BAR,
        series=[Series("2025", {"Q1": 10.0, "Q2": 12.5})],
        width=400,
        height=300,
    )
    table = Table(name="grid", rows=[["A", "B"], ["1", "2"]], width=300, height=100)

    return Presentation(slides=[
        Slide(name="Intro", shapes=[first, table]),
        Slide(name="Details", shapes=[Group(name="g", shapes=[second, chart])]),
    ])


@pytest.fixture
def rich_presentation(png_file: Path) -> Presentation:
    """A deck exercising every built-in part writer."""
    logo = Image(name="logo", path=str(png_file), width=120, height=60, description="Company logo")
    generated = MemoryImage(name="plot", data=PNG_BYTES * 2, width=320, height=240)
    chart = Chart(
        name="revenue",
        title="Revenue",
        chart_type=ChartType.LINE,
        series=[
            Series("2024", {"Q1": 1.0, "Q2": 2.0, "Q3": 3.0}),
            Series("2025", {"Q1": 2.0, "Q2": 4.0, "Q4": 5.0}),
        ],
        width=480,
        height=320,
    )

    deck = Presentation(
        properties=DocumentProperties(
            creator="Finance",
            title="Quarterly review",
            created="2025-01-15T09:00:00",
            company="Example Corp",
        ),
        thumbnail_path=str(png_file),
    )
    intro = deck.create_slide("Intro")
    intro.add_shape(RichText(name="title", paragraphs=["Quarterly review", "2025"], width=600, height=80))
    intro.add_shape(logo)
    intro.notes = "Welcome everyone"

    numbers = deck.create_slide("Numbers")
    numbers.add_shape(chart)
    numbers.add_shape(Group(name="visuals", shapes=[generated, logo]))
    numbers.add_shape(Table(name="summary", rows=[["Quarter", "Revenue"], ["Q1", "1.0"]]))
    return deck
