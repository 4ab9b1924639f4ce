"""
odpwriter: OpenDocument Presentation package writer

Turns an in-memory Presentation into a single .odp package by running an
ordered set of part writers (mimetype, content, meta, settings, styles,
pictures, chart objects, thumbnail, manifest) against a shared archive:

- Drawings are collected once, in document order, and given stable indices
- Charts discovered while writing content are shared with later writers
- Output goes to a file, or to standard output through a temporary file

Example:
    from odpwriter import ODPresentationWriter
    from odpwriter.models import Presentation, RichText

    deck = Presentation()
    deck.create_slide().add_shape(RichText(paragraphs=["Hello"]))
    ODPresentationWriter(deck).save("hello.odp")
"""

from odpwriter.version import __version__

__all__ = [
    # Orchestrator
    "ODPresentationWriter",
    "SaveReport",
    # Part writers
    "PartWriter",
    "PartWriterRegistry",
    # Shared state
    "DrawingRegistry",
    "ChartAccumulator",
    "collect_drawings",
    "__version__",
]


def __getattr__(name):
    """Lazy imports to avoid circular dependencies."""
    if name in ("ODPresentationWriter", "SaveReport"):
        from odpwriter.writer import ODPresentationWriter, SaveReport
        return locals()[name]
    elif name == "PartWriter":
        from odpwriter.base import PartWriter
        return PartWriter
    elif name == "PartWriterRegistry":
        from odpwriter.registry import PartWriterRegistry
        return PartWriterRegistry
    elif name in ("DrawingRegistry", "collect_drawings"):
        from odpwriter.drawings import DrawingRegistry, collect_drawings
        return locals()[name]
    elif name == "ChartAccumulator":
        from odpwriter.charts import ChartAccumulator
        return ChartAccumulator
    raise AttributeError(f"module 'odpwriter' has no attribute '{name}'")
