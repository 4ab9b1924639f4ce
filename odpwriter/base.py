"""
Part Writer Base Class

A part writer contributes one logical section of the package (styles,
content, manifest, ...) as one or more archive entries.

Design Principles:
1. One writer, one responsibility: each writer owns its entry names
2. Deterministic: same presentation = same bytes
3. Exclusive hand-off: a writer holds the archive only while it runs and
   hands it back; it never closes it
4. Explicit ordering: ``order`` and ``requires`` fix the execution order
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from odpwriter.archive import PackageArchive
from odpwriter.charts import ChartAccumulator
from odpwriter.config import DiskCachingConfig
from odpwriter.drawings import DrawingRegistry
from odpwriter.errors import DuplicateEntryError, PartWriterError
from odpwriter.models import Presentation

logger = logging.getLogger(__name__)


class PartWriter(ABC):
    """
    Abstract base class for all part writers.

    Subclasses must implement:
        - render(): Add this writer's entries to the archive

    Subclasses should override:
        - name: Unique writer identifier
        - order: Position hint (lower runs first)
        - requires: Writers whose output this one reads
        - parts: Entry names (or prefixes) this writer produces

    Example:
        class NotesWriter(PartWriter):
            name = "notes"
            order = 45
            requires = ["content"]
            parts = ["notes.xml"]

            def render(self, archive, presentation, drawings, charts):
                archive.write_entry("notes.xml", build_notes(presentation))
                return archive
    """

    # Writer metadata, override in subclasses
    name: str = "base"
    version: str = "1.0.0"
    order: int = 0
    description: str = "Base part writer"

    # Dependency declaration
    requires: List[str] = []   # Writer names that must run first
    parts: List[str] = []      # Entry names this writer produces

    def __init__(self, disk_caching: Optional[DiskCachingConfig] = None):
        self.disk_caching = disk_caching or DiskCachingConfig()

    @abstractmethod
    def render(
        self,
        archive: PackageArchive,
        presentation: Presentation,
        drawings: DrawingRegistry,
        charts: ChartAccumulator,
    ) -> PackageArchive:
        """
        Write this writer's entries.

        Args:
            archive: Open archive, lent for the duration of the call
            presentation: Document being saved (read-only)
            drawings: Registry of embedded drawings (read-only)
            charts: Chart accumulator (entries may be added or updated)

        Returns:
            The archive handle to pass on (same instance or a successor)
        """
        pass

    def run(
        self,
        archive: PackageArchive,
        presentation: Presentation,
        drawings: DrawingRegistry,
        charts: ChartAccumulator,
    ) -> Tuple[PackageArchive, ChartAccumulator]:
        """
        Execute the writer with timing and failure wrapping.

        Do NOT override, override render() instead.

        Returns:
            (archive, charts) to thread into the next writer

        Raises:
            DuplicateEntryError: If an entry name was already written
            PartWriterError: For any other failure, or if render() did not
                hand back an open archive
        """
        start = time.perf_counter()
        before = len(archive.names())
        archive.current_writer = self.name
        logger.debug(f"[{self.name}] Starting")

        try:
            result = self.render(archive, presentation, drawings, charts)
        except DuplicateEntryError:
            logger.error(f"[{self.name}] Duplicate entry, package would be corrupt")
            raise
        except Exception as e:
            logger.error(f"[{self.name}] Failed: {e}")
            raise PartWriterError(self.name, f"{type(e).__name__}: {e}") from e
        finally:
            archive.current_writer = None

        if not isinstance(result, PackageArchive) or not result.is_open:
            raise PartWriterError(self.name, f"did not return an open archive (got {result!r})")

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        written = len(result.names()) - before
        logger.info(f"[{self.name}] Wrote {written} entries ({elapsed_ms}ms)")
        return result, charts

    def __repr__(self) -> str:
        return f"<PartWriter {self.name}@{self.version} order={self.order}>"


# Type alias for part writer classes
PartWriterClass = type[PartWriter]
