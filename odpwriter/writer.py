"""
ODPresentationWriter: saves a Presentation as an OpenDocument package.

Save pipeline:

    IDLE -> TARGET_RESOLVED -> OPENED -> PARTS_APPLIED -> CLOSED -> FINALIZED
                      (any failure) -> FAILED

1. Resolve the target (file path, or a stream staged through a temp file)
2. Open the archive at the physical path
3. Collect drawings, build the drawing registry, run the part writers in
   order, threading the archive handle and the chart accumulator
4. Close the archive
5. Deliver a staged package to its stream and remove the temp file

The first failure aborts the save. Nothing is rolled back: a partially
written file may remain on disk and must be treated as garbage.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from odpwriter.archive import PackageArchive
from odpwriter.base import PartWriterClass
from odpwriter.charts import ChartAccumulator
from odpwriter.config import DiskCachingConfig, WriterConfig, get_config
from odpwriter.drawings import DrawingRegistry, collect_drawings
from odpwriter.errors import DirectoryNotFoundError, ODPWriterError
from odpwriter.models import Drawing, Presentation
from odpwriter.registry import PartWriterRegistry
from odpwriter.target import FileTarget, StreamTarget, prepare_output, resolve_target

logger = logging.getLogger(__name__)


class SaveState(str, Enum):
    """Stages of a save."""
    IDLE = "idle"
    TARGET_RESOLVED = "target_resolved"
    OPENED = "opened"
    PARTS_APPLIED = "parts_applied"
    CLOSED = "closed"
    FINALIZED = "finalized"
    FAILED = "failed"


@dataclass
class SaveReport:
    """Outcome of a successful save."""
    target: str
    write_path: str
    entries: List[str]
    writers: List[str]
    drawing_count: int
    chart_count: int
    execution_time_ms: int
    temporary: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "write_path": self.write_path,
            "entries": self.entries,
            "writers": self.writers,
            "drawing_count": self.drawing_count,
            "chart_count": self.chart_count,
            "execution_time_ms": self.execution_time_ms,
            "temporary": self.temporary,
            "metadata": self.metadata,
        }


class ODPresentationWriter:
    """
    Writes a Presentation to an .odp package.

    Example:
        writer = ODPresentationWriter(presentation)
        writer.set_use_disk_caching(True, "/var/tmp/odp-cache")
        report = writer.save("deck.odp")
        writer.save("stream://output")   # package bytes to stdout

    Args:
        presentation: Document to save (may be assigned later)
        config: Writer configuration (defaults to the global config)
        part_writers: Writer classes to run, in order (defaults to the
            registry's discovery order)
    """

    def __init__(
        self,
        presentation: Optional[Presentation] = None,
        config: Optional[WriterConfig] = None,
        part_writers: Optional[Sequence[PartWriterClass]] = None,
    ):
        self.presentation = presentation
        self.config = config if config is not None else get_config()
        self.part_writers = list(part_writers) if part_writers is not None else None
        self.state = SaveState.IDLE

        self._use_disk_caching = False
        self._disk_caching_directory = Path(".")
        self._drawing_registry: Optional[DrawingRegistry] = None

        cache_cfg = self.config.disk_caching
        self.set_use_disk_caching(
            cache_cfg.enabled,
            cache_cfg.directory if cache_cfg.directory not in ("", ".") else None,
        )

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def set_presentation(self, presentation: Presentation) -> ODPresentationWriter:
        self.presentation = presentation
        return self

    def get_presentation(self) -> Presentation:
        if self.presentation is None:
            raise ValueError("No presentation assigned to the writer")
        return self.presentation

    def all_drawings(self) -> List[Drawing]:
        """Embeddable drawings of the presentation, in document order."""
        return collect_drawings(self.get_presentation())

    def get_drawing_registry(self) -> Optional[DrawingRegistry]:
        """Registry built by the last save (None before the first save)."""
        return self._drawing_registry

    # ------------------------------------------------------------------
    # Disk caching
    # ------------------------------------------------------------------

    def has_disk_caching(self) -> bool:
        """Use disk caching where possible?"""
        return self._use_disk_caching

    def set_use_disk_caching(
        self,
        enabled: bool = False,
        directory: Optional[Union[str, Path]] = None,
    ) -> ODPresentationWriter:
        """
        Enable or disable disk caching, optionally moving the cache directory.

        The directory is checked now, not when a save uses it.

        Raises:
            DirectoryNotFoundError: If directory is given and does not exist;
                the previous caching state is kept
        """
        if directory is not None:
            if not Path(directory).is_dir():
                raise DirectoryNotFoundError(directory)
            self._disk_caching_directory = Path(directory)
        self._use_disk_caching = bool(enabled)
        logger.debug(
            f"[writer] Disk caching {'on' if self._use_disk_caching else 'off'} "
            f"(directory={self._disk_caching_directory})"
        )
        return self

    def get_disk_caching_directory(self) -> Path:
        return self._disk_caching_directory

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def _transition(self, state: SaveState) -> None:
        logger.debug(f"[writer] {self.state.value} -> {state.value}")
        self.state = state

    def _resolve_part_writers(self) -> List[PartWriterClass]:
        if self.part_writers is not None:
            return list(self.part_writers)
        return PartWriterRegistry.ordered()

    def save(self, target: Union[str, Path, FileTarget, StreamTarget]) -> SaveReport:
        """
        Save the presentation.

        Args:
            target: File path, ``stream://output`` / ``stream://stdout``
                (case-insensitive), or an explicit FileTarget/StreamTarget

        Returns:
            SaveReport describing what was written

        Raises:
            EmptyTargetError: Empty target (nothing is created)
            ArchiveOpenError: The archive could not be opened
            DuplicateEntryError: Two entries with the same name
            PartWriterError: A part writer failed
            ArchiveCloseError: The archive could not be closed
            CopyFailedError: A staged package could not reach its stream
            CleanupFailedError: Output delivered, temp file left behind
        """
        start = time.perf_counter()
        self.state = SaveState.IDLE

        try:
            resolved_target = resolve_target(target)
            presentation = self.get_presentation()
            output = prepare_output(
                resolved_target,
                temp_dir=self.config.temp.directory,
                temp_prefix=self.config.temp.prefix,
            )
            self._transition(SaveState.TARGET_RESOLVED)

            archive = PackageArchive(
                compression=self.config.archive.compression,
                compresslevel=self.config.archive.compresslevel,
            )
            archive.open(output.write_path)
            self._transition(SaveState.OPENED)

            try:
                drawings = DrawingRegistry.build(collect_drawings(presentation))
                self._drawing_registry = drawings
                charts = ChartAccumulator()

                writer_classes = self._resolve_part_writers()
                if not writer_classes:
                    logger.warning("[writer] No part writers to run; the package will be empty")

                cache = DiskCachingConfig(
                    enabled=self._use_disk_caching,
                    directory=str(self._disk_caching_directory),
                )
                names = []
                for writer_cls in writer_classes:
                    part = writer_cls(disk_caching=cache)
                    archive, charts = part.run(archive, presentation, drawings, charts)
                    names.append(part.name)
                self._transition(SaveState.PARTS_APPLIED)
            except Exception:
                archive.abort()
                raise

            entries = archive.names()
            chart_count = len(charts)
            archive.close()
            self._transition(SaveState.CLOSED)

            output.finalize()
            self._transition(SaveState.FINALIZED)

        except ODPWriterError as e:
            failed_in = self.state.value
            self.state = SaveState.FAILED
            logger.error(f"[writer] Save failed after '{failed_in}' ({e.stage}): {e}")
            raise
        except Exception as e:
            failed_in = self.state.value
            self.state = SaveState.FAILED
            logger.error(f"[writer] Save failed after '{failed_in}': {e}")
            raise

        execution_time_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            f"[writer] Saved {resolved_target.describe()}: {len(entries)} entries, "
            f"{len(drawings)} drawings, {chart_count} charts ({execution_time_ms}ms)"
        )
        return SaveReport(
            target=resolved_target.describe(),
            write_path=str(output.write_path),
            entries=entries,
            writers=names,
            drawing_count=len(drawings),
            chart_count=chart_count,
            execution_time_ms=execution_time_ms,
            temporary=output.temporary,
        )
