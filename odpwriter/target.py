"""
Output targets for a save.

A save writes either straight to a file (FileTarget) or to a binary stream
such as the process's standard output (StreamTarget). The kind is decided
once, when the caller's target is resolved; nothing downstream sniffs
strings.

A ZIP archive cannot be written to a non-seekable stream, so a StreamTarget
is staged through a temporary file that is copied to the stream and removed
once the archive has been closed.
"""

import logging
import os
import shutil
import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Optional, Union

from odpwriter.errors import CleanupFailedError, CopyFailedError, EmptyTargetError

logger = logging.getLogger(__name__)

# Logical markers meaning "the calling process's standard output"
STREAM_MARKERS = ("stream://output", "stream://stdout")

TEMP_PREFIX = "odptmp"


def _stdout_buffer() -> BinaryIO:
    return sys.stdout.buffer


@dataclass
class FileTarget:
    """Write directly to a path."""
    path: Path

    def __post_init__(self):
        if isinstance(self.path, str):
            self.path = Path(self.path)

    def describe(self) -> str:
        return str(self.path)


@dataclass
class StreamTarget:
    """Write to a binary stream (standard output by default)."""
    marker: str = STREAM_MARKERS[0]
    stream: Optional[BinaryIO] = field(default=None, repr=False)

    def resolve_stream(self) -> BinaryIO:
        return self.stream if self.stream is not None else _stdout_buffer()

    def describe(self) -> str:
        return self.marker


OutputTarget = Union[FileTarget, StreamTarget]


def is_stream_marker(value: str) -> bool:
    return value.lower() in STREAM_MARKERS


def resolve_target(target: Union[str, Path, FileTarget, StreamTarget, None]) -> OutputTarget:
    """
    Turn a caller-supplied target into an OutputTarget.

    Raises:
        EmptyTargetError: If target is None or an empty string
    """
    if isinstance(target, (FileTarget, StreamTarget)):
        return target
    if target is None:
        raise EmptyTargetError()
    if isinstance(target, Path):
        return FileTarget(target)

    text = str(target)
    if not text.strip():
        raise EmptyTargetError()
    if is_stream_marker(text):
        return StreamTarget(marker=text)
    return FileTarget(Path(text))


@dataclass
class ResolvedOutput:
    """Where the archive is physically written, and how to finalize it."""
    target: OutputTarget
    write_path: Path
    temporary: bool = False

    def finalize(self) -> None:
        """
        Deliver a staged package to its stream and remove the temp file.

        No-op for direct file targets.

        Raises:
            CopyFailedError: If the bytes could not be copied to the stream
            CleanupFailedError: If the temp file could not be removed (the
                output was already delivered)
        """
        if not self.temporary:
            return

        destination = self.target.describe()
        try:
            stream = self.target.resolve_stream()
            with open(self.write_path, "rb") as src:
                shutil.copyfileobj(src, stream)
            stream.flush()
        except (OSError, ValueError, AttributeError) as e:
            raise CopyFailedError(self.write_path, destination, str(e)) from e
        logger.info(f"[target] Copied {self.write_path} to {destination}")

        try:
            os.remove(self.write_path)
        except OSError as e:
            raise CleanupFailedError(self.write_path, str(e)) from e
        logger.debug(f"[target] Removed temporary file {self.write_path}")


def prepare_output(
    target: OutputTarget,
    temp_dir: Union[str, Path] = ".",
    temp_prefix: str = TEMP_PREFIX,
) -> ResolvedOutput:
    """
    Choose the physical path the archive is written to.

    File targets are written in place. Stream targets get a temporary file in
    ``temp_dir``; if none can be allocated the marker itself is used as a
    path, which normally makes opening the archive fail later.
    """
    if isinstance(target, FileTarget):
        return ResolvedOutput(target=target, write_path=target.path)

    try:
        fd, name = tempfile.mkstemp(prefix=temp_prefix, dir=str(temp_dir))
    except OSError as e:
        logger.warning(
            f"[target] Could not allocate temporary file in {temp_dir} ({e}); "
            f"falling back to {target.marker}"
        )
        return ResolvedOutput(target=target, write_path=Path(target.marker))
    os.close(fd)
    logger.debug(f"[target] Staging {target.marker} through {name}")
    return ResolvedOutput(target=target, write_path=Path(name), temporary=True)
