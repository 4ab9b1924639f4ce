"""
PackageArchive: the ZIP container a presentation is written into.

The archive is opened and closed by the orchestrator only; part writers
receive the open handle, add entries, and hand it back.

Entries carry a fixed timestamp and fixed permissions so that writing the
same parts in the same order always yields byte-identical packages.
Writing an entry name twice is a fatal error (the package would be
corrupt), not a silent overwrite.
"""

import logging
import zipfile
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from odpwriter.errors import ArchiveCloseError, ArchiveOpenError, DuplicateEntryError

logger = logging.getLogger(__name__)

# Earliest timestamp representable in a ZIP header
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
ENTRY_PERMISSIONS = 0o644 << 16

_COMPRESSION = {
    "deflated": zipfile.ZIP_DEFLATED,
    "stored": zipfile.ZIP_STORED,
}


class PackageArchive:
    """
    Write-only ZIP archive with duplicate-entry detection.

    Example:
        archive = PackageArchive(compression="deflated")
        archive.open("deck.odp")
        archive.write_entry("mimetype", b"...", compress=False)
        archive.close()
    """

    def __init__(self, compression: str = "deflated", compresslevel: Optional[int] = None):
        if compression not in _COMPRESSION:
            raise ValueError(f"Invalid compression {compression!r}, must be one of {tuple(_COMPRESSION)}")
        self.compression = compression
        self.compresslevel = compresslevel
        self.path: Optional[Path] = None
        self._zip: Optional[zipfile.ZipFile] = None
        self._fp: Optional[BinaryIO] = None
        self._names: List[str] = []
        self.current_writer: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self._zip is not None

    def open(self, path: Union[str, Path]) -> "PackageArchive":
        """Create (or truncate) the archive at ``path``."""
        if self._zip is not None:
            raise ArchiveOpenError(path, "archive is already open")
        try:
            fp = open(path, "wb")
        except (OSError, ValueError) as e:
            raise ArchiveOpenError(path, str(e)) from e
        try:
            self._zip = zipfile.ZipFile(
                fp, mode="w",
                compression=_COMPRESSION[self.compression],
                compresslevel=self.compresslevel,
            )
        except (OSError, ValueError) as e:
            fp.close()
            raise ArchiveOpenError(path, str(e)) from e
        self._fp = fp
        self.path = Path(path)
        self._names = []
        logger.debug(f"[archive] Opened {path}")
        return self

    def _check_writable(self, name: str) -> None:
        if self._zip is None:
            raise RuntimeError(f"Cannot write {name!r}: archive is not open")
        if name in self._names:
            raise DuplicateEntryError(name, self.current_writer)

    def _zipinfo(self, name: str, compress: bool) -> zipfile.ZipInfo:
        info = zipfile.ZipInfo(name, date_time=ZIP_EPOCH)
        info.external_attr = ENTRY_PERMISSIONS
        info.compress_type = _COMPRESSION[self.compression] if compress else zipfile.ZIP_STORED
        if compress and self.compresslevel is not None:
            # ZipFile.open() only honors a level stored on the ZipInfo
            info._compresslevel = self.compresslevel
        return info

    def write_entry(self, name: str, data: Union[bytes, str], compress: bool = True) -> None:
        """Add an in-memory entry. Strings are encoded as UTF-8."""
        self._check_writable(name)
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._zip.writestr(self._zipinfo(name, compress), data)
        self._names.append(name)
        logger.debug(f"[archive] + {name} ({len(data)} bytes)")

    def write_file(self, name: str, source: Union[str, Path], compress: bool = True) -> None:
        """Add an entry streamed from a file on disk."""
        self._check_writable(name)
        info = self._zipinfo(name, compress)
        with open(source, "rb") as src, self._zip.open(info, mode="w") as dest:
            while True:
                chunk = src.read(1024 * 1024)
                if not chunk:
                    break
                dest.write(chunk)
        self._names.append(name)
        logger.debug(f"[archive] + {name} (from {source})")

    def names(self) -> List[str]:
        """Entry names in write order."""
        return list(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def close(self) -> None:
        """Write the central directory and release the file."""
        if self._zip is None:
            raise ArchiveCloseError(self.path, "archive is not open")
        zf, self._zip = self._zip, None
        fp, self._fp = self._fp, None
        try:
            try:
                zf.close()
            finally:
                fp.close()
        except (OSError, ValueError) as e:
            raise ArchiveCloseError(self.path, str(e)) from e
        logger.debug(f"[archive] Closed {self.path} ({len(self._names)} entries)")

    def abort(self) -> None:
        """
        Release the file after a failed save.

        Entries already written stay on disk, but the central directory is
        cut off, so the leftover file is not a readable package.
        """
        if self._zip is None:
            return
        zf, self._zip = self._zip, None
        fp, self._fp = self._fp, None
        try:
            end_of_entries = fp.tell()
            zf.close()
            fp.truncate(end_of_entries)
        except (OSError, ValueError) as e:
            logger.warning(f"[archive] Failed to release {self.path} after abort: {e}")
        finally:
            fp.close()
        logger.debug(f"[archive] Aborted {self.path} after {len(self._names)} entries")

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<PackageArchive {self.path} {state} entries={len(self._names)}>"
