"""
Error taxonomy for the odpwriter save pipeline.

Every failure raised while saving a presentation derives from ODPWriterError
and names the pipeline stage it happened in, so a caller receives a single
terminal signal identifying both the stage and the underlying cause
(available as ``__cause__``).

CleanupFailedError is the one failure raised after the output was fully
delivered; ``output_usable`` lets callers tell it apart from failures that
leave no usable output.
"""

from typing import Optional


class ODPWriterError(Exception):
    """Base class for all odpwriter failures."""

    stage: str = "save"
    output_usable: bool = False


class EmptyTargetError(ODPWriterError):
    """Raised when save() is called without a target."""

    stage = "resolve_target"

    def __init__(self, message: str = "Filename is empty"):
        super().__init__(message)


class DirectoryNotFoundError(ODPWriterError):
    """Raised when the disk caching directory does not exist."""

    stage = "configure"

    def __init__(self, directory):
        self.directory = directory
        super().__init__(f"Directory does not exist: {directory}")


class ArchiveOpenError(ODPWriterError):
    """The output archive could not be opened."""

    stage = "open"

    def __init__(self, path, reason: str = ""):
        self.path = path
        message = f"Could not open archive {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DuplicateEntryError(ODPWriterError):
    """An entry name was written twice into the same archive."""

    stage = "write_parts"

    def __init__(self, name: str, writer: Optional[str] = None):
        self.name = name
        self.writer = writer
        message = f"Duplicate archive entry: {name}"
        if writer:
            message = f"{message} (written by '{writer}')"
        super().__init__(message)


class PartWriterError(ODPWriterError):
    """Wraps the failure of a single part writer."""

    stage = "write_parts"

    def __init__(self, writer: str, reason: str):
        self.writer = writer
        self.reason = reason
        super().__init__(f"Part writer '{writer}' failed: {reason}")


class ArchiveCloseError(ODPWriterError):
    """The archive could not be finalized on disk."""

    stage = "close"

    def __init__(self, path, reason: str = ""):
        self.path = path
        message = f"Could not close archive {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class CopyFailedError(ODPWriterError):
    """The temporary package could not be copied to the stream target."""

    stage = "finalize"

    def __init__(self, source, destination: str, reason: str = ""):
        self.source = source
        self.destination = destination
        message = f"Could not copy temporary zip file {source} to {destination}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class CleanupFailedError(ODPWriterError):
    """The output was delivered but the temporary file could not be removed."""

    stage = "finalize"
    output_usable = True

    def __init__(self, path, reason: str = ""):
        self.path = path
        message = f"The file {path} could not be removed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DrawingNotFoundError(ODPWriterError, KeyError):
    """Lookup of a drawing that was never registered."""

    stage = "write_parts"

    def __init__(self, drawing):
        self.drawing = drawing
        super().__init__(f"Drawing not registered: {drawing!r}")

    def __str__(self) -> str:
        return self.args[0]
