"""Domain-specific exceptions for the atlas generator."""

from pathlib import Path


class MetadataError(ValueError):
    """Raised when ``meta.json`` is unreadable or missing required fields."""

    def __init__(self, path: Path, reason: str | None = None):
        message = f"Invalid metadata file: {path}"
        if reason:
            message = f"{message} ({reason})"
        self.path = path
        super().__init__(message)


class MetadataNotFoundError(MetadataError):
    """Raised when an asset directory has no ``meta.json``."""

    def __init__(self, path: Path):
        super().__init__(path, reason="File not found")


class ValidationError(ValueError):
    """Raised when user-provided settings fail validation."""


class ProcessingError(RuntimeError):
    """Raised when the pipeline fails unexpectedly."""


class CropBoundsError(ProcessingError):
    """Raised when a computed crop box does not fit inside its source image."""


class AmbiguousDocumentError(ProcessingError):
    """Raised when more than one sibling directory holds the frame document."""

    def __init__(self, name: str, matches: list[Path]):
        listed = ", ".join(str(p) for p in matches)
        self.matches = matches
        super().__init__(f"Found {len(matches)} candidate documents for {name}: {listed}")


class FrameRecordError(ValueError):
    """Raised when a frame document cannot hold the packed coordinates."""
