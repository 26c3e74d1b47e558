"""Core data model for atlas generation."""

__all__ = [
    "FrameGeometry",
    "AnimationMetadata",
    "CropBox",
    "CroppedImage",
    "PackingRectangle",
    "BoundingBox",
    "RoundingPolicy",
    "AtlasSettings",
    "UpdateStatus",
    "FrameRecordUpdate",
    "DirectoryStatus",
    "ProcessingOutcome",
]

import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class FrameGeometry:
    """Logical size and offset of a frame, in metadata units."""

    height: int
    width: int
    offset_x: int
    offset_y: int


@dataclass(frozen=True)
class AnimationMetadata:
    """Parsed ``meta.json`` content."""

    reference: FrameGeometry
    frames: tuple[FrameGeometry, ...]
    declared_frame_count: int

    @property
    def frame_count_matches(self) -> bool:
        return len(self.frames) == self.declared_frame_count


@dataclass(frozen=True)
class CropBox:
    """Crop rectangle in source pixel space."""

    x: int
    y: int
    width: int
    height: int

    @property
    def box(self) -> tuple[int, int, int, int]:
        """Pillow-style (left, upper, right, lower) box."""

        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass
class CroppedImage:
    """A cropped frame held in memory for composition."""

    source_path: Path
    crop_path: Path
    width: int
    height: int
    image: Image.Image = field(repr=False)


@dataclass
class PackingRectangle:
    """Box submitted to the packer; ``id`` is the frame index."""

    id: int
    width: int
    height: int
    x: int = 0
    y: int = 0

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def intersects(self, other: "PackingRectangle") -> bool:
        return not (
            self.right <= other.x or other.right <= self.x or self.bottom <= other.y or other.bottom <= self.y
        )


@dataclass(frozen=True)
class BoundingBox:
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


class RoundingPolicy(str, Enum):
    """How scaled crop coordinates become whole pixels."""

    FLOOR = "floor"
    ROUND = "round"
    CEIL = "ceil"

    def apply(self, value: float) -> int:
        if self is RoundingPolicy.ROUND:
            return math.floor(value + 0.5)
        if self is RoundingPolicy.CEIL:
            return math.ceil(value)
        # Truncation toward zero; coordinates are never negative.
        return int(value)


@dataclass
class AtlasSettings:
    """User-configurable settings used for atlas generation."""

    search_dirs: Optional[list[Path]] = None
    workspace: Optional[Path] = None
    rounding: RoundingPolicy = RoundingPolicy.FLOOR
    palette_colors: int = 256
    alpha_cutoff: int = 127
    low_alpha: int = 127
    json_indent: Optional[int] = 4
    dry_run: bool = False


class UpdateStatus(str, Enum):
    UPDATED = "updated"
    NO_TARGET = "no_target"
    ERROR = "error"


@dataclass
class FrameRecordUpdate:
    """Result of rewriting a consumer frame document."""

    status: UpdateStatus
    document_path: Optional[Path] = None
    backup_path: Optional[Path] = None
    message: Optional[str] = None


class DirectoryStatus(str, Enum):
    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ProcessingOutcome:
    """Result paths produced by processing one asset directory."""

    directory: Path
    status: DirectoryStatus
    full_color_path: Optional[Path] = None
    atlas_path: Optional[Path] = None
    crop_paths: list[Path] = field(default_factory=list)
    bounding_box: Optional[BoundingBox] = None
    record_update: Optional[FrameRecordUpdate] = None
    error: Optional[str] = None
