"""Filesystem helpers."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

FULL_COLOR_PREFIX = "NOPAL_"


def ensure_directory(path: Path) -> Path:
    """Create a directory if it does not exist."""

    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)
    return path


def source_frame_path(directory: Path, index: int) -> Path:
    """Numbered source frame, e.g. ``3.png``."""

    return directory / f"{index}.png"


def crop_frame_path(directory: Path, index: int) -> Path:
    return directory / f"crop_{index}.png"


def atlas_paths(output_dir: Path, asset_name: str) -> tuple[Path, Path]:
    """Return (full-colour atlas, indexed atlas) paths for an asset."""

    return output_dir / f"{FULL_COLOR_PREFIX}{asset_name}.png", output_dir / f"{asset_name}.png"


def list_subdirectories(root: Path) -> list[Path]:
    """Return sub-directories of root sorted by name."""

    if not root.is_dir():
        return []
    return sorted((p for p in root.iterdir() if p.is_dir()), key=lambda p: p.name)
