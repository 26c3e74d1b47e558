"""Rewriting of the consumer's per-frame sprite records."""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Optional, Sequence

from . import FrameRecordUpdate, PackingRectangle, UpdateStatus
from .errors import AmbiguousDocumentError, FrameRecordError
from ..utils import file_tools

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = "_backup"


def document_name(asset_name: str) -> str:
    return f"{asset_name}.json"


def backup_path_for(document_path: Path) -> Path:
    return document_path.with_name(f"{document_path.stem}{BACKUP_SUFFIX}{document_path.suffix}")


def find_frame_document(
    asset_name: str,
    search_dirs: Optional[Sequence[Path]] = None,
    workspace: Optional[Path] = None,
) -> Optional[Path]:
    """Locate ``<asset_name>.json`` for an asset directory.

    With ``search_dirs`` the directories are tried in the declared order and
    the first hit wins. Otherwise every sub-directory of ``workspace`` (the
    parent of the working directory by default) is scanned, and more than
    one hit is an error.
    """

    filename = document_name(asset_name)
    if search_dirs:
        for directory in search_dirs:
            logger.debug("Looking for %s in %s", filename, directory)
            candidate = directory / filename
            if candidate.is_file():
                return candidate
        return None

    root = workspace if workspace is not None else Path.cwd().parent
    matches = [d / filename for d in file_tools.list_subdirectories(root) if (d / filename).is_file()]
    if len(matches) > 1:
        raise AmbiguousDocumentError(filename, matches)
    return matches[0] if matches else None


def ensure_backup(document_path: Path) -> Path:
    """Copy the document aside once; an existing backup is never replaced."""

    backup = backup_path_for(document_path)
    if not backup.exists():
        shutil.copy2(document_path, backup)
        logger.info("Backed up %s to %s", document_path, backup)
    return backup


def apply_rectangles(document: Any, rectangles: Sequence[PackingRectangle]) -> None:
    """Write packed coordinates into ``document["frames"]`` by position.

    ``rectangles`` must already be in frame (id) order.
    """

    frames = document.get("frames") if isinstance(document, dict) else None
    if not isinstance(frames, list):
        raise FrameRecordError("Document has no 'frames' array")
    if len(frames) < len(rectangles):
        raise FrameRecordError(f"Document has {len(frames)} frame records for {len(rectangles)} packed frames")
    if len(frames) > len(rectangles):
        logger.warning(
            "Document has %s frame records but only %s frames were packed; extra records left as is",
            len(frames),
            len(rectangles),
        )

    for index, rect in enumerate(rectangles):
        record = frames[index]
        if not isinstance(record, dict):
            raise FrameRecordError(f"Frame record {index} is not an object")
        record["sprite_height"] = rect.height
        record["sprite_width"] = rect.width
        record["sprite_sheet_x"] = rect.x
        record["sprite_sheet_y"] = rect.y


def update_frame_records(
    document_path: Path,
    rectangles: Sequence[PackingRectangle],
    indent: Optional[int] = 4,
) -> FrameRecordUpdate:
    """Back up the document once, then rewrite it with the packed coordinates."""

    try:
        document = json.loads(document_path.read_text(encoding="utf-8"))
        apply_rectangles(document, rectangles)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, FrameRecordError) as exc:
        logger.error("Could not update %s: %s", document_path, exc)
        return FrameRecordUpdate(status=UpdateStatus.ERROR, document_path=document_path, message=str(exc))

    backup = ensure_backup(document_path)
    document_path.write_text(json.dumps(document, indent=indent, ensure_ascii=False), encoding="utf-8")
    logger.info("Updated %s frame records in %s", len(rectangles), document_path)
    return FrameRecordUpdate(status=UpdateStatus.UPDATED, document_path=document_path, backup_path=backup)
