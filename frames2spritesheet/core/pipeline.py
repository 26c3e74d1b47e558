"""Per-directory atlas build: crop, pack, compose, reduce, update records."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from . import (
    AtlasSettings,
    CroppedImage,
    DirectoryStatus,
    FrameRecordUpdate,
    PackingRectangle,
    ProcessingOutcome,
    UpdateStatus,
)
from . import atlas_builder, frame_cropper, frame_records, metadata_loader, palette_reducer, rect_packer
from .errors import MetadataError, MetadataNotFoundError, ProcessingError
from ..utils import file_tools

logger = logging.getLogger(__name__)


def process_directory(directory: Path, settings: AtlasSettings) -> ProcessingOutcome:
    """Build the atlas for one asset directory.

    Raises :class:`MetadataError` or :class:`ProcessingError` on failure;
    files written before the failure are left in place.
    """

    logger.info("Processing folder: %s", directory)
    name = directory.name
    try:
        metadata = metadata_loader.load_metadata(directory / metadata_loader.META_FILENAME)
    except MetadataNotFoundError:
        logger.info("%s: no %s found, skipping", name, metadata_loader.META_FILENAME)
        return ProcessingOutcome(directory=directory, status=DirectoryStatus.SKIPPED)

    if settings.dry_run:
        logger.info("%s: would crop and pack %s frames", name, len(metadata.frames))
        return ProcessingOutcome(directory=directory, status=DirectoryStatus.SKIPPED)

    crops: list[CroppedImage] = []
    rectangles: list[PackingRectangle] = []
    for index, frame in enumerate(metadata.frames):
        crop = frame_cropper.crop_frame(
            file_tools.source_frame_path(directory, index),
            file_tools.crop_frame_path(directory, index),
            frame,
            metadata.reference,
            settings.rounding,
        )
        crops.append(crop)
        rectangles.append(PackingRectangle(id=index, width=crop.width, height=crop.height))
    if not crops:
        raise ProcessingError(f"{name}: metadata lists no frames")
    logger.info("%s frames have been cropped.", name)

    packed, bounds = rect_packer.pack_rectangles(rectangles)
    ordered = rect_packer.sort_by_id(packed)

    document_path = frame_records.find_frame_document(name, settings.search_dirs, settings.workspace)
    output_dir = document_path.parent if document_path else directory
    full_color_path, atlas_path = file_tools.atlas_paths(output_dir, name)

    atlas = atlas_builder.compose_atlas(bounds, crops, ordered)
    atlas_builder.write_atlas(atlas, full_color_path)
    indexed = palette_reducer.reduce_palette(
        atlas, settings.palette_colors, settings.alpha_cutoff, settings.low_alpha
    )
    palette_reducer.write_indexed_atlas(indexed, atlas_path)
    logger.info("%s spritesheet has been saved.", name)

    if document_path is None:
        logger.warning(
            "%s: no %s found in any search directory; frame records not updated",
            name,
            frame_records.document_name(name),
        )
        record_update = FrameRecordUpdate(status=UpdateStatus.NO_TARGET)
    else:
        record_update = frame_records.update_frame_records(document_path, ordered, settings.json_indent)

    return ProcessingOutcome(
        directory=directory,
        status=DirectoryStatus.COMPLETED,
        full_color_path=full_color_path,
        atlas_path=atlas_path,
        crop_paths=[crop.crop_path for crop in crops],
        bounding_box=bounds,
        record_update=record_update,
    )


def process_directories(paths: Iterable[Path], settings: AtlasSettings) -> list[ProcessingOutcome]:
    """Process each directory argument in turn; one failure does not stop the rest."""

    outcomes: list[ProcessingOutcome] = []
    for path in paths:
        logger.debug("Checking arg: %s", path)
        if not path.is_dir():
            continue
        try:
            outcomes.append(process_directory(path, settings))
        except (MetadataError, ProcessingError, OSError) as exc:
            logger.error("%s: %s", path.name, exc)
            outcomes.append(ProcessingOutcome(directory=path, status=DirectoryStatus.FAILED, error=str(exc)))
    return outcomes
