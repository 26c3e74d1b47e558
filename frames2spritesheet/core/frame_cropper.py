"""Mapping of logical frame geometry onto source pixels, and cropping."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from . import CropBox, CroppedImage, FrameGeometry, RoundingPolicy
from .errors import CropBoundsError, ProcessingError
from ..utils import file_tools

logger = logging.getLogger(__name__)


def compute_crop_box(
    source_size: tuple[int, int],
    frame: FrameGeometry,
    reference: FrameGeometry,
    rounding: RoundingPolicy = RoundingPolicy.FLOOR,
) -> CropBox:
    """Scale a frame's logical rectangle into the source image's pixel space.

    The reference geometry describes the logical canvas the source image
    represents, so each axis gets its own scale factor. Every coordinate is
    rounded on its own; no error correction is carried between them.
    """

    source_width, source_height = source_size
    x_scale = source_width / reference.width
    y_scale = source_height / reference.height

    return CropBox(
        x=rounding.apply(x_scale * (reference.offset_x + frame.offset_x)),
        y=rounding.apply(y_scale * (reference.offset_y + frame.offset_y)),
        width=rounding.apply(x_scale * frame.width),
        height=rounding.apply(y_scale * frame.height),
    )


def check_crop_bounds(crop: CropBox, source_size: tuple[int, int], label: str = "Crop") -> None:
    """Raise if the crop is empty or reaches outside the source image."""

    source_width, source_height = source_size
    if crop.width <= 0 or crop.height <= 0:
        raise CropBoundsError(f"{label} {crop.box} is empty")
    if crop.x < 0 or crop.y < 0 or crop.x + crop.width > source_width or crop.y + crop.height > source_height:
        raise CropBoundsError(f"{label} {crop.box} exceeds source bounds {source_width}x{source_height}")


def crop_frame(
    source_path: Path,
    output_path: Path,
    frame: FrameGeometry,
    reference: FrameGeometry,
    rounding: RoundingPolicy = RoundingPolicy.FLOOR,
) -> CroppedImage:
    """Crop one source frame, persist the crop and return it in memory."""

    logger.info("Cropping image: %s", source_path)
    try:
        with Image.open(source_path) as source:
            crop = compute_crop_box(source.size, frame, reference, rounding)
            check_crop_bounds(crop, source.size, label=f"Crop of {source_path}")
            cropped = source.convert("RGBA").crop(crop.box)
    except (FileNotFoundError, UnidentifiedImageError) as exc:
        raise ProcessingError(f"Failed to open frame {source_path}: {exc}") from exc

    file_tools.ensure_directory(output_path.parent)
    cropped.save(output_path)
    logger.debug("Wrote crop %s (%sx%s)", output_path, crop.width, crop.height)
    return CroppedImage(
        source_path=source_path,
        crop_path=output_path,
        width=crop.width,
        height=crop.height,
        image=cropped,
    )
