"""Atlas composition using Pillow."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from PIL import Image

from . import BoundingBox, CroppedImage, PackingRectangle
from .errors import ProcessingError
from ..utils import file_tools

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


def compose_atlas(
    bounds: BoundingBox,
    crops: Sequence[CroppedImage],
    rectangles: Sequence[PackingRectangle],
) -> Image.Image:
    """Copy every crop onto a transparent canvas at its packed position.

    ``crops`` and ``rectangles`` must both be in frame order. Pixels are
    replaced, not blended, so a crop's own alpha ends up in the atlas as is.
    """

    if len(crops) != len(rectangles):
        raise ProcessingError(f"Got {len(crops)} crops for {len(rectangles)} packed rectangles")

    atlas = Image.new("RGBA", (bounds.width, bounds.height), TRANSPARENT)
    for index, (crop, rect) in enumerate(zip(crops, rectangles)):
        if rect.id != index:
            raise ProcessingError(f"Rectangle at position {index} has id {rect.id}; sort rectangles by id first")
        if (crop.width, crop.height) != (rect.width, rect.height):
            raise ProcessingError(
                f"Crop {crop.crop_path} is {crop.width}x{crop.height} but was packed as {rect.width}x{rect.height}"
            )
        if rect.right > bounds.width or rect.bottom > bounds.height:
            raise ProcessingError(f"Rectangle {rect.id} lies outside the {bounds.width}x{bounds.height} atlas")
        # No mask: paste overwrites every channel, alpha included.
        atlas.paste(crop.image.convert("RGBA"), (rect.x, rect.y))
    return atlas


def write_atlas(atlas: Image.Image, output_path: Path) -> Path:
    """Persist the full-colour atlas as PNG."""

    file_tools.ensure_directory(output_path.parent)
    atlas.save(output_path, format="PNG")
    logger.info("Wrote full-colour atlas to %s", output_path)
    return output_path
