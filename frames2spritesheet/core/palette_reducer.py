"""Indexed-colour reduction of the atlas.

Quantization itself is left to Pillow. What this module owns is the rule
applied to the resulting palette afterwards: every partially transparent entry
is pushed to one of two levels, so the palette only ever holds alpha values of
0, ``LOW_ALPHA`` and 255.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import numpy as np
from PIL import Image

from ..utils import file_tools

logger = logging.getLogger(__name__)

DEFAULT_COLORS = 256
ALPHA_CUTOFF = 127
LOW_ALPHA = 127
OPAQUE = 255
TRANSPARENT = 0


def snap_alpha(alpha: int, cutoff: int = ALPHA_CUTOFF, low: int = LOW_ALPHA) -> int:
    """Snap one alpha value; 0 and 255 pass through."""

    if alpha <= TRANSPARENT or alpha >= OPAQUE:
        return alpha
    return OPAQUE if alpha > cutoff else low


def snap_palette_alpha(palette: Sequence[int], cutoff: int = ALPHA_CUTOFF, low: int = LOW_ALPHA) -> list[int]:
    """Apply :func:`snap_alpha` to every entry of a flat RGBA palette."""

    entries = np.asarray(palette, dtype=np.uint8)
    if entries.size % 4:
        raise ValueError(f"RGBA palette length must be a multiple of 4, got {entries.size}")
    entries = entries.reshape(-1, 4).copy()

    alpha = entries[:, 3]
    partial = (alpha > TRANSPARENT) & (alpha < OPAQUE)
    entries[partial, 3] = np.where(alpha[partial] > cutoff, OPAQUE, low)
    return entries.reshape(-1).tolist()


def quantize_atlas(atlas: Image.Image, colors: int = DEFAULT_COLORS) -> Image.Image:
    """Reduce an RGBA image to a palette image with an RGBA palette."""

    # FASTOCTREE is one of the methods Pillow supports for RGBA input.
    return atlas.convert("RGBA").quantize(colors=colors, method=Image.Quantize.FASTOCTREE)


def palette_entries(indexed: Image.Image) -> list[int]:
    """Return the flat RGBA palette of a ``P`` image."""

    palette = indexed.getpalette(rawmode="RGBA")
    if palette is None:
        raise ValueError("Image has no palette")
    return palette


def reduce_palette(
    atlas: Image.Image,
    colors: int = DEFAULT_COLORS,
    cutoff: int = ALPHA_CUTOFF,
    low: int = LOW_ALPHA,
) -> Image.Image:
    """Quantize the atlas, then snap the palette alpha and write it back."""

    indexed = quantize_atlas(atlas, colors)
    snapped = snap_palette_alpha(palette_entries(indexed), cutoff, low)
    indexed.putpalette(snapped, rawmode="RGBA")
    logger.debug("Reduced atlas to %s palette entries", len(snapped) // 4)
    return indexed


def write_indexed_atlas(indexed: Image.Image, output_path: Path) -> Path:
    """Persist the indexed atlas, replacing any existing file."""

    file_tools.ensure_directory(output_path.parent)
    indexed.save(output_path, format="PNG")
    logger.info("Wrote indexed atlas to %s", output_path)
    return output_path
