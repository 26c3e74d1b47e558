"""Rectangle packing for the atlas layout.

Rectangles are placed with a guillotine binary tree: each placement splits its
free node into the space to the right of the rectangle (as tall as the
rectangle) and the space below it (as wide as the node). The tree is grown in a
bin of fixed width and unbounded height, so a bin at least as wide as the widest
rectangle always fits everything. Several bin widths are tried and the layout
with the smallest bounding area is kept.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence

from . import BoundingBox, PackingRectangle
from .errors import ProcessingError

logger = logging.getLogger(__name__)

# Multiples of sqrt(total area) tried as bin widths, on top of the prefix sums.
SQUARE_WIDTH_FACTORS = (1.0, 1.1, 1.25, 1.5, 2.0)


@dataclass
class _Node:
    x: int
    y: int
    width: int
    height: int
    used: bool = False
    right: Optional["_Node"] = None
    down: Optional["_Node"] = None

    def find(self, width: int, height: int) -> Optional["_Node"]:
        # Depth-first, right branch before down branch; iterative so long
        # frame lists do not hit the recursion limit.
        stack: list[_Node] = [self]
        while stack:
            node = stack.pop()
            if node.used:
                if node.down:
                    stack.append(node.down)
                if node.right:
                    stack.append(node.right)
            elif width <= node.width and height <= node.height:
                return node
        return None

    def split(self, width: int, height: int) -> None:
        self.used = True
        self.right = _Node(self.x + width, self.y, self.width - width, height)
        self.down = _Node(self.x, self.y + height, self.width, self.height - height)


def packing_order(rectangles: Iterable[PackingRectangle]) -> list[PackingRectangle]:
    """Tallest first, then widest, then by id so equal boxes keep a stable order."""

    return sorted(rectangles, key=lambda r: (-r.height, -r.width, r.id))


def candidate_widths(rectangles: Sequence[PackingRectangle]) -> list[int]:
    """Bin widths worth trying, ascending and unique."""

    widest = max(r.width for r in rectangles)
    total_width = sum(r.width for r in rectangles)
    widths = {widest, total_width}

    running = 0
    for rect in sorted(rectangles, key=lambda r: (-r.width, r.id)):
        running += rect.width
        widths.add(running)

    side = math.sqrt(sum(r.width * r.height for r in rectangles))
    for factor in SQUARE_WIDTH_FACTORS:
        widths.add(int(side * factor))

    return sorted(w for w in widths if widest <= w <= total_width)


def pack_into_width(
    ordered: Sequence[PackingRectangle], bin_width: int
) -> tuple[list[PackingRectangle], BoundingBox]:
    """Pack rectangles, in the given order, into a bin ``bin_width`` wide."""

    root = _Node(0, 0, bin_width, sum(r.height for r in ordered))
    placed: list[PackingRectangle] = []
    for rect in ordered:
        node = root.find(rect.width, rect.height)
        if node is None:
            raise ProcessingError(f"Rectangle {rect.id} ({rect.width}x{rect.height}) does not fit width {bin_width}")
        node.split(rect.width, rect.height)
        placed.append(replace(rect, x=node.x, y=node.y))

    width = max((r.right for r in placed), default=0)
    height = max((r.bottom for r in placed), default=0)
    return placed, BoundingBox(width, height)


def pack_rectangles(rectangles: Sequence[PackingRectangle]) -> tuple[list[PackingRectangle], BoundingBox]:
    """Place every rectangle without overlaps in a small bounding box.

    Returns new rectangles with ``x``/``y`` set, in packing order rather than
    input order; use :func:`sort_by_id` before any positional use.
    """

    if not rectangles:
        return [], BoundingBox(0, 0)
    for rect in rectangles:
        if rect.width <= 0 or rect.height <= 0:
            raise ProcessingError(f"Rectangle {rect.id} has no area ({rect.width}x{rect.height})")

    ordered = packing_order(rectangles)
    first, *others = candidate_widths(ordered)
    best = pack_into_width(ordered, first)
    for bin_width in others:
        placed, bounds = pack_into_width(ordered, bin_width)
        if _layout_key(bounds) < _layout_key(best[1]):
            best = (placed, bounds)

    logger.debug("Packed %s rectangles into %sx%s", len(rectangles), best[1].width, best[1].height)
    return best


def sort_by_id(rectangles: Iterable[PackingRectangle]) -> list[PackingRectangle]:
    """Restore frame order and check the ids are exactly ``0..N-1``."""

    ordered = sorted(rectangles, key=lambda r: r.id)
    for expected, rect in enumerate(ordered):
        if rect.id != expected:
            raise ProcessingError(f"Rectangle ids are not a dense 0..{len(ordered) - 1} range (found {rect.id})")
    return ordered


def _layout_key(bounds: BoundingBox) -> tuple[int, int, int]:
    return (bounds.area, max(bounds.width, bounds.height), bounds.width)
