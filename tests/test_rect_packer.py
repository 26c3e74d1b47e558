import random
from itertools import combinations

import pytest

from frames2spritesheet.core import BoundingBox, PackingRectangle
from frames2spritesheet.core.errors import ProcessingError
from frames2spritesheet.core.rect_packer import candidate_widths, pack_rectangles, sort_by_id


def _random_rectangles(seed: int, count: int) -> list[PackingRectangle]:
    rng = random.Random(seed)
    return [PackingRectangle(id=i, width=rng.randint(1, 40), height=rng.randint(1, 40)) for i in range(count)]


@pytest.mark.parametrize("seed", range(12))
def test_packed_rectangles_do_not_overlap_and_fit_bounds(seed):
    rectangles = _random_rectangles(seed, 3 + seed * 3)

    packed, bounds = pack_rectangles(rectangles)

    assert len(packed) == len(rectangles)
    for first, second in combinations(packed, 2):
        assert not first.intersects(second), (first, second)
    for rect in packed:
        assert rect.x >= 0 and rect.y >= 0
        assert rect.right <= bounds.width and rect.bottom <= bounds.height
    assert bounds.width == max(r.right for r in packed)
    assert bounds.height == max(r.bottom for r in packed)
    assert bounds.area >= sum(r.width * r.height for r in rectangles)


@pytest.mark.parametrize("seed", range(5))
def test_sort_by_id_round_trips_input_order(seed):
    rectangles = _random_rectangles(seed, 15)

    ordered = sort_by_id(pack_rectangles(rectangles)[0])

    assert [r.id for r in ordered] == list(range(15))
    assert [(r.width, r.height) for r in ordered] == [(r.width, r.height) for r in rectangles]


def test_packer_does_not_mutate_input():
    rectangles = [PackingRectangle(id=0, width=5, height=5), PackingRectangle(id=1, width=3, height=8)]
    pack_rectangles(rectangles)
    assert all((r.x, r.y) == (0, 0) for r in rectangles)


def test_packing_is_deterministic():
    rectangles = _random_rectangles(7, 25)
    assert pack_rectangles(rectangles) == pack_rectangles(list(rectangles))


def test_two_frame_layout_prefers_smallest_area():
    rectangles = [PackingRectangle(id=0, width=4, height=10), PackingRectangle(id=1, width=3, height=6)]

    packed, bounds = pack_rectangles(rectangles)

    # A 4x16 column beats the 7x10 side-by-side layout.
    assert bounds == BoundingBox(4, 16)
    assert [(r.id, r.x, r.y) for r in sort_by_id(packed)] == [(0, 0, 0), (1, 0, 10)]


def test_equal_squares_pack_into_a_square():
    rectangles = [PackingRectangle(id=i, width=8, height=8) for i in range(4)]
    _, bounds = pack_rectangles(rectangles)
    assert bounds == BoundingBox(16, 16)


def test_empty_input_gives_empty_bounds():
    assert pack_rectangles([]) == ([], BoundingBox(0, 0))


def test_zero_area_rectangle_is_rejected():
    with pytest.raises(ProcessingError):
        pack_rectangles([PackingRectangle(id=0, width=0, height=4)])


def test_candidate_widths_stay_between_widest_and_total():
    rectangles = _random_rectangles(3, 10)
    widths = candidate_widths(rectangles)
    assert widths == sorted(set(widths))
    assert widths[0] == max(r.width for r in rectangles)
    assert widths[-1] == sum(r.width for r in rectangles)


def test_sort_by_id_rejects_gaps():
    with pytest.raises(ProcessingError):
        sort_by_id([PackingRectangle(id=0, width=1, height=1), PackingRectangle(id=2, width=1, height=1)])


def test_single_rectangle_packs_at_origin():
    packed, bounds = pack_rectangles([PackingRectangle(id=0, width=5, height=7)])
    assert [(r.x, r.y) for r in packed] == [(0, 0)]
    assert bounds == BoundingBox(5, 7)
