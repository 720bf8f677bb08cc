import numpy as np
import pytest

from conftest import BLUE, WHITE, random_buffer, solid_buffer
from iconmatte.pipeline.stages import grow_from_corners, grow_region
from iconmatte.pipeline.stages.s2_region import MAX_COLOR_DISTANCE


def test_uniform_buffer_fills_completely():
    region = grow_from_corners(solid_buffer(12, 7, (40, 90, 10)), (40, 90, 10), 0)
    assert region.all()


def test_square_is_not_filled(icon_buffer):
    region = grow_from_corners(icon_buffer, WHITE, 35)

    assert not region[6:14, 6:14].any()
    assert region.sum() == 20 * 20 - 8 * 8


def test_zero_tolerance_matches_exact_color_only():
    buffer = solid_buffer(10, 10, WHITE)
    buffer.pixels[5, 5, :3] = (254, 255, 255)

    region = grow_region(buffer, (0, 0), WHITE, 0)

    assert not region[5, 5]
    assert region.sum() == 99


def test_max_tolerance_matches_everything():
    buffer = random_buffer(15, 11, seed=4)
    assert MAX_COLOR_DISTANCE < 441.7
    assert grow_region(buffer, (7, 5), (0, 0, 0), 441.7).all()


def test_fill_stops_at_barrier():
    buffer = solid_buffer(9, 5, WHITE)
    buffer.pixels[:, 4, :3] = BLUE

    region = grow_region(buffer, (0, 0), WHITE, 10)

    assert region[:, :4].all()
    assert not region[:, 4:].any()


def test_fill_is_four_connected():
    buffer = solid_buffer(3, 3, (0, 0, 0))
    buffer.pixels[0, 0, :3] = WHITE
    buffer.pixels[1, 1, :3] = WHITE

    region = grow_region(buffer, (0, 0), WHITE, 0)

    assert region[0, 0]
    assert not region[1, 1]


def test_unmatched_seed_gives_empty_region(icon_buffer):
    assert not grow_region(icon_buffer, (10, 10), WHITE, 35).any()


def test_corner_union_covers_separated_regions():
    buffer = solid_buffer(9, 9, WHITE)
    buffer.pixels[4, :, :3] = BLUE
    buffer.pixels[:, 4, :3] = BLUE

    region = grow_from_corners(buffer, WHITE, 0)

    assert region.sum() == 4 * 16
    assert not region[4, :].any()


def test_idempotent():
    buffer = random_buffer(20, 20, seed=8)
    first = grow_region(buffer, (0, 0), (128, 128, 128), 150)
    second = grow_region(buffer, (0, 0), (128, 128, 128), 150)
    assert np.array_equal(first, second)


@pytest.mark.parametrize("seed", range(3))
def test_monotone_in_tolerance(seed):
    buffer = random_buffer(24, 18, seed=seed)
    target = tuple(int(c) for c in buffer.pixels[0, 0, :3])

    previous = None
    for tolerance in (0, 40, 120, 200, 300, 442):
        region = grow_region(buffer, (0, 0), target, tolerance)
        if previous is not None:
            assert not (previous & ~region).any()
        previous = region


def test_rejects_bad_arguments(icon_buffer):
    with pytest.raises(ValueError):
        grow_region(icon_buffer, (20, 0), WHITE, 10)
    with pytest.raises(ValueError):
        grow_region(icon_buffer, (0, 0), WHITE, -1)
