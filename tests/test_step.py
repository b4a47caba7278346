"""Tests for the named step tables and neighbourhood generation."""

import pytest

from xdbuf import Step2D, Step3D, neighborhood


def _directions(table) -> dict[str, tuple[int, ...]]:
    return {
        name: value
        for name, value in vars(table).items()
        if name.isupper() and name not in ("NEXT", "PREV")
    }


@pytest.mark.parametrize(
    "rank, full, face",
    [
        (1, 2, 2),
        (2, 8, 4),
        (3, 26, 6),
        (4, 80, 8),
    ],
)
def test_neighborhood_sizes(rank: int, full: int, face: int) -> None:
    assert len(neighborhood(rank)) == full
    assert len(neighborhood(rank, "face")) == face


def test_neighborhood_excludes_zero_step() -> None:
    steps = neighborhood(3)

    assert (0, 0, 0) not in steps
    assert len(set(steps)) == len(steps)


def test_face_steps_are_axis_aligned() -> None:
    for step in neighborhood(3, "face"):
        assert sum(abs(d) for d in step) == 1


def test_neighborhood_rejects_bad_arguments() -> None:
    with pytest.raises(ValueError):
        neighborhood(0)
    with pytest.raises(ValueError):
        neighborhood(2, "diagonal")


def test_step2d_covers_full_neighborhood() -> None:
    directions = _directions(Step2D)

    assert len(directions) == 8
    assert set(directions.values()) == set(neighborhood(2))
    assert Step2D.NEXT == Step2D.RIGHT
    assert Step2D.PREV == Step2D.LEFT


def test_step3d_covers_full_neighborhood() -> None:
    directions = _directions(Step3D)

    assert len(directions) == 26
    assert set(directions.values()) == set(neighborhood(3))
    assert Step3D.NEXT == Step3D.RIGHT


def test_opposite_directions_cancel() -> None:
    assert tuple(a + b for a, b in zip(Step3D.RIGHT_FRONT_TOP, Step3D.LEFT_BACK_BOTTOM)) == (0, 0, 0)
    assert tuple(a + b for a, b in zip(Step2D.RIGHT_UP, Step2D.LEFT_DOWN)) == (0, 0)
