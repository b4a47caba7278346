"""Unit tests for the checked index arithmetic helpers."""

from itertools import product

import numpy as np
import pytest

from xdbuf.errors import IndexOverflowError, IndexRangeError, RankMismatchError
from xdbuf.indexing import (
    as_vector,
    calc_dim_stride,
    calc_total_size,
    checked_add,
    checked_mul,
    checked_signed_add,
    checked_signed_mul,
    to_mul_dim_index,
    to_scalar_index,
)

LIMIT = int(np.iinfo(np.intp).max)


@pytest.mark.parametrize(
    "size, stride, total",
    [
        ((3, 4, 5), (1, 3, 12), 60),
        ((7,), (1,), 7),
        ((2, 1, 3, 2), (1, 2, 2, 6), 12),
    ],
)
def test_stride_and_total_size(size, stride, total) -> None:
    assert calc_dim_stride(size, LIMIT) == stride
    assert calc_total_size(size, LIMIT) == total


@pytest.mark.parametrize("size", [(0,), (3, 0, 5), (4, 4, 0)])
def test_total_size_rejects_zero_extent(size) -> None:
    with pytest.raises(IndexRangeError):
        calc_total_size(size, LIMIT)


def test_total_size_rejects_empty_size() -> None:
    with pytest.raises(RankMismatchError):
        calc_total_size((), LIMIT)


def test_total_size_respects_limit() -> None:
    assert calc_total_size((10, 10), limit=100) == 100
    with pytest.raises(IndexOverflowError):
        calc_total_size((10, 10), limit=99)


def test_stride_overflow_is_reported() -> None:
    with pytest.raises(IndexOverflowError):
        calc_dim_stride((2**40, 2**40, 2), LIMIT)


def test_scalar_index_example() -> None:
    assert to_scalar_index((1, 2, 3), (1, 3, 12), LIMIT) == 1 + 3 * 2 + 12 * 3 == 43


def test_scalar_index_overflow_in_sum() -> None:
    # Each product fits under 40 but the running sum does not.
    with pytest.raises(IndexOverflowError):
        to_scalar_index((1, 2, 3), (1, 3, 12), limit=40)


def test_scalar_index_overflow_in_product() -> None:
    with pytest.raises(IndexOverflowError):
        to_scalar_index((0, 0, 4), (1, 3, 12), limit=40)


def test_scalar_index_rejects_negative_component() -> None:
    with pytest.raises(IndexRangeError):
        to_scalar_index((1, -1, 0), (1, 3, 12), LIMIT)


def test_coordinate_round_trip() -> None:
    size = (3, 4, 5)
    stride = calc_dim_stride(size, LIMIT)
    seen = set()

    for coordinate in product(*(range(extent) for extent in size)):
        offset = to_scalar_index(coordinate, stride, LIMIT)
        assert 0 <= offset < 60
        assert to_mul_dim_index(offset, stride) == coordinate
        seen.add(offset)

    assert len(seen) == 60


def test_checked_unsigned_arithmetic() -> None:
    assert checked_add(5, 5, limit=10) == 10
    assert checked_mul(2, 5, limit=10) == 10
    with pytest.raises(IndexOverflowError):
        checked_add(6, 5, limit=10)
    with pytest.raises(IndexOverflowError):
        checked_mul(3, 4, limit=10)
    with pytest.raises(IndexOverflowError):
        checked_add(1, -2, limit=10)


def test_checked_signed_arithmetic() -> None:
    assert checked_signed_add(-11, 0, limit=10) == -11
    assert checked_signed_mul(-2, 5, limit=10) == -10
    with pytest.raises(IndexOverflowError):
        checked_signed_add(-11, -1, limit=10)
    with pytest.raises(IndexOverflowError):
        checked_signed_mul(-5, 3, limit=10)
    with pytest.raises(IndexOverflowError):
        checked_signed_mul(4, 3, limit=10)


def test_as_vector_accepts_numpy_integers() -> None:
    vector = as_vector(np.array([1, 2], dtype=np.int32), 2)

    assert vector == (1, 2)
    assert all(type(v) is int for v in vector)


def test_as_vector_rejects_wrong_rank() -> None:
    with pytest.raises(RankMismatchError):
        as_vector((1, 2, 3), 2)


def test_as_vector_rejects_non_integers() -> None:
    with pytest.raises(TypeError):
        as_vector((1.5, 2), 2)
