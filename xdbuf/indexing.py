"""
Checked index arithmetic for strided buffers.

Python integers never overflow, so every helper here enforces an explicit
addressable limit instead. Unsigned results must lie in ``[0, limit]`` and
signed results in ``[-(limit + 1), limit]``, mirroring native size types.
"""

from collections.abc import Sequence
from operator import index as as_index

from xdbuf.errors import IndexOverflowError, IndexRangeError, RankMismatchError


def checked_add(a: int, b: int, limit: int) -> int:
    result = a + b
    if result < 0 or result > limit:
        raise IndexOverflowError(f"{a} + {b} exceeds the addressable range [0, {limit}]")
    return result


def checked_mul(a: int, b: int, limit: int) -> int:
    result = a * b
    if result < 0 or result > limit:
        raise IndexOverflowError(f"{a} * {b} exceeds the addressable range [0, {limit}]")
    return result


def checked_signed_add(a: int, b: int, limit: int) -> int:
    result = a + b
    if result < -limit - 1 or result > limit:
        raise IndexOverflowError(f"{a} + {b} exceeds the signed range of limit {limit}")
    return result


def checked_signed_mul(a: int, b: int, limit: int) -> int:
    result = a * b
    if result < -limit - 1 or result > limit:
        raise IndexOverflowError(f"{a} * {b} exceeds the signed range of limit {limit}")
    return result


def as_vector(values: Sequence[int], rank: int, name: str = "index") -> tuple[int, ...]:
    """
    Coerce a coordinate or step vector to a tuple of ints of length ``rank``.

    Args:
        values: Any sequence of integer-like values (numpy integers included)
        rank: Required length
        name: Used in the error message

    Returns:
        Tuple of plain ints
    """
    vector = tuple(as_index(v) for v in values)
    if len(vector) != rank:
        raise RankMismatchError(f"{name} has {len(vector)} components, expected {rank}")
    return vector


def calc_total_size(size: Sequence[int], limit: int) -> int:
    """
    Number of elements in an array of the given extents.

    Raises:
        RankMismatchError: ``size`` is empty
        IndexRangeError: some extent is zero or negative
        IndexOverflowError: the product exceeds ``limit``

    Example:
        >>> calc_total_size((3, 4, 5), limit=2**31 - 1)
        60
    """
    if len(size) == 0:
        raise RankMismatchError("size must have at least one dimension")
    if any(extent <= 0 for extent in size):
        raise IndexRangeError(f"size {tuple(size)} has an empty dimension")

    total = 1
    for extent in size:
        total = checked_mul(total, extent, limit)
    return total


def calc_dim_stride(size: Sequence[int], limit: int) -> tuple[int, ...]:
    """
    Per-axis stride for a column-major layout: ``stride[0] == 1`` and each
    following stride is the previous one times the previous extent.

    Example:
        >>> calc_dim_stride((3, 4, 5), limit=2**31 - 1)
        (1, 3, 12)
    """
    stride = [1] * len(size)
    for i in range(1, len(size)):
        stride[i] = checked_mul(stride[i - 1], size[i - 1], limit)
    return tuple(stride)


def to_scalar_index(index: Sequence[int], stride: Sequence[int], limit: int) -> int:
    """Fold a coordinate into ``sum(index[i] * stride[i])`` without per-axis bounds checks."""
    scalar = 0
    for i, s in zip(index, stride):
        if i < 0:
            raise IndexRangeError(f"negative component {i} in index {tuple(index)}")
        scalar = checked_add(scalar, checked_mul(i, s, limit), limit)
    return scalar


def to_mul_dim_index(scalar: int, stride: Sequence[int]) -> tuple[int, ...]:
    """Split a known-valid flat offset back into per-axis coordinates."""
    index = [0] * len(stride)
    for i in reversed(range(len(stride))):
        index[i], scalar = divmod(scalar, stride[i])
    return tuple(index)


__all__ = [
    "as_vector",
    "calc_dim_stride",
    "calc_total_size",
    "checked_add",
    "checked_mul",
    "checked_signed_add",
    "checked_signed_mul",
    "to_mul_dim_index",
    "to_scalar_index",
]
