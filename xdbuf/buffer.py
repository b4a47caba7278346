"""
XDBuf - A reusable N-dimensional buffer with stride-based addressing.

The buffer stores its elements in a flat numpy array laid out column-major
(the first axis varies fastest). Coordinates map to flat offsets through a
precomputed stride table, and every piece of index arithmetic is checked
against the configured addressable limit.

Reusing a single instance through ``init``/``init_from_sequence`` avoids
reallocation: the backing array is only ever grown, and ``shrink_to_fit`` is
the one explicit way to give capacity back.

Usage:
    from xdbuf import XDBuf

    buf = XDBuf.from_sequence((3, 3), range(1, 10))
    walker = buf.walker_from((1, 1))
    walker.move_by((1, 0))
    print(walker.offset, walker.value)  # 5 6
"""

import copy
import logging
import warnings
from collections.abc import Iterable, Sequence
from operator import index as as_index
from typing import Any

import numpy as np
from numpy.exceptions import ComplexWarning

from xdbuf.config import DEFAULT_CONFIG, XDBufConfig
from xdbuf.errors import ElementCastError, IndexRangeError, ShapeMismatchError
from xdbuf.indexing import (
    as_vector,
    calc_dim_stride,
    calc_total_size,
    to_mul_dim_index,
    to_scalar_index,
)
from xdbuf.walker import Walker

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (bool, int, float, complex, np.generic)


def _infer_dtype(fill: Any, dtype, config: XDBufConfig) -> np.dtype:
    if dtype is not None:
        return np.dtype(dtype)
    if config.default_dtype is not None:
        return np.dtype(config.default_dtype)
    if isinstance(fill, _SCALAR_TYPES) and not isinstance(fill, (np.str_, np.bytes_)):
        return np.asarray(fill).dtype
    return np.dtype(object)


def _cast_exact(source: np.ndarray, dtype: np.dtype) -> np.ndarray:
    """
    Cast ``source`` to ``dtype``, refusing any cast that changes a value.

    Raises:
        ElementCastError: a value cannot be converted, or converts lossily
            (truncated floats, wrapped or oversized integers, cut strings)
    """
    if dtype == object:
        return source.astype(object)
    if source.dtype.kind in "USVmM" and source.dtype.kind != dtype.kind:
        raise ElementCastError(f"cannot store {source.dtype} values in a {dtype} buffer")

    try:
        with warnings.catch_warnings(), np.errstate(invalid="ignore", over="ignore"):
            warnings.simplefilter("ignore", ComplexWarning)
            cast = source.astype(dtype)
            same = cast == source
            if source.dtype.kind in "fc":
                same |= np.isnan(cast) & np.isnan(source)
    except (OverflowError, ValueError, TypeError) as exc:
        raise ElementCastError(f"cannot store {source.dtype} values in a {dtype} buffer") from exc

    if not np.all(same):
        raise ElementCastError(f"storing values in a {dtype} buffer would change them")
    return cast


def _check_element(value: Any, dtype: np.dtype) -> Any:
    """Return ``value`` converted for a single ``dtype`` slot, without loss."""
    if dtype == object:
        return value
    source = np.asarray(value)
    if source.ndim != 0:
        raise ElementCastError(f"cannot store a sequence of shape {source.shape} in one element")
    return _cast_exact(source, dtype)[()]


def _fill(target: np.ndarray, value: Any) -> None:
    """Fill ``target`` in place, giving every object slot its own copy of ``value``."""
    if target.dtype == object:
        for i in range(target.size):
            target[i] = copy.copy(value)
    else:
        target.fill(_check_element(value, target.dtype))


def _as_flat(elements: Iterable[Any], dtype) -> np.ndarray:
    """
    Build a fresh 1-D array from ``elements``.

    numpy arrays of any shape are flattened column-major. Other iterables are
    taken item by item; when no dtype is given, anything numpy cannot store
    as a flat run of scalars (strings, nested sequences) is kept as objects.
    """
    if isinstance(elements, np.ndarray):
        flat = elements.ravel(order="F")
        return _cast_exact(flat, np.dtype(dtype)) if dtype is not None else flat.copy()

    items = list(elements)
    if dtype is None:
        if all(isinstance(item, _SCALAR_TYPES) for item in items):
            flat = np.asarray(items)
            if flat.dtype.kind not in "USO":
                return flat
        dtype = object

    dtype = np.dtype(dtype)
    if dtype == object:
        flat = np.empty(len(items), dtype=object)
        for i, item in enumerate(items):
            flat[i] = item
        return flat

    try:
        source = np.asarray(items)
    except OverflowError as exc:
        raise ElementCastError(f"elements do not fit a {dtype} buffer") from exc
    except ValueError as exc:
        raise ShapeMismatchError("elements must be a flat sequence of scalars") from exc
    if source.ndim != 1:
        raise ShapeMismatchError(f"elements must be flat, got shape {source.shape}")
    return _cast_exact(source, dtype)


class XDBuf:
    """
    Fixed-rank N-dimensional buffer.

    The rank is taken from the ``size`` given at construction and never
    changes afterwards; any coordinate, step or new size of a different
    length is rejected with ``RankMismatchError``.
    """

    def __init__(
        self,
        size: Sequence[int],
        fill: Any,
        *,
        dtype=None,
        config: XDBufConfig | None = None,
    ):
        """
        Allocate ``prod(size)`` elements, each set to ``fill``.

        Args:
            size: Extent of each dimension, all > 0
            fill: Initial value of every element
            dtype: numpy dtype; inferred from ``fill`` when omitted
            config: Addressing limits; ``DEFAULT_CONFIG`` when omitted

        Raises:
            IndexRangeError: some extent is zero
            IndexOverflowError: the total size exceeds ``config.max_index``
            ElementCastError: ``fill`` does not fit an explicit ``dtype``
        """
        self.config = config if config is not None else DEFAULT_CONFIG
        size = tuple(as_index(extent) for extent in size)
        self._rank = len(size)
        size, total, stride = self._layout(size)

        self._dtype = _infer_dtype(fill, dtype, self.config)
        data = np.empty(total, dtype=self._dtype)
        _fill(data, fill)
        self._assign(data, size, stride, total)
        logger.debug("Allocated %s buffer of size %s (%d elements)", self._dtype, size, total)

    @classmethod
    def from_sequence(
        cls,
        size: Sequence[int],
        elements: Iterable[Any],
        *,
        dtype=None,
        config: XDBufConfig | None = None,
    ) -> "XDBuf":
        """
        Build a buffer from an already flattened sequence.

        The buffer owns a copy of ``elements``; their order must already be
        column-major (first axis fastest).

        Raises:
            ShapeMismatchError: ``len(elements) != prod(size)``

        Example:
            >>> buf = XDBuf.from_sequence((3, 4, 5), [0] * 60)
            >>> len(buf)
            60
        """
        buf = cls.__new__(cls)
        buf.config = config if config is not None else DEFAULT_CONFIG
        size = tuple(as_index(extent) for extent in size)
        buf._rank = len(size)
        size, total, stride = buf._layout(size)

        flat = _as_flat(elements, dtype if dtype is not None else buf.config.default_dtype)
        if flat.size != total:
            raise ShapeMismatchError(
                f"sequence has {flat.size} elements but size {size} needs {total}"
            )

        buf._dtype = flat.dtype
        buf._assign(flat, size, stride, total)
        logger.debug("Adopted %s sequence as buffer of size %s", buf._dtype, size)
        return buf

    @classmethod
    def from_array(cls, array, *, config: XDBufConfig | None = None) -> "XDBuf":
        """Copy a numpy array into a buffer of the same shape and dtype."""
        array = np.asarray(array)
        return cls.from_sequence(array.shape, array, dtype=array.dtype, config=config)

    def _layout(self, size: Sequence[int]) -> tuple[tuple[int, ...], int, tuple[int, ...]]:
        size = as_vector(size, self._rank, "size")
        limit = self.config.max_index
        total = calc_total_size(size, limit)
        stride = calc_dim_stride(size, limit)
        return size, total, stride

    def _assign(self, data: np.ndarray, size, stride, total: int) -> None:
        self._data = data
        self._size = size
        self._stride = stride
        self._len = total

    # === Index conversion ===

    def to_scalar_index(self, index: Sequence[int]) -> int:
        """
        Convert a coordinate to its flat offset, ``sum(index[i] * stride[i])``.

        Per-axis bounds are not checked here; use ``validate_index`` first
        when the coordinate is untrusted.

        Raises:
            IndexOverflowError: an intermediate product or sum exceeds the
                addressable limit
            IndexRangeError: a component is negative

        Example:
            >>> buf = XDBuf((3, 4, 5), 0)
            >>> buf.to_scalar_index((1, 2, 3))
            43
        """
        index = as_vector(index, self._rank)
        return to_scalar_index(index, self._stride, self.config.max_index)

    def to_coordinate(self, offset: int) -> tuple[int, ...]:
        """
        Convert a flat offset back to a coordinate.

        Raises:
            IndexRangeError: ``offset`` is outside ``offset_range()``
        """
        offset = as_index(offset)
        if not 0 <= offset < self._len:
            raise IndexRangeError(f"offset {offset} is outside [0, {self._len})")
        return to_mul_dim_index(offset, self._stride)

    def validate_index(self, index: Sequence[int]) -> bool:
        """True when every component lies within its axis extent."""
        index = as_vector(index, self._rank)
        return all(0 <= i < s for i, s in zip(index, self._size))

    # === Element access ===

    def get(self, offset: int, default: Any = None) -> Any:
        """Element at ``offset``, or ``default`` when the offset is out of range."""
        offset = as_index(offset)
        if not 0 <= offset < self._len:
            return default
        return self._data[offset]

    def get_view(self, offset: int) -> np.ndarray | None:
        """
        Writable zero-dimensional view of the element at ``offset``.

        Returns None when the offset is out of range. Assigning through the
        view (``view[...] = value``) updates the buffer.
        """
        offset = as_index(offset)
        if not 0 <= offset < self._len:
            return None
        return self._data[offset, ...]

    def set(self, offset: int, value: Any) -> None:
        """
        Store ``value`` at ``offset``.

        Raises:
            IndexRangeError: ``offset`` is out of range
            ElementCastError: ``value`` would change when stored in ``dtype``
        """
        offset = as_index(offset)
        if not 0 <= offset < self._len:
            raise IndexRangeError(f"offset {offset} is outside [0, {self._len})")
        self._data[offset] = _check_element(value, self._dtype)

    def get_at(self, index: Sequence[int], default: Any = None) -> Any:
        """
        Element at coordinate ``index``, or ``default`` when it lies outside the buffer.

        Args:
            index: Coordinate with one component per axis
            default: Returned for out-of-range coordinates

        Raises:
            RankMismatchError: ``index`` has the wrong number of components
        """
        if not self.validate_index(index):
            return default
        return self._data[self.to_scalar_index(index)]

    def set_at(self, index: Sequence[int], value: Any) -> None:
        """
        Store ``value`` at coordinate ``index``.

        Raises:
            IndexRangeError: ``index`` lies outside the buffer
            ElementCastError: ``value`` would change when stored in ``dtype``
        """
        if not self.validate_index(index):
            raise IndexRangeError(f"index {tuple(index)} is outside size {self._size}")
        self._data[self.to_scalar_index(index)] = _check_element(value, self._dtype)

    # === Re-initialization ===

    def init(self, size: Sequence[int], fill: Any, *, dtype=None) -> None:
        """
        Reset the buffer to a new size, every element set to ``fill``.

        The backing array is reused when it is large enough, so capacity is
        never reduced here. Nothing changes if validation fails.

        Args:
            size: New extents; must have the buffer's rank
            fill: Value of every element
            dtype: New dtype; keeps the current one when omitted

        Raises:
            ElementCastError: ``fill`` would change when stored in the dtype

        Example:
            >>> buf = XDBuf((3, 4, 5), 0)
            >>> buf.init((1, 2, 3), 1)
            >>> len(buf), buf.get(0)
            (6, 1)
        """
        size, total, stride = self._layout(size)
        dtype = np.dtype(dtype) if dtype is not None else self._dtype
        fill = _check_element(fill, dtype)

        data = self._storage_for(total, dtype)
        _fill(data[:total], fill)
        self._commit(data, size, stride, total)

    def init_from_sequence(self, size: Sequence[int], elements: Iterable[Any]) -> None:
        """
        Reset the buffer to a new size holding a copy of ``elements``.

        Elements are converted to the buffer's dtype. Capacity is never
        reduced, and nothing changes if validation fails.

        Raises:
            ShapeMismatchError: ``len(elements) != prod(size)``
            ElementCastError: an element would change when stored in the dtype
        """
        size, total, stride = self._layout(size)
        flat = _as_flat(elements, self._dtype)
        if flat.size != total:
            raise ShapeMismatchError(
                f"sequence has {flat.size} elements but size {size} needs {total}"
            )

        data = self._storage_for(total, self._dtype)
        data[:total] = flat
        self._commit(data, size, stride, total)

    def _storage_for(self, total: int, dtype: np.dtype) -> np.ndarray:
        """Backing array able to hold ``total`` elements, never smaller than the current one."""
        capacity = self._data.size
        if dtype == self._dtype and total <= capacity:
            logger.debug("Reusing backing array (capacity %d) for %d elements", capacity, total)
            return self._data

        new_capacity = max(total, capacity)
        logger.debug(
            "Reallocating backing array: %s x %d -> %s x %d",
            self._dtype,
            capacity,
            dtype,
            new_capacity,
        )
        return np.empty(new_capacity, dtype=dtype)

    def _commit(self, data: np.ndarray, size, stride, total: int) -> None:
        if data.dtype == object:
            # Drop references held past the live region
            data[total:] = None
        self._dtype = data.dtype
        self._assign(data, size, stride, total)

    def shrink_to_fit(self) -> None:
        """Reduce the backing array to exactly ``len(self)`` elements."""
        if self._data.size == self._len:
            return
        logger.debug("Shrinking capacity %d -> %d", self._data.size, self._len)
        self._data = self._data[: self._len].copy()

    # === Walkers ===

    def walker_from(self, index: Sequence[int]) -> Walker:
        """
        Create a walker positioned at ``index``.

        Raises:
            IndexRangeError: ``index`` is outside the buffer

        Example:
            >>> buf = XDBuf((3, 4, 5), 0)
            >>> buf.walker_from((0, 0, 0)).offset
            0
        """
        if not self.validate_index(index):
            raise IndexRangeError(f"index {tuple(index)} is outside size {self._size}")
        return Walker(self, self.to_scalar_index(index))

    # === Introspection ===

    def __len__(self) -> int:
        return self._len

    def __repr__(self) -> str:
        return f"XDBuf(size={self._size}, dtype={self._dtype}, capacity={self.capacity})"

    def offset_range(self) -> range:
        """Range of valid flat offsets."""
        return range(self._len)

    @property
    def size(self) -> tuple[int, ...]:
        return self._size

    @property
    def stride(self) -> tuple[int, ...]:
        return self._stride

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def capacity(self) -> int:
        """Number of elements the backing array can hold without reallocating."""
        return self._data.size

    def as_flat(self) -> np.ndarray:
        """View of the live elements in offset order."""
        return self._data[: self._len]

    def to_array(self) -> np.ndarray:
        """View of the live elements shaped ``size`` (column-major)."""
        return self.as_flat().reshape(self._size, order="F")
