"""
Walker - bounds-checked cursor over an XDBuf.

A walker holds a reference to a buffer and one flat offset into it. Every
move has three forms sharing one computation:

    offset_by(step)   -> int      compute the target, leave the walker alone
    move_by(step)     -> Walker   move in place, return self for chaining
    moved_by(step)    -> Walker   return a moved copy, leave the walker alone

The same pattern covers ``next``, ``prev`` and ``until``. A failed move
raises and never changes the walker's position. Walkers never modify the
buffer, and the buffer must outlive them; re-initializing a buffer while
walkers are in use leaves their offsets pointing into the new layout.
"""

from collections.abc import Callable, Sequence
from operator import index as as_index
from typing import TYPE_CHECKING, Any

from xdbuf.errors import IndexRangeError, ScanExhaustedError
from xdbuf.indexing import as_vector, checked_add, checked_signed_add, checked_signed_mul
from xdbuf.step import neighborhood

if TYPE_CHECKING:
    from xdbuf.buffer import XDBuf


class Walker:
    """Cursor performing relative index arithmetic over a buffer."""

    __slots__ = ("_buf", "_offset")

    def __init__(self, buf: "XDBuf", offset: int):
        """
        Args:
            buf: Buffer to walk; must outlive the walker
            offset: Starting flat offset

        Raises:
            IndexRangeError: ``offset`` is outside the buffer
        """
        offset = as_index(offset)
        if not 0 <= offset < len(buf):
            raise IndexRangeError(f"offset {offset} is outside [0, {len(buf)})")
        self._buf = buf
        self._offset = offset

    @property
    def buffer(self) -> "XDBuf":
        return self._buf

    @property
    def offset(self) -> int:
        """Current flat offset."""
        return self._offset

    @property
    def coordinate(self) -> tuple[int, ...]:
        """Current position as a coordinate."""
        return self._buf.to_coordinate(self._offset)

    @property
    def value(self) -> Any:
        """Element under the walker."""
        return self._buf.get(self._offset)

    def __repr__(self) -> str:
        return f"Walker(offset={self._offset}, buffer={self._buf!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Walker):
            return NotImplemented
        return self._buf is other._buf and self._offset == other._offset

    def __hash__(self) -> int:
        return hash((id(self._buf), self._offset))

    def _checked_target(self, target: int) -> int:
        if not 0 <= target < len(self._buf):
            raise IndexRangeError(f"target offset {target} is outside [0, {len(self._buf)})")
        return target

    def _moved_to(self, offset: int) -> "Walker":
        walker = Walker.__new__(Walker)
        walker._buf = self._buf
        walker._offset = offset
        return walker

    # === Step by vector ===

    def offset_by(self, step: Sequence[int], *, confined: bool = False) -> int:
        """
        Offset reached by moving ``step`` from the current position.

        The target is ``offset + sum(step[i] * stride[i])`` in signed
        arithmetic. Moves are over flat offsets, so by default a step past
        the end of one axis carries into the next, as long as the result is
        still inside the buffer. With ``confined=True`` every axis must stay
        inside its own extent instead.

        Args:
            step: Signed step per axis, e.g. ``Step2D.RIGHT``
            confined: Reject moves that leave any single axis

        Returns:
            Target flat offset

        Raises:
            IndexOverflowError: the arithmetic exceeds the addressable range
            IndexRangeError: the target is outside the buffer

        Example:
            >>> buf = XDBuf.from_sequence((3, 3), range(1, 10))
            >>> walker = buf.walker_from((1, 1))
            >>> walker.offset_by((1, 0)), walker.offset_by((0, 1))
            (5, 7)
        """
        buf = self._buf
        step = as_vector(step, buf.rank, "step")
        if confined:
            return self._confined_offset_by(step)

        limit = buf.config.max_index
        target = self._offset
        for delta, stride in zip(step, buf.stride):
            target = checked_signed_add(target, checked_signed_mul(delta, stride, limit), limit)
        return self._checked_target(target)

    def _confined_offset_by(self, step: tuple[int, ...]) -> int:
        buf = self._buf
        limit = buf.config.max_index
        moved = []
        for current, delta, extent in zip(self.coordinate, step, buf.size):
            index = checked_signed_add(current, delta, limit)
            if not 0 <= index < extent:
                raise IndexRangeError(f"step {step} leaves axis extent {extent} at {index}")
            moved.append(index)
        return buf.to_scalar_index(moved)

    def move_by(self, step: Sequence[int], *, confined: bool = False) -> "Walker":
        self._offset = self.offset_by(step, confined=confined)
        return self

    def moved_by(self, step: Sequence[int], *, confined: bool = False) -> "Walker":
        return self._moved_to(self.offset_by(step, confined=confined))

    # === Adjacent offsets ===

    def next_offset(self) -> int:
        """
        The following flat offset.

        Raises:
            IndexRangeError: the walker is on the last element
        """
        return self._checked_target(checked_add(self._offset, 1, self._buf.config.max_index))

    def move_next(self) -> "Walker":
        self._offset = self.next_offset()
        return self

    def moved_next(self) -> "Walker":
        return self._moved_to(self.next_offset())

    def prev_offset(self) -> int:
        """
        The preceding flat offset.

        Raises:
            IndexRangeError: the walker is on the first element
        """
        if self._offset == 0:
            raise IndexRangeError("offset 0 has no previous offset")
        return self._checked_target(self._offset - 1)

    def move_prev(self) -> "Walker":
        self._offset = self.prev_offset()
        return self

    def moved_prev(self) -> "Walker":
        return self._moved_to(self.prev_offset())

    # === Conditional scan ===

    def offset_until(self, predicate: Callable[[Any, int], bool]) -> int:
        """
        First offset, from the current one onwards, whose element satisfies
        ``predicate(element, offset)``.

        The predicate is only called with valid offsets.

        Raises:
            ScanExhaustedError: no element up to the end of the buffer matches

        Example:
            >>> buf = XDBuf.from_sequence((3, 3), range(1, 10))
            >>> buf.walker_from((0, 0)).offset_until(lambda x, _i: x == 5)
            4
        """
        data = self._buf.as_flat()
        for offset in range(self._offset, len(data)):
            if predicate(data[offset], offset):
                return offset
        raise ScanExhaustedError(f"no element from offset {self._offset} satisfies the predicate")

    def move_until(self, predicate: Callable[[Any, int], bool]) -> "Walker":
        self._offset = self.offset_until(predicate)
        return self

    def moved_until(self, predicate: Callable[[Any, int], bool]) -> "Walker":
        return self._moved_to(self.offset_until(predicate))

    # === Neighbourhood ===

    def neighbors(self, connectivity: str = "full") -> list[int]:
        """
        Offsets of the in-bounds neighbours one unit step away.

        Args:
            connectivity: "full" for every combination of axis steps
                (8 in 2D, 26 in 3D) or "face" for axis-aligned steps only
                (4 in 2D, 6 in 3D)

        Returns:
            Neighbour offsets, in ``neighborhood`` order
        """
        buf = self._buf
        coordinate = self.coordinate
        offsets = []
        for step in neighborhood(buf.rank, connectivity):
            moved = tuple(c + d for c, d in zip(coordinate, step))
            if buf.validate_index(moved):
                offsets.append(buf.to_scalar_index(moved))
        return offsets
