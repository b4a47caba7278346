"""Error types raised by buffers and walkers."""


class XDBufError(Exception):
    """Base class for every recoverable buffer or walker failure."""


class IndexRangeError(XDBufError, IndexError):
    """Raised when a coordinate, offset or move target lies outside the buffer."""


class ScanExhaustedError(IndexRangeError):
    """Raised when a conditional scan reaches the end without a match."""


class IndexOverflowError(XDBufError, OverflowError):
    """Raised when index arithmetic exceeds the addressable range."""


class ShapeMismatchError(XDBufError, ValueError):
    """Raised when a flat sequence does not match the requested extents."""


class RankMismatchError(ShapeMismatchError):
    """Raised when a vector's length disagrees with the buffer rank."""


class ElementCastError(XDBufError, ValueError):
    """Raised when a value cannot be stored in the buffer dtype without loss."""


__all__ = [
    "ElementCastError",
    "IndexOverflowError",
    "IndexRangeError",
    "RankMismatchError",
    "ScanExhaustedError",
    "ShapeMismatchError",
    "XDBufError",
]
