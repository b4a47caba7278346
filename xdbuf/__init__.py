"""N-dimensional strided buffers and bounds-checked walkers."""

from .buffer import XDBuf
from .config import DEFAULT_CONFIG, SmallIndexConfig, XDBufConfig
from .errors import (
    ElementCastError,
    IndexOverflowError,
    IndexRangeError,
    RankMismatchError,
    ScanExhaustedError,
    ShapeMismatchError,
    XDBufError,
)
from .step import Step2D, Step3D, neighborhood
from .walker import Walker

__all__ = [
    # Buffer
    "XDBuf",
    "Walker",
    # Steps
    "Step2D",
    "Step3D",
    "neighborhood",
    # Configuration
    "XDBufConfig",
    "SmallIndexConfig",
    "DEFAULT_CONFIG",
    # Errors
    "XDBufError",
    "ElementCastError",
    "IndexRangeError",
    "ScanExhaustedError",
    "IndexOverflowError",
    "ShapeMismatchError",
    "RankMismatchError",
]
