"""
Configuration for XDBuf

Limits and defaults shared by every buffer and walker.
"""

from dataclasses import dataclass, field

import numpy as np


@dataclass
class XDBufConfig:
    """Configuration for strided buffers."""

    # === Addressing ===
    max_index: int = field(default_factory=lambda: int(np.iinfo(np.intp).max))

    # === Storage ===
    default_dtype: object = None  # None = infer from values, falling back to object

    def __post_init__(self):
        if self.max_index < 1:
            raise ValueError(f"max_index must be positive, got {self.max_index}")


@dataclass
class SmallIndexConfig(XDBufConfig):
    """32-bit addressing, for buffers shared with code using int32 offsets."""

    max_index: int = int(np.iinfo(np.int32).max)


DEFAULT_CONFIG = XDBufConfig()
