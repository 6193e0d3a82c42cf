"""
Reader configuration.
"""

from dataclasses import dataclass
from typing import Optional


DEFAULT_MAX_DECOMPRESSED_SIZE = 64 * 1024 * 1024


@dataclass
class ReaderConfig:
    """
    Settings shared by every slot decode of a region file.

    Attributes:
        max_workers: Thread pool size, ``None`` lets the executor pick
        max_decompressed_size: Upper bound on the inflated size of one chunk
        log_failures: Emit a warning for each slot that fails to decode
    """
    max_workers: Optional[int] = None
    max_decompressed_size: int = DEFAULT_MAX_DECOMPRESSED_SIZE
    log_failures: bool = True

    def __post_init__(self):
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")
        if self.max_decompressed_size < 1:
            raise ValueError(
                f"max_decompressed_size must be positive, got {self.max_decompressed_size}")
