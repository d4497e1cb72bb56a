from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MIN_BLOCKS_PER_PAGE = 4
DEFAULT_MAX_BLOCKS_PER_PAGE = 8


@dataclass(frozen=True)
class PaginationConfig:
    """
    Page bin-packing limits. A heading2 only forces a break once the current
    page holds `min_blocks_per_page` blocks; a page is always cut at
    `max_blocks_per_page`.
    """

    min_blocks_per_page: int = DEFAULT_MIN_BLOCKS_PER_PAGE
    max_blocks_per_page: int = DEFAULT_MAX_BLOCKS_PER_PAGE

    def __post_init__(self):
        if self.min_blocks_per_page < 1:
            raise ValueError(f"min_blocks_per_page must be >= 1, got {self.min_blocks_per_page}")
        if self.max_blocks_per_page < self.min_blocks_per_page:
            raise ValueError(
                f"max_blocks_per_page ({self.max_blocks_per_page}) must be >= "
                f"min_blocks_per_page ({self.min_blocks_per_page})"
            )

    @classmethod
    def from_env(cls) -> "PaginationConfig":
        return cls(
            min_blocks_per_page=int(os.getenv("TEXTBOOK_MIN_BLOCKS_PER_PAGE", str(DEFAULT_MIN_BLOCKS_PER_PAGE))),
            max_blocks_per_page=int(os.getenv("TEXTBOOK_MAX_BLOCKS_PER_PAGE", str(DEFAULT_MAX_BLOCKS_PER_PAGE))),
        )
