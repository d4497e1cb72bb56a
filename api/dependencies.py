from __future__ import annotations

import os
from functools import lru_cache

from course_reader.textbook import PaginationConfig, TextbookEngine


@lru_cache(maxsize=1)
def get_engine() -> TextbookEngine:
    include_header = os.getenv("TEXTBOOK_INCLUDE_HEADER_SLOT", "false").lower() in ("1", "true", "yes")
    return TextbookEngine(
        config=PaginationConfig.from_env(),
        include_header_slot=include_header,
    )
