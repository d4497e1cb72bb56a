from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from .config import PaginationConfig
from .models import HEADING_LEVELS, BlockType, ContentBlock, TableOfContentsItem, TextbookPage

logger = logging.getLogger(__name__)


class Paginator:
    """
    Groups a flat block stream into bounded pages and builds the table of
    contents in the same pass.

    A heading1 always opens a new chapter page. A heading2 starts a new page
    only once the current one holds `min_blocks_per_page` blocks, and any page
    is cut when it reaches `max_blocks_per_page`. TOC entries take the number
    of the page their heading lands on, computed before any pending flush.
    """

    def __init__(self, config: Optional[PaginationConfig] = None):
        self.config = config or PaginationConfig()

    def paginate(self, blocks: Iterable[ContentBlock]) -> Tuple[List[TextbookPage], List[TableOfContentsItem]]:
        pages: List[TextbookPage] = []
        toc: List[TableOfContentsItem] = []
        buffer: List[ContentBlock] = []
        section: Optional[str] = None
        # The first page of a module opens its chapter.
        chapter_start = True

        def flush() -> None:
            nonlocal buffer, chapter_start
            if not buffer:
                return
            pages.append(
                TextbookPage(
                    page_number=len(pages) + 1,
                    content=buffer,
                    section=section,
                    is_chapter_start=chapter_start,
                )
            )
            logger.debug("Flushed page %s with %s blocks", len(pages), len(buffer))
            buffer = []
            chapter_start = False

        for block in blocks:
            if block.type == BlockType.HEADING1:
                flush()
                chapter_start = True
                section = block.content
            elif block.type == BlockType.HEADING2:
                if len(buffer) >= self.config.min_blocks_per_page:
                    flush()
                section = block.content

            level = HEADING_LEVELS.get(block.type)
            if level is not None:
                toc.append(TableOfContentsItem(title=block.content, page=len(pages) + 1, level=level))

            buffer.append(block)
            if len(buffer) >= self.config.max_blocks_per_page:
                flush()

        # Final flush
        flush()
        return pages, toc


def paginate(
    blocks: Iterable[ContentBlock],
    config: Optional[PaginationConfig] = None,
) -> Tuple[List[TextbookPage], List[TableOfContentsItem]]:
    return Paginator(config).paginate(blocks)
