from __future__ import annotations

from typing import Iterable, List

from .models import TextbookPage


def search_pages(pages: Iterable[TextbookPage], query: str) -> List[int]:
    """
    Return the ascending page numbers with a block containing `query`,
    case-insensitively. List items and figure captions are searched too;
    a match never spans two blocks.

    A linear scan is enough here: a module paginates into tens of pages.
    """
    if not query or not query.strip():
        return []
    needle = query.casefold()
    hits = []
    for page in pages:
        if any(needle in block.searchable_text().casefold() for block in page.content):
            hits.append(page.page_number)
    return sorted(hits)
