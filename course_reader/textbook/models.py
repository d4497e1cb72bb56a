from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class BlockType(str, Enum):
    HEADING1 = "heading1"
    HEADING2 = "heading2"
    HEADING3 = "heading3"
    META = "meta"
    STANDFIRST = "standfirst"
    PARAGRAPH = "paragraph"
    CALLOUT = "callout"
    DIDYOUKNOW = "didyouknow"
    EXAMPLE = "example"
    EXERCISE = "exercise"
    QUOTE = "quote"
    LIST = "list"
    NUMBERED_LIST = "numbered-list"
    CODE = "code"
    TABLE = "table"
    FIGURE = "figure"
    MARGINAL_NOTE = "marginal-note"
    KEY_CONCEPT = "key-concept"
    WARNING = "warning"
    TIP = "tip"
    SUMMARY = "summary"


# Block types rendered as a highlighted box; an empty body suppresses them.
CALLOUT_TYPES = frozenset(
    {
        BlockType.CALLOUT,
        BlockType.DIDYOUKNOW,
        BlockType.EXAMPLE,
        BlockType.EXERCISE,
        BlockType.KEY_CONCEPT,
        BlockType.WARNING,
        BlockType.TIP,
        BlockType.SUMMARY,
    }
)

HEADING_LEVELS = {
    BlockType.HEADING1: 1,
    BlockType.HEADING2: 2,
    BlockType.HEADING3: 3,
}


class SlotType(str, Enum):
    HEADER = "header"
    DIAGRAM = "diagram"
    INLINE = "inline"


@dataclass(frozen=True)
class ContentBlock:
    type: BlockType
    content: str
    items: Optional[List[str]] = None
    caption: Optional[str] = None
    source: Optional[str] = None

    def searchable_text(self) -> str:
        parts = [self.content]
        if self.items:
            parts.extend(self.items)
        if self.caption:
            parts.append(self.caption)
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value, "content": self.content}
        if self.items is not None:
            data["items"] = list(self.items)
        if self.caption is not None:
            data["caption"] = self.caption
        if self.source is not None:
            data["source"] = self.source
        return data


@dataclass(frozen=True)
class TextbookPage:
    page_number: int
    content: List[ContentBlock]
    section: Optional[str] = None
    is_chapter_start: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page_number": self.page_number,
            "content": [block.to_dict() for block in self.content],
            "section": self.section,
            "is_chapter_start": self.is_chapter_start,
        }


@dataclass(frozen=True)
class TableOfContentsItem:
    title: str
    page: int
    level: int

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "page": self.page, "level": self.level}


@dataclass(frozen=True)
class ModuleVisualSlot:
    """
    Illustration placement produced by the external visual-slot planner.
    Treated as read-only input: the injector never mutates it.
    """

    id: str
    slot_type: SlotType
    block_index: Optional[int] = None
    heading: Optional[str] = None
    summary: Optional[str] = None
    suggested_visual_style: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModuleVisualSlot":
        """
        Accepts both the planner's camelCase payload and snake_case keys.
        """
        slot_id = data.get("id")
        if not slot_id:
            raise ValueError("Visual slot is missing an id")
        raw_type = data.get("slotType", data.get("slot_type"))
        try:
            slot_type = SlotType(raw_type)
        except ValueError:
            raise ValueError(f"Unknown slot type for visual slot {slot_id}: {raw_type!r}") from None

        block_index = data.get("blockIndex", data.get("block_index"))
        if block_index is not None and (isinstance(block_index, bool) or not isinstance(block_index, int)):
            raise ValueError(f"blockIndex must be an integer or null for visual slot {slot_id}")

        return cls(
            id=str(slot_id),
            slot_type=slot_type,
            block_index=block_index,
            heading=data.get("heading"),
            summary=data.get("summary"),
            suggested_visual_style=data.get("suggestedVisualStyle", data.get("suggested_visual_style")),
        )


@dataclass(frozen=True)
class Textbook:
    """
    Paginated result of one engine run: pages, table of contents and the
    figure-augmented block stream the pages were cut from.
    """

    pages: List[TextbookPage]
    table_of_contents: List[TableOfContentsItem]
    blocks: List[ContentBlock] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    def page(self, page_number: int) -> Optional[TextbookPage]:
        if 1 <= page_number <= len(self.pages):
            return self.pages[page_number - 1]
        return None

    def search(self, query: str) -> List[int]:
        from .search import search_pages

        return search_pages(self.pages, query)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pages": [page.to_dict() for page in self.pages],
            "table_of_contents": [item.to_dict() for item in self.table_of_contents],
            "total_pages": self.total_pages,
        }
