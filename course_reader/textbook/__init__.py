"""
Textbook subsystem exports.
"""

from .audit import EditorialIssue, EditorialIssueCode, audit_editorial_markdown
from .blocks import BlockParser, parse_blocks
from .callouts import classify_insight_card, map_callout_type
from .config import PaginationConfig
from .cursor import LineCursor
from .engine import TextbookEngine, build_textbook
from .models import (
    BlockType,
    ContentBlock,
    ModuleVisualSlot,
    SlotType,
    TableOfContentsItem,
    Textbook,
    TextbookPage,
)
from .normalizer import normalize
from .paginator import Paginator, paginate
from .search import search_pages
from .visual_slots import inject_figures, select_gallery_slots, select_integrated_slots

__all__ = [
    "BlockParser",
    "BlockType",
    "ContentBlock",
    "EditorialIssue",
    "EditorialIssueCode",
    "LineCursor",
    "ModuleVisualSlot",
    "PaginationConfig",
    "Paginator",
    "SlotType",
    "TableOfContentsItem",
    "Textbook",
    "TextbookEngine",
    "TextbookPage",
    "audit_editorial_markdown",
    "build_textbook",
    "classify_insight_card",
    "inject_figures",
    "map_callout_type",
    "normalize",
    "paginate",
    "parse_blocks",
    "search_pages",
    "select_gallery_slots",
    "select_integrated_slots",
]
