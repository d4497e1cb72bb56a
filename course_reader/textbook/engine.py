from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from .blocks import BlockParser
from .config import PaginationConfig
from .models import ModuleVisualSlot, Textbook
from .paginator import Paginator
from .visual_slots import inject_figures, select_integrated_slots

logger = logging.getLogger(__name__)

SlotInput = Union[ModuleVisualSlot, Dict[str, Any]]


def coerce_slots(visual_slots: Optional[Iterable[SlotInput]]) -> List[ModuleVisualSlot]:
    if not visual_slots:
        return []
    return [slot if isinstance(slot, ModuleVisualSlot) else ModuleVisualSlot.from_dict(slot) for slot in visual_slots]


class TextbookEngine:
    """
    Turns one module's text into a paginated textbook.

    The engine is stateless and deterministic: the same
    `(text, title, locale, visual_slots)` always yields the same pages and
    table of contents. Callers re-run `build` whenever an input changes, most
    often when the visual slots arrive after the text has been shown.
    """

    def __init__(
        self,
        config: Optional[PaginationConfig] = None,
        include_header_slot: bool = False,
    ):
        self.config = config or PaginationConfig()
        self.include_header_slot = include_header_slot
        self.parser = BlockParser()
        self.paginator = Paginator(self.config)

    def build(
        self,
        text: str,
        title: str = "",
        locale: str = "en",
        visual_slots: Optional[Iterable[SlotInput]] = None,
    ) -> Textbook:
        if not isinstance(text, str):
            raise TypeError(f"Module content must be str, got {type(text).__name__}")

        blocks = self.parser.parse(text)
        slots = select_integrated_slots(
            coerce_slots(visual_slots),
            module_title=title,
            include_header=self.include_header_slot,
        )
        blocks = inject_figures(blocks, slots, locale=locale)
        pages, toc = self.paginator.paginate(blocks)
        logger.debug(
            "Built textbook %r: %s blocks, %s figures, %s pages",
            title,
            len(blocks),
            len(slots),
            len(pages),
        )
        return Textbook(pages=pages, table_of_contents=toc, blocks=blocks)


def build_textbook(
    text: str,
    title: str = "",
    locale: str = "en",
    visual_slots: Optional[Iterable[SlotInput]] = None,
    config: Optional[PaginationConfig] = None,
) -> Textbook:
    return TextbookEngine(config).build(text, title=title, locale=locale, visual_slots=visual_slots)
