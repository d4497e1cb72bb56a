"""
Placement of externally planned illustrations into the block stream.

The planner (outside this package) decides what to draw and where; every
non-header slot carries a `block_index` into the block list as it was before
any figures were inserted. Injection keeps that meaning: a figure always lands
right before the block it was planned for, whatever was inserted earlier.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import BlockType, ContentBlock, ModuleVisualSlot, SlotType

logger = logging.getLogger(__name__)

# A cover visual must never precede the hook (title + standfirst).
HEADER_MIN_BLOCK_INDEX = 2
GALLERY_SLOT_LIMIT = 4

DEFAULT_CAPTIONS: Dict[str, Dict[SlotType, str]] = {
    "en": {SlotType.HEADER: "Cover", SlotType.DIAGRAM: "Diagram", SlotType.INLINE: "Figure"},
    "es": {SlotType.HEADER: "Portada", SlotType.DIAGRAM: "Diagrama", SlotType.INLINE: "Figura"},
}


def default_caption(slot_type: SlotType, locale: str = "en") -> str:
    captions = DEFAULT_CAPTIONS.get(locale, DEFAULT_CAPTIONS["en"])
    return captions[slot_type]


def effective_block_index(slot: ModuleVisualSlot) -> Optional[int]:
    """
    Position a slot targets in the pre-injection block list, or None when the
    slot cannot be placed inline.
    """
    if slot.slot_type == SlotType.HEADER:
        return max(slot.block_index if slot.block_index is not None else HEADER_MIN_BLOCK_INDEX, HEADER_MIN_BLOCK_INDEX)
    if slot.block_index is None or slot.block_index < 0:
        return None
    return slot.block_index


def figure_for_slot(slot: ModuleVisualSlot, locale: str = "en") -> ContentBlock:
    caption = slot.heading or slot.summary or default_caption(slot.slot_type, locale)
    return ContentBlock(
        type=BlockType.FIGURE,
        content=slot.id,
        caption=caption,
        source=slot.slot_type.value,
    )


def inject_figures(
    blocks: Sequence[ContentBlock],
    slots: Iterable[ModuleVisualSlot],
    locale: str = "en",
) -> List[ContentBlock]:
    """
    Return a new block list with one `figure` block per placeable slot.

    Targets are clamped to `[0, len(blocks)]` and stably sorted, then merged
    with the original blocks in one pass. This is the same result as inserting
    at `clamped_index + running_offset` in a growing list, without mutating a
    list while walking it.
    """
    placements: List[Tuple[int, ModuleVisualSlot]] = []
    for slot in slots:
        index = effective_block_index(slot)
        if index is None:
            logger.debug("Skipping visual slot %s without a usable block index", slot.id)
            continue
        if slot.slot_type == SlotType.HEADER and len(blocks) < HEADER_MIN_BLOCK_INDEX:
            logger.debug("Skipping header slot %s: module has no room after its hook", slot.id)
            continue
        clamped = min(max(index, 0), len(blocks))
        if clamped != index:
            logger.debug("Clamped visual slot %s from block %s to %s", slot.id, index, clamped)
        placements.append((clamped, slot))

    if not placements:
        return list(blocks)
    placements.sort(key=lambda placement: placement[0])

    merged: List[ContentBlock] = []
    cursor = 0
    for position in range(len(blocks) + 1):
        while cursor < len(placements) and placements[cursor][0] == position:
            merged.append(figure_for_slot(placements[cursor][1], locale))
            cursor += 1
        if position < len(blocks):
            merged.append(blocks[position])
    return merged


def select_integrated_slots(
    slots: Sequence[ModuleVisualSlot],
    module_title: str = "",
    include_header: bool = False,
) -> List[ModuleVisualSlot]:
    """
    Pick the slots shown inside the reading flow: the first diagram, and the
    first inline slot whose heading is not just the module title (falling back
    to the first inline slot). Header slots are only integrated on request,
    and then only the first one.
    """
    title = (module_title or "").strip().lower()
    header = None
    if include_header:
        header = next((slot for slot in slots if slot.slot_type == SlotType.HEADER), None)
    diagram = next((slot for slot in slots if slot.slot_type == SlotType.DIAGRAM), None)
    inline_slots = [slot for slot in slots if slot.slot_type == SlotType.INLINE]

    def distinct_heading(slot: ModuleVisualSlot) -> bool:
        heading = (slot.heading or "").strip()
        if not heading:
            return False
        return not title or heading.lower() != title

    inline = next((slot for slot in inline_slots if distinct_heading(slot)), None)
    if inline is None and inline_slots:
        inline = inline_slots[0]

    chosen = [selected for selected in (header, diagram, inline) if selected is not None]
    return [slot for slot in slots if any(slot is selected for selected in chosen)]


def select_gallery_slots(slots: Sequence[ModuleVisualSlot], limit: int = GALLERY_SLOT_LIMIT) -> List[ModuleVisualSlot]:
    """Supporting (non-header) slots for the catalog strip above the book."""
    return [slot for slot in slots if slot.slot_type != SlotType.HEADER][:limit]
