"""
Callout classification rules shared by the block parser.

Three tables live here: the alias table for `:::type[...]` fences, the keyword
rules that classify `> ### Heading` insight cards, and the emoji prefixes that
turn a single line into a callout.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Optional, Tuple

from .models import BlockType

CALLOUT_ALIASES = {
    "didyouknow": BlockType.DIDYOUKNOW,
    "tip": BlockType.TIP,
    "warning": BlockType.WARNING,
    "example": BlockType.EXAMPLE,
    "exercise": BlockType.EXERCISE,
    "note": BlockType.CALLOUT,
    "info": BlockType.CALLOUT,
    "important": BlockType.KEY_CONCEPT,
    "keyconcept": BlockType.KEY_CONCEPT,
    "key-concept": BlockType.KEY_CONCEPT,
    "summary": BlockType.SUMMARY,
}

WARNING_EMOJI = "\u26a0"  # ⚠ (with or without U+FE0F)
RED_CIRCLE = "\U0001F534"  # 🔴
LIGHT_BULB = "\U0001F4A1"  # 💡
CHECK_MARK = "\u2705"  # ✅
GREEN_HEART = "\U0001F49A"  # 💚
DIRECT_HIT = "\U0001F3AF"  # 🎯
PUSHPIN = "\U0001F4CC"  # 📌

# Order matters: the first matching rule wins.
INSIGHT_CARD_RULES: Tuple[Tuple[BlockType, Tuple[str, ...], Tuple[str, ...]], ...] = (
    (
        BlockType.WARNING,
        (WARNING_EMOJI, RED_CIRCLE),
        ("warning", "caution", "careful", "danger", "pitfall", "advertencia", "cuidado", "atencion", "peligro"),
    ),
    (
        BlockType.DIDYOUKNOW,
        (LIGHT_BULB,),
        ("insight", "insights", "idea", "ideas", "did you know", "sabias que", "sabias"),
    ),
    (
        BlockType.TIP,
        (CHECK_MARK, GREEN_HEART),
        ("tip", "tips", "consejo", "consejos", "truco"),
    ),
    (
        BlockType.KEY_CONCEPT,
        (DIRECT_HIT, PUSHPIN),
        ("key concept", "key concepts", "keyconcept", "concepto clave", "conceptos clave"),
    ),
    (
        BlockType.EXERCISE,
        (),
        ("exercise", "exercises", "ejercicio", "ejercicios", "practice", "practica"),
    ),
)

EMOJI_SHORTCUTS: Tuple[Tuple[str, BlockType], ...] = (
    (LIGHT_BULB, BlockType.DIDYOUKNOW),
    (WARNING_EMOJI, BlockType.WARNING),
    (RED_CIRCLE, BlockType.WARNING),
    (CHECK_MARK, BlockType.TIP),
    (GREEN_HEART, BlockType.TIP),
    (DIRECT_HIT, BlockType.KEY_CONCEPT),
    (PUSHPIN, BlockType.KEY_CONCEPT),
)

_VARIATION_SELECTOR = "\ufe0f"


def map_callout_type(raw_type: str) -> BlockType:
    """Resolve a `:::type` fence name; unknown names fall back to a generic callout."""
    return CALLOUT_ALIASES.get(raw_type.strip().lower(), BlockType.CALLOUT)


def _fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def _has_keyword(folded: str, keyword: str) -> bool:
    return re.search(rf"(?<![a-z]){re.escape(keyword)}(?![a-z])", folded) is not None


def classify_insight_card(heading: str) -> BlockType:
    """
    Classify a `> ### Heading` card by emoji or keyword in its heading text.
    Falls back to a generic callout.
    """
    folded = _fold(heading)
    for block_type, emojis, keywords in INSIGHT_CARD_RULES:
        if any(emoji in heading for emoji in emojis):
            return block_type
        if any(_has_keyword(folded, keyword) for keyword in keywords):
            return block_type
    return BlockType.CALLOUT


def match_emoji_shortcut(line: str) -> Optional[Tuple[BlockType, str]]:
    """
    Return `(type, text)` when `line` starts with a callout emoji, with the
    emoji (and its variation selector) stripped from the text.
    """
    for emoji, block_type in EMOJI_SHORTCUTS:
        if line.startswith(emoji):
            rest = line[len(emoji):]
            if rest.startswith(_VARIATION_SELECTOR):
                rest = rest[len(_VARIATION_SELECTOR):]
            return block_type, rest.strip()
    return None
