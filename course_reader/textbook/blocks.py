"""
Line-oriented block parser for generated course modules.

The input is the markdown-like dialect written by the course generator:
headings, `:::type[title]` fences, blockquotes whose meaning depends on where
they appear, pipe tables that are sometimes a one-cell "sidebar box", emoji
shortcuts and the editorial image placeholders. Each line is dispatched through
a fixed chain of rules; anything no rule claims becomes part of a paragraph, so
content is never lost and the parser never raises on content.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional

from .callouts import classify_insight_card, map_callout_type, match_emoji_shortcut
from .cursor import LineCursor
from .models import CALLOUT_TYPES, BlockType, ContentBlock
from .normalizer import normalize

logger = logging.getLogger(__name__)

_RULE_RE = re.compile(r"^-{3,}$")
_META_KEYWORD_RE = re.compile(
    r"\b(tiempo|time|duraci[oó]n|duration|nivel|level|tags?|etiquetas)\b",
    re.IGNORECASE,
)
_HEADING_RE = re.compile(r"^(#+)(?!#)\s*(\S.*)$")
_CALLOUT_OPEN_RE = re.compile(r"^:::\s*([\w-]+)(?:\[([^\]]*)\])?")
_BARE_FENCE_RE = re.compile(r"^:::\s*$")
_PULL_QUOTE_RE = re.compile(r"^##(?!#)\s*(.*)$")
_INSIGHT_CARD_RE = re.compile(r"^###\s*(.+)$")
_BOLD_LINE_RE = re.compile(r"^\*\*(.+)\*\*$")
_DESIGN_PLACEHOLDER_RE = re.compile(r"^!\[\s*DISE[ÑN]O\s*:(.*)$", re.IGNORECASE)
_PLACEHOLDER_TAIL_RE = re.compile(r"\](\([^)]*\))?\s*$")
_BULLET_RE = re.compile(r"^[-*]\s+(.*)$")
_NUMBERED_RE = re.compile(r"^\d+\.\s+(.*)$")
_TABLE_SEPARATOR_RE = re.compile(r"^\|?\s*:?-+:?\s*(\|\s*:?-+:?\s*)*\|?$")


def _is_blockquote(line: str) -> bool:
    return line.startswith(">")


def _is_bullet(line: str) -> bool:
    return line.startswith("- ") or line.startswith("* ")


def _is_numbered(line: str) -> bool:
    return _NUMBERED_RE.match(line) is not None


def _is_table_row(line: str) -> bool:
    return line.startswith("|")


def _unquote(line: str) -> str:
    return re.sub(r"^>\s?", "", line.strip())


def _table_cells(line: str) -> List[str]:
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|"):
        row = row[:-1]
    return [cell.strip() for cell in row.split("|")]


def _bold_line_text(line: str) -> Optional[str]:
    match = _BOLD_LINE_RE.match(line)
    if not match or "**" in match.group(1):
        return None
    return match.group(1).strip() or None


def _placeholder_prompt(line: str) -> Optional[str]:
    match = _DESIGN_PLACEHOLDER_RE.match(line)
    if not match:
        return None
    return _PLACEHOLDER_TAIL_RE.sub("", match.group(1)).strip()


class _ParseRun:
    """
    State for a single parse: the cursor, the emitted blocks and whether the
    cursor is still inside the hero region (the lead zone before the first
    horizontal rule).
    """

    def __init__(self, text: str):
        self.cursor = LineCursor.from_text(text)
        self.blocks: List[ContentBlock] = []
        self.in_hero = True
        self.rules: List[Callable[[str], bool]] = [
            self._blank,
            self._horizontal_rule,
            self._hero_meta,
            self._heading,
            self._fenced_callout,
            self._blockquote,
            self._hero_bold_standfirst,
            self._design_placeholder,
            self._emoji_shortcut,
            self._list,
            self._code_fence,
            self._pipe_table,
        ]

    def run(self) -> List[ContentBlock]:
        while not self.cursor.at_end():
            line = self.cursor.peek().strip()
            if not any(rule(line) for rule in self.rules):
                self._paragraph(line)
        return self.blocks

    # region helpers
    def _emit(self, block_type: BlockType, content: str, **extra) -> None:
        if block_type in CALLOUT_TYPES and not content.strip():
            logger.debug("Suppressed empty %s callout at line %s", block_type.value, self.cursor.position)
            return
        self.blocks.append(ContentBlock(type=block_type, content=content, **extra))

    def _emit_titled(self, block_type: BlockType, title: str, body: str) -> None:
        # A titled callout with no body renders as an empty box; drop it.
        if not body:
            logger.debug("Suppressed %s callout %r with empty body", block_type.value, title)
            return
        content = f"**{title}**\n\n{body}" if title else body
        self._emit(block_type, content)

    def _starts_block(self, line: str) -> bool:
        if _RULE_RE.match(line) or _HEADING_RE.match(line):
            return True
        if self.in_hero and (self._is_meta(line) or _bold_line_text(line) is not None):
            return True
        if line.startswith(":::") or _is_blockquote(line) or line.startswith("```") or _is_table_row(line):
            return True
        if _DESIGN_PLACEHOLDER_RE.match(line) or match_emoji_shortcut(line):
            return True
        return _is_bullet(line) or _is_numbered(line)

    def _is_meta(self, line: str) -> bool:
        return "|" in line and _META_KEYWORD_RE.search(line) is not None

    # endregion

    # region rules, in precedence order
    def _blank(self, line: str) -> bool:
        if line:
            return False
        self.cursor.advance()
        return True

    def _horizontal_rule(self, line: str) -> bool:
        if not _RULE_RE.match(line):
            return False
        self.cursor.advance()
        self.in_hero = False
        return True

    def _hero_meta(self, line: str) -> bool:
        if not self.in_hero or not self._is_meta(line):
            return False
        self.cursor.advance()
        self._emit(BlockType.META, line)
        return True

    def _heading(self, line: str) -> bool:
        match = _HEADING_RE.match(line)
        if not match:
            return False
        self.cursor.advance()
        depth = len(match.group(1))
        text = match.group(2).strip()
        if depth == 1:
            self._emit(BlockType.HEADING1, text)
        elif depth == 2:
            self._emit(BlockType.HEADING2, text)
        else:
            self._emit(BlockType.HEADING3, text)
        return True

    def _fenced_callout(self, line: str) -> bool:
        if _BARE_FENCE_RE.match(line):
            logger.debug("Skipping stray closing fence at line %s", self.cursor.position)
            self.cursor.advance()
            return True
        match = _CALLOUT_OPEN_RE.match(line)
        if not match:
            return False
        self.cursor.advance()
        body_lines = self.cursor.take_until(lambda raw: raw.strip().startswith(":::"))
        block_type = map_callout_type(match.group(1))
        title = (match.group(2) or "").strip()
        body = "\n".join(body_lines).strip()
        self._emit_titled(block_type, title, body)
        return True

    def _blockquote(self, line: str) -> bool:
        if not _is_blockquote(line):
            return False
        lines = [_unquote(raw) for raw in self.cursor.take_while(lambda raw: _is_blockquote(raw.strip()))]
        first = lines[0].strip()
        pull_quote = _PULL_QUOTE_RE.match(first)
        insight_card = _INSIGHT_CARD_RE.match(first)

        if self.in_hero and (pull_quote or insight_card):
            logger.info(
                "Ambiguous blockquote inside hero region (%s); classified as %s",
                first[:60],
                "pull-quote" if pull_quote else "standfirst",
            )

        if pull_quote:
            text = "\n".join([pull_quote.group(1)] + lines[1:]).strip()
            if text:
                self._emit(BlockType.QUOTE, text)
            return True
        if self.in_hero:
            if insight_card:
                lines = [insight_card.group(1)] + lines[1:]
            text = " ".join(part.strip() for part in lines if part.strip())
            if text:
                self._emit(BlockType.STANDFIRST, text)
            return True
        if insight_card:
            title = insight_card.group(1).strip()
            body = "\n".join(lines[1:]).strip()
            self._emit_titled(classify_insight_card(title), title, body)
            return True
        self._emit(BlockType.CALLOUT, "\n".join(lines).strip())
        return True

    def _hero_bold_standfirst(self, line: str) -> bool:
        if not self.in_hero:
            return False
        text = _bold_line_text(line)
        if text is None:
            return False
        self.cursor.advance()
        self._emit(BlockType.STANDFIRST, text)
        return True

    def _design_placeholder(self, line: str) -> bool:
        prompt = _placeholder_prompt(line)
        if prompt is None:
            return False
        self.cursor.advance()
        self._emit(BlockType.CALLOUT, prompt)
        return True

    def _emoji_shortcut(self, line: str) -> bool:
        shortcut = match_emoji_shortcut(line)
        if shortcut is None:
            return False
        self.cursor.advance()
        block_type, text = shortcut
        self._emit(block_type, text)
        return True

    def _list(self, line: str) -> bool:
        if _is_bullet(line):
            raw_items = self.cursor.take_while(lambda raw: _is_bullet(raw.strip()))
            items = [_BULLET_RE.match(raw.strip()).group(1).strip() for raw in raw_items]
            self._emit(BlockType.LIST, "", items=items)
            return True
        if _is_numbered(line):
            raw_items = self.cursor.take_while(lambda raw: _is_numbered(raw.strip()))
            items = [_NUMBERED_RE.match(raw.strip()).group(1).strip() for raw in raw_items]
            self._emit(BlockType.NUMBERED_LIST, "", items=items)
            return True
        return False

    def _code_fence(self, line: str) -> bool:
        if not line.startswith("```"):
            return False
        self.cursor.advance()
        language = line[3:].strip()
        code_lines = self.cursor.take_until(lambda raw: raw.strip().startswith("```"))
        self._emit(BlockType.CODE, "\n".join(code_lines), caption=language or None)
        return True

    def _pipe_table(self, line: str) -> bool:
        if not _is_table_row(line):
            return False
        rows = [raw.strip() for raw in self.cursor.take_while(lambda raw: _is_table_row(raw.strip()))]
        if len(rows) < 2:
            logger.debug("Dropped single-line table: %s", rows[0][:60])
            return True
        if len(rows) == 3 and _TABLE_SEPARATOR_RE.match(rows[1]):
            head, body = _table_cells(rows[0]), _table_cells(rows[2])
            if len(head) == 1 and len(body) == 1 and head[0]:
                self._emit(BlockType.CALLOUT, f"**{head[0]}**\n\n{body[0]}" if body[0] else "")
                return True
        self._emit(BlockType.TABLE, "\n".join(rows))
        return True

    # endregion

    def _paragraph(self, line: str) -> None:
        self.cursor.advance()
        rest = self.cursor.take_while(lambda raw: bool(raw.strip()) and not self._starts_block(raw.strip()))
        self._emit(BlockType.PARAGRAPH, " ".join([line] + [raw.strip() for raw in rest]))


class BlockParser:
    """
    Turns module text into an ordered list of typed content blocks.
    Stateless and reusable; every call normalises its input first.
    """

    def parse(self, text: str) -> List[ContentBlock]:
        if not isinstance(text, str):
            raise TypeError(f"Module content must be str, got {type(text).__name__}")
        blocks = _ParseRun(normalize(text)).run()
        logger.debug("Parsed %s blocks", len(blocks))
        return blocks


def parse_blocks(text: str) -> List[ContentBlock]:
    return BlockParser().parse(text)
