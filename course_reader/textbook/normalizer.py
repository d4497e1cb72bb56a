"""
Text normalisation applied before block parsing.

Generated modules are stored once and rendered many times, and older ones
still carry HTML box markup from a previous generator. The normaliser turns
that markup into the `:::callout` dialect and cleans up the text so that the
parser only sees one syntax. It runs at generation time and again at render
time on the same stored text, so it must be idempotent.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

_BOLD_TITLE_BOX_RE = re.compile(
    r"<div[^>]*style=[\"'][^\"']*border[^\"']*[\"'][^>]*>\s*<b>([^<]+)</b>\s*(?:<br\s*/?>)?\s*(.*?)</div>",
    re.IGNORECASE | re.DOTALL,
)
_STYLED_DIV_RE = re.compile(r"<div[^>]*style=[\"'][^\"']*[\"'][^>]*>(.*?)</div>", re.IGNORECASE | re.DOTALL)
_BOX_BODY_TAG_RE = re.compile(r"</?(?:div|span|b|br|i|em|strong|p)\b[^>]*>", re.IGNORECASE)
_STYLED_DIV_INNER_TAG_RE = re.compile(r"</?(?:b|br|i|em|strong|span)\b[^>]*>", re.IGNORECASE)
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_INLINE_TAG_RE = re.compile(r"</?(?:div|span|b|i|em|strong|p)\b[^>]*>", re.IGNORECASE)
_SHORT_SEPARATOR_RE = re.compile(r"^[ \t]*--[ \t]*$", re.MULTILINE)
_EMPTY_LIST_MARKER_RE = re.compile(r"^[ \t]*[-*][ \t]*$", re.MULTILINE)
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")


def _box_to_callout(match: re.Match) -> str:
    title = match.group(1).strip()
    body = _BOX_BODY_TAG_RE.sub("", match.group(2)).strip()
    return f"\n:::didyouknow[{title}]\n{body}\n:::\n"


def _unwrap_styled_div(match: re.Match) -> str:
    return _STYLED_DIV_INNER_TAG_RE.sub("", match.group(1)).strip()


def _normalize_pass(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if text.startswith("\ufeff"):
        text = text[1:]
    text = _BOLD_TITLE_BOX_RE.sub(_box_to_callout, text)
    text = _STYLED_DIV_RE.sub(_unwrap_styled_div, text)
    text = _BR_RE.sub("\n", text)
    text = _INLINE_TAG_RE.sub("", text)
    text = _SHORT_SEPARATOR_RE.sub("---", text)
    text = _EMPTY_LIST_MARKER_RE.sub("", text)
    return _EXCESS_NEWLINES_RE.sub("\n\n", text)


def normalize(text: str) -> str:
    """
    Convert legacy HTML boxes to `:::didyouknow[Title]` fences, strip leftover
    inline tags and collapse runs of blank lines.

    The pass is repeated until the text stops changing, so stripping a tag that
    uncovers another one (``<<b>b>``) still yields a fixed point and
    ``normalize(normalize(x)) == normalize(x)`` holds.
    """
    if not isinstance(text, str):
        raise TypeError(f"normalize() expects str, got {type(text).__name__}")

    # Terminates: a changing pass removes markup or settles a separator line.
    current = text
    passes = 1
    while True:
        updated = _normalize_pass(current)
        if updated == current:
            if passes > 2:
                logger.debug("Normalisation settled after %s passes", passes)
            return current
        current = updated
        passes += 1
