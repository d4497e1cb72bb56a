"""
Lightweight audit of the editorial ("magazine") module format.

Generated modules are expected to open with an H1, a standfirst and a `---`
separator, to contain at least one `> ##` pull quote and one sidebar box, to
tag every code fence with a language and to break up long runs of plain
paragraphs. The audit only reports; it never rewrites the text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List

MAX_PLAIN_PARAGRAPH_RUN = 3

_RULE_RE = re.compile(r"^-{3,}$")
_SIDEBAR_BOX_RE = re.compile(r"\|\s*\U0001F4A1\s*TECH\s+INSIGHT\s*:", re.IGNORECASE)
_FENCE_RE = re.compile(r"```([^\n\r]*)")
_BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")
_NUMBERED_RE = re.compile(r"^\d+\.\s")
_DESIGN_PLACEHOLDER_RE = re.compile(r"^!\[\s*DISE[ÑN]O\s*:", re.IGNORECASE)


class EditorialIssueCode(str, Enum):
    MISSING_H1 = "missing_h1"
    MISSING_STANDFIRST = "missing_standfirst"
    MISSING_SEPARATOR = "missing_separator"
    MISSING_PULL_QUOTE = "missing_pull_quote"
    MISSING_SIDEBAR_BOX = "missing_sidebar_box"
    CODE_FENCE_MISSING_LANGUAGE = "code_fence_missing_language"
    TOO_MANY_PLAIN_PARAGRAPHS = "too_many_plain_paragraphs"


@dataclass(frozen=True)
class EditorialIssue:
    code: EditorialIssueCode
    message: str

    def to_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message}


def _is_plain_paragraph(block: str) -> bool:
    text = block.strip()
    if not text:
        return False
    if text.startswith(("#", ">", "```", "|", ":::", "- ", "* ")):
        return False
    if _NUMBERED_RE.match(text) or _RULE_RE.match(text) or _DESIGN_PLACEHOLDER_RE.match(text):
        return False
    return True


def _has_standfirst(lines: List[str]) -> bool:
    for line in lines:
        text = line.strip()
        if text.startswith("**") and text.endswith("**") and len(text) > 4:
            return True
        if text.startswith(">") and not text.startswith("> ##"):
            return True
    return False


def audit_editorial_markdown(markdown: str) -> List[EditorialIssue]:
    """Return the editorial rules `markdown` breaks; an empty list means it looks compliant."""
    if not isinstance(markdown, str):
        raise TypeError(f"audit_editorial_markdown() expects str, got {type(markdown).__name__}")

    issues: List[EditorialIssue] = []
    lines = re.split(r"\r?\n", markdown)

    first_index = next((i for i, line in enumerate(lines) if line.strip()), None)
    first_line = lines[first_index].strip() if first_index is not None else ""
    if not first_line.startswith("# "):
        issues.append(
            EditorialIssue(EditorialIssueCode.MISSING_H1, "Missing H1 title as the first non-empty line (# Title).")
        )

    after_title = lines[first_index + 1:] if first_index is not None else lines
    separator_index = next((i for i, line in enumerate(after_title) if _RULE_RE.match(line.strip())), None)
    lead = after_title[:separator_index] if separator_index is not None else after_title

    if not _has_standfirst(lead):
        issues.append(
            EditorialIssue(EditorialIssueCode.MISSING_STANDFIRST, "Missing standfirst immediately after the H1.")
        )
    if separator_index is None:
        issues.append(
            EditorialIssue(
                EditorialIssueCode.MISSING_SEPARATOR,
                "Missing --- separator after the hook (title + standfirst).",
            )
        )
    if "> ##" not in markdown:
        issues.append(
            EditorialIssue(
                EditorialIssueCode.MISSING_PULL_QUOTE,
                'No pull quote found. Expected at least one blockquote with "> ##".',
            )
        )
    if not _SIDEBAR_BOX_RE.search(markdown):
        issues.append(
            EditorialIssue(
                EditorialIssueCode.MISSING_SIDEBAR_BOX,
                "No sidebar box found. Expected a one-cell table starting with \"| \U0001F4A1 TECH INSIGHT:\".",
            )
        )

    # Opening and closing fences alternate; only openings carry a language.
    fences = _FENCE_RE.findall(markdown)
    if any(not language.strip() for language in fences[::2]):
        issues.append(
            EditorialIssue(
                EditorialIssueCode.CODE_FENCE_MISSING_LANGUAGE,
                "Found a code fence without a language (```python, ```ts, etc.).",
            )
        )

    run = longest = 0
    for block in _BLOCK_SPLIT_RE.split(markdown):
        if _is_plain_paragraph(block):
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    if longest > MAX_PLAIN_PARAGRAPH_RUN:
        issues.append(
            EditorialIssue(
                EditorialIssueCode.TOO_MANY_PLAIN_PARAGRAPHS,
                f"Detected {longest} consecutive plain paragraphs; at most "
                f"{MAX_PLAIN_PARAGRAPH_RUN} are allowed before a widget break.",
            )
        )
    return issues
