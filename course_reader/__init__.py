"""
Course reader core package.

This package currently focuses on the textbook subsystem. It exposes
dataclasses for content blocks, pages and table-of-contents entries, the
normaliser and block parser for the generated module dialect, visual-slot
injection, pagination and page search, wired together by `TextbookEngine`.
"""
