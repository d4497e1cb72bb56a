from __future__ import annotations

from typing import Callable, List, Optional


class LineCursor:
    """
    Forward-only cursor over the lines of a document. Dispatch rules read with
    `peek`, consume with `advance`/`take_while`, and never move backwards.
    """

    def __init__(self, lines: List[str]):
        self._lines = lines
        self._pos = 0

    @classmethod
    def from_text(cls, text: str) -> "LineCursor":
        return cls(text.split("\n"))

    @property
    def position(self) -> int:
        return self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self._lines)

    def peek(self, offset: int = 0) -> Optional[str]:
        index = self._pos + offset
        if 0 <= index < len(self._lines):
            return self._lines[index]
        return None

    def advance(self) -> Optional[str]:
        line = self.peek()
        if line is not None:
            self._pos += 1
        return line

    def take_while(self, predicate: Callable[[str], bool]) -> List[str]:
        taken: List[str] = []
        while not self.at_end() and predicate(self._lines[self._pos]):
            taken.append(self._lines[self._pos])
            self._pos += 1
        return taken

    def take_until(self, predicate: Callable[[str], bool]) -> List[str]:
        """
        Consume lines up to the first one matching `predicate`, then consume
        that terminator too (fence semantics). Runs to the end when no line
        matches.
        """
        taken = self.take_while(lambda line: not predicate(line))
        self.advance()
        return taken
