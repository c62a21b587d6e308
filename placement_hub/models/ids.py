"""
Id generation.

Each table in the store owns one generator, so ids are assigned by the
storage layer rather than by a class-level counter on the entity.
"""

import re
from typing import Iterable


class SequenceIdGenerator:
    """
    Monotonic, never-reused ids with a fixed-width numeric suffix.

        gen = SequenceIdGenerator("INT")
        gen.next_id()  # "INT0001"
    """

    def __init__(self, prefix: str, width: int = 4, start: int = 1):
        self.prefix = prefix
        self.width = width
        self._next = start
        self._pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")

    def next_id(self) -> str:
        value = f"{self.prefix}{self._next:0{self.width}d}"
        self._next += 1
        return value

    __call__ = next_id

    def peek(self) -> str:
        return f"{self.prefix}{self._next:0{self.width}d}"

    @property
    def next_value(self) -> int:
        return self._next

    def advance_to(self, value: int) -> None:
        self._next = max(self._next, value)

    def advance_past(self, ids: Iterable[str]) -> None:
        """Move the counter beyond every id already issued (e.g. restored from storage)."""
        for existing in ids:
            match = self._pattern.match(existing or "")
            if match:
                self._next = max(self._next, int(match.group(1)) + 1)
