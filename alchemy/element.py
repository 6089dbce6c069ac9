"""The five atomic kinds every compound is built from."""
from __future__ import annotations

from enum import Enum
from functools import total_ordering


@total_ordering
class Element(Enum):
    """An element with a fixed integer weight.

    Members compare by weight, which is also the canonical display order.
    """

    A = 1
    B = 2
    C = 3
    D = 4
    E = 5

    @property
    def weight(self) -> int:
        return self.value

    @property
    def tag(self) -> str:
        return self.name.lower()

    @classmethod
    def from_tag(cls, tag: str) -> Element:
        try:
            return cls[tag.upper()]
        except KeyError:
            raise ValueError(f"Unknown element tag: {tag!r}") from None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self.weight < other.weight

    def __str__(self) -> str:
        return self.tag


ELEMENTS_BY_WEIGHT: tuple[Element, ...] = tuple(sorted(Element))
