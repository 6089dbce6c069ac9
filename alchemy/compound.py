"""Fixed-weight compounds."""
from __future__ import annotations

from collections.abc import Mapping

from .element import Element
from .element_counts import ElementCounts, parse_element_counts
from .errors import SizeError

COMPOUND_WEIGHT = 7


class Compound:
    """Element counts whose total weight is exactly ``target_weight``.

    Every way of building a compound (explicit counts, text, or a search
    result) goes through ``__init__``, which drops zero counts and raises
    :class:`SizeError` on a weight mismatch. Equality and hashing only look at
    the element content.
    """

    __slots__ = ("_counts", "_target_weight")

    def __init__(
        self,
        counts: ElementCounts | Mapping[Element, int],
        target_weight: int = COMPOUND_WEIGHT,
    ) -> None:
        self._target_weight = target_weight
        self._counts = self._validated(counts)

    @classmethod
    def from_counts(
        cls,
        a: int = 0,
        b: int = 0,
        c: int = 0,
        d: int = 0,
        e: int = 0,
        target_weight: int = COMPOUND_WEIGHT,
    ) -> Compound:
        counts = {Element.A: a, Element.B: b, Element.C: c, Element.D: d, Element.E: e}
        return cls(counts, target_weight=target_weight)

    @classmethod
    def parse(cls, text: str, target_weight: int = COMPOUND_WEIGHT) -> Compound:
        return cls(parse_element_counts(text), target_weight=target_weight)

    def _validated(self, counts: ElementCounts | Mapping[Element, int]) -> ElementCounts:
        if not isinstance(counts, ElementCounts):
            counts = ElementCounts(counts)
        cleaned = counts.clean()
        if cleaned.weight != self._target_weight:
            raise SizeError(cleaned.weight, self._target_weight)
        return cleaned

    @property
    def counts(self) -> ElementCounts:
        return self._counts

    @property
    def target_weight(self) -> int:
        return self._target_weight

    @property
    def weight(self) -> int:
        return self._counts.weight

    def count(self, element: Element) -> int:
        return self._counts.count(element)

    def copy(self) -> Compound:
        return Compound(self._counts, target_weight=self._target_weight)

    def replace_counts(self, counts: ElementCounts | Mapping[Element, int]) -> None:
        """Swap in new content of the same weight; used by reactions."""

        self._counts = self._validated(counts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Compound):
            return NotImplemented
        return self._counts == other._counts

    def __hash__(self) -> int:
        return hash(str(self))

    def __str__(self) -> str:
        parts: list[str] = []
        for element, count in self._counts.sorted_items():
            parts.append(f"{count}{element.tag}" if count > 1 else element.tag)
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Compound({str(self)!r})"
