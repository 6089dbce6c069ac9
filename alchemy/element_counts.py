"""Element multisets and the compound text notation."""
from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping

from .element import ELEMENTS_BY_WEIGHT, Element
from .errors import ParseError

# One optional "[count]tag" block per element, ascending weight, whole string.
_NOTATION = re.compile(
    "".join(
        rf"(?P<{element.name}>(?P<{element.name}_count>[0-9]+)?{element.tag})?"
        for element in ELEMENTS_BY_WEIGHT
    ),
    re.IGNORECASE,
)


class ElementCounts(Mapping[Element, int]):
    """Immutable mapping of element to count.

    Zero counts are allowed until :meth:`clean` drops them. Every operation
    that changes a count returns a new instance.
    """

    __slots__ = ("_counts",)

    def __init__(self, counts: Mapping[Element, int] | Iterable[tuple[Element, int]] = ()) -> None:
        data = dict(counts)
        for element, count in data.items():
            if not isinstance(element, Element):
                raise ValueError(f"Expected an Element key, got {element!r}")
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise ValueError(f"Count for {element.name} must be a non-negative int, got {count!r}")
        self._counts: dict[Element, int] = data

    def __getitem__(self, element: Element) -> int:
        return self._counts[element]

    def __iter__(self) -> Iterator[Element]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ElementCounts):
            return self._counts == other._counts
        if isinstance(other, Mapping):
            return self._counts == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._counts.items()))

    def __repr__(self) -> str:
        inner = ", ".join(f"{element.name}: {count}" for element, count in self.sorted_items())
        return f"ElementCounts({{{inner}}})"

    def __add__(self, other: object) -> ElementCounts:
        if not isinstance(other, ElementCounts):
            return NotImplemented
        total = dict(self._counts)
        for element, count in other.items():
            total[element] = total.get(element, 0) + count
        return ElementCounts(total)

    @property
    def weight(self) -> int:
        return sum(element.weight * count for element, count in self._counts.items())

    @property
    def units(self) -> int:
        """Total number of element units, regardless of weight."""

        return sum(self._counts.values())

    def count(self, element: Element) -> int:
        return self._counts.get(element, 0)

    def sorted_items(self) -> list[tuple[Element, int]]:
        return sorted(self._counts.items(), key=lambda item: item[0])

    def clean(self) -> ElementCounts:
        """Return a copy with every zero entry removed."""

        return ElementCounts({element: count for element, count in self._counts.items() if count})

    def add_unit(self, element: Element) -> ElementCounts:
        updated = dict(self._counts)
        updated[element] = updated.get(element, 0) + 1
        return ElementCounts(updated)

    def remove_unit(self, element: Element) -> ElementCounts:
        current = self._counts.get(element, 0)
        if current <= 0:
            raise ValueError(f"No {element.name} left to remove")
        updated = dict(self._counts)
        if current == 1:
            del updated[element]
        else:
            updated[element] = current - 1
        return ElementCounts(updated)

    def first_present(self) -> Element | None:
        """Lightest element with a positive count."""

        for element in ELEMENTS_BY_WEIGHT:
            if self._counts.get(element, 0) > 0:
                return element
        return None


def parse_element_counts(text: str) -> ElementCounts:
    """Parse compound notation such as ``"2ae"`` or ``"a3b"``.

    Each element may appear once, in ascending weight order, optionally
    prefixed by a decimal count (default 1). Explicit zero counts are kept.
    """

    match = _NOTATION.fullmatch(text)
    if match is None:
        raise ParseError(text)
    counts: dict[Element, int] = {}
    for element in ELEMENTS_BY_WEIGHT:
        if match.group(element.name) is None:
            continue
        raw = match.group(f"{element.name}_count")
        counts[element] = int(raw) if raw is not None else 1
    return ElementCounts(counts)
