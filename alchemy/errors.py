"""Errors raised while building compounds."""
from __future__ import annotations


class CompoundError(ValueError):
    """Base class for compound construction failures."""


class ParseError(CompoundError):
    def __init__(self, text: str) -> None:
        super().__init__(f"failed to parse compound: {text!r}")
        self.text = text


class SizeError(CompoundError):
    """The element counts are well formed but weigh the wrong amount."""

    def __init__(self, size: int, target_weight: int) -> None:
        super().__init__(f"invalid weight in compound: {size} (expected {target_weight})")
        self.size = size
        self.target_weight = target_weight
