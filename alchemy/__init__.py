"""Fixed-weight compounds and the reactions between them."""
from .compound import COMPOUND_WEIGHT, Compound  # noqa: F401
from .element import Element  # noqa: F401
from .element_counts import ElementCounts, parse_element_counts  # noqa: F401
from .errors import CompoundError, ParseError, SizeError  # noqa: F401
from .reactions import (  # noqa: F401
    react,
    reaction_search,
    search_partitions,
    set_of_possible_reactions,
)

__all__ = [
    "COMPOUND_WEIGHT",
    "Compound",
    "CompoundError",
    "Element",
    "ElementCounts",
    "ParseError",
    "SizeError",
    "parse_element_counts",
    "react",
    "reaction_search",
    "search_partitions",
    "set_of_possible_reactions",
]
