"""Reaction rules: which compounds react under which cauldron conditions."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

from alchemy import COMPOUND_WEIGHT, Compound

LOGGER = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path("assets/design/reaction_rules.json")


class Heat(Enum):
    SIMMERING = "Simmering"
    BOILING = "Boiling"


class StirMethod(Enum):
    ZERO_STIR = "ZeroStir"
    SINGLE_STIR = "SingleStir"
    DOUBLE_STIR = "DoubleStir"
    QUADRUPLE_STIR = "QuadrupleStir"


class RuleError(ValueError):
    """A rule file entry that cannot be turned into a :class:`ReactionRule`."""


@dataclass(frozen=True)
class ReactionRule:
    compound: Compound
    # None means the compound reacts under any heat
    heat: Heat | None = None
    # None means the compound reacts under any stir method
    stir_method: StirMethod | None = None

    def accepts(self, stir_method: StirMethod | None, heat: Heat | None) -> bool:
        stir_match = stir_method is None or self.stir_method is None or self.stir_method == stir_method
        heat_match = heat is None or self.heat is None or self.heat == heat
        return stir_match and heat_match


def _parse_enum(enum_cls: type[Enum], value: Any, index: int, field: str) -> Any:
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise RuleError(f"Rule {index}: unknown {field} {value!r} (expected one of {choices})") from None


def rule_from_dict(entry: Any, index: int = 0, target_weight: int = COMPOUND_WEIGHT) -> ReactionRule:
    if not isinstance(entry, dict):
        raise RuleError(f"Rule {index}: expected an object, got {type(entry).__name__}")
    text = entry.get("compound")
    if not isinstance(text, str):
        raise RuleError(f"Rule {index}: missing compound")
    compound = Compound.parse(text, target_weight=target_weight)
    return ReactionRule(
        compound=compound,
        heat=_parse_enum(Heat, entry.get("heat"), index, "heat"),
        stir_method=_parse_enum(StirMethod, entry.get("stir_method"), index, "stir_method"),
    )


def rule_to_dict(rule: ReactionRule) -> dict[str, Any]:
    return {
        "compound": str(rule.compound),
        "heat": rule.heat.value if rule.heat else None,
        "stir_method": rule.stir_method.value if rule.stir_method else None,
    }


def parse_reaction_rules(document: Any, target_weight: int = COMPOUND_WEIGHT) -> list[ReactionRule]:
    if not isinstance(document, list):
        raise RuleError("Reaction rules must be a JSON list")
    return [rule_from_dict(entry, index, target_weight) for index, entry in enumerate(document)]


def load_reaction_rules(
    path: str | Path = DEFAULT_RULES_PATH, target_weight: int = COMPOUND_WEIGHT
) -> list[ReactionRule]:
    """Load reaction rules from a JSON file."""

    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        document = json.load(handle)
    rules = parse_reaction_rules(document, target_weight)
    LOGGER.debug("Loaded %d reaction rules from %s", len(rules), path)
    return rules


def get_reactive_compounds(
    reaction_rules: Iterable[ReactionRule],
    stir_method: StirMethod | None = None,
    heat: Heat | None = None,
) -> list[Compound]:
    """Compounds that react under the given conditions.

    ``None`` for ``stir_method`` or ``heat`` places no requirement on that
    condition, e.g. ``stir_method=None`` filters on heat alone.
    """

    return [rule.compound for rule in reaction_rules if rule.accepts(stir_method, heat)]
