"""
Environmental impact classification.

Maps an item type to a fixed CO2-saved weight (in lbs) per recycled item.

Evaluation Order:
1. contains "plastic"  -> 0.12
2. contains "aluminum" -> 0.22
3. contains "glass"    -> 0.16
4. anything else       -> 0.10 (default weight)

The first matching rule wins, so "Plastic Aluminum Hybrid" scores as plastic.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Sequence, Tuple


@dataclass(frozen=True)
class ImpactRule:
    """A (predicate, weight) pair evaluated against the lowercased item type."""
    name: str
    predicate: Callable[[str], bool]
    weight: Decimal


def contains(keyword: str, weight: Decimal) -> ImpactRule:
    """Build a rule matching item types that contain keyword (case-insensitive)."""
    needle = keyword.lower()
    return ImpactRule(
        name=needle,
        predicate=lambda item_type: needle in item_type,
        weight=weight,
    )


DEFAULT_IMPACT_WEIGHT = Decimal("0.10")

# Fixed priority order - do not sort
IMPACT_RULES: Tuple[ImpactRule, ...] = (
    contains("plastic", Decimal("0.12")),
    contains("aluminum", Decimal("0.22")),
    contains("glass", Decimal("0.16")),
)


def impact_weight(
    item_type: str,
    rules: Sequence[ImpactRule] = IMPACT_RULES,
    default_weight: Decimal = DEFAULT_IMPACT_WEIGHT
) -> Decimal:
    """Return the impact weight of the first rule matching item_type.

    Args:
        item_type: Free-form item type, e.g. "Glass Beer Bottle"
        rules: Ordered rules, evaluated top to bottom
        default_weight: Weight used when no rule matches

    Returns:
        Impact weight for a single item
    """
    lowered = item_type.lower()
    for rule in rules:
        if rule.predicate(lowered):
            return rule.weight
    return default_weight
