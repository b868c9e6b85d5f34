from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from ..config import TheoryConfig
from ..lexicons import AXIAL_CATEGORY_RULES, AXIAL_DEFINITION_RULES
from ..models.schemas import AxialCodingResult, Category, Code

logger = logging.getLogger(__name__)

SLOTS = (
    "causal_conditions",
    "context",
    "intervening_conditions",
    "action_strategies",
    "consequences",
)


def analyze_paradigm_model(
    category: Category,
    all_categories: Sequence[Category],
    members: Sequence[Code],
    conf: Optional[TheoryConfig] = None,
) -> AxialCodingResult:
    """Fill the paradigm model for one category.

    Other categories are placed by name; the category's own member codes are
    placed by phrases in their definitions (at most ``axial_code_cap`` each).
    """
    conf = conf or TheoryConfig()
    slots: Dict[str, List[str]] = {slot: [] for slot in SLOTS}

    for rule in AXIAL_CATEGORY_RULES:
        for other in all_categories:
            if other.name != category.name and rule.matches(other.name):
                _add(slots[rule.label], other.name)

    for rule in AXIAL_DEFINITION_RULES:
        matched = [c.name for c in members if rule.matches("", c.definition)]
        for name in matched[: conf.axial_code_cap]:
            _add(slots[rule.label], name)

    return AxialCodingResult(phenomenon=category.name, **slots)


def perform_axial_coding(
    categories: Sequence[Category],
    codes: Sequence[Code],
    conf: Optional[TheoryConfig] = None,
) -> List[AxialCodingResult]:
    by_name: Mapping[str, Code] = {c.name: c for c in codes}
    results: List[AxialCodingResult] = []
    for category in categories:
        members = [by_name[n] for n in category.related_codes if n in by_name]
        results.append(analyze_paradigm_model(category, categories, members, conf))
    logger.debug("axial coding produced %d paradigm models", len(results))
    return results


def link_categories(categories: Sequence[Category], axial_results: Sequence[AxialCodingResult]) -> List[Category]:
    """Copy of ``categories`` with related_categories taken from the axial results."""
    names = {c.name for c in categories}
    axial = {a.phenomenon: a for a in axial_results}
    linked: List[Category] = []
    for category in categories:
        related: List[str] = []
        result = axial.get(category.name)
        if result is not None:
            for slot in SLOTS:
                for entry in getattr(result, slot):
                    if entry in names and entry != category.name:
                        _add(related, entry)
        linked.append(category.model_copy(update={"related_categories": related}))
    return linked


def _add(items: List[str], value: str) -> None:
    if value not in items:
        items.append(value)
