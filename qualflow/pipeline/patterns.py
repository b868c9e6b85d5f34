from __future__ import annotations

import logging
from typing import List, Sequence

from ..lexicons import CONTRAST_PAIRS
from ..models.schemas import Code, Pattern

logger = logging.getLogger(__name__)

_SIGNIFICANCE_ORDER = {"high": 0, "medium": 1, "low": 2}


def analyze_patterns(codes: Sequence[Code]) -> List[Pattern]:
    """Co-occurrence, contrast and hierarchy patterns, most significant first."""
    patterns = find_co_occurrences(codes) + find_contrasts(codes) + find_hierarchies(codes)
    logger.debug("found %d patterns across %d codes", len(patterns), len(codes))
    return sorted(patterns, key=lambda p: _SIGNIFICANCE_ORDER[p.significance])


def _overlaps(a: str, b: str) -> bool:
    return a == b or a in b or b in a


def find_co_occurrences(codes: Sequence[Code]) -> List[Pattern]:
    patterns: List[Pattern] = []
    for i, first in enumerate(codes):
        for second in codes[i + 1:]:
            others = [ex for ex in second.examples if ex]
            shared = [ex for ex in first.examples if ex and any(_overlaps(ex, o) for o in others)]
            if not shared:
                continue
            patterns.append(
                Pattern(
                    type="co-occurrence",
                    description=f'"{first.name}" and "{second.name}" frequently occur together',
                    elements=[first.name, second.name],
                    frequency=len(shared),
                    significance="high" if len(shared) > 2 else "medium",
                )
            )
    return patterns


def find_contrasts(codes: Sequence[Code]) -> List[Pattern]:
    patterns: List[Pattern] = []
    for term, opposite in CONTRAST_PAIRS:
        one = [c.name for c in codes if term in c.name.lower()]
        other = [c.name for c in codes if opposite in c.name.lower()]
        if one and other:
            patterns.append(
                Pattern(
                    type="contrast",
                    description=f"Contrast between {term} and {opposite} concepts",
                    elements=one + other,
                    frequency=len(one) + len(other),
                    significance="high",
                )
            )
    return patterns


def find_hierarchies(codes: Sequence[Code]) -> List[Pattern]:
    patterns: List[Pattern] = []
    for i, parent in enumerate(codes):
        children = [
            c.name for j, c in enumerate(codes) if j != i and c.name.startswith(parent.name)
        ]
        if children:
            patterns.append(
                Pattern(
                    type="hierarchy",
                    description=(
                        f'"{parent.name}" is a parent concept with {len(children)} sub-categories'
                    ),
                    elements=[parent.name] + children,
                    frequency=len(children),
                    significance="medium",
                )
            )
    return patterns
