from __future__ import annotations

from typing import Callable, List, Sequence

from ..models.schemas import Code
from ..utils.text_utils import name_tokens


def name_overlap(a: str, b: str) -> float:
    """Share of ``a``'s name tokens found in ``b``, over the longer token list."""
    words_a = name_tokens(a)
    words_b = name_tokens(b)
    longest = max(len(words_a), len(words_b))
    if longest == 0:
        return 0.0
    common = [w for w in words_a if w in words_b]
    return len(common) / longest


def above(threshold: float) -> Callable[[float], bool]:
    return lambda ratio: ratio > threshold


def at_least(threshold: float) -> Callable[[float], bool]:
    return lambda ratio: ratio >= threshold


def group_codes(codes: Sequence[Code], similar: Callable[[float], bool]) -> List[List[Code]]:
    """Greedy first-match grouping, in order of each group's first member.

    A code joins the first group whose first member it resembles; otherwise it
    opens a new group. This is not transitive: encounter order decides groups.
    """
    groups: List[List[Code]] = []
    for code in codes:
        for group in groups:
            if similar(name_overlap(code.name, group[0].name)):
                group.append(code)
                break
        else:
            groups.append([code])
    return groups
