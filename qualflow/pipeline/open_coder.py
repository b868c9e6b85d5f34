from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..config import TheoryConfig
from ..lexicons import CATEGORY_RULES, DEFAULT_DIMENSION, DIMENSION_RULES, STOP_WORDS, first_match
from ..models.schemas import Category, Code, Dimension
from ..utils.text_utils import name_tokens

logger = logging.getLogger(__name__)

PARADIGMS = ("constructivist", "objectivist")


def infer_category_name(code: Code) -> str:
    rule = first_match(CATEGORY_RULES, code.name, code.definition)
    if rule is not None:
        return rule.label
    words = [w for w in name_tokens(code.name.lower()) if len(w) > 3]
    return words[0] if words else "miscellaneous"


def categories_are_similar(a: str, b: str) -> bool:
    if a == b:
        return True
    if a in (b + "s", b + "es") or b in (a + "s", a + "es"):
        return True
    words_b = name_tokens(b)
    return any(w in words_b for w in name_tokens(a))


def group_into_categories(codes: Sequence[Code]) -> Dict[str, List[Code]]:
    """Label every code, then fold labels that look alike into the first one seen."""
    raw: Dict[str, List[Code]] = {}
    for code in codes:
        raw.setdefault(infer_category_name(code), []).append(code)

    merged: Dict[str, List[Code]] = {}
    for label, members in raw.items():
        for key in merged:
            if categories_are_similar(label, key):
                merged[key].extend(members)
                break
        else:
            merged[label] = list(members)
    return merged


def identify_categories(
    codes: Sequence[Code],
    paradigm: str = "constructivist",
    conf: Optional[TheoryConfig] = None,
) -> List[Category]:
    """Open coding: abstract codes into categories with properties and dimensions."""
    conf = conf or TheoryConfig()
    categories: List[Category] = []
    for name, members in group_into_categories(codes).items():
        properties = identify_properties(members, conf.max_properties)
        dimensional_range = infer_dimensional_range(members)
        categories.append(
            Category(
                name=name,
                description=describe_category(members, paradigm),
                properties=properties,
                dimensions=[Dimension(property=p, range=dimensional_range) for p in properties],
                related_codes=[c.name for c in members],
                examples=[ex for c in members for ex in c.examples][: conf.example_cap],
            )
        )
    logger.debug("open coding produced %d categories from %d codes", len(categories), len(codes))
    return categories


def describe_category(codes: Sequence[Code], paradigm: str) -> str:
    if paradigm == "constructivist":
        prefix = "This category represents participants' experiences of"
    else:
        prefix = "This category describes the phenomenon of"
    names = ", ".join(c.name for c in codes)
    return f"{prefix} {names}. It emerged from {len(codes)} codes across the data."


def identify_properties(codes: Sequence[Code], limit: int = 5) -> List[str]:
    props: List[str] = []
    for code in codes:
        for word in name_tokens(code.name):
            if len(word) > 3 and word.lower() not in STOP_WORDS and word not in props:
                props.append(word)
    return props[:limit]


def infer_dimensional_range(codes: Sequence[Code]) -> str:
    for rule in DIMENSION_RULES:
        if any(rule.matches("", c.definition) for c in codes):
            return rule.label
    return DEFAULT_DIMENSION
