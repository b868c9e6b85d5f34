from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..config import ThemeConfig
from ..lexicons import THEORETICAL_FRAMEWORKS
from ..models.schemas import Code, Theme
from ..utils.text_utils import name_tokens
from .similarity import above, at_least, group_codes

logger = logging.getLogger(__name__)

MODES = ("inductive", "deductive")


def extract_themes(
    codes: Sequence[Code],
    mode: str = "inductive",
    depth: str = "medium",
    conf: Optional[ThemeConfig] = None,
) -> List[Theme]:
    """Group codes into themes, ranked by prevalence (highest first).

    At ``depth="deep"`` a theme of ``conf.deep_min_codes`` or more codes gets
    one level of sub-themes. These regroup its codes with an overlap strictly
    above ``conf.subtheme_similarity`` (0.5), not the 0.3 used for themes,
    since regrouping at 0.3 just rebuilds the parent as its only sub-theme. Set
    ``subtheme_similarity=0.3`` to get the plain regrouping.
    """
    conf = conf or ThemeConfig()
    if mode not in MODES:
        raise ValueError(f"Unknown theme extraction mode: {mode}")
    if not codes:
        return []
    if mode == "inductive":
        themes = _inductive(codes, depth, conf)
    else:
        themes = _deductive(codes, conf)
    logger.debug("extracted %d %s themes from %d codes", len(themes), mode, len(codes))
    return sorted(themes, key=lambda t: -t.prevalence)


def _inductive(codes: Sequence[Code], depth: str, conf: ThemeConfig) -> List[Theme]:
    total = total_frequency(codes)
    themes: List[Theme] = []
    for group in group_codes(codes, at_least(conf.similarity)):
        if len(group) < 2:
            continue
        theme = _theme_from_group(group, total, conf.example_cap)
        if depth == "deep" and len(group) >= conf.deep_min_codes:
            # one level only: sub-themes are never grouped again
            theme.sub_themes = [
                _theme_from_group(sub, total, conf.subtheme_example_cap)
                for sub in group_codes(group, above(conf.subtheme_similarity))
                if len(sub) >= 2
            ]
        themes.append(theme)
    return themes


def _deductive(codes: Sequence[Code], conf: ThemeConfig) -> List[Theme]:
    total = total_frequency(codes)
    themes: List[Theme] = []
    for framework in THEORETICAL_FRAMEWORKS:
        matching = [c for c in codes if framework.matches(c.name, c.definition)]
        if not matching:
            continue
        themes.append(
            Theme(
                name=framework.label,
                description=(
                    f"Theme identified through deductive analysis based on the "
                    f"'{framework.label}' theoretical framework"
                ),
                supporting_codes=[c.name for c in matching],
                prevalence=prevalence(matching, total),
                examples=[ex for c in matching for ex in c.examples][: conf.example_cap],
            )
        )
    return themes


def _theme_from_group(group: Sequence[Code], total: int, example_cap: int) -> Theme:
    names = ", ".join(c.name for c in group)
    return Theme(
        name=theme_name(group),
        description=(
            f"This theme encompasses {len(group)} related codes: {names}. "
            f"It represents a pattern of meaning across the data."
        ),
        supporting_codes=[c.name for c in group],
        prevalence=prevalence(group, total),
        examples=[ex for c in group for ex in c.examples][:example_cap],
    )


def theme_name(group: Sequence[Code]) -> str:
    counts: Dict[str, int] = {}
    for code in group:
        for word in name_tokens(code.name):
            if len(word) > 3:
                counts[word] = counts.get(word, 0) + 1
    # sorted() is stable, so equal counts keep first-seen order
    top = [w for w, _ in sorted(counts.items(), key=lambda kv: -kv[1])[:3]]
    if not top:
        return group[0].name
    return " and ".join(w[:1].upper() + w[1:] for w in top)


def total_frequency(codes: Sequence[Code]) -> int:
    return sum(c.frequency for c in codes)


def prevalence(codes: Sequence[Code], total: int) -> float:
    if total <= 0:
        return 0.0
    return min(total_frequency(codes) / total, 1.0)
