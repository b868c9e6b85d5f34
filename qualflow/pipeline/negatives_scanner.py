from __future__ import annotations

from typing import List, Optional, Sequence

from ..lexicons import OPPOSITIONS
from ..models.schemas import Code, NegativeCase, NegativeCaseReport, Theme

THRESHOLDS = ("weak", "moderate", "strong")


def scan_negatives(
    theme: Theme, all_codes: Sequence[Code], threshold: str = "moderate"
) -> NegativeCaseReport:
    """Find codes outside ``theme`` whose terms oppose the theme's name."""
    if threshold not in THRESHOLDS:
        raise ValueError(f"Unknown contradiction threshold: {threshold}")
    theme_name = theme.name.lower()
    supporting = set(theme.supporting_codes)

    cases: List[NegativeCase] = []
    for code in all_codes:
        if code.name in supporting:
            continue
        case = detect_contradiction(theme_name, code)
        if case is not None:
            cases.append(case)

    filtered = [c for c in cases if _passes(c.strength, threshold)]
    count = len(filtered)
    if count == 0:
        recommendation = "No significant negative cases found. Theme appears robust."
    elif count <= 2:
        recommendation = (
            f"{count} negative case(s) found. Consider refining theme definition "
            f"to account for these exceptions."
        )
    else:
        recommendation = (
            f"{count} negative cases found. Theme may need significant revision "
            f"or should be split into multiple themes."
        )
    return NegativeCaseReport(negative_cases=filtered, recommendation=recommendation)


find_negative_cases = scan_negatives


def _passes(strength: str, threshold: str) -> bool:
    if threshold == "weak":
        return True
    if threshold == "moderate":
        return strength != "weak"
    return strength == "strong"


def detect_contradiction(theme_name: str, code: Code) -> Optional[NegativeCase]:
    name = code.name.lower()
    definition = code.definition.lower()
    for opp in OPPOSITIONS:
        for stated, opposed in ((opp.positive, opp.negative), (opp.negative, opp.positive)):
            if stated in theme_name and (opposed in name or opposed in definition):
                return NegativeCase(
                    code=code.name,
                    contradiction=f'Theme emphasizes "{stated}" but code suggests "{opposed}"',
                    strength=opp.strength,
                )
    return None
