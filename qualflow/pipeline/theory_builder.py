"""Theory integration and the full grounded theory build.

``build_grounded_theory`` runs four ordered sub-stages:

1. open coding (:mod:`.open_coder`) groups codes into categories;
2. axial coding (:mod:`.axial_coder`) fills a paradigm model per category;
3. selective coding (:mod:`.selective_coder`) elevates one core category;
4. integration (this module) writes the framework and storyline, scores
   completeness and drafts recommendations.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..config import TheoryConfig
from ..exceptions import NoCategoriesError
from ..models.schemas import (
    AxialCodingResult,
    Category,
    Code,
    CoreCategory,
    GroundedTheoryResult,
    Theme,
)
from .axial_coder import link_categories, perform_axial_coding
from .open_coder import PARADIGMS, identify_categories
from .selective_coder import identify_core_category

logger = logging.getLogger(__name__)


def build_grounded_theory(
    codes: Sequence[Code],
    research_question: str,
    themes: Optional[Sequence[Theme]] = None,
    paradigm: str = "constructivist",
    conf: Optional[TheoryConfig] = None,
) -> GroundedTheoryResult:
    conf = conf or TheoryConfig()
    if paradigm not in PARADIGMS:
        raise ValueError(f"Unknown paradigm: {paradigm}")

    categories = identify_categories(codes, paradigm, conf)
    if not categories:
        raise NoCategoriesError()
    axial_results = perform_axial_coding(categories, codes, conf)
    categories = link_categories(categories, axial_results)
    core = identify_core_category(categories, axial_results, research_question, conf)
    return integrate_theory(core, categories, axial_results, research_question, paradigm, themes)


def integrate_theory(
    core: CoreCategory,
    categories: Sequence[Category],
    axial_results: Sequence[AxialCodingResult],
    research_question: str,
    paradigm: str = "constructivist",
    themes: Optional[Sequence[Theme]] = None,
) -> GroundedTheoryResult:
    completeness = assess_completeness(core, categories, axial_results)
    logger.debug("theory around %s is %.0f%% complete", core.name, completeness * 100)
    return GroundedTheoryResult(
        core_category=core,
        supporting_categories=list(categories),
        axial_results=list(axial_results),
        theoretical_framework=theoretical_framework(core, categories, paradigm, themes),
        storyline=storyline(core, axial_results, research_question),
        stage="theory_integration",
        completeness=completeness,
        recommendations=recommendations(completeness, core, categories),
    )


def theoretical_framework(
    core: CoreCategory,
    categories: Sequence[Category],
    paradigm: str,
    themes: Optional[Sequence[Theme]] = None,
) -> str:
    if paradigm == "constructivist":
        text = "This grounded theory, constructed from participants' lived experiences, "
    else:
        text = "This grounded theory, derived from systematic data analysis, "
    text += f'proposes that "{core.name}" serves as the core organizing concept. '
    text += (
        f"\n\nThe theory identifies {len(categories)} major categories that interact "
        f"to explain the phenomenon. These categories are: "
    )
    text += ", ".join(c.name for c in categories) + ". "
    if themes:
        text += f"\n\nIt is informed by the themes: {', '.join(t.name for t in themes)}. "
    text += "\n\nThe relationships between categories follow this pattern:\n"
    for rel in core.relationships:
        text += f"- {rel.description}\n"
    text += (
        "\nThis theoretical framework provides a substantive explanation of the processes "
        "and patterns observed in the data."
    )
    return text


def storyline(
    core: CoreCategory, axial_results: Sequence[AxialCodingResult], research_question: str
) -> str:
    text = "GROUNDED THEORY STORYLINE\n\n"
    text += (
        f'Addressing the research question "{research_question}", '
        f"this theory explains how {core.name} operates as the central process.\n\n"
    )
    axial = next((a for a in axial_results if a.phenomenon == core.name), None)
    if axial is not None:
        if axial.causal_conditions or axial.context:
            text += "The process begins when certain conditions are present. "
            if axial.causal_conditions:
                text += f"Causal factors include {', '.join(axial.causal_conditions)}. "
            if axial.context:
                text += f"This occurs within contexts characterized by {', '.join(axial.context)}. "
            text += "\n\n"
        if axial.action_strategies:
            text += "In response to these conditions, participants engage in various strategies. "
            text += f"Key approaches include {', '.join(axial.action_strategies)}. "
            if axial.intervening_conditions:
                text += (
                    "These strategies are shaped by intervening factors such as "
                    f"{', '.join(axial.intervening_conditions)}. "
                )
            text += "\n\n"
        if axial.consequences:
            text += f"The outcomes of this process include {', '.join(axial.consequences)}. "
            text += (
                "These consequences may, in turn, influence future iterations of the process, "
                "creating a dynamic and evolving pattern.\n\n"
            )
    text += (
        "This integrated storyline demonstrates how the categories work together "
        "to form a coherent theoretical explanation."
    )
    return text


def assess_completeness(
    core: CoreCategory,
    categories: Sequence[Category],
    axial_results: Sequence[AxialCodingResult],
) -> float:
    score = 20.0  # a core category exists
    score += min(len(categories) * 4, 20)
    score += min(len(core.relationships) * 5, 20)
    score += min(len(axial_results) * 4, 20)
    score += core.centrality * 20
    return min(score / 100.0, 1.0)


def recommendations(
    completeness: float, core: CoreCategory, categories: Sequence[Category]
) -> List[str]:
    recs: List[str] = []
    if completeness < 0.6:
        recs.append(
            "Theory is incomplete. Continue data collection and coding to develop more robust categories."
        )
    elif completeness < 0.8:
        recs.append("Theory is developing well. Focus on refining relationships between categories.")
    else:
        recs.append("Theory is well-developed and ready for validation and refinement.")

    if len(core.relationships) < 3:
        recs.append(
            "Consider exploring more relationships between the core category and other categories."
        )
    if len(categories) < 5:
        recs.append(
            "Theory might benefit from identifying additional categories through further analysis."
        )
    if core.centrality < 0.5:
        recs.append(
            "The identified core category may not be sufficiently central. "
            "Consider if another category better integrates the theory."
        )
    recs.append("Write detailed theoretical memos to document your analytical decisions.")
    recs.append("Consider member checking by sharing preliminary findings with participants.")
    return recs
