from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..config import CentralityWeights, TheoryConfig
from ..exceptions import NoCategoriesError
from ..models.schemas import AxialCodingResult, Category, CoreCategory, Relationship

logger = logging.getLogger(__name__)


def centrality_score(
    category: Category,
    axial: Optional[AxialCodingResult],
    weights: Optional[CentralityWeights] = None,
) -> float:
    w = weights or CentralityWeights()
    score = len(category.related_codes) * w.related_codes
    if axial is not None:
        score += len(axial.causal_conditions) * w.causal_conditions
        score += len(axial.consequences) * w.consequences
        score += len(axial.action_strategies) * w.action_strategies
        score += len(axial.context) * w.context
        score += len(axial.intervening_conditions) * w.intervening_conditions
    return score


def identify_core_category(
    categories: Sequence[Category],
    axial_results: Sequence[AxialCodingResult],
    research_question: str,
    conf: Optional[TheoryConfig] = None,
) -> CoreCategory:
    """Selective coding: elevate the most connected category to core category."""
    conf = conf or TheoryConfig()
    if not categories:
        raise NoCategoriesError()

    axial = {a.phenomenon: a for a in axial_results}
    scores: Dict[str, float] = {}
    for category in categories:
        scores[category.name] = centrality_score(category, axial.get(category.name), conf.weights)

    # first category wins ties
    core = max(categories, key=lambda c: scores[c.name])
    core_axial = axial.get(core.name)
    total = sum(scores.values())
    centrality = scores[core.name] / total if total > 0 else 0.0
    logger.debug("core category %s (score %.1f of %.1f)", core.name, scores[core.name], total)

    return CoreCategory(
        name=core.name,
        description=core.description,
        centrality=centrality,
        relationships=build_relationships(core.name, core_axial),
        theoretical_memo=theoretical_memo(core, core_axial, research_question),
    )


def build_relationships(core_name: str, axial: Optional[AxialCodingResult]) -> List[Relationship]:
    if axial is None:
        return []
    rels: List[Relationship] = []
    for cause in axial.causal_conditions:
        rels.append(Relationship(
            related_category=cause,
            relationship_type="causes",
            description=f"{cause} contributes to the emergence of {core_name}",
        ))
    for consequence in axial.consequences:
        rels.append(Relationship(
            related_category=consequence,
            relationship_type="leads_to",
            description=f"{core_name} results in {consequence}",
        ))
    for strategy in axial.action_strategies:
        rels.append(Relationship(
            related_category=strategy,
            relationship_type="influences",
            description=f"{core_name} is managed through {strategy}",
        ))
    return rels


def theoretical_memo(
    category: Category, axial: Optional[AxialCodingResult], research_question: str
) -> str:
    parts = [
        f"THEORETICAL MEMO: {category.name.upper()}\n\n",
        f"Research Question: {research_question}\n\n",
        f'The core category "{category.name}" emerged as the central phenomenon '
        f"organizing this grounded theory. ",
    ]
    if axial is not None:
        if axial.causal_conditions:
            parts.append(f"It appears to be caused or influenced by: {', '.join(axial.causal_conditions)}. ")
        if axial.context:
            parts.append(f"This occurs within the context of: {', '.join(axial.context)}. ")
        if axial.action_strategies:
            parts.append(
                f"Participants respond through strategies such as: {', '.join(axial.action_strategies)}. "
            )
        if axial.consequences:
            parts.append(f"The consequences include: {', '.join(axial.consequences)}. ")
    parts.append(
        f"\n\nThis category integrates {len(category.related_codes)} codes "
        f"and provides a theoretical explanation for the phenomenon under study."
    )
    return "".join(parts)
