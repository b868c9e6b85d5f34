from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from ..config import CodingConfig
from ..models.schemas import Code, CodeMerge, RefinementResult
from .similarity import above, group_codes

logger = logging.getLogger(__name__)


def refine_codebook(codes: Sequence[Code], conf: Optional[CodingConfig] = None) -> RefinementResult:
    """Merge near-duplicate codes until no further merge applies.

    Each pass is a greedy first-match clustering on name-token overlap; a pass
    over an already refined codebook merges nothing.
    """
    conf = conf or CodingConfig()
    current = [c.model_copy(deep=True) for c in codes]
    merges: List[CodeMerge] = []
    while True:
        current, pass_merges = _merge_pass(current, conf)
        if not pass_merges:
            break
        merges.extend(pass_merges)
    logger.debug("refined %d codes into %d (%d merges)", len(codes), len(current), len(merges))
    return RefinementResult(refined=current, merges=merges)


def _merge_pass(codes: List[Code], conf: CodingConfig) -> Tuple[List[Code], List[CodeMerge]]:
    refined: List[Code] = []
    merges: List[CodeMerge] = []
    for group in group_codes(codes, above(conf.merge_similarity)):
        if len(group) == 1:
            refined.append(group[0])
            continue
        merged = merge_codes(group, conf.merged_example_cap)
        refined.append(merged)
        merges.append(
            CodeMerge(
                merged_from=[c.name for c in group],
                to=merged.name,
                reason=(
                    f"Names are similar: they share more than "
                    f"{conf.merge_similarity:.0%} of their terms"
                ),
            )
        )
    return refined, merges


def merge_codes(group: Sequence[Code], example_cap: int = 5) -> Code:
    first = group[0]
    # min() keeps the first of equally short names
    name = min((c.name for c in group), key=len)
    examples = [ex for c in group for ex in c.examples][:example_cap]
    return Code(
        name=name,
        definition=first.definition,
        examples=examples,
        frequency=sum(c.frequency for c in group),
        type=first.type,
    )
