from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Sequence, Set, Union

from ..config import SaturationConfig
from ..models.schemas import Code, SaturationAnalysis

logger = logging.getLogger(__name__)

LEVELS = ("code", "theme", "theoretical")


def detect_saturation(
    codes_by_source: Mapping[str, Sequence[Union[Code, str]]],
    level: str = "code",
    conf: Optional[SaturationConfig] = None,
) -> SaturationAnalysis:
    """Measure how many unseen codes each source contributes, in mapping order.

    The order of ``codes_by_source`` must be the order the sources were
    collected; the rate looks only at the last ``conf.window`` sources.
    """
    conf = conf or SaturationConfig()
    if level not in LEVELS:
        raise ValueError(f"Unknown saturation level: {level}")
    seen: Set[str] = set()
    new_counts: List[int] = []
    for source, items in codes_by_source.items():
        new_names: List[str] = []
        for item in items:
            name = item.name if isinstance(item, Code) else str(item)
            if name not in seen and name not in new_names:
                new_names.append(name)
        new_counts.append(len(new_names))
        seen.update(new_names)
        logger.debug("source %s contributed %d new codes", source, len(new_names))

    recent = new_counts[-conf.window:]
    if recent:
        avg = sum(recent) / len(recent)
        rate = 1 - min(avg / conf.new_code_ceiling, 1.0)
    else:
        rate = 0.0
    saturated = rate > conf.saturated_above

    if saturated:
        recommendation = (
            f"Saturation achieved at {level} level: recent sources add few new codes, "
            f"so the data appear saturated. You likely have enough data."
        )
    elif rate > conf.approaching_above:
        recommendation = "Approaching saturation. 2-3 more data sources recommended."
    else:
        recommendation = "Not yet saturated. Continue data collection for robust findings."

    return SaturationAnalysis(
        level=level,
        saturated=saturated,
        saturation_rate=rate,
        new_codes_per_source=new_counts,
        recommendation=recommendation,
    )
