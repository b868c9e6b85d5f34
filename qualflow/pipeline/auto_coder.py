from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Sequence

from ..config import CodingConfig
from ..lexicons import (
    AFFECT_VERBS,
    PHENOMENOLOGY_RULES,
    RELATIONAL_RULES,
    THEMATIC_RULES,
    Rule,
    all_matches,
)
from ..models.schemas import Code, CodedSegment, CodingResult, CodingSummary
from ..utils.text_utils import excerpt, name_tokens, slugify
from .segmenter import segment_text

logger = logging.getLogger(__name__)

_QUOTED = re.compile(r"[\"“]([^\"“”]+)[\"”]")
_AFFECT = re.compile(r"\b(?:%s)\s+\w+" % "|".join(AFFECT_VERBS), re.IGNORECASE)
_GERUND = re.compile(r"\b\w+ing\b")


def generate_codes(
    text: str,
    existing_codes: Optional[Sequence[str]] = None,
    methodology: Optional[str] = "general",
    conf: Optional[CodingConfig] = None,
) -> CodingResult:
    """Code ``text`` segment by segment and fold the results into a codebook.

    Three strategies run on every segment: in-vivo extraction, constructed
    codes chosen by ``methodology``, and re-attachment of ``existing_codes``
    whose name parts occur in the segment.
    """
    conf = conf or CodingConfig()
    existing = list(existing_codes or [])
    method = (methodology or "general").lower()

    codebook: Dict[str, Code] = {}
    coded: List[CodedSegment] = []
    for seg in segment_text(text or "", conf.max_paragraph_chars):
        attached: List[str] = []
        for code in _codes_for_segment(seg.text, method, existing, conf):
            if code.name in attached:
                continue
            attached.append(code.name)
            _accumulate(codebook, code, seg.text, conf)
        coded.append(
            CodedSegment(text=seg.text, codes=attached, start_index=seg.start, end_index=seg.end)
        )

    codes = list(codebook.values())
    logger.debug("coded %d segments into %d codes (methodology=%s)", len(coded), len(codes), method)
    return CodingResult(codes=codes, segments=coded, summary=summarize(codes, coded))


def _accumulate(codebook: Dict[str, Code], code: Code, segment: str, conf: CodingConfig) -> None:
    found = codebook.get(code.name)
    if found is None:
        codebook[code.name] = code
        return
    found.frequency += 1
    if conf.max_examples_per_code is None or len(found.examples) < conf.max_examples_per_code:
        found.examples.append(excerpt(segment, conf.example_chars))


def _codes_for_segment(
    segment: str, method: str, existing: Sequence[str], conf: CodingConfig
) -> List[Code]:
    codes = extract_in_vivo(segment, conf)
    codes.extend(construct_codes(segment, method, conf))
    example = excerpt(segment, conf.example_chars)
    for name in existing:
        if code_applies(segment, name):
            codes.append(
                Code(
                    name=name,
                    definition="Existing code from codebook",
                    examples=[example],
                    type="constructed",
                )
            )
    return codes


def extract_in_vivo(segment: str, conf: Optional[CodingConfig] = None) -> List[Code]:
    """Participants' own words: quoted phrases and affect/cognition verbs."""
    conf = conf or CodingConfig()
    codes: List[Code] = []
    for match in _QUOTED.finditer(segment):
        cleaned = match.group(1).strip()
        if conf.in_vivo_min_chars <= len(cleaned) < conf.in_vivo_max_chars:
            codes.append(
                Code(
                    name=slugify(cleaned),
                    definition=f'In-vivo code: "{cleaned}"',
                    examples=[excerpt(segment, conf.example_chars)],
                    type="in_vivo",
                )
            )
    for match in _AFFECT.finditer(segment):
        phrase = match.group(0).lower()
        codes.append(
            Code(
                name=slugify(phrase),
                definition=f"Emotional/cognitive expression: {' '.join(phrase.split())}",
                examples=[segment[match.start(): match.start() + conf.example_chars]],
                type="in_vivo",
            )
        )
    return codes


def construct_codes(segment: str, method: str, conf: Optional[CodingConfig] = None) -> List[Code]:
    """Researcher-constructed codes; which lexicons run depends on ``method``."""
    conf = conf or CodingConfig()
    general = method == "general"
    example = excerpt(segment, conf.example_chars)
    codes: List[Code] = []

    if "grounded" in method or general:
        for gerund in extract_gerunds(segment, conf):
            codes.append(Code(name=gerund, definition=f"Process/action: {gerund}", examples=[example]))
        codes.extend(_from_rules(RELATIONAL_RULES, segment, example))
    if "thematic" in method or general:
        codes.extend(_from_rules(THEMATIC_RULES, segment, example))
    if "phenomenology" in method:
        codes.extend(_from_rules(PHENOMENOLOGY_RULES, segment, example))
    return codes


def extract_gerunds(segment: str, conf: Optional[CodingConfig] = None) -> List[str]:
    """The first ``max_gerunds_per_segment`` distinct -ing words, minus the short ones.

    Short words such as "sing" still take one of the slots.
    """
    conf = conf or CodingConfig()
    unique: List[str] = []
    for word in _GERUND.findall(segment.lower()):
        if word not in unique:
            unique.append(word)
    return [w for w in unique[: conf.max_gerunds_per_segment] if len(w) >= conf.min_gerund_chars]


def _from_rules(rules: Sequence[Rule], segment: str, example: str) -> List[Code]:
    return [
        Code(name=rule.label, definition=rule.description, examples=[example])
        for rule in all_matches(rules, segment)
    ]


def code_applies(segment: str, code_name: str) -> bool:
    # short parts like "of" match almost anything
    lowered = segment.lower()
    return any(part.lower() in lowered for part in name_tokens(code_name))


def summarize(codes: Sequence[Code], segments: Sequence[CodedSegment]) -> CodingSummary:
    applications = sum(len(s.codes) for s in segments)
    average = applications / len(segments) if segments else 0.0
    return CodingSummary(
        total_codes=len(codes),
        in_vivo_codes=sum(1 for c in codes if c.type == "in_vivo"),
        constructed_codes=sum(1 for c in codes if c.type == "constructed"),
        theoretical_codes=sum(1 for c in codes if c.type == "theoretical"),
        average_codes_per_segment=round(average, 1),
    )
