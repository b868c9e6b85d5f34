"""Term lexicons used by the coding, theming and theory stages.

Every lexicon is plain data: an ordered tuple of :class:`Rule` records (or term
pairs) read by the small evaluator below. Order matters wherever a lexicon is
used as a decision list.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Rule:
    """A labelled trigger record.

    ``terms`` and ``suffixes`` are tested against the primary text (usually a
    code name), ``definition_terms`` against the secondary text. All checks are
    case-insensitive substring tests unless ``whole_word`` is set.
    """

    label: str
    terms: Tuple[str, ...] = ()
    definition_terms: Tuple[str, ...] = ()
    suffixes: Tuple[str, ...] = ()
    whole_word: bool = False
    description: str = ""

    def matches(self, text: str, definition: str = "") -> bool:
        text = (text or "").lower()
        definition = (definition or "").lower()
        if any(text.endswith(s) for s in self.suffixes):
            return True
        if contains_any(text, self.terms, self.whole_word):
            return True
        return contains_any(definition, self.definition_terms, self.whole_word)


@dataclass(frozen=True)
class Opposition:
    positive: str
    negative: str
    strength: str = "moderate"


def contains_any(text: str, terms: Iterable[str], whole_word: bool = False) -> bool:
    for term in terms:
        if whole_word:
            if re.search(rf"\b{re.escape(term)}\b", text):
                return True
        elif term in text:
            return True
    return False


def first_match(rules: Sequence[Rule], text: str, definition: str = "") -> Optional[Rule]:
    for rule in rules:
        if rule.matches(text, definition):
            return rule
    return None


def all_matches(rules: Sequence[Rule], text: str, definition: str = "") -> List[Rule]:
    return [rule for rule in rules if rule.matches(text, definition)]


# --- coding stage -----------------------------------------------------------

AFFECT_VERBS: Tuple[str, ...] = (
    "feel", "felt", "feeling", "think", "thought", "believe", "believed",
)

RELATIONAL_RULES: Tuple[Rule, ...] = (
    Rule(
        "relational-dynamics",
        terms=("relationship", "interaction", "connection", "between"),
        description="Describes relationships or interactions between entities",
    ),
)

THEMATIC_RULES: Tuple[Rule, ...] = (
    Rule(
        "challenge-identified",
        terms=("difficult", "challenge", "problem", "issue", "struggle"),
        description="Participant describes a difficulty or challenge",
    ),
    Rule(
        "coping-strategy",
        terms=("solution", "strategy", "approach", "way to", "how to"),
        description="Participant describes a strategy or solution",
    ),
) + tuple(
    Rule(f"emotion-{word}", terms=(word,), whole_word=True, description=f"Emotional state: {word}")
    for word in ("happy", "sad", "angry", "frustrated", "excited", "worried", "anxious")
)

PHENOMENOLOGY_RULES: Tuple[Rule, ...] = (
    Rule(
        "lived-experience",
        terms=("experience", "feel", "sense", "perceive"),
        description="Description of lived experience or perception",
    ),
)

# --- theming stage ----------------------------------------------------------


def _framework(label: str, *keywords: str) -> Rule:
    return Rule(label, terms=keywords, definition_terms=keywords)


THEORETICAL_FRAMEWORKS: Tuple[Rule, ...] = (
    _framework("Challenges and Barriers", "difficult", "challenge", "problem", "barrier", "obstacle", "struggle"),
    _framework("Strategies and Solutions", "solution", "strategy", "approach", "cope", "manage", "handle"),
    _framework("Emotional Experiences", "feel", "emotion", "happy", "sad", "angry", "frustrated", "anxious"),
    _framework("Relationships and Interactions", "relationship", "interaction", "connection", "communication", "support"),
    _framework("Identity and Self-Concept", "identity", "self", "who", "personal", "individual"),
)

CONTRAST_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("positive", "negative"),
    ("easy", "difficult"),
    ("success", "failure"),
    ("before", "after"),
    ("challenge", "solution"),
)

OPPOSITIONS: Tuple[Opposition, ...] = (
    Opposition("positive", "negative", "strong"),
    Opposition("success", "failure", "strong"),
    Opposition("easy", "difficult", "moderate"),
    Opposition("support", "obstacle", "moderate"),
    Opposition("benefit", "cost", "moderate"),
)

# --- theory stage -----------------------------------------------------------

CATEGORY_RULES: Tuple[Rule, ...] = (
    Rule("processes", suffixes=("ing",), definition_terms=("process", "action", "doing")),
    Rule("conditions", terms=("condition",), definition_terms=("condition", "situation", "context", "when")),
    Rule("strategies", terms=("strategy", "coping"), definition_terms=("strategy", "approach", "cope", "manage", "handle")),
    Rule("emotions", terms=("emotion", "feel"), definition_terms=("emotion", "feel")),
    Rule("challenges", terms=("challenge", "problem"), definition_terms=("challenge", "problem", "difficulty", "barrier")),
    Rule("outcomes", terms=("outcome", "result"), definition_terms=("outcome", "result", "consequence", "effect")),
    Rule("relationships", terms=("relational",), definition_terms=("relationship", "interaction", "connection")),
)

# Labels are AxialCodingResult field names.
AXIAL_CATEGORY_RULES: Tuple[Rule, ...] = (
    Rule("causal_conditions", terms=("condition", "cause")),
    Rule("context", terms=("context", "situation")),
    Rule("intervening_conditions", terms=("factor", "influence", "barrier")),
    Rule("action_strategies", terms=("strategy", "coping", "approach", "process")),
    Rule("consequences", terms=("outcome", "result", "consequence", "effect")),
)

AXIAL_DEFINITION_RULES: Tuple[Rule, ...] = (
    Rule("causal_conditions", definition_terms=("because", "due to", "caused by", "result of", "led to")),
    Rule("context", definition_terms=("when", "where", "situation", "context", "environment")),
    Rule("consequences", definition_terms=("result", "outcome", "led to", "caused", "effect")),
)

DIMENSION_RULES: Tuple[Rule, ...] = (
    Rule("low to high", definition_terms=("low", "high", "strong", "weak", "intense", "mild")),
    Rule("rarely to frequently", definition_terms=("often", "sometimes", "rarely", "always", "never")),
)
DEFAULT_DIMENSION = "varies across contexts"

STOP_WORDS = frozenset({
    "the", "and", "for", "with", "from", "that", "this",
    "have", "has", "had", "was", "were", "been", "being",
})
