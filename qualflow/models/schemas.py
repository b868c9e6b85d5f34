from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Literal

CodeType = Literal["in_vivo", "constructed", "theoretical"]
Significance = Literal["high", "medium", "low"]
Strength = Literal["weak", "moderate", "strong"]
SaturationLevel = Literal["code", "theme", "theoretical"]
RelationshipType = Literal["causes", "leads_to", "influences", "part_of", "contradicts"]

# Coding stage

class Code(BaseModel):
    name: str
    definition: str = ""
    examples: List[str] = Field(default_factory=list)
    frequency: int = Field(default=1, ge=0)
    type: CodeType = "constructed"

class TextSegment(BaseModel):
    text: str
    start: int
    end: int

class CodedSegment(BaseModel):
    text: str
    codes: List[str] = Field(default_factory=list)
    start_index: int
    end_index: int

class CodingSummary(BaseModel):
    total_codes: int = 0
    in_vivo_codes: int = 0
    constructed_codes: int = 0
    theoretical_codes: int = 0
    average_codes_per_segment: float = 0.0

class CodingResult(BaseModel):
    codes: List[Code] = Field(default_factory=list)
    segments: List[CodedSegment] = Field(default_factory=list)
    summary: CodingSummary = Field(default_factory=CodingSummary)

class CodeMerge(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    merged_from: List[str] = Field(alias="from")
    to: str
    reason: str

class RefinementResult(BaseModel):
    refined: List[Code] = Field(default_factory=list)
    merges: List[CodeMerge] = Field(default_factory=list)

# Theming stage

class Theme(BaseModel):
    name: str
    description: str = ""
    supporting_codes: List[str] = Field(min_length=1)
    prevalence: float = Field(default=0.0, ge=0.0, le=1.0)
    examples: List[str] = Field(default_factory=list)
    sub_themes: Optional[List["Theme"]] = None

class Pattern(BaseModel):
    type: Literal["co-occurrence", "contrast", "hierarchy", "sequence"]
    description: str
    elements: List[str]
    frequency: int
    significance: Significance

class SaturationAnalysis(BaseModel):
    level: SaturationLevel
    saturated: bool
    saturation_rate: float = Field(ge=0.0, le=1.0)
    new_codes_per_source: List[int] = Field(default_factory=list)
    recommendation: str

class NegativeCase(BaseModel):
    code: str
    contradiction: str
    strength: Strength

class NegativeCaseReport(BaseModel):
    negative_cases: List[NegativeCase] = Field(default_factory=list)
    recommendation: str

# Theory stage

class Dimension(BaseModel):
    property: str
    range: str

class Category(BaseModel):
    name: str
    description: str
    properties: List[str] = Field(default_factory=list)
    dimensions: List[Dimension] = Field(default_factory=list)
    related_codes: List[str] = Field(default_factory=list)
    related_categories: List[str] = Field(default_factory=list)
    examples: List[str] = Field(default_factory=list)

class AxialCodingResult(BaseModel):
    phenomenon: str
    causal_conditions: List[str] = Field(default_factory=list)
    context: List[str] = Field(default_factory=list)
    intervening_conditions: List[str] = Field(default_factory=list)
    action_strategies: List[str] = Field(default_factory=list)
    consequences: List[str] = Field(default_factory=list)

class Relationship(BaseModel):
    related_category: str
    relationship_type: RelationshipType
    description: str

class CoreCategory(BaseModel):
    name: str
    description: str
    centrality: float = Field(ge=0.0, le=1.0)
    relationships: List[Relationship] = Field(default_factory=list)
    theoretical_memo: str

class GroundedTheoryResult(BaseModel):
    core_category: CoreCategory
    supporting_categories: List[Category]
    axial_results: List[AxialCodingResult] = Field(default_factory=list)
    theoretical_framework: str
    storyline: str
    stage: Literal["theory_integration"] = "theory_integration"
    completeness: float = Field(ge=0.0, le=1.0)
    recommendations: List[str] = Field(default_factory=list)
