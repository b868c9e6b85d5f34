from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Optional

class CodingConfig(BaseModel):
    max_paragraph_chars: int = 500
    example_chars: int = 100
    in_vivo_min_chars: int = 10
    in_vivo_max_chars: int = 50
    max_gerunds_per_segment: int = 5
    min_gerund_chars: int = 6
    # None keeps every excerpt a code collects
    max_examples_per_code: Optional[int] = None
    merge_similarity: float = 0.5
    merged_example_cap: int = 5

class ThemeConfig(BaseModel):
    similarity: float = 0.3
    subtheme_similarity: float = 0.5
    deep_min_codes: int = 6
    example_cap: int = 3
    subtheme_example_cap: int = 2

class SaturationConfig(BaseModel):
    window: int = 3
    new_code_ceiling: float = 5.0
    saturated_above: float = 0.85
    approaching_above: float = 0.7

class CentralityWeights(BaseModel):
    related_codes: float = 1.0
    causal_conditions: float = 2.0
    consequences: float = 2.0
    action_strategies: float = 1.5
    context: float = 1.0
    intervening_conditions: float = 1.0

class TheoryConfig(BaseModel):
    max_properties: int = 5
    example_cap: int = 3
    axial_code_cap: int = 3
    weights: CentralityWeights = Field(default_factory=CentralityWeights)

class OutputConfig(BaseModel):
    out_dir: str = "output"
    save_html: bool = True
    # run-all writes the full DEBUG log here, inside out_dir; "" disables it
    log_file: str = "analysis.log"

class AppConfig(BaseModel):
    methodology: str = "general"
    paradigm: str = "constructivist"
    coding: CodingConfig = CodingConfig()
    themes: ThemeConfig = ThemeConfig()
    saturation: SaturationConfig = SaturationConfig()
    theory: TheoryConfig = TheoryConfig()
    output: OutputConfig = OutputConfig()
