from .auto_coder import generate_codes
from .codebook_builder import refine_codebook
from .theme_extractor import extract_themes
from .patterns import analyze_patterns
from .saturation import detect_saturation
from .negatives_scanner import find_negative_cases
from .theory_builder import build_grounded_theory
