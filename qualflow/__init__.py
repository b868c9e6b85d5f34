"""
QualFlow - deterministic qualitative analysis pipeline.

Turns raw text into codes, and codes into themes, patterns, saturation
metrics, negative cases and a grounded theory, using transparent lexical
heuristics that a researcher can audit.
"""

__version__ = "0.1.0"
