from __future__ import annotations
from typing import List, Dict, Any, Optional, Sequence
from ..models.schemas import GroundedTheoryResult, Pattern, Theme
from ..utils.file_io import write_text

def theory_tables(theory: GroundedTheoryResult, themes: Optional[Sequence[Theme]] = None, patterns: Optional[Sequence[Pattern]] = None) -> Dict[str, List[Dict[str, Any]]]:
    tables: Dict[str, List[Dict[str, Any]]] = {
        "Categories": [
            {"category": c.name, "codes": ", ".join(c.related_codes), "properties": ", ".join(c.properties),
             "related": ", ".join(c.related_categories)}
            for c in theory.supporting_categories
        ],
        "Core Relationships": [
            {"type": r.relationship_type, "category": r.related_category, "description": r.description}
            for r in theory.core_category.relationships
        ],
    }
    if themes is not None:
        tables["Themes"] = [
            {"theme": t.name, "prevalence": f"{t.prevalence:.2f}", "codes": ", ".join(t.supporting_codes)}
            for t in themes
        ]
    if patterns is not None:
        tables["Patterns"] = [
            {"type": p.type, "significance": p.significance, "elements": ", ".join(p.elements)}
            for p in patterns
        ]
    return tables

def emit_markdown(out_path: str, stats: Dict[str, Any], tables: Dict[str, List[Dict[str,Any]]], sections: Optional[Dict[str, str]] = None):
    lines = ["# QualFlow Analysis Report", ""]
    lines.append("## Stats")
    for k,v in stats.items():
        lines.append(f"- **{k}**: {v}")
    lines.append("")
    for title, body in (sections or {}).items():
        lines.append(f"## {title}")
        lines.append("")
        lines.append(body)
        lines.append("")
    for name, rows in tables.items():
        lines.append(f"## {name}")
        if not rows:
            lines.append("_Empty_")
            lines.append("")
            continue
        headers = list(rows[0].keys())
        lines.append("| " + " | ".join(headers) + " |")
        lines.append("|" + "|".join(["---"]*len(headers)) + "|")
        for r in rows:
            lines.append("| " + " | ".join(str(r.get(h, "")).replace("|", "\\|") for h in headers) + " |")
        lines.append("")
    write_text(out_path, "\n".join(lines))
