from __future__ import annotations
import os, json
from typing import Any, Dict, List
import yaml
from pydantic import TypeAdapter
from ..models.schemas import Code

def ensure_dir(p: str):
    os.makedirs(p, exist_ok=True)

def read_text(p: str) -> str:
    with open(p, "r", encoding="utf-8") as f:
        return f.read()

def write_text(p: str, s: str):
    ensure_dir(os.path.dirname(p) or ".")
    with open(p, "w", encoding="utf-8") as f:
        f.write(s)

def read_json(p: str) -> Any:
    with open(p, "r", encoding="utf-8") as f:
        return json.load(f)

def write_json(p: str, obj: Any):
    ensure_dir(os.path.dirname(p) or ".")
    with open(p, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)

def read_structured(p: str) -> Any:
    """JSON or YAML, chosen by extension."""
    if p.endswith(".json"):
        return read_json(p)
    return yaml.safe_load(read_text(p))

def read_codes(p: str) -> List[Code]:
    """Codes from a bare list or from any object holding a ``codes``/``refined`` list."""
    data = read_json(p)
    if isinstance(data, dict):
        data = data.get("codes") or data.get("refined") or []
    return TypeAdapter(List[Code]).validate_python(data)

def read_codes_by_source(p: str) -> Dict[str, List[Any]]:
    data = read_json(p)
    if not isinstance(data, dict):
        raise ValueError(f"{p}: expected an object mapping source names to codes")
    out: Dict[str, List[Any]] = {}
    for source, items in data.items():
        out[source] = [x if isinstance(x, str) else Code.model_validate(x) for x in items]
    return out
