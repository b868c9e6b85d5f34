from __future__ import annotations
import os
from typing import List, Optional
import typer
from pydantic import TypeAdapter, ValidationError
from rich.markup import escape
from rich.table import Table
from .config import AppConfig
from .exceptions import ConfigError, MissingReferenceError, QualFlowError
from .logging import attach_log_file, configure_logging, console, logger
from .models.schemas import GroundedTheoryResult, Pattern, Theme
from .utils.file_io import (
    ensure_dir, read_codes, read_codes_by_source, read_json, read_structured, read_text, write_json,
)
from .pipeline.segmenter import segment_text
from .pipeline.auto_coder import generate_codes
from .pipeline.codebook_builder import refine_codebook
from .pipeline.theme_extractor import extract_themes
from .pipeline.patterns import analyze_patterns
from .pipeline.saturation import detect_saturation
from .pipeline.negatives_scanner import find_negative_cases
from .pipeline.theory_builder import build_grounded_theory
from .pipeline.report import emit_markdown, theory_tables
from .pipeline.report_html import emit_html

app = typer.Typer(help="QualFlow qualitative analysis pipeline")

@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    configure_logging(verbose)

def _load_config(config_path: str | None) -> AppConfig:
    if config_path and os.path.exists(config_path):
        try:
            return AppConfig.model_validate(read_structured(config_path) or {})
        except ValidationError as exc:
            raise ConfigError(f"Invalid config {config_path}: {exc}") from exc
    return AppConfig()

def _stage_header(name: str):
    logger.info("stage: %s", name)
    console.rule(f"[info]{name}[/info]")

# pydantic's ValidationError and json's JSONDecodeError are ValueErrors
_INPUT_ERRORS = (QualFlowError, ValueError, OSError)

def _fail(exc: Exception):
    console.print(f"[err]Error:[/err] {escape(str(exc))}")
    raise typer.Exit(code=1)

def _read_themes(path: str) -> List[Theme]:
    data = read_json(path)
    if isinstance(data, dict):
        data = data.get("themes", [])
    return TypeAdapter(List[Theme]).validate_python(data)

def _dump(models) -> list:
    return [m.model_dump(by_alias=True) for m in models]

@app.command()
def segment(
    input_path: str = typer.Option(..., "-i", help="Input text file"),
    out_dir: str = typer.Option("output", "-o", help="Output directory"),
    max_chars: int = typer.Option(500, help="Paragraphs longer than this are split into sentences"),
):
    try:
        segs = segment_text(read_text(input_path), max_chars)
    except _INPUT_ERRORS as exc:
        _fail(exc)
    ensure_dir(out_dir)
    write_json(os.path.join(out_dir, "segments.json"), _dump(segs))
    console.print(f"[ok]Segmented {len(segs)} segments -> {out_dir}/segments.json[/ok]")

@app.command()
def code(
    input_path: str = typer.Option(..., "-i", help="Input text file"),
    out_dir: str = typer.Option("output", "-o"),
    methodology: Optional[str] = typer.Option(None, "-m", help="grounded|thematic|phenomenology|general"),
    existing_path: Optional[str] = typer.Option(None, "--existing", help="JSON codebook whose codes may re-attach"),
    config_path: Optional[str] = typer.Option(None, "-c"),
):
    try:
        conf = _load_config(config_path)
        existing = [c.name for c in read_codes(existing_path)] if existing_path else []
        result = generate_codes(read_text(input_path), existing, methodology or conf.methodology, conf.coding)
    except _INPUT_ERRORS as exc:
        _fail(exc)
    ensure_dir(out_dir)
    write_json(os.path.join(out_dir, "codes.json"), result.model_dump())
    s = result.summary
    console.print(
        f"[ok]{s.total_codes} codes ({s.in_vivo_codes} in vivo, {s.constructed_codes} constructed) "
        f"from {len(result.segments)} segments -> {out_dir}/codes.json[/ok]"
    )

@app.command()
def refine(
    codes_path: str = typer.Option(..., "-i", help="Codes JSON"),
    out_dir: str = typer.Option("output", "-o"),
    config_path: Optional[str] = typer.Option(None, "-c"),
):
    try:
        conf = _load_config(config_path)
        result = refine_codebook(read_codes(codes_path), conf.coding)
    except _INPUT_ERRORS as exc:
        _fail(exc)
    ensure_dir(out_dir)
    write_json(os.path.join(out_dir, "codebook.json"), result.model_dump(by_alias=True))
    console.print(f"[ok]{len(result.merges)} merges, {len(result.refined)} codes -> {out_dir}/codebook.json[/ok]")

@app.command()
def themes(
    codes_path: str = typer.Option(..., "-i", help="Codes JSON"),
    out_dir: str = typer.Option("output", "-o"),
    mode: str = typer.Option("inductive", help="inductive|deductive"),
    depth: str = typer.Option("medium", help="shallow|medium|deep"),
    config_path: Optional[str] = typer.Option(None, "-c"),
):
    try:
        conf = _load_config(config_path)
        found = extract_themes(read_codes(codes_path), mode, depth, conf.themes)
    except _INPUT_ERRORS as exc:
        _fail(exc)
    ensure_dir(out_dir)
    write_json(os.path.join(out_dir, "themes.json"), _dump(found))
    table = Table(title="Themes")
    table.add_column("Theme")
    table.add_column("Prevalence")
    table.add_column("Codes")
    for t in found:
        table.add_row(t.name, f"{t.prevalence:.2f}", str(len(t.supporting_codes)))
    console.print(table)

@app.command()
def patterns(
    codes_path: str = typer.Option(..., "-i", help="Codes JSON"),
    out_dir: str = typer.Option("output", "-o"),
):
    try:
        found = analyze_patterns(read_codes(codes_path))
    except _INPUT_ERRORS as exc:
        _fail(exc)
    ensure_dir(out_dir)
    write_json(os.path.join(out_dir, "patterns.json"), _dump(found))
    console.print(f"[ok]{len(found)} patterns -> {out_dir}/patterns.json[/ok]")

@app.command()
def saturation(
    sources_path: str = typer.Option(..., "-i", help="JSON object: source name -> codes, in collection order"),
    out_dir: str = typer.Option("output", "-o"),
    level: str = typer.Option("code", help="code|theme|theoretical"),
    config_path: Optional[str] = typer.Option(None, "-c"),
):
    try:
        conf = _load_config(config_path)
        result = detect_saturation(read_codes_by_source(sources_path), level, conf.saturation)
    except _INPUT_ERRORS as exc:
        _fail(exc)
    ensure_dir(out_dir)
    write_json(os.path.join(out_dir, "saturation.json"), result.model_dump())
    style = "ok" if result.saturated else "warn"
    console.print(f"[{style}]saturation rate {result.saturation_rate:.2f}[/{style}] {result.recommendation}")

@app.command()
def negatives(
    themes_path: str = typer.Option(..., "-t", help="Themes JSON"),
    theme_name: str = typer.Option(..., "--theme", help="Name of the theme to test"),
    codes_path: str = typer.Option(..., "-i", help="Codes JSON"),
    out_dir: str = typer.Option("output", "-o"),
    threshold: str = typer.Option("moderate", help="weak|moderate|strong"),
):
    try:
        theme = next((t for t in _read_themes(themes_path) if t.name == theme_name), None)
        if theme is None:
            raise MissingReferenceError("Theme", theme_name)
        report = find_negative_cases(theme, read_codes(codes_path), threshold)
    except _INPUT_ERRORS as exc:
        _fail(exc)
    ensure_dir(out_dir)
    write_json(os.path.join(out_dir, "negatives.json"), report.model_dump())
    console.print(f"[ok]{len(report.negative_cases)} negative cases.[/ok] {report.recommendation}")

@app.command()
def theory(
    codes_path: str = typer.Option(..., "-i", help="Codes JSON"),
    question: str = typer.Option(..., "-q", help="Research question"),
    out_dir: str = typer.Option("output", "-o"),
    themes_path: Optional[str] = typer.Option(None, "-t", help="Optional themes JSON"),
    paradigm: Optional[str] = typer.Option(None, help="constructivist|objectivist"),
    config_path: Optional[str] = typer.Option(None, "-c"),
):
    try:
        conf = _load_config(config_path)
        found_themes = _read_themes(themes_path) if themes_path else None
        result = build_grounded_theory(
            read_codes(codes_path), question, found_themes, paradigm or conf.paradigm, conf.theory
        )
    except _INPUT_ERRORS as exc:
        _fail(exc)
    ensure_dir(out_dir)
    write_json(os.path.join(out_dir, "theory.json"), result.model_dump())
    console.print(
        f"[ok]Core category: {result.core_category.name}[/ok] "
        f"(centrality {result.core_category.centrality:.2f}, completeness {result.completeness:.2f})"
    )

def _write_reports(out_dir: str, result: GroundedTheoryResult, found_themes, found_patterns, stats, save_html: bool = True):
    sections = {
        "Theoretical Framework": result.theoretical_framework,
        "Storyline": result.storyline,
        "Recommendations": "\n".join(f"{i}. {r}" for i, r in enumerate(result.recommendations, start=1)),
    }
    emit_markdown(os.path.join(out_dir, "report.md"), stats, theory_tables(result, found_themes, found_patterns), sections)
    if save_html:
        emit_html(os.path.join(out_dir, "report.html"), stats, result, found_themes, found_patterns)

@app.command()
def report(out_dir: str = typer.Option("output", "-o")):
    themes_json = os.path.join(out_dir, "themes.json")
    patterns_json = os.path.join(out_dir, "patterns.json")
    try:
        result = GroundedTheoryResult.model_validate(read_json(os.path.join(out_dir, "theory.json")))
        found_themes = _read_themes(themes_json) if os.path.exists(themes_json) else None
        found_patterns = (
            TypeAdapter(List[Pattern]).validate_python(read_json(patterns_json))
            if os.path.exists(patterns_json) else None
        )
    except _INPUT_ERRORS as exc:
        _fail(exc)
    stats = {
        "categories": len(result.supporting_categories),
        "core_category": result.core_category.name,
        "completeness": round(result.completeness, 2),
    }
    _write_reports(out_dir, result, found_themes, found_patterns, stats)
    console.print(f"[ok]Wrote {out_dir}/report.md and {out_dir}/report.html[/ok]")

@app.command()
def run_all(
    input_path: str = typer.Option(..., "-i"),
    question: str = typer.Option(..., "-q", help="Research question"),
    config_path: Optional[str] = typer.Option(None, "-c"),
    out_dir: Optional[str] = typer.Option(None, "-o"),
):
    try:
        conf = _load_config(config_path)
    except _INPUT_ERRORS as exc:
        _fail(exc)
    out_dir = out_dir or conf.output.out_dir
    ensure_dir(out_dir)
    if conf.output.log_file:
        attach_log_file(os.path.join(out_dir, conf.output.log_file))

    # 1) Coding
    _stage_header("Coding")
    try:
        text = read_text(input_path)
    except _INPUT_ERRORS as exc:
        _fail(exc)
    coding = generate_codes(text, [], conf.methodology, conf.coding)
    write_json(os.path.join(out_dir, "codes.json"), coding.model_dump())
    console.print(f"[ok]codes: {len(coding.codes)} from {len(coding.segments)} segments[/ok]")

    # 2) Codebook refinement
    _stage_header("Codebook")
    refined = refine_codebook(coding.codes, conf.coding)
    write_json(os.path.join(out_dir, "codebook.json"), refined.model_dump(by_alias=True))
    codes = refined.refined

    # 3) Themes and patterns
    _stage_header("Themes")
    found_themes = extract_themes(codes, "inductive", "deep", conf.themes)
    write_json(os.path.join(out_dir, "themes.json"), _dump(found_themes))
    found_patterns = analyze_patterns(codes)
    write_json(os.path.join(out_dir, "patterns.json"), _dump(found_patterns))

    # 4) Theory
    _stage_header("Grounded Theory")
    try:
        result = build_grounded_theory(codes, question, found_themes, conf.paradigm, conf.theory)
    except _INPUT_ERRORS as exc:
        _fail(exc)
    write_json(os.path.join(out_dir, "theory.json"), result.model_dump())

    # 5) Reports
    _stage_header("Report")
    stats = {
        "segments": len(coding.segments),
        "codes": len(coding.codes),
        "codebook_entries": len(codes),
        "merges": len(refined.merges),
        "themes": len(found_themes),
        "patterns": len(found_patterns),
        "categories": len(result.supporting_categories),
        "completeness": round(result.completeness, 2),
    }
    _write_reports(out_dir, result, found_themes, found_patterns, stats, conf.output.save_html)

    console.print(f"[ok]Done. See {out_dir}[/ok]")
    table = Table(title="Analysis Summary")
    table.add_column("Artifact")
    table.add_column("Count")
    for k, v in stats.items():
        table.add_row(k, str(v))
    console.print(table)
