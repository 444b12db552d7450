"""
AI readiness assessment CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging (to stderr).
  3. Load the assessment definition and input JSON files.
  4. Run the pure engine functions.
  5. Print a text report, or JSON with ``--json``.

Any ``AssessmentError``, missing file or malformed JSON prints
``[ERROR] ...`` to stderr and exits with code 1.

Install and run::

    pip install -e .
    ai-readiness --help
    ai-readiness validate-config
    ai-readiness show-assessment
    ai-readiness score --answers answers.json --context context.json
    ai-readiness normalize legacy_result.json
    ai-readiness project-valuation legacy_result.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

from ai_readiness.errors import AssessmentError

app = typer.Typer(
    name="ai-readiness",
    help="AI readiness self-assessment: scoring, recommendations, valuation impact.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from ai_readiness.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config) -> None:
    from ai_readiness.utils.logging import configure_logging
    configure_logging(config.logging, debug=config.debug)


def _fail(message: str) -> None:
    typer.echo(f"[ERROR] {message}", err=True)
    raise typer.Exit(code=1)


def _read_json(path: str, what: str) -> Any:
    p = Path(path)
    if not p.exists():
        _fail(f"{what} file not found: {p}")
    try:
        with open(p, encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        _fail(f"{what} file {p} is not valid JSON: {exc}")


def _load_definition_or_exit(config, definition_path: Optional[str]):
    from ai_readiness.assessment.loader import load_assessment

    path = Path(definition_path or config.data.assessment_file)
    try:
        return load_assessment(path)
    except (FileNotFoundError, AssessmentError) as exc:
        _fail(str(exc))


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    bands = config.valuation.multiple_bands
    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Assessment file:  {config.data.assessment_file}")
    typer.echo(
        f"  Score bands:      low < {config.scoring.band_low_max:g} <= medium "
        f"< {config.scoring.band_high_min:g} <= high"
    )
    typer.echo(f"  Priority weights: {config.recommendations.priority_weights}")
    typer.echo(f"  Pool precedence:  {' > '.join(config.recommendations.pool_precedence)}")
    typer.echo(f"  Multiple bands:   {len(bands)} (top {bands[0][1]:g}x '{bands[0][2]}')")
    typer.echo(f"  Max improvement:  {config.valuation.max_improvement:g}x")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        _echo_json(config.model_dump())

    typer.echo("")


@app.command("show-assessment")
def show_assessment(
    definition_path: Optional[str] = typer.Option(
        None, "--definition", help="Assessment definition JSON (default from config)."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Print the dimensions, weights and question counts of an assessment."""
    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    definition = _load_definition_or_exit(config, definition_path)

    grouped = definition.questions_by_dimension()
    typer.echo("")
    typer.echo(f"=== {definition.title or definition.id} ===")
    typer.echo(f"  Id:         {definition.id}")
    typer.echo(f"  Questions:  {len(definition.questions)}")
    typer.echo(f"  Templates:  {definition.pools.template_count()}")
    typer.echo("")
    typer.echo(f"    {'Dimension':<26}  {'Weight':>6}  {'Questions':>9}  Mandatory")
    typer.echo("    " + "-" * 56)
    for dim in definition.dimensions:
        label = dim.label or dim.id
        typer.echo(
            f"    {label[:26]:<26}  {dim.weight:>6.2f}  {len(grouped.get(dim.id, [])):>9}  "
            f"{'yes' if dim.mandatory else 'no'}"
        )
    if definition.industry_benchmarks:
        typer.echo("")
        typer.echo(f"  Benchmarks: {', '.join(sorted(definition.industry_benchmarks))}")


@app.command("score")
def score_command(
    answers_path: str = typer.Option(..., "--answers", help="JSON object: question id -> score."),
    context_path: Optional[str] = typer.Option(
        None, "--context", help="JSON object with industry, agency_type, selected_activities, ..."
    ),
    definition_path: Optional[str] = typer.Option(
        None, "--definition", help="Assessment definition JSON (default from config)."
    ),
    legacy_path: Optional[str] = typer.Option(
        None, "--legacy", help="Legacy result JSON used to fill unmeasured dimensions."
    ),
    top_n: Optional[int] = typer.Option(None, "--top", help="Show only the top N recommendations."),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Score an answer file and print scores, recommendations and valuation."""
    from pydantic import ValidationError

    from ai_readiness.engine import run_assessment
    from ai_readiness.models.assessment import Context
    from ai_readiness.reporting.formatters import (
        format_recommendations,
        format_score_summary,
        format_valuation,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    definition = _load_definition_or_exit(config, definition_path)

    answers = _read_json(answers_path, "Answers")
    if not isinstance(answers, dict):
        _fail(f"Answers file {answers_path} must contain a JSON object.")

    context = Context()
    if context_path:
        try:
            context = Context.model_validate(_read_json(context_path, "Context"))
        except ValidationError as exc:
            _fail(f"Invalid context file {context_path}:\n{exc}")

    legacy = _read_json(legacy_path, "Legacy result") if legacy_path else None

    try:
        result = run_assessment(definition, answers, context, config=config, legacy=legacy)
    except AssessmentError as exc:
        _fail(str(exc))

    if as_json:
        _echo_json(result.model_dump(mode="json"))
        return

    typer.echo(format_score_summary(result.score_set, result.insights, definition.title))
    typer.echo(format_recommendations(result.recommendations, top_n=top_n))
    typer.echo(format_valuation(result.valuation))
    typer.echo("")


@app.command("normalize")
def normalize_command(
    raw_path: str = typer.Argument(..., help="Result JSON in any historical shape."),
    definition_path: Optional[str] = typer.Option(
        None,
        "--definition",
        help="Assessment definition supplying dimensions, weights and mandatory set.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the canonical ScoreSet as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Normalize a legacy result file into the canonical score shape."""
    from ai_readiness.reporting.formatters import format_score_summary
    from ai_readiness.scoring.normalizer import normalize

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    raw = _read_json(raw_path, "Result")

    kwargs: dict[str, Any] = {}
    if definition_path:
        definition = _load_definition_or_exit(config, definition_path)
        kwargs = {
            "dimensions": definition.dimension_ids,
            "mandatory": definition.mandatory_dimensions,
            "weights": definition.dimension_weights,
        }

    try:
        score_set = normalize(raw, **kwargs)
    except AssessmentError as exc:
        _fail(str(exc))

    if as_json:
        _echo_json(score_set.model_dump(mode="json"))
        return
    typer.echo(format_score_summary(score_set))
    typer.echo("")


@app.command("project-valuation")
def project_valuation(
    raw_path: str = typer.Argument(..., help="Result JSON in any historical shape."),
    as_json: bool = typer.Option(False, "--json", help="Print the projection as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Normalize a result file and project its valuation impact."""
    from ai_readiness.reporting.formatters import format_valuation
    from ai_readiness.scoring.normalizer import normalize
    from ai_readiness.valuation.projector import project

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    raw = _read_json(raw_path, "Result")

    dims = list(dict.fromkeys(config.valuation.dimension_map.values()))
    try:
        score_set = normalize(raw, dimensions=dims)
        projection = project(score_set, config.valuation)
    except AssessmentError as exc:
        _fail(str(exc))

    if as_json:
        _echo_json(projection.model_dump(mode="json"))
        return
    typer.echo(f"  Overall score: {score_set.overall:.1f}")
    typer.echo(format_valuation(projection))
    typer.echo("")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
