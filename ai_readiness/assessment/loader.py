"""
Assessment definition loader: JSON → validated ``AssessmentDefinition``.

The definition is validated exactly once, here.  Scoring and recommendation
code downstream trusts it as canonical input.

JSON structure
--------------
    {
      "id": "inhouse_marketing",
      "title": "In-house Marketing AI Readiness",
      "dimensions": [
        {"id": "strategy", "label": "Strategy & Leadership", "weight": 1.5,
         "mandatory": true}
      ],
      "questions": [
        {"id": "q1", "dimension": "strategy", "weight": 1, "scale_max": 5,
         "activity": "content_creation",
         "options": [{"label": "None", "score": 0}, ...],
         "condition": {"company_size": ["enterprise"]}}
      ],
      "pools": {
        "core":        {"<dimension>": {"low": [...], "medium": [...], "high": [...]}},
        "activity":    {"<activity>":  [...]},
        "industry":    {"<industry>":  {"low": [...], "medium": [...], "high": [...]}},
        "agency_type": {"<type>":      [...]}
      },
      "industry_benchmarks": {"b2b_saas": {"average": 62, "top_quartile": 80}},
      "valuation_dimensions": {"technology": "ai_capability"}
    }

Validation rules (beyond the model validators)
----------------------------------------------
- Template ids are unique within each pool key (a duplicate would be
  silently dropped by the selector otherwise).
- Any pydantic validation failure or malformed JSON becomes ``ConfigError``
  naming the file.

Usage
-----
    from ai_readiness.assessment.loader import load_assessment

    definition = load_assessment(Path("config/assessments/inhouse_marketing.json"))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from ai_readiness.errors import ConfigError
from ai_readiness.models.assessment import AssessmentDefinition
from ai_readiness.models.recommendation import RecommendationPools, RecommendationTemplate

logger = logging.getLogger(__name__)


def _check_unique_ids(where: str, templates: Iterable[RecommendationTemplate]) -> None:
    seen: set[str] = set()
    for template in templates:
        if template.id in seen:
            raise ConfigError(f"Duplicate recommendation id '{template.id}' in {where}.")
        seen.add(template.id)


def _validate_pools(pools: RecommendationPools) -> None:
    for name in ("core", "industry"):
        for key, bands in getattr(pools, name).items():
            for band, templates in bands.items():
                _check_unique_ids(f"pools.{name}.{key}.{band}", templates)
    for name in ("activity", "agency_type"):
        for key, templates in getattr(pools, name).items():
            _check_unique_ids(f"pools.{name}.{key}", templates)


def parse_assessment(raw: Any, source: str = "<memory>") -> AssessmentDefinition:
    """Validate an already-decoded definition object.

    Args:
        raw:    Decoded JSON object.
        source: Label used in error messages (usually the file path).

    Raises:
        ConfigError: If the definition is invalid.
    """
    if not isinstance(raw, dict):
        raise ConfigError(
            f"Assessment definition {source} must be a JSON object, "
            f"got {type(raw).__name__}."
        )
    try:
        definition = AssessmentDefinition.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid assessment definition {source}:\n{exc}") from exc
    _validate_pools(definition.pools)

    logger.debug(
        "Loaded assessment '%s': %d dimension(s), %d question(s), %d template(s).",
        definition.id,
        len(definition.dimensions),
        len(definition.questions),
        definition.pools.template_count(),
    )
    return definition


def load_assessment(path: Path) -> AssessmentDefinition:
    """Load and validate an assessment definition JSON file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ConfigError:       If the file is not valid JSON or fails validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Assessment definition not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Assessment definition {path} is not valid JSON: {exc}") from exc

    return parse_assessment(raw, source=str(path))
