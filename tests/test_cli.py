"""
Tests for the typer CLI (ai_readiness/cli.py).

What we test
------------
- validate-config: success summary, --full JSON dump, invalid and missing
  config files exit with code 1.
- show-assessment: dimension table for a shipped definition.
- score: text report, --json payload, --top, invalid inputs exit 1.
- normalize / project-valuation: legacy result files in, canonical JSON out.

Every invocation passes a config that raises the log level to ERROR so
stdout carries only command output.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ai_readiness.cli import app

runner = CliRunner()


@pytest.fixture
def quiet_config(tmp_path: Path) -> str:
    path = tmp_path / "quiet.toml"
    path.write_text('[logging]\nlevel = "ERROR"\n', encoding="utf-8")
    return str(path)


def _json_file(tmp_path: Path, name: str, payload) -> str:
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def _perfect_answers(definition_path: Path) -> dict:
    raw = json.loads(definition_path.read_text(encoding="utf-8"))
    return {q["id"]: 5 for q in raw["questions"]}


class TestValidateConfig:
    def test_success(self, quiet_config):
        result = runner.invoke(app, ["validate-config", "--config", quiet_config])
        assert result.exit_code == 0
        assert "Configuration validated successfully." in result.output
        assert "low < 40 <= medium < 70 <= high" in result.output

    def test_full(self, quiet_config):
        result = runner.invoke(app, ["validate-config", "--config", quiet_config, "--full"])
        assert result.exit_code == 0
        assert '"max_improvement": 2.5' in result.output

    def test_invalid(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[scoring]\nband_low_max = 90.0\n", encoding="utf-8")
        result = runner.invoke(app, ["validate-config", "--config", str(path)])
        assert result.exit_code == 1
        assert "[ERROR] Config validation failed" in result.output

    def test_missing(self, tmp_path):
        result = runner.invoke(app, ["validate-config", "--config", str(tmp_path / "none.toml")])
        assert result.exit_code == 1
        assert "[ERROR]" in result.output


class TestShowAssessment:
    def test_inhouse(self, quiet_config, inhouse_definition_path):
        result = runner.invoke(
            app,
            ["show-assessment", "--definition", str(inhouse_definition_path), "--config", quiet_config],
        )
        assert result.exit_code == 0
        assert "In-house Marketing AI Readiness" in result.output
        assert "People & Skills" in result.output
        assert "Questions:  10" in result.output

    def test_missing_definition(self, quiet_config, tmp_path):
        result = runner.invoke(
            app,
            ["show-assessment", "--definition", str(tmp_path / "x.json"), "--config", quiet_config],
        )
        assert result.exit_code == 1
        assert "not found" in result.output


class TestScore:
    def _args(self, quiet_config, definition_path, answers_path, *extra) -> list[str]:
        return [
            "score",
            "--answers", answers_path,
            "--definition", str(definition_path),
            "--config", quiet_config,
            *extra,
        ]

    def test_json_output(self, tmp_path, quiet_config, inhouse_definition_path):
        answers = _json_file(tmp_path, "answers.json", _perfect_answers(inhouse_definition_path))
        context = _json_file(tmp_path, "context.json", {"industry": "b2b_saas"})
        result = runner.invoke(
            app,
            self._args(quiet_config, inhouse_definition_path, answers, "--context", context, "--json"),
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["assessment_id"] == "inhouse_marketing"
        assert payload["score_set"]["overall"] == 100.0
        assert payload["insights"]["readiness_category"] == "ai_leader"
        assert payload["valuation"]["base_multiple"] == 7.5
        assert payload["recommendations"]["ordered"]

    def test_text_report(self, tmp_path, quiet_config, inhouse_definition_path):
        answers = _json_file(tmp_path, "answers.json", {"ps_ai_literacy": 1, "pi_automation": 3})
        result = runner.invoke(
            app, self._args(quiet_config, inhouse_definition_path, answers, "--top", "1")
        )
        assert result.exit_code == 0, result.output
        assert "=== AI Readiness Scores ===" in result.output
        assert "=== Recommendations ===" in result.output
        assert " 1. " in result.output
        assert " 2. " not in result.output
        assert "=== Valuation Impact ===" in result.output
        assert "not measured: strategy_leadership" in result.output

    def test_answers_not_object(self, tmp_path, quiet_config, inhouse_definition_path):
        answers = _json_file(tmp_path, "answers.json", [1, 2, 3])
        result = runner.invoke(app, self._args(quiet_config, inhouse_definition_path, answers))
        assert result.exit_code == 1
        assert "must contain a JSON object" in result.output

    def test_answers_missing(self, tmp_path, quiet_config, inhouse_definition_path):
        result = runner.invoke(
            app, self._args(quiet_config, inhouse_definition_path, str(tmp_path / "nope.json"))
        )
        assert result.exit_code == 1
        assert "Answers file not found" in result.output

    def test_invalid_context(self, tmp_path, quiet_config, inhouse_definition_path):
        answers = _json_file(tmp_path, "answers.json", {})
        context = _json_file(tmp_path, "context.json", {"selected_activities": 5})
        result = runner.invoke(
            app, self._args(quiet_config, inhouse_definition_path, answers, "--context", context)
        )
        assert result.exit_code == 1
        assert "Invalid context file" in result.output

    def test_legacy_missing_mandatory(self, tmp_path, quiet_config, inhouse_definition_path):
        answers = _json_file(tmp_path, "answers.json", {"sl_strategy": 4})
        legacy = _json_file(tmp_path, "legacy.json", {"overallScore": 50})
        result = runner.invoke(
            app, self._args(quiet_config, inhouse_definition_path, answers, "--legacy", legacy)
        )
        assert result.exit_code == 1
        assert "Mandatory dimension" in result.output

    def test_legacy_fills_dimensions(self, tmp_path, quiet_config, inhouse_definition_path):
        answers = _json_file(tmp_path, "answers.json", {"sl_strategy": 5})
        legacy = _json_file(
            tmp_path,
            "legacy.json",
            {"dimensionScores": {"people_skills": 40, "process_infrastructure": {"score": 60}}},
        )
        result = runner.invoke(
            app,
            self._args(quiet_config, inhouse_definition_path, answers, "--legacy", legacy, "--json"),
        )
        assert result.exit_code == 0, result.output
        dims = json.loads(result.stdout)["score_set"]["dimensions"]
        assert dims == {
            "people_skills": 40.0,
            "process_infrastructure": 60.0,
            "strategy_leadership": 100.0,
        }


class TestNormalize:
    def test_legacy_shape_json(self, tmp_path, quiet_config):
        raw = _json_file(
            tmp_path,
            "legacy.json",
            {"overallScore": 62, "dimensionScores": {"people": 58, "process": "66"}},
        )
        result = runner.invoke(app, ["normalize", raw, "--json", "--config", quiet_config])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["overall"] == 62.0
        assert payload["dimensions"] == {"people": 58.0, "process": 66.0}

    def test_flat_shape_without_definition(self, tmp_path, quiet_config):
        raw = _json_file(tmp_path, "flat.json", {"people_skills": 58})
        result = runner.invoke(app, ["normalize", raw, "--json", "--config", quiet_config])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["dimensions"] == {"people_skills": 58.0}
        assert payload["overall"] == 58.0

    def test_mandatory_from_definition(self, tmp_path, quiet_config, inhouse_definition_path):
        raw = _json_file(tmp_path, "flat.json", {"people_skills": 70})
        result = runner.invoke(
            app,
            ["normalize", raw, "--definition", str(inhouse_definition_path), "--config", quiet_config],
        )
        assert result.exit_code == 1
        assert "process_infrastructure" in result.output

    def test_not_a_mapping(self, tmp_path, quiet_config):
        raw = _json_file(tmp_path, "list.json", [70, 80])
        result = runner.invoke(app, ["normalize", raw, "--config", quiet_config])
        assert result.exit_code == 1
        assert "expected a mapping" in result.output

    def test_malformed_json(self, tmp_path, quiet_config):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        result = runner.invoke(app, ["normalize", str(path), "--config", quiet_config])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output


class TestProjectValuation:
    def test_json(self, tmp_path, quiet_config):
        raw = _json_file(
            tmp_path,
            "result.json",
            {"overall": 85, "financial": 90, "operational": 80, "ai": 85, "strategic": 80},
        )
        result = runner.invoke(app, ["project-valuation", raw, "--json", "--config", quiet_config])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["base_multiple"] == 7.5
        assert payload["risk_profile"] == "Low Risk"
        assert payload["ebit_impact_percent"] == 30.0

    def test_text(self, tmp_path, quiet_config):
        raw = _json_file(tmp_path, "result.json", {"scores": {"overall": 35}})
        result = runner.invoke(app, ["project-valuation", raw, "--config", quiet_config])
        assert result.exit_code == 0, result.output
        assert "Overall score: 35.0" in result.output
        assert "(High Risk)" in result.output

    def test_invalid_utf8(self, tmp_path, quiet_config):
        path = tmp_path / "garbled.json"
        path.write_bytes(b'{"overall": \xff\xfe 50}')
        result = runner.invoke(app, ["project-valuation", str(path), "--config", quiet_config])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output
        assert not isinstance(result.exception, UnicodeDecodeError)
