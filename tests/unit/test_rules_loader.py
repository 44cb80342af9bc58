"""
Tests for rules.yaml loading and ops validation.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from loadrush.app_shell.config import missing_env, validate_ops_rules
from loadrush.rules.loader import load_rules


class TestLoadRules:
    def test_project_rules_load(self, rules) -> None:
        assert rules.project.slug == "loadrush-core"
        assert rules.archival.window_days == 7
        assert rules.archival.eligible_statuses == ["completed", "archived"]
        assert rules.archival.batch_limit == 200
        assert rules.archival.purge_default_days == 14
        assert rules.photos.max_photos == 20
        assert rules.fuel.diesel_price == 4.10
        assert rules.fuel.gas_price == 3.65
        assert rules.event_log.storage_key == "app.logs.v1"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_rules(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("project: [unclosed")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_rules(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            load_rules(path)

    def test_schema_violation(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("project:\n  slug: x\n  rules_version: '1'\nfuel:\n  diesel_price: cheap\n")
        with pytest.raises(ValueError, match="Rules validation failed"):
            load_rules(path)

    def test_sections_default(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("project:\n  slug: x\n  rules_version: '1'\n")

        rules = load_rules(path)

        assert rules.cache.analytics_ttl_seconds == 600
        assert rules.ops.cron_secret_env == "LOADRUSH_CRON_SECRET"


def _requiring(rules, *names: str):
    return rules.model_copy(
        update={"ops": rules.ops.model_copy(update={"required_env": list(names)})}
    )


class TestOpsValidation:
    def test_missing_required_env_exits(self, rules, monkeypatch) -> None:
        monkeypatch.delenv("LOADRUSH_TEST_REQUIRED", raising=False)
        custom = _requiring(rules, "LOADRUSH_TEST_REQUIRED")

        assert missing_env(custom) == ["LOADRUSH_TEST_REQUIRED"]
        with pytest.raises(SystemExit):
            validate_ops_rules(custom)

    def test_present_env_passes(self, rules, monkeypatch) -> None:
        monkeypatch.setenv("LOADRUSH_TEST_REQUIRED", "1")
        custom = _requiring(rules, "LOADRUSH_TEST_REQUIRED")

        validate_ops_rules(custom)
