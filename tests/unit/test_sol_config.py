"""Configuration loading and inline file directives."""

import json
import logging

import pytest

from sollint.config import LintConfig, parse_rule, parse_severity
from sollint.error_reporter import ConfigError
from sollint.findings import RuleKind, Severity
from sollint.runtime import apply_file_flags, parse_file_flags


class TestLintConfig:

    def test_defaults(self):
        config = LintConfig()
        assert all(config.is_enabled(rule) for rule in RuleKind)
        assert config.guard_functions == ("require",)
        assert config.destructive_functions == ("selfdestruct", "suicide")
        assert config.report_all_destructive_calls is False
        assert config.count_nested_references is False
        assert config.fail_on is None

    def test_disable_wins_over_enable(self):
        config = LintConfig(enabled_rules=frozenset({RuleKind.UNUSED_VARIABLE}))
        assert config.is_enabled(RuleKind.UNUSED_VARIABLE)
        assert not config.is_enabled(RuleKind.UNPROTECTED_SELFDESTRUCT)
        assert not config.disable(["unused-variable"]).is_enabled(RuleKind.UNUSED_VARIABLE)

    def test_with_overrides_ignores_none(self):
        config = LintConfig().with_overrides(fail_on=None, report_all_destructive_calls=True)
        assert config.fail_on is None
        assert config.report_all_destructive_calls is True

    def test_from_dict(self):
        config = LintConfig.from_dict({
            "disable": ["division-before-multiplication"],
            "guard_functions": ["require", "_checkOwner"],
            "fail_on": "medium",
            "log_level": "info",
        })
        assert not config.is_enabled(RuleKind.DIVISION_BEFORE_MULTIPLICATION)
        assert config.guard_functions == ("require", "_checkOwner")
        assert config.fail_on == Severity.MEDIUM
        assert config.log_level == "INFO"

    def test_unknown_key_is_ignored_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="sollint.config"):
            config = LintConfig.from_dict({"colour": "blue"}, source="sollint.json")
        assert config == LintConfig()
        assert "colour" in caplog.text

    @pytest.mark.parametrize("data", [
        {"disable": ["no-such-rule"]},
        {"fail_on": "critical"},
        {"report_all_destructive_calls": "yes"},
        {"guard_functions": [1, 2]},
        {"log_level": "LOUD"},
    ])
    def test_invalid_values_raise(self, data):
        with pytest.raises(ConfigError):
            LintConfig.from_dict(data)

    def test_top_level_must_be_object(self):
        with pytest.raises(ConfigError):
            LintConfig.from_dict(["unused-variable"])

    def test_load_file(self, tmp_path):
        path = tmp_path / "lint.json"
        path.write_text(json.dumps({"count_nested_references": True}))
        config = LintConfig.load(str(path))
        assert config.count_nested_references is True
        assert config.source == str(path)

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "lint.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            LintConfig.load(str(path))

    def test_load_default_file_from_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert LintConfig.load() == LintConfig()
        (tmp_path / "sollint.json").write_text('{"disable": ["unused-variable"]}')
        assert not LintConfig.load().is_enabled(RuleKind.UNUSED_VARIABLE)

    def test_parse_helpers(self):
        assert parse_rule(" Unused-Variable ") == RuleKind.UNUSED_VARIABLE
        assert parse_severity("HIGH") == Severity.HIGH
        assert Severity.HIGH.at_least(Severity.MEDIUM)
        assert not Severity.LOW.at_least(Severity.MEDIUM)


class TestFileFlags:

    def test_key_value_directive(self):
        source = "// @sollint: disable=unused-variable,division-before-multiplication; report_all_destructive_calls=true\n"
        flags = parse_file_flags(source)
        assert flags == {
            "disable": ["unused-variable", "division-before-multiplication"],
            "report_all_destructive_calls": True,
        }

    def test_json_directive(self):
        flags = parse_file_flags('/* @sollint: {"disable": ["unused-variable"]} */\ncontract C {}')
        assert flags == {"disable": ["unused-variable"]}

    def test_malformed_json_is_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="sollint.runtime.file_flags"):
            assert parse_file_flags("// @sollint: {broken\n") == {}
        assert "malformed" in caplog.text

    def test_only_leading_lines_are_scanned(self):
        source = "\n" * 30 + "// @sollint: disable=unused-variable\n"
        assert parse_file_flags(source) == {}

    def test_apply_flags(self):
        config = apply_file_flags(LintConfig(), {
            "disable": "unused-variable",
            "count_nested_references": True,
        })
        assert not config.is_enabled(RuleKind.UNUSED_VARIABLE)
        assert config.count_nested_references is True

    def test_enable_undoes_a_project_level_disable(self):
        base = LintConfig().disable(["unused-variable"])
        config = apply_file_flags(base, {"enable": ["unused-variable"]})
        assert config.is_enabled(RuleKind.UNUSED_VARIABLE)

    def test_non_boolean_flag_is_ignored(self):
        config = apply_file_flags(LintConfig(), {"report_all_destructive_calls": 3})
        assert config.report_all_destructive_calls is False

    def test_unknown_rule_in_directive_is_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="sollint.runtime.file_flags"):
            config = apply_file_flags(LintConfig(), {
                "disable": ["no-such-rule", "unused-variable"],
                "enable": "also-missing",
            })
        assert not config.is_enabled(RuleKind.UNUSED_VARIABLE)
        assert config.is_enabled(RuleKind.UNPROTECTED_SELFDESTRUCT)
        assert "no-such-rule" in caplog.text
        assert "also-missing" in caplog.text
