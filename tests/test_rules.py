"""Tests for address_dedup.algorithms.rules."""

import os
import tempfile

import pytest
import yaml

from address_dedup.algorithms.rules import (
    DEFAULT_FACILITY_NAME_PATTERN,
    DEFAULT_POBOX_PATTERN,
    DEFAULT_SIMILAR_TEXT_PATTERN,
    ExtractionRules,
    compile_pattern,
)
from address_dedup.errors import InvalidPattern


# ---- compile_pattern --------------------------------------------------------


class TestCompilePattern:
    def test_valid(self):
        assert compile_pattern(r"\d+").search("abc 42").group(0) == "42"

    def test_invalid(self):
        with pytest.raises(InvalidPattern) as exc:
            compile_pattern("[A-Z")
        assert exc.value.pattern == "[A-Z"

    def test_not_a_string(self):
        with pytest.raises(InvalidPattern):
            compile_pattern(42)  # type: ignore[arg-type]


# ---- ExtractionRules --------------------------------------------------------


class TestExtractionRules:
    def test_defaults(self):
        rules = ExtractionRules()
        assert rules.pobox == DEFAULT_POBOX_PATTERN
        assert rules.regex("facility_name").pattern == DEFAULT_FACILITY_NAME_PATTERN

    def test_invalid_override(self):
        with pytest.raises(InvalidPattern):
            ExtractionRules(street_name="(")

    def test_from_yaml_partial(self):
        data = {"patterns": {"street_name": r"\b[A-Za-z]{6,}", "unknown_key": "x"}}
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            yaml.dump(data, f)
            path = f.name

        try:
            rules = ExtractionRules.from_yaml(path)
            assert rules.street_name == r"\b[A-Za-z]{6,}"
            assert rules.similar_text == DEFAULT_SIMILAR_TEXT_PATTERN
        finally:
            os.unlink(path)

    def test_from_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert ExtractionRules.from_yaml(path) == ExtractionRules()

    def test_from_yaml_invalid_pattern(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"patterns": {"pobox": "[unclosed"}}))
        with pytest.raises(InvalidPattern):
            ExtractionRules.from_yaml(path)

    def test_from_project_yaml(self):
        """The shipped match_rules.yaml should reproduce the built-in defaults."""
        config_path = os.path.join(
            os.path.dirname(__file__),
            "..",
            "config",
            "match_rules.yaml",
        )
        if os.path.exists(config_path):
            assert ExtractionRules.from_yaml(config_path) == ExtractionRules()
