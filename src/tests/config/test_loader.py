"""Tests for rule configuration loading."""

import json
from pathlib import Path

import pytest

from scrape_rules.exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    InvalidRuleError,
    UnsupportedFormatError,
)
from scrape_rules.loader import dump_rule_set, load_rule_set
from scrape_rules.rules import ManyRule, RuleSet, SingleRule


JSON_CONFIG = '''
{
    "type": "Article",
    "rules": [
        {"type": "One", "selector": "h1.title", "name": "title"},
        {"type": "One", "selector": "div.author", "name": "author"},
        {
            "type": "All",
            "selector": ".post",
            "name": "posts",
            "sub_rules": [{"type": "One", "selector": "h2", "name": "heading"}]
        }
    ]
}
'''

TOML_CONFIG = '''
type = "Article"

[[rules]]
type = "One"
selector = "h1.title"
name = "title"

[[rules]]
type = "One"
selector = "div.author"
name = "author"

[[rules]]
type = "All"
selector = ".post"
name = "posts"

[[rules.sub_rules]]
type = "One"
selector = "h2"
name = "heading"
'''


class TestLoadRuleSet:
    """Test cases for load_rule_set."""

    @pytest.fixture
    def expected(self):
        """Rule set described by both config fixtures."""
        return RuleSet(
            rules=[
                SingleRule("h1.title", "title"),
                SingleRule("div.author", "author"),
                ManyRule(".post", "posts", sub_rules=[SingleRule("h2", "heading")]),
            ],
            output_type="Article",
        )

    def test_inline_json(self, expected):
        assert load_rule_set(JSON_CONFIG) == expected

    def test_inline_toml(self, expected):
        assert load_rule_set(TOML_CONFIG) == expected

    def test_inline_bare_json_list(self):
        rule_set = load_rule_set('[{"type": "Text", "selector": "p", "name": "body"}]')

        assert rule_set.names() == ["body"]

    def test_json_file(self, tmp_path, expected):
        path = tmp_path / "rules.json"
        path.write_text(JSON_CONFIG, encoding="utf-8")

        assert load_rule_set(path) == expected
        assert load_rule_set(str(path)) == expected

    def test_toml_file(self, tmp_path, expected):
        path = tmp_path / "rules.toml"
        path.write_text(TOML_CONFIG, encoding="utf-8")

        assert load_rule_set(path) == expected

    def test_extension_decides_format(self, tmp_path):
        # TOML content in a .json file is not sniffed
        path = tmp_path / "rules.json"
        path.write_text(TOML_CONFIG, encoding="utf-8")

        with pytest.raises(ConfigParseError):
            load_rule_set(path)

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules: []", encoding="utf-8")

        with pytest.raises(UnsupportedFormatError):
            load_rule_set(str(path))

    def test_missing_path_object(self, tmp_path):
        with pytest.raises(ConfigFileNotFoundError):
            load_rule_set(tmp_path / "missing.toml")

    def test_missing_path_string(self, tmp_path):
        with pytest.raises(ConfigFileNotFoundError) as exc_info:
            load_rule_set(str(tmp_path / "missing.json"))

        assert exc_info.value.path.endswith("missing.json")

    def test_malformed_inline_config(self):
        with pytest.raises(ConfigParseError) as exc_info:
            load_rule_set("rules = [ {")

        assert "JSON" in str(exc_info.value)
        assert "TOML" in str(exc_info.value)

    def test_invalid_rule_in_config(self):
        with pytest.raises(InvalidRuleError):
            load_rule_set('{"rules": [{"type": "Bogus", "selector": "p", "name": "x"}]}')

    def test_rule_set_passthrough(self, expected):
        assert load_rule_set(expected) is expected

    def test_decoded_mapping(self, expected):
        assert load_rule_set(json.loads(JSON_CONFIG)) == expected

    def test_decoded_mapping_invalid(self):
        with pytest.raises(InvalidRuleError) as exc_info:
            load_rule_set({"type": "Article"})

        assert "rules" in str(exc_info.value)

    def test_rule_list(self):
        rules = [SingleRule("h1", "title")]

        assert load_rule_set(rules) == RuleSet(rules=rules)

    def test_unsupported_source(self):
        with pytest.raises(ConfigError):
            load_rule_set(42)

    def test_config_errors_share_base(self):
        assert issubclass(UnsupportedFormatError, ConfigError)
        assert issubclass(ConfigFileNotFoundError, ConfigError)
        assert issubclass(ConfigParseError, ConfigError)


class TestDumpRuleSet:
    """Test cases for dump_rule_set."""

    def test_dump_and_reload(self, tmp_path):
        rule_set = RuleSet(rules=[
            SingleRule(".abstract", "abstract", sub_rules=[SingleRule("p.last", "text")]),
            ManyRule(".keywords a", "keywords", attribute="href"),
        ])
        path = Path(tmp_path) / "rules.json"
        path.write_text(dump_rule_set(rule_set, indent=2), encoding="utf-8")

        assert load_rule_set(path) == rule_set
        assert json.loads(path.read_text(encoding="utf-8"))["rules"][1]["attribute"] == "href"

    def test_dump_inline_round_trip(self):
        rule_set = RuleSet(rules=[SingleRule("h1", "titel ü")], output_type="News")

        assert load_rule_set(dump_rule_set(rule_set)) == rule_set
