"""Tests for the rule schema."""

import dataclasses

import pytest

from scrape_rules.exceptions import InvalidRuleError
from scrape_rules.rules import (
    ManyRule,
    RuleSet,
    SingleRule,
    TextRule,
    rule_from_dict,
    rule_to_dict,
)


class TestRules:
    """Test cases for rule construction and encoding."""

    @pytest.fixture
    def rule_set(self):
        """Rule set covering every variant and nesting."""
        return RuleSet(
            rules=[
                SingleRule("h1.title", "title"),
                SingleRule("a.canonical", "canonical", attribute="href"),
                ManyRule("div.paragraph", "content"),
                ManyRule(
                    ".post",
                    "posts",
                    sub_rules=[
                        SingleRule("h2", "heading"),
                        ManyRule("a", "links", attribute="href"),
                    ],
                ),
                SingleRule(".intro", "intro", sub_rules=[TextRule("p", "text")]),
                TextRule("p", "body"),
            ],
            output_type="Article",
        )

    def test_rules_are_immutable(self):
        rule = SingleRule("h1", "title")

        with pytest.raises(dataclasses.FrozenInstanceError):
            rule.selector = "h2"

    def test_sub_rules_are_stored_as_tuple(self):
        rule = ManyRule(".post", "posts", sub_rules=[SingleRule("h2", "heading")])

        assert rule.sub_rules == (SingleRule("h2", "heading"),)
        assert hash(rule) == hash(ManyRule(".post", "posts", sub_rules=(SingleRule("h2", "heading"),)))

    @pytest.mark.parametrize("selector,name", [("", "title"), ("h1", ""), ("h1", None), (None, "x")])
    def test_empty_selector_or_name_rejected(self, selector, name):
        with pytest.raises(InvalidRuleError):
            SingleRule(selector, name)

    def test_sub_rule_must_be_rule(self):
        with pytest.raises(InvalidRuleError):
            SingleRule("div", "outer", sub_rules=[{"type": "One"}])

    def test_rule_to_dict_omits_absent_fields(self):
        assert rule_to_dict(SingleRule("h1", "title")) == {
            "type": "One",
            "selector": "h1",
            "name": "title",
        }
        assert rule_to_dict(ManyRule("img", "images", attribute="src")) == {
            "type": "All",
            "selector": "img",
            "name": "images",
            "attribute": "src",
        }
        assert rule_to_dict(TextRule("p", "body")) == {
            "type": "Text",
            "selector": "p",
            "name": "body",
        }

    def test_rule_from_dict_ignores_unknown_fields(self):
        rule = rule_from_dict({
            "type": "Text",
            "selector": "p",
            "name": "body",
            "comment": "ignored",
            "attribute": "ignored for text rules",
        })

        assert rule == TextRule("p", "body")

    def test_rule_from_dict_nested(self):
        rule = rule_from_dict({
            "type": "One",
            "selector": ".intro",
            "name": "intro",
            "sub_rules": [{"type": "All", "selector": "p", "name": "paragraphs"}],
        })

        assert isinstance(rule, SingleRule)
        assert rule.sub_rules == (ManyRule("p", "paragraphs"),)
        assert rule.attribute is None

    @pytest.mark.parametrize("data", [
        {"type": "Many", "selector": "p", "name": "x"},
        {"selector": "p", "name": "x"},
        {"type": "One", "name": "x"},
        {"type": "All", "selector": "p"},
        {"type": "One", "selector": "p", "name": "x", "sub_rules": "p"},
        {"type": "One", "selector": "p", "name": "x", "attribute": 3},
        ["One", "p", "x"],
    ])
    def test_rule_from_dict_invalid(self, data):
        with pytest.raises(InvalidRuleError):
            rule_from_dict(data)

    def test_round_trip(self, rule_set):
        assert RuleSet.from_dict(rule_set.to_dict()) == rule_set

    def test_str_is_json_config(self, rule_set):
        text = str(rule_set)

        assert text.startswith('{"rules": [')
        assert '"type": "Article"' in text

    def test_from_bare_list(self):
        rule_set = RuleSet.from_dict([{"type": "One", "selector": "h1", "name": "title"}])

        assert rule_set.rules == (SingleRule("h1", "title"),)
        assert rule_set.output_type is None

    def test_from_dict_requires_rules_list(self):
        with pytest.raises(InvalidRuleError):
            RuleSet.from_dict({"type": "Article"})

    def test_duplicate_names(self):
        rule_set = RuleSet(rules=[
            SingleRule("h1", "title"),
            SingleRule("h2", "title"),
            ManyRule("p", "content"),
        ])

        assert rule_set.names() == ["title", "title", "content"]
        assert rule_set.duplicate_names() == ["title"]
        assert len(rule_set) == 3
