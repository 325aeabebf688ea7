"""Declarative extraction rules."""

import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .exceptions import InvalidRuleError


def _check_text_field(rule_type: str, field_name: str, value: Any):
    if not isinstance(value, str) or not value.strip():
        raise InvalidRuleError(
            f"{rule_type} rule requires a non-empty string '{field_name}', got {value!r}"
        )


def _freeze_sub_rules(rule_type: str, sub_rules: Optional[Iterable['Rule']]) -> Optional[Tuple['Rule', ...]]:
    if sub_rules is None:
        return None
    frozen = tuple(sub_rules)
    for sub_rule in frozen:
        if not isinstance(sub_rule, RULE_TYPES):
            raise InvalidRuleError(f"{rule_type} sub-rule is not a rule: {sub_rule!r}")
    return frozen


@dataclass(frozen=True)
class SingleRule:
    """Extract from the first node matching ``selector``."""

    selector: str
    name: str
    sub_rules: Optional[Tuple['Rule', ...]] = None  # Recurse into the match
    attribute: Optional[str] = None  # Extract this attribute instead of text

    type_tag = "One"

    def __post_init__(self):
        _check_text_field(self.type_tag, "selector", self.selector)
        _check_text_field(self.type_tag, "name", self.name)
        object.__setattr__(self, "sub_rules", _freeze_sub_rules(self.type_tag, self.sub_rules))


@dataclass(frozen=True)
class ManyRule:
    """Extract from every node matching ``selector``, in document order."""

    selector: str
    name: str
    sub_rules: Optional[Tuple['Rule', ...]] = None
    attribute: Optional[str] = None

    type_tag = "All"

    def __post_init__(self):
        _check_text_field(self.type_tag, "selector", self.selector)
        _check_text_field(self.type_tag, "name", self.name)
        object.__setattr__(self, "sub_rules", _freeze_sub_rules(self.type_tag, self.sub_rules))


@dataclass(frozen=True)
class TextRule:
    """Join the text of every node matching ``selector`` into one string."""

    selector: str
    name: str

    type_tag = "Text"

    def __post_init__(self):
        _check_text_field(self.type_tag, "selector", self.selector)
        _check_text_field(self.type_tag, "name", self.name)


Rule = Union[SingleRule, ManyRule, TextRule]

RULE_TYPES = (SingleRule, ManyRule, TextRule)

_RULES_BY_TAG = {rule_type.type_tag: rule_type for rule_type in RULE_TYPES}


def rule_to_dict(rule: Rule) -> Dict[str, Any]:
    """Encode a rule into its configuration schema."""
    data: Dict[str, Any] = {
        "type": rule.type_tag,
        "selector": rule.selector,
        "name": rule.name,
    }
    if isinstance(rule, TextRule):
        return data

    if rule.sub_rules is not None:
        data["sub_rules"] = [rule_to_dict(sub_rule) for sub_rule in rule.sub_rules]
    if rule.attribute is not None:
        data["attribute"] = rule.attribute
    return data


def rule_from_dict(data: Dict[str, Any]) -> Rule:
    """
    Decode a rule from its configuration schema.

    Args:
        data: Mapping with a ``type`` of "One", "All" or "Text", plus
            ``selector``, ``name`` and the optional ``sub_rules`` and
            ``attribute`` fields. Unknown fields are ignored.

    Returns:
        The decoded rule tree
    """
    if not isinstance(data, dict):
        raise InvalidRuleError(f"Rule must be an object, got {type(data).__name__}")

    type_tag = data.get("type")
    rule_type = _RULES_BY_TAG.get(type_tag)
    if rule_type is None:
        raise InvalidRuleError(
            f"Unknown rule type {type_tag!r}; expected one of {sorted(_RULES_BY_TAG)}"
        )

    for required in ("selector", "name"):
        if required not in data:
            raise InvalidRuleError(f"{type_tag} rule is missing '{required}'")

    if rule_type is TextRule:
        return TextRule(selector=data["selector"], name=data["name"])

    sub_rules = data.get("sub_rules")
    if sub_rules is not None:
        if not isinstance(sub_rules, list):
            raise InvalidRuleError(f"'sub_rules' of rule {data['name']!r} must be a list")
        sub_rules = [rule_from_dict(sub_rule) for sub_rule in sub_rules]

    attribute = data.get("attribute")
    if attribute is not None and not isinstance(attribute, str):
        raise InvalidRuleError(f"'attribute' of rule {data['name']!r} must be a string")

    return rule_type(
        selector=data["selector"],
        name=data["name"],
        sub_rules=sub_rules,
        attribute=attribute,
    )


@dataclass(frozen=True)
class RuleSet:
    """An ordered list of top-level rules."""

    rules: Tuple[Rule, ...] = field(default_factory=tuple)
    output_type: Optional[str] = None  # ``type`` metadata of serialized forms

    def __post_init__(self):
        object.__setattr__(self, "rules", _freeze_sub_rules("RuleSet", self.rules) or ())

    def __iter__(self):
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __str__(self) -> str:
        return self.to_json()

    def names(self) -> List[str]:
        return [rule.name for rule in self.rules]

    def duplicate_names(self) -> List[str]:
        """Names shared by more than one top-level rule."""
        counts = Counter(self.names())
        return [name for name, count in counts.items() if count > 1]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"rules": [rule_to_dict(rule) for rule in self.rules]}
        if self.output_type is not None:
            data["type"] = self.output_type
        return data

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Union[Dict[str, Any], List[Any]]) -> 'RuleSet':
        """Decode a rule set from ``{"rules": [...], "type": ...}`` or a bare list."""
        if isinstance(data, list):
            return cls(rules=tuple(rule_from_dict(item) for item in data))

        if not isinstance(data, dict):
            raise InvalidRuleError(f"Rule set must be an object or a list, got {type(data).__name__}")

        rules = data.get("rules")
        if not isinstance(rules, list):
            raise InvalidRuleError("Rule set requires a 'rules' list")

        output_type = data.get("type")
        if output_type is not None and not isinstance(output_type, str):
            raise InvalidRuleError("Rule set 'type' must be a string")

        return cls(
            rules=tuple(rule_from_dict(item) for item in rules),
            output_type=output_type,
        )
