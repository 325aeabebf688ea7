"""Sequential rule evaluation against a parsed document."""

from typing import Dict, Iterable, Optional

import structlog
from bs4 import Tag

from .cleaners import TextCleaner
from .document import SoupDocumentAdapter
from .rules import ManyRule, Rule, SingleRule, TextRule
from .values import Value

logger = structlog.get_logger(__name__)


class RuleEvaluator:
    """Walk a rule tree against a document node and build a result value."""

    def __init__(
        self,
        cleaner: Optional[TextCleaner] = None,
        adapter: Optional[SoupDocumentAdapter] = None
    ):
        """
        Initialize the evaluator.

        Args:
            cleaner: Applied once to every extracted text leaf
            adapter: Document adapter used for selector queries
        """
        self.cleaner = cleaner
        self.adapter = adapter or SoupDocumentAdapter()

    def evaluate_rules(self, node: Tag, rules: Iterable[Rule]) -> Dict[str, Value]:
        """
        Evaluate a list of sibling rules against one node.

        Returns:
            Mapping of rule name to value, in rule order. A later rule
            replaces an earlier one with the same name.
        """
        results: Dict[str, Value] = {}
        for rule in rules:
            results[rule.name] = self.evaluate(node, rule)
        return results

    def evaluate(self, node: Tag, rule: Rule) -> Value:
        """Evaluate one rule against ``node``."""
        if isinstance(rule, SingleRule):
            return self._evaluate_single(node, rule)
        elif isinstance(rule, ManyRule):
            return self._evaluate_many(node, rule)
        elif isinstance(rule, TextRule):
            return self._evaluate_text(node, rule)
        else:
            raise TypeError(f"Unsupported rule type: {type(rule).__name__}")

    def _evaluate_single(self, node: Tag, rule: SingleRule) -> Value:
        element = self.adapter.select_one(node, rule.selector)
        if element is None:
            logger.debug("No match for rule", rule=rule.name, selector=rule.selector)
            return None
        return self._extract_from_element(element, rule)

    def _evaluate_many(self, node: Tag, rule: ManyRule) -> Value:
        elements = self.adapter.select(node, rule.selector)
        if not elements:
            logger.debug("No matches for rule", rule=rule.name, selector=rule.selector)
        return [self._extract_from_element(element, rule) for element in elements]

    def _evaluate_text(self, node: Tag, rule: TextRule) -> Value:
        elements = self.adapter.select(node, rule.selector)
        joined = " ".join(self.adapter.text(element) for element in elements)
        return self._clean(" ".join(joined.split()))

    def _extract_from_element(self, element: Tag, rule: Rule) -> Value:
        """Extract the value of one matched element."""
        if rule.sub_rules is not None:
            return self.evaluate_rules(element, rule.sub_rules)
        elif rule.attribute is not None:
            return self._clean(self.adapter.attribute(element, rule.attribute))
        else:
            return self._clean(self.adapter.text(element).strip())

    def _clean(self, text: str) -> str:
        if self.cleaner is None:
            return text
        return self.cleaner.clean(text)
