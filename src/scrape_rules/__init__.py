"""Declarative rule-based data extraction from HTML documents."""

from .cleaners import (
    ChainCleaner,
    DefaultCleaner,
    FunctionCleaner,
    HtmlEntityCleaner,
    IdentityCleaner,
    TextCleaner,
    ThreadSafeCleaner,
)
from .converters import convert_result
from .document import SoupDocumentAdapter
from .evaluator import RuleEvaluator
from .exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    InvalidRuleError,
    ScraperError,
    SelectorError,
    UnsupportedFormatError,
)
from .loader import dump_rule_set, load_rule_set
from .parallel import ParallelRuleEvaluator
from .rules import ManyRule, Rule, RuleSet, SingleRule, TextRule
from .scraper import HtmlScraper, HtmlScraperBuilder
from .values import Value, to_string_map

__all__ = [
    "HtmlScraper",
    "HtmlScraperBuilder",
    "RuleEvaluator",
    "ParallelRuleEvaluator",
    "SoupDocumentAdapter",
    "Rule",
    "SingleRule",
    "ManyRule",
    "TextRule",
    "RuleSet",
    "load_rule_set",
    "dump_rule_set",
    "convert_result",
    "Value",
    "to_string_map",
    "TextCleaner",
    "IdentityCleaner",
    "DefaultCleaner",
    "HtmlEntityCleaner",
    "FunctionCleaner",
    "ChainCleaner",
    "ThreadSafeCleaner",
    "ScraperError",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "InvalidRuleError",
    "UnsupportedFormatError",
    "SelectorError",
]
