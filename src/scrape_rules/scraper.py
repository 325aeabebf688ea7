"""Builder-configured entry point for scraping HTML documents."""

import threading
import weakref
from typing import Any, Dict, Optional, Type, TypeVar, Union

import structlog

from .cleaners import CleanerLike, TextCleaner, resolve_cleaner
from .converters import convert_result, rules_for
from .document import SoupDocumentAdapter
from .evaluator import RuleEvaluator
from .exceptions import ConfigError
from .loader import RuleSource, load_rule_set
from .parallel import ParallelRuleEvaluator
from .rules import RuleSet
from .settings import get_settings
from .values import Value, to_string_map

logger = structlog.get_logger(__name__)

T = TypeVar('T')

# Marks an argument left to the settings default
FROM_SETTINGS: Any = object()


class HtmlScraper:
    """
    Scrape HTML documents with a declarative rule set.

    Example:
        scraper = (
            HtmlScraper.builder()
            .with_config("rules.json")
            .with_cleaner(DefaultCleaner())
            .build()
        )
        article = scraper.scrape(html, NewsArticle)

    A parallel scraper owns a thread pool. Release it with ``close()`` or
    by using the scraper as a context manager; otherwise it is shut down
    when the scraper is garbage collected.
    """

    def __init__(
        self,
        config: Optional[RuleSource] = None,
        cleaner: CleanerLike = FROM_SETTINGS,
        parallel: Optional[bool] = None,
        max_workers: Optional[int] = None,
        adapter: Optional[SoupDocumentAdapter] = None
    ):
        """
        Initialize the scraper.

        Args:
            config: Rule source overriding the record type's own rules
            cleaner: Leaf text post-processing, defaults to the
                ``default_cleaner`` setting; ``None`` disables cleaning
            parallel: Evaluate top-level rules on a worker pool
            max_workers: Worker pool size for parallel evaluation
            adapter: Document adapter, defaults to the ``parser`` setting
        """
        settings = get_settings()

        self.config = config
        self.cleaner: Optional[TextCleaner] = resolve_cleaner(
            settings.default_cleaner if cleaner is FROM_SETTINGS else cleaner
        )
        self.parallel = settings.parallel if parallel is None else parallel
        self.max_workers = max_workers or settings.max_workers
        self.adapter = adapter or SoupDocumentAdapter(parser=settings.parser)

        if self.parallel:
            self.evaluator = ParallelRuleEvaluator(
                cleaner=self.cleaner,
                adapter=self.adapter,
                max_workers=self.max_workers
            )
            self._finalizer = weakref.finalize(self, self.evaluator.shutdown, wait=False)
        else:
            self.evaluator = RuleEvaluator(cleaner=self.cleaner, adapter=self.adapter)
            self._finalizer = None

        self._rule_set: Optional[RuleSet] = None
        self._lock = threading.Lock()
        self.scrape_stats = {
            'total_scrapes': 0,
            'successful_scrapes': 0,
            'failed_scrapes': 0,
            'rules_evaluated': 0
        }

    @staticmethod
    def builder() -> 'HtmlScraperBuilder':
        return HtmlScraperBuilder()

    def __repr__(self) -> str:
        mode = "parallel" if self.parallel else "sequential"
        return f"HtmlScraper(mode={mode}, cleaner={type(self.cleaner).__name__})"

    def _configured_rules(self) -> Optional[RuleSet]:
        if self.config is None:
            return None
        with self._lock:
            if self._rule_set is None:
                self._rule_set = load_rule_set(self.config)
            return self._rule_set

    def resolve_rules(self, record_type: Optional[Type[Any]] = None) -> RuleSet:
        """Configured rules, else the rules declared by ``record_type``."""
        rule_set = self._configured_rules()
        if rule_set is None and record_type is not None:
            rule_set = rules_for(record_type)
        if rule_set is None:
            raise ConfigError(
                "No rules available: configure a rule source or pass a record "
                "type that defines scrape_rules()"
            )
        return rule_set

    def _record(self, key: str, amount: int = 1):
        with self._lock:
            self.scrape_stats[key] += amount

    def scrape_value(self, html: str, record_type: Optional[Type[Any]] = None) -> Dict[str, Value]:
        """Scrape ``html`` into the structural result value."""
        self._record('total_scrapes')
        try:
            rule_set = self.resolve_rules(record_type)
            document = self.adapter.parse(html)
            result = self.evaluator.evaluate_rules(document, rule_set.rules)
        except Exception as e:
            self._record('failed_scrapes')
            logger.error(f"Error scraping document: {e}")
            raise

        self._record('successful_scrapes')
        self._record('rules_evaluated', len(rule_set))
        return result

    def scrape(self, html: str, record_type: Optional[Type[T]] = None) -> Union[T, Dict[str, Value]]:
        """
        Scrape ``html`` and optionally convert the result.

        Args:
            html: Raw HTML document
            record_type: Record to convert into; also supplies rules when
                no rule source is configured

        Returns:
            The converted record, or the result dict when no record type
            is given
        """
        result = self.scrape_value(html, record_type)
        if record_type is None:
            return result
        return convert_result(result, record_type)

    def scrape_to_string_map(self, html: str, record_type: Optional[Type[Any]] = None) -> Dict[str, str]:
        """Scrape ``html`` into a flat map of strings."""
        return to_string_map(self.scrape_value(html, record_type))

    def get_statistics(self) -> Dict[str, Any]:
        """Get scrape statistics."""
        with self._lock:
            stats = dict(self.scrape_stats)

        success_rate = stats['successful_scrapes'] / max(stats['total_scrapes'], 1)
        return {
            **stats,
            'success_rate': round(success_rate, 2),
            'mode': "parallel" if self.parallel else "sequential"
        }

    def close(self):
        """Shut down the worker pool of a parallel scraper."""
        if self._finalizer is not None:
            self._finalizer()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class HtmlScraperBuilder:
    """Staged construction of an ``HtmlScraper``."""

    def __init__(self):
        self._options: Dict[str, Any] = {}

    def with_config(self, config: RuleSource) -> 'HtmlScraperBuilder':
        self._options['config'] = config
        return self

    def with_cleaner(self, cleaner: CleanerLike) -> 'HtmlScraperBuilder':
        self._options['cleaner'] = cleaner
        return self

    def with_parallelism(self, max_workers: Optional[int] = None) -> 'HtmlScraperBuilder':
        self._options['parallel'] = True
        self._options['max_workers'] = max_workers
        return self

    def with_parser(self, parser: str) -> 'HtmlScraperBuilder':
        self._options['adapter'] = SoupDocumentAdapter(parser=parser)
        return self

    def build(self) -> HtmlScraper:
        return HtmlScraper(**self._options)
