"""Parallel evaluation of independent top-level rules."""

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Tuple

import structlog
from bs4 import Tag

from .cleaners import TextCleaner, ThreadSafeCleaner
from .document import SoupDocumentAdapter
from .evaluator import RuleEvaluator
from .rules import Rule
from .values import Value

logger = structlog.get_logger(__name__)


class ResultMap:
    """Result container that workers insert into concurrently."""

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[int, Tuple[str, Value]] = {}

    def insert(self, position: int, name: str, value: Value):
        with self._lock:
            self._entries[position] = (name, value)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def to_dict(self) -> Dict[str, Value]:
        """
        Merge entries in rule order.

        When two rules share a name, the one later in the rule list wins,
        regardless of which worker finished last.
        """
        with self._lock:
            ordered = sorted(self._entries.items())
        results: Dict[str, Value] = {}
        for _, (name, value) in ordered:
            results[name] = value
        return results


class ParallelRuleEvaluator:
    """
    Fan top-level rules out across a thread pool.

    Each task runs the sequential ``RuleEvaluator`` for one top-level rule
    against the shared, read-only root. Sub-rules are not split further.
    """

    def __init__(
        self,
        cleaner: Optional[TextCleaner] = None,
        adapter: Optional[SoupDocumentAdapter] = None,
        max_workers: Optional[int] = None
    ):
        self.max_workers = max_workers or os.cpu_count() or 1
        shared_cleaner = ThreadSafeCleaner(cleaner) if cleaner is not None else None
        self.evaluator = RuleEvaluator(cleaner=shared_cleaner, adapter=adapter)

        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix="scrape-rules"
                )
                logger.debug("Started rule worker pool", max_workers=self.max_workers)
            return self._executor

    def _run_rule(self, results: ResultMap, position: int, root: Tag, rule: Rule):
        results.insert(position, rule.name, self.evaluator.evaluate(root, rule))

    def evaluate_rules(self, root: Tag, rules: Iterable[Rule]) -> Dict[str, Value]:
        """
        Evaluate top-level rules concurrently.

        Raises:
            The error of the first failing rule in list order; no partial
            result is returned.
        """
        rules: List[Rule] = list(rules)
        if not rules:
            return {}

        names = [rule.name for rule in rules]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            logger.warning(
                "Duplicate top-level rule names, last rule in list order wins",
                names=duplicates
            )

        executor = self._get_executor()
        results = ResultMap()
        futures = [
            executor.submit(self._run_rule, results, position, root, rule)
            for position, rule in enumerate(rules)
        ]

        try:
            for future in futures:
                future.result()
        except Exception:
            for future in futures:
                future.cancel()
            raise

        return results.to_dict()

    def shutdown(self, wait: bool = True):
        """Stop the worker pool."""
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
