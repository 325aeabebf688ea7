"""Pluggable post-processing for extracted leaf text."""

import html
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Union


class TextCleaner(ABC):
    """
    Transform one raw extracted string into a cleaned string.

    Implementations must be pure. Cleaners shared across parallel workers
    are called concurrently unless they set ``thread_safe = False``.
    """

    thread_safe = True

    @abstractmethod
    def clean(self, text: str) -> str:
        pass

    def __call__(self, text: str) -> str:
        return self.clean(text)


class IdentityCleaner(TextCleaner):
    """Return text unchanged."""

    def clean(self, text: str) -> str:
        return text


class DefaultCleaner(TextCleaner):
    """Collapse multi-line, whitespace-padded text into one line."""

    def clean(self, text: str) -> str:
        lines = (line.strip() for line in text.splitlines())
        return " ".join(line for line in lines if line)


class HtmlEntityCleaner(TextCleaner):
    """Decode HTML character references, then hand off to ``then`` if given."""

    def __init__(self, then: Optional[TextCleaner] = None):
        self.then = then

    @property
    def thread_safe(self) -> bool:
        return self.then is None or self.then.thread_safe

    def clean(self, text: str) -> str:
        decoded = html.unescape(text)
        return self.then.clean(decoded) if self.then else decoded


class FunctionCleaner(TextCleaner):
    """Adapt a plain ``str -> str`` callable."""

    def __init__(self, func: Callable[[str], str], thread_safe: bool = True):
        self.func = func
        self.thread_safe = thread_safe

    def clean(self, text: str) -> str:
        return self.func(text)


class ChainCleaner(TextCleaner):
    """Apply several cleaners in order."""

    def __init__(self, *cleaners: TextCleaner):
        self.cleaners = cleaners

    @property
    def thread_safe(self) -> bool:
        return all(cleaner.thread_safe for cleaner in self.cleaners)

    def clean(self, text: str) -> str:
        for cleaner in self.cleaners:
            text = cleaner.clean(text)
        return text


class ThreadSafeCleaner(TextCleaner):
    """
    Shared form of a cleaner handed to parallel workers.

    Thread-safe cleaners are called straight through; anything else is
    serialized behind a lock.
    """

    def __init__(self, cleaner: TextCleaner):
        self.cleaner = cleaner
        self._lock = None if cleaner.thread_safe else threading.Lock()

    def clean(self, text: str) -> str:
        if self._lock is None:
            return self.cleaner.clean(text)
        with self._lock:
            return self.cleaner.clean(text)


CLEANERS: Dict[str, Callable[[], TextCleaner]] = {
    "identity": IdentityCleaner,
    "default": DefaultCleaner,
    "html": lambda: HtmlEntityCleaner(then=DefaultCleaner()),
}


CleanerLike = Union[None, str, TextCleaner, Callable[[str], str]]


def resolve_cleaner(cleaner: CleanerLike) -> Optional[TextCleaner]:
    """Turn a cleaner name, callable or instance into a ``TextCleaner``."""
    if cleaner is None or isinstance(cleaner, TextCleaner):
        return cleaner
    if isinstance(cleaner, str):
        try:
            return CLEANERS[cleaner]()
        except KeyError:
            raise ValueError(
                f"Unknown cleaner {cleaner!r}; expected one of {sorted(CLEANERS)}"
            ) from None
    if callable(cleaner):
        return FunctionCleaner(cleaner)
    raise TypeError(f"Cannot use {type(cleaner).__name__} as a text cleaner")
