"""Error types raised by the scraping engine."""

from typing import Optional


class ScraperError(Exception):
    """Base scraper error."""
    pass


class ConfigError(ScraperError):
    """Rule configuration could not be loaded."""
    pass


class UnsupportedFormatError(ConfigError):
    """Config file extension is neither .json nor .toml."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Unsupported config file format: {path}. Use .json or .toml")


class ConfigFileNotFoundError(ConfigError):
    """A config path was given but no such file exists."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Config file not found: {path}")


class ConfigParseError(ConfigError):
    """Config content is not valid JSON or TOML."""
    pass


class InvalidRuleError(ConfigError):
    """A rule definition is malformed."""
    pass


class SelectorError(ScraperError):
    """A selector string could not be parsed."""

    def __init__(self, selector: str, reason: Optional[str] = None):
        self.selector = selector
        self.reason = reason
        message = f"Invalid selector: {selector!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
