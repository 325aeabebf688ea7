"""Loading rule sets from JSON or TOML configuration."""

import json
import os
import tomllib
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

import structlog

from .exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    UnsupportedFormatError,
)
from .rules import Rule, RuleSet

logger = structlog.get_logger(__name__)

SUPPORTED_EXTENSIONS = (".json", ".toml")

RuleSource = Union[RuleSet, Mapping[str, Any], Iterable[Rule], Path, str]


def _looks_like_path(source: str) -> bool:
    """A single-line string naming a supported config file."""
    stripped = source.strip()
    return (
        "\n" not in stripped
        and stripped.lower().endswith(SUPPORTED_EXTENSIONS)
        and not stripped.startswith(("{", "["))
    )


def _decode(data: Any) -> RuleSet:
    return RuleSet.from_dict(data)


def load_rule_file(path: Union[str, Path]) -> RuleSet:
    """
    Load a rule set from a file, choosing the format by extension.

    Raises:
        ConfigFileNotFoundError: The file does not exist
        UnsupportedFormatError: The extension is not .json or .toml
        ConfigParseError: The file content is malformed
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigFileNotFoundError(str(path))

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(str(path))

    content = path.read_text(encoding="utf-8")
    try:
        if suffix == ".json":
            data = json.loads(content)
        else:
            data = tomllib.loads(content)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigParseError(f"Error parsing {path}: {e}") from e

    rule_set = _decode(data)
    logger.info(f"Loaded {len(rule_set)} rules from {path}")
    return rule_set


def load_rule_string(content: str) -> RuleSet:
    """Decode inline configuration, trying JSON first and then TOML."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError as json_error:
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as toml_error:
            raise ConfigParseError(
                f"Config is neither valid JSON ({json_error}) nor valid TOML ({toml_error})"
            ) from toml_error
    return _decode(data)


def load_rule_set(source: RuleSource) -> RuleSet:
    """
    Resolve any supported rule source into a ``RuleSet``.

    Args:
        source: A RuleSet, an already decoded config mapping, an iterable
            of rules, a filesystem path, or an inline JSON/TOML string.
            Existing paths are read by extension; ``Path`` objects and
            strings naming a .json/.toml file must exist.

    Returns:
        The decoded rule set
    """
    if isinstance(source, RuleSet):
        return source

    if isinstance(source, os.PathLike):
        return load_rule_file(source)

    if isinstance(source, str):
        if os.path.isfile(source) or _looks_like_path(source):
            return load_rule_file(source.strip())
        return load_rule_string(source)

    if isinstance(source, Mapping):
        return _decode(dict(source))

    try:
        return RuleSet(rules=tuple(source))
    except TypeError:
        raise ConfigError(f"Unsupported rule source: {type(source).__name__}") from None


def dump_rule_set(rule_set: RuleSet, indent: Optional[int] = None) -> str:
    """Encode a rule set as JSON configuration."""
    return rule_set.to_json(indent=indent)
