"""The engine's JSON-like result value and views derived from it."""

import json
from typing import Dict, List, Optional, Union

Value = Union[None, str, List['Value'], Dict[str, 'Value']]


def dumps(value: Value, indent: Optional[int] = None) -> str:
    """Canonical JSON text of a value."""
    return json.dumps(value, ensure_ascii=False, indent=indent)


def to_string_map(result: Dict[str, Value]) -> Dict[str, str]:
    """
    Flatten a top-level result into a string-keyed map of strings.

    Text values are kept as they are, lists and objects are JSON-encoded,
    and null values are left out.
    """
    flat: Dict[str, str] = {}
    for name, value in result.items():
        if value is None:
            continue
        flat[name] = value if isinstance(value, str) else dumps(value)
    return flat
