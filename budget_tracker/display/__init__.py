"""Display settings: status labels, colour tokens and progress-bar bands.

Settings live in JSON files next to this module (``display.json``).  Each
file is parsed once; callers always receive their own copy, so editing a
returned dict never changes what later lookups see.
"""

from __future__ import annotations

import copy
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

SETTINGS_DIR = Path(__file__).parent
DEFAULT_SETTINGS = 'display'


@lru_cache(maxsize=None)
def _parsed_settings(name: str) -> Dict[str, Any]:
    path = SETTINGS_DIR / f"{name}.json"
    if not path.is_file():
        raise FileNotFoundError(f"Display settings not found: {path}")
    with path.open(encoding='utf-8') as handle:
        return json.load(handle)


def load_settings(name: str = DEFAULT_SETTINGS) -> Dict[str, Any]:
    """Return a private copy of the named settings file.

    Raises:
        FileNotFoundError: If ``<name>.json`` does not exist
        json.JSONDecodeError: If the file is not valid JSON
    """
    return copy.deepcopy(_parsed_settings(name))


def setting(*keys: str, default: Any = None, name: str = DEFAULT_SETTINGS) -> Any:
    """Look up a nested display setting.

    Args:
        *keys: Path into the settings (e.g. 'status_colors', 'safe')
        default: Returned when the path or the settings file is missing
        name: Settings file to read, without the .json suffix

    Example:
        >>> setting('status_labels', 'danger')
        'Over Budget'
    """
    try:
        value: Any = _parsed_settings(name)
        for key in keys:
            value = value[key]
    except (KeyError, TypeError, FileNotFoundError):
        return default
    return copy.deepcopy(value)
