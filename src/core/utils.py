"""
Core Utility Functions.

Coercion helpers used at the catalog normalization boundary. Raw Supabase
rows carry numeric ids, nullable text and loosely-typed JSON columns; these
helpers turn them into clean strings, id lists and numbers so nothing past
the boundary has to coerce again.
"""

import math
from typing import Any, List, Optional


def safe_text(value: Any) -> str:
    """
    Convert any value to a stripped string ('' for None).

    Examples:
        >>> safe_text(None)
        ''
        >>> safe_text("  Silk ")
        'Silk'
        >>> safe_text(12)
        '12'
    """
    if value is None:
        return ""
    return str(value).strip()


def normalize_id(value: Any) -> Optional[str]:
    """
    Normalize a single id to its string form.

    Numeric database ids and string ids compare equal after this, which is
    what the match engine relies on. Integral floats ("3.0") collapse to "3".

    Returns:
        The normalized id, or None for None/blank/bool input
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = safe_text(value)
    return text or None


def normalize_ids(values: Any) -> List[str]:
    """
    Normalize an id array from a JSON column.

    Non-list input yields an empty list. Blank entries are dropped and
    duplicates collapse, keeping first-seen order.

    Examples:
        >>> normalize_ids([3, "3", " silk ", None, ""])
        ['3', 'silk']
        >>> normalize_ids("silk")
        []
    """
    if not isinstance(values, (list, tuple)):
        return []
    seen = set()
    result = []
    for raw in values:
        item = normalize_id(raw)
        if item is None or item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def to_number(value: Any) -> Optional[float]:
    """
    Convert a JSON number (or numeric string) to float.

    Returns:
        The number, or None for missing, boolean, non-numeric or non-finite input
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def to_flag(value: Any) -> bool:
    """
    Convert a JSON boolean that may have been stored as a string or 0/1.

    Example:
        >>> to_flag("false"), to_flag("True"), to_flag(1), to_flag(None)
        (False, True, True, False)
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return False


def safe_get(obj: Any, *keys: str, default: Any = None) -> Any:
    """
    Safely get nested dictionary values.

    Example:
        >>> safe_get({'spec': {'fabricTypeIds': ['silk']}}, 'spec', 'fabricTypeIds')
        ['silk']
        >>> safe_get({'spec': None}, 'spec', 'fabricTypeIds', default=[])
        []
    """
    current = obj
    for key in keys:
        if isinstance(current, dict):
            current = current.get(key)
        else:
            return default
        if current is None:
            return default
    return current

