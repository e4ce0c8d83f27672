"""Merge helpers for partial project updates.

Presence is always a key-existence check: a key mapped to ``None`` is present
and overrides, a missing key leaves the earlier value in place.
"""
from typing import Any, Dict, Mapping, Optional

from tocapi.constants import COLOR_FIELDS, TocSection

_MISSING = object()


def rightmost_present(key: str, *sources: Optional[Mapping[str, Any]], default: Any = None) -> Any:
    """
    Return the value for ``key`` from the last source that contains it.

    Args:
        key: Key to look up
        sources: Mappings ordered from lowest to highest priority; ``None`` entries are skipped
        default: Value returned when no source contains the key

    Returns:
        The winning value, or ``default``
    """
    value = _MISSING
    for source in sources:
        if source is not None and key in source:
            value = source[key]
    return default if value is _MISSING else value


def merge_content(
    existing: Optional[Mapping[str, Any]],
    incoming: Optional[Mapping[str, Any]],
) -> Dict[str, Any]:
    """Merge ToC content: sections present in ``incoming`` replace stored ones."""
    return {
        section: rightmost_present(section, existing, incoming)
        for section in TocSection.names()
    }


def default_color_config() -> Dict[str, Dict[str, str]]:
    """Return a color configuration with empty colors for every section."""
    return {section: {field: "" for field in COLOR_FIELDS} for section in TocSection.names()}


def _color_section(config: Any, section: str) -> Optional[Mapping[str, Any]]:
    if not isinstance(config, Mapping):
        return None
    pair = config.get(section)
    return pair if isinstance(pair, Mapping) else None


def merge_color_config(existing: Any, incoming: Any) -> Dict[str, Dict[str, Any]]:
    """
    Three-way merge of ToC color configurations.

    For each section and each of ``shape``/``text`` the result takes the
    incoming value if present, else the existing value if present, else "".
    Unknown sections and fields are dropped.
    """
    merged = {}
    for section in TocSection.names():
        tiers = (_color_section(existing, section), _color_section(incoming, section))
        merged[section] = {
            field: rightmost_present(field, *tiers, default="") for field in COLOR_FIELDS
        }
    return merged
