"""
Mapping of raw spreadsheet rows to domain entries.

Rows arrive as free-form ``{column: value}`` maps. ``normalize_row`` folds every
known column spelling onto one canonical key and is applied once, where rows
enter the system. ``map_rows`` normalizes again so it also accepts raw rows;
normalizing an already normalized row is a no-op.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from domain.models import ImprovementEntry
from domain.months import derive_month

# Get logger for this module
logger = logging.getLogger(__name__)

FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "control_number": ("Control Number", "controlNumber", "control_number"),
    "record_number": ("Record Number", "recordNumber", "record_number"),
    "area_code": ("Area Code", "areaCode", "area_code"),
    "category": ("Category", "category"),
    "title": ("Entry Title", "entryTitle", "entry_title", "title"),
    "description": ("Description", "description"),
    "before_image": ("Before Image", "beforeImage", "before_image"),
    "after_image": ("After Image", "afterImage", "after_image"),
    "improvement": ("Improvement", "improvement"),
    "improvement_effect": (
        "Improvement Effect",
        "improvementEffect",
        "improvement_effect",
    ),
    "date_time": ("Date and Time", "dateTime", "date_time"),
    "id": ("id", "ID", "Id", "idNumber"),
    "month": ("month", "Month", "monthData"),
    "timestamp": ("timestamp", "Timestamp"),
    "date": ("date", "Date"),
}

ENTRY_FIELDS: Tuple[str, ...] = (
    "control_number",
    "record_number",
    "area_code",
    "category",
    "title",
    "description",
    "before_image",
    "after_image",
    "improvement",
    "improvement_effect",
)

_ALIAS_LOOKUP: Dict[str, str] = {
    alias: canonical
    for canonical, aliases in FIELD_ALIASES.items()
    for alias in aliases
}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_row(row: Mapping[str, Any]) -> Dict[str, str]:
    """
    Fold known column spellings onto canonical snake_case keys.

    The first non-empty value among the variants of a field wins. Columns with
    no known alias are kept under their original name.

    Args:
        row: Raw row as returned by the store

    Returns:
        A new dict with string values
    """
    normalized: Dict[str, str] = {}
    for key, value in row.items():
        canonical = _ALIAS_LOOKUP.get(key, key)
        text = _as_text(value)
        if normalized.get(canonical):
            continue
        normalized[canonical] = text
    return normalized


def map_rows(rows: Iterable[Mapping[str, Any]]) -> List[ImprovementEntry]:
    """
    Convert rows into improvement entries.

    Every row yields exactly one entry; missing fields default to ``""``.
    """
    entries = []
    for index, raw_row in enumerate(rows, start=1):
        row = normalize_row(raw_row)
        date_time = row.get("date_time", "")
        fields = {name: row.get(name, "") for name in ENTRY_FIELDS}
        entries.append(
            ImprovementEntry(
                id=f"entry-{index}",
                date_time=date_time,
                month=derive_month(date_time),
                **fields,
            )
        )
    logger.debug("Mapped %d rows to entries", len(entries))
    return entries


def filter_entries_by_month(
    entries: Iterable[ImprovementEntry], month: str
) -> List[ImprovementEntry]:
    """Keep entries whose derived month equals ``month`` (case-insensitive), in order."""
    wanted = month.lower()
    return [entry for entry in entries if entry.month.lower() == wanted]


def filter_rows(
    rows: Iterable[Dict[str, str]], column: str, value: str
) -> List[Dict[str, str]]:
    """Keep normalized rows whose canonical ``column`` equals ``value`` exactly."""
    return [row for row in rows if row.get(column) == value]
