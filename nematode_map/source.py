"""Loading and flattening of the grouped nematode observation document."""

import json
import logging
import math
import re
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Union

from nematode_map.constants import (
    COMMON_NAME_FIELD,
    ENTRIES_FIELD,
    LATITUDE_FIELD,
    LONGITUDE_FIELD,
    NEMATODE_TAXA_FIELD,
    OPTIONAL_ENTRY_FIELDS,
    SAMPLE_SIZE_FIELD,
    SCIENTIFIC_TAXA_FIELD,
    TEXT_ENTRY_FIELDS,
)

logger = logging.getLogger(__name__)

_RANGE_PATTERN = re.compile(r"^(\d+)\s*-\s*(\d+)$")
_NON_NUMERIC_PATTERN = re.compile(r"[^0-9.]")


class SourceDocumentError(ValueError):
    """A source document is missing expected keys or has the wrong shape."""


def load_json_document(path: Union[str, Path]) -> Any:
    """Read a JSON document from disk. IO and decode errors propagate."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def parse_sample_size(value: Any) -> Optional[float]:
    """
    Parse a sample size into the highest recorded count.

    Args:
        value: A number, a ``"low-high"`` range string, or free text

    Returns:
        The number itself, the larger bound of a range, the number left after
        stripping non-numeric characters, or None when nothing numeric remains
    """
    if value is None or isinstance(value, bool):
        return None
    text = "" if isinstance(value, (int, float)) else str(value).strip()
    match = _RANGE_PATTERN.match(text)
    digits = _NON_NUMERIC_PATTERN.sub("", text)
    try:
        if isinstance(value, (int, float)):
            size = float(value)
        elif match:
            size = float(max(int(match.group(1)), int(match.group(2))))
        elif digits:
            size = float(digits)
        else:
            return None
    except (ValueError, OverflowError):
        return None

    # NaN, Infinity and overlong digit strings
    return size if math.isfinite(size) else None


def parse_coordinate(value: Any, limit: float = 180.0) -> Optional[float]:
    """A finite float within [-limit, limit], or None when it can't be placed."""
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            coordinate = float(value)
        else:
            coordinate = float(str(value).strip())
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(coordinate) or abs(coordinate) > limit:
        return None
    return coordinate


def _iter_groups(source: Any) -> Iterator[tuple[Optional[str], Mapping[str, Any]]]:
    if isinstance(source, Mapping):
        items: list[tuple[Optional[str], Any]] = list(source.items())
    elif isinstance(source, list):
        items = [(None, group) for group in source]
    else:
        raise SourceDocumentError(
            f"Observation source must be a mapping or a list, got {type(source).__name__}"
        )

    for key, group in items:
        if not isinstance(group, Mapping):
            raise SourceDocumentError(f"Observation group {key!r} is not a mapping")
        yield key, group


def _iter_entries(
    entries: Any,
) -> Iterator[tuple[Optional[str], Mapping[str, Any]]]:
    # Entries are either a plain list or grouped by taxon name
    if entries is None:
        return
    if isinstance(entries, Mapping):
        for taxon, taxon_entries in entries.items():
            for entry in taxon_entries or []:
                yield taxon, entry
    elif isinstance(entries, list):
        for entry in entries:
            yield None, entry
    else:
        raise SourceDocumentError(
            f"'{ENTRIES_FIELD}' must be a list or a mapping, got {type(entries).__name__}"
        )


def iter_observation_records(source: Any) -> Iterator[dict[str, Any]]:
    """
    Flatten a grouped observation document into one record per entry.

    The document is either a mapping from group key to group or a list of
    groups. Entries without coordinates are kept; placement-dependent stages
    filter them out. Each call starts again from the beginning of the source.

    Raises:
        SourceDocumentError: If the document or one of its groups has the wrong shape.
    """
    index = 0
    for key, group in _iter_groups(source):
        label = group.get(COMMON_NAME_FIELD) or key
        if not label:
            raise SourceDocumentError(
                f"Observation group is missing '{COMMON_NAME_FIELD}'"
            )
        scientific_taxa = [str(t) for t in group.get(SCIENTIFIC_TAXA_FIELD) or []]

        for taxon, entry in _iter_entries(group.get(ENTRIES_FIELD)):
            if not isinstance(entry, Mapping):
                raise SourceDocumentError(f"Entry in group {label!r} is not a mapping")

            nematode = (
                entry.get(NEMATODE_TAXA_FIELD) or taxon or ", ".join(scientific_taxa)
            )
            record: dict[str, Any] = {
                "observationIndex": index,
                "label": str(label),
                "nematode": str(nematode) if nematode else None,
                "scientificTaxa": scientific_taxa,
                "latitude": parse_coordinate(entry.get(LATITUDE_FIELD), limit=90.0),
                "longitude": parse_coordinate(entry.get(LONGITUDE_FIELD)),
                "sampleSize": parse_sample_size(entry.get(SAMPLE_SIZE_FIELD)),
            }
            for field, column in TEXT_ENTRY_FIELDS.items():
                record[column] = str(entry.get(field) or "")
            for field, column in OPTIONAL_ENTRY_FIELDS.items():
                value = entry.get(field)
                record[column] = None if value is None else str(value)

            index += 1
            yield record

    logger.debug(f"Flattened {index} observation records")
