"""Client-side query evaluation over aggregated view records."""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Sequence

from confmod.models import QueryCriteria, RequestStatus, SortDirection, SortKey, ViewRecord
from confmod.utils.text import fold


def apply_query(records: Sequence[ViewRecord], criteria: QueryCriteria) -> List[ViewRecord]:
    """Derive the displayed list from the aggregated records.

    Search is always applied. Only the title key is sorted here; timestamp
    keys keep the order returned by the listing service.
    """
    displayed = filter_by_title(records, criteria.search_term)
    if criteria.sort_key is SortKey.TITLE:
        displayed = sort_by_title(displayed, criteria.sort_direction)
    return displayed


def filter_by_title(records: Sequence[ViewRecord], search_term: str) -> List[ViewRecord]:
    """Case-insensitive substring match on title; blank terms match everything."""
    needle = fold(search_term.strip())
    if not needle:
        return list(records)
    return [record for record in records if needle in fold(record.title)]


def sort_by_title(records: Sequence[ViewRecord], direction: SortDirection) -> List[ViewRecord]:
    # sorted() is stable under reverse=True, so tied titles keep server order.
    return sorted(
        records,
        key=lambda record: fold(record.title),
        reverse=direction is SortDirection.DESC,
    )


def status_counts(records: Sequence[ViewRecord]) -> Dict[str, int]:
    """Count records per status, plus an `all` total."""
    counter = Counter(record.status for record in records)
    counts = {status.value: counter.get(status, 0) for status in RequestStatus}
    counts["all"] = len(records)
    return counts
