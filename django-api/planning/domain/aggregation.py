"""Merge the three draft streams into one reviewable plan.

Recurring drafts, drafts resolved from mandatory placements and manual
drafts are concatenated in that order and stably sorted by date, so events
on the same day always appear as recurring, template, manual.
"""

from collections import Counter
from collections.abc import Collection, Iterable, Sequence
from datetime import date

from planning.domain.models import (
    CategoryCount,
    DraftEvent,
    MandatoryPlacement,
    Plan,
    PlanStatistics,
)
from planning.domain.placement import placements_to_drafts
from planning.domain.value_objects import CategoryId, DraftSource


def has_category(draft: DraftEvent, known_category_ids: Collection[CategoryId] | None = None) -> bool:
    if draft.category_id is None:
        return False
    if known_category_ids is not None and draft.category_id not in known_category_ids:
        return False
    return True


def in_window(draft: DraftEvent, window: tuple[date, date] | None = None) -> bool:
    if window is None:
        return True
    start, end = window
    return start <= draft.date <= end


def merge_drafts(*streams: Iterable[DraftEvent]) -> list[DraftEvent]:
    """Concatenate ``streams`` and sort by date; first occurrence of a key wins."""
    seen: set[str] = set()
    merged: list[DraftEvent] = []
    for stream in streams:
        for draft in stream:
            if draft.key in seen:
                continue
            seen.add(draft.key)
            merged.append(draft)
    merged.sort(key=lambda draft: draft.date)
    return merged


def compute_statistics(
    entries: Sequence[DraftEvent],
    placements: Sequence[MandatoryPlacement],
) -> PlanStatistics:
    category_counts = Counter(draft.category_id for draft in entries if draft.category_id is not None)
    by_category = tuple(
        CategoryCount(category_id=category_id, count=count)
        for category_id, count in category_counts.most_common()
    )
    by_source = {source: 0 for source in DraftSource}
    for draft in entries:
        by_source[draft.source] += 1
    return PlanStatistics(
        total=len(entries),
        by_category=by_category,
        by_source=by_source,
        mandatory_total=len(placements),
        mandatory_placed=sum(1 for placement in placements if placement.is_resolved),
    )


def aggregate(
    recurring_drafts: Iterable[DraftEvent],
    placements: Sequence[MandatoryPlacement],
    manual_drafts: Iterable[DraftEvent],
    known_category_ids: Collection[CategoryId] | None = None,
    window: tuple[date, date] | None = None,
) -> Plan:
    """Build the reviewable plan from all three sources.

    Drafts without a (known) category, and drafts dated outside ``window``
    when one is given, are moved to ``Plan.dropped`` instead of the entries.
    Unplaced mandatory placements are reported, not rejected.
    """
    merged = merge_drafts(recurring_drafts, placements_to_drafts(placements), manual_drafts)
    entries = []
    dropped = []
    for draft in merged:
        if has_category(draft, known_category_ids) and in_window(draft, window):
            entries.append(draft)
        else:
            dropped.append(draft)
    return Plan(
        entries=tuple(entries),
        statistics=compute_statistics(entries, placements),
        dropped=tuple(dropped),
        unplaced=tuple(placement for placement in placements if not placement.is_resolved),
    )


def group_by_month(entries: Iterable[DraftEvent]) -> list[tuple[int, int, list[DraftEvent]]]:
    """Group date-ordered drafts into ``(year, month, drafts)`` buckets."""
    groups: list[tuple[int, int, list[DraftEvent]]] = []
    for draft in sorted(entries, key=lambda draft: draft.date):
        if groups and (groups[-1][0], groups[-1][1]) == (draft.date.year, draft.date.month):
            groups[-1][2].append(draft)
        else:
            groups.append((draft.date.year, draft.date.month, [draft]))
    return groups
