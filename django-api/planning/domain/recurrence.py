"""Expansion of recurring rules into concrete dates and draft events."""

from collections.abc import Iterable
from datetime import date

from planning.domain.calendar_math import (
    add_days,
    add_weeks,
    day_of_week,
    iter_months,
    last_weekday_of_month,
    nth_weekday_of_month,
)
from planning.domain.errors import InvalidRecurrenceRuleError
from planning.domain.models import DraftEvent, RecurringRule
from planning.domain.value_objects import DraftSource, Frequency, RecurringRuleId

LAST_WEEK = -1
VALID_WEEKS_OF_MONTH = frozenset({1, 2, 3, 4, LAST_WEEK})


def validate_rule(rule: RecurringRule) -> None:
    """Reject rules that cannot be expanded.

    Raises:
        InvalidRecurrenceRuleError: If frequency, weekday or week of month is malformed.
    """
    try:
        frequency = Frequency(rule.frequency)
    except ValueError:
        raise InvalidRecurrenceRuleError(f"unknown frequency {rule.frequency!r}") from None
    day = rule.day_of_week
    if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
        raise InvalidRecurrenceRuleError(f"day_of_week must be 0-6, got {rule.day_of_week!r}")
    if frequency is Frequency.MONTHLY and rule.week_of_month is not None:
        week = rule.week_of_month
        if isinstance(week, bool) or week not in VALID_WEEKS_OF_MONTH:
            raise InvalidRecurrenceRuleError(
                f"week_of_month must be one of 1, 2, 3, 4 or -1, got {rule.week_of_month!r}"
            )


def _weekly_dates(weekday: int, start: date, end: date) -> list[date]:
    offset = (weekday - day_of_week(start)) % 7
    current = add_days(start, offset)
    dates = []
    while current <= end:
        dates.append(current)
        current = add_weeks(current, 1)
    return dates


def _monthly_dates(weekday: int, week_of_month: int | None, start: date, end: date) -> list[date]:
    nth = 1 if week_of_month is None else week_of_month
    dates = []
    for year, month in iter_months(start, end):
        if nth == LAST_WEEK:
            target = last_weekday_of_month(year, month, weekday)
        else:
            target = nth_weekday_of_month(year, month, weekday, nth)
        if target is not None and start <= target <= end:
            dates.append(target)
    return dates


def expand_rule(rule: RecurringRule, start: date, end: date) -> list[date]:
    """Return every date in ``[start, end]`` on which ``rule`` fires, ascending.

    An empty window or a rule without matches yields an empty list.

    Raises:
        InvalidRecurrenceRuleError: If the rule is malformed.
    """
    validate_rule(rule)
    if start > end:
        return []
    if Frequency(rule.frequency) is Frequency.WEEKLY:
        return _weekly_dates(rule.day_of_week, start, end)
    return _monthly_dates(rule.day_of_week, rule.week_of_month, start, end)


def rule_draft_key(rule_id: RecurringRuleId, day: date) -> str:
    return f"recurring-{rule_id}-{day.isoformat()}"


def rule_to_drafts(rule: RecurringRule, start: date, end: date) -> list[DraftEvent]:
    title = rule.default_title or rule.name
    return [
        DraftEvent(
            key=rule_draft_key(rule.id, day),
            date=day,
            title=title,
            source=DraftSource.RECURRING,
            category_id=rule.default_category_id,
            recurring_rule_id=rule.id,
            is_mandatory=False,
        )
        for day in expand_rule(rule, start, end)
    ]


def generate_recurring_drafts(
    rules: Iterable[RecurringRule],
    selected_rule_ids: Iterable[RecurringRuleId],
    start: date,
    end: date,
) -> list[DraftEvent]:
    """Expand the selected rules and return their drafts ordered by date.

    Same-day drafts keep the order of ``rules``.
    """
    selected = set(selected_rule_ids)
    drafts: list[DraftEvent] = []
    for rule in rules:
        if rule.id in selected:
            drafts.extend(rule_to_drafts(rule, start, end))
    drafts.sort(key=lambda draft: draft.date)
    return drafts
