"""Placement suggestions for mandatory event templates."""

from collections.abc import Iterable
from dataclasses import replace
from datetime import date

from planning.domain.calendar_math import first_business_like_day
from planning.domain.errors import InvalidTemplateError
from planning.domain.models import DraftEvent, EventTemplate, MandatoryPlacement
from planning.domain.value_objects import DraftSource

DEFAULT_FIRST_MONTH = 7


def suggest_placement_date(
    default_month: int | None,
    year_start: date,
    year_end: date,
    first_month: int = DEFAULT_FIRST_MONTH,
) -> date | None:
    """Suggest a date for a template that belongs in ``default_month``.

    Months from ``first_month`` on fall in the calendar year the operating
    year starts in, earlier months in the following one. The first weekday of
    that month is suggested, or None if it lies outside the year.

    Raises:
        InvalidTemplateError: If ``default_month`` is not between 1 and 12.
    """
    if default_month is None:
        return None
    if not 1 <= default_month <= 12:
        raise InvalidTemplateError(f"default_month must be 1-12, got {default_month}")
    year = year_start.year if default_month >= first_month else year_start.year + 1
    suggested = first_business_like_day(year, default_month)
    if not year_start <= suggested <= year_end:
        return None
    return suggested


def initial_placements(
    templates: Iterable[EventTemplate],
    year_start: date,
    year_end: date,
    first_month: int = DEFAULT_FIRST_MONTH,
) -> list[MandatoryPlacement]:
    """Build one placement per mandatory template with its suggested date."""
    placements = []
    for template in templates:
        if not template.is_mandatory:
            continue
        suggested = suggest_placement_date(template.default_month, year_start, year_end, first_month)
        placements.append(
            MandatoryPlacement(
                template=template,
                date=suggested,
                invitation_text=template.default_invitation_text or "",
                is_placed=suggested is not None,
            )
        )
    return placements


def place(
    placement: MandatoryPlacement,
    day: date | None,
    invitation_text: str | None = None,
) -> MandatoryPlacement:
    """Return ``placement`` moved to ``day``; None clears it."""
    changes: dict = {"date": day, "is_placed": day is not None}
    if invitation_text is not None:
        changes["invitation_text"] = invitation_text
    return replace(placement, **changes)


def template_draft_key(placement: MandatoryPlacement) -> str:
    return f"template-{placement.template_id}-{placement.date.isoformat()}"


def placement_to_draft(placement: MandatoryPlacement) -> DraftEvent | None:
    if not placement.is_resolved:
        return None
    template = placement.template
    return DraftEvent(
        key=template_draft_key(placement),
        date=placement.date,
        title=template.name,
        source=DraftSource.TEMPLATE,
        category_id=template.category_id,
        description=template.description,
        invitation_text=placement.invitation_text or None,
        template_id=template.id,
        is_mandatory=True,
        duration_minutes=template.default_duration_minutes,
    )


def placements_to_drafts(placements: Iterable[MandatoryPlacement]) -> list[DraftEvent]:
    drafts = []
    for placement in placements:
        draft = placement_to_draft(placement)
        if draft is not None:
            drafts.append(draft)
    return drafts
