"""Small constructors for domain records used across the tests."""

import uuid
from datetime import date

from planning.domain import (
    Category,
    CategoryId,
    DraftEvent,
    DraftSource,
    EventTemplate,
    Frequency,
    OrganizationId,
    RecurringRule,
    RecurringRuleId,
    TemplateId,
)

ORG = OrganizationId(uuid.UUID("00000000-0000-0000-0000-000000000001"))
MEETINGS = CategoryId(uuid.UUID("00000000-0000-0000-0000-0000000000c1"))
ASSEMBLIES = CategoryId(uuid.UUID("00000000-0000-0000-0000-0000000000c2"))


def category(category_id: CategoryId = MEETINGS, name: str = "Meetings") -> Category:
    return Category(id=category_id, organization_id=ORG, name=name)


def rule(
    day_of_week: int,
    frequency: Frequency = Frequency.WEEKLY,
    week_of_month: int | None = None,
    name: str = "Club evening",
    category_id: CategoryId | None = MEETINGS,
    **kwargs,
) -> RecurringRule:
    return RecurringRule(
        id=RecurringRuleId(uuid.uuid4()),
        organization_id=ORG,
        name=name,
        frequency=frequency,
        day_of_week=day_of_week,
        week_of_month=week_of_month,
        default_category_id=category_id,
        **kwargs,
    )


def template(
    name: str = "Annual assembly",
    default_month: int | None = 9,
    is_mandatory: bool = True,
    category_id: CategoryId = ASSEMBLIES,
    **kwargs,
) -> EventTemplate:
    return EventTemplate(
        id=TemplateId(uuid.uuid4()),
        organization_id=ORG,
        name=name,
        category_id=category_id,
        is_mandatory=is_mandatory,
        default_month=default_month,
        **kwargs,
    )


def draft(
    key: str,
    day: date,
    source: DraftSource = DraftSource.MANUAL,
    category_id: CategoryId | None = MEETINGS,
    title: str = "Event",
    **kwargs,
) -> DraftEvent:
    return DraftEvent(
        key=key, date=day, title=title, source=source, category_id=category_id, **kwargs
    )
