from planning.domain.models import (
    Category,
    CategoryCount,
    CommitRequest,
    DraftEvent,
    EventTemplate,
    MandatoryPlacement,
    OperatingYear,
    Plan,
    PlannedEvent,
    PlanStatistics,
    RecurringRule,
    YearWithEvents,
)
from planning.domain.value_objects import (
    CategoryId,
    DraftSource,
    EventStatus,
    Frequency,
    OrganizationId,
    PlannedEventId,
    PublishedEventId,
    RecurringRuleId,
    TemplateId,
    YearId,
    YearStatus,
)

__all__ = [
    "Category",
    "CategoryCount",
    "CommitRequest",
    "DraftEvent",
    "EventTemplate",
    "MandatoryPlacement",
    "OperatingYear",
    "Plan",
    "PlannedEvent",
    "PlanStatistics",
    "RecurringRule",
    "YearWithEvents",
    "CategoryId",
    "DraftSource",
    "EventStatus",
    "Frequency",
    "OrganizationId",
    "PlannedEventId",
    "PublishedEventId",
    "RecurringRuleId",
    "TemplateId",
    "YearId",
    "YearStatus",
]
