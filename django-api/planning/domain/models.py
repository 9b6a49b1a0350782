"""Domain models representing persisted and in-session planning state.

These are pure domain objects with no API input rules.
Django ORM models are in planning/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import date, datetime

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


@dataclass(frozen=True)
class Category:
    """Domain representation of an event Category."""

    id: CategoryId
    organization_id: OrganizationId
    name: str
    color: str | None = None


@dataclass(frozen=True)
class RecurringRule:
    """A weekday-based repeating schedule.

    ``day_of_week`` counts from 0 = Sunday. ``week_of_month`` only applies to
    monthly rules: 1-4 for the n-th occurrence, -1 for the last one and None
    for the first.
    """

    id: RecurringRuleId
    organization_id: OrganizationId
    name: str
    frequency: Frequency
    day_of_week: int
    week_of_month: int | None = None
    description: str | None = None
    default_category_id: CategoryId | None = None
    default_title: str | None = None
    is_active: bool = True


@dataclass(frozen=True)
class EventTemplate:
    """A reusable event definition; mandatory ones are placed once per year."""

    id: TemplateId
    organization_id: OrganizationId
    name: str
    category_id: CategoryId
    default_duration_minutes: int = 120
    description: str | None = None
    default_invitation_text: str | None = None
    is_mandatory: bool = False
    default_month: int | None = None
    is_active: bool = True


@dataclass(frozen=True)
class OperatingYear:
    """Domain representation of an operating year (inclusive date window)."""

    id: YearId
    organization_id: OrganizationId
    name: str
    start_date: date
    end_date: date
    status: YearStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None
    event_count: int = 0

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class PlannedEvent:
    """Durable event bound to an operating year."""

    id: PlannedEventId
    year_id: YearId
    date: date
    title: str
    category_id: CategoryId
    status: EventStatus = EventStatus.PLANNED
    end_date: date | None = None
    description: str | None = None
    template_id: TemplateId | None = None
    recurring_rule_id: RecurringRuleId | None = None
    is_mandatory: bool = False
    invitation_text: str | None = None
    published_event_id: PublishedEventId | None = None

    @property
    def is_published(self) -> bool:
        return self.published_event_id is not None


# Fields of a committed planned event that may be changed one at a time.
EDITABLE_EVENT_FIELDS = frozenset(
    {
        "title",
        "description",
        "date",
        "end_date",
        "category_id",
        "status",
        "is_mandatory",
        "invitation_text",
    }
)


@dataclass(frozen=True)
class YearWithEvents:
    """An operating year together with its events ordered by date."""

    year: OperatingYear
    events: tuple[PlannedEvent, ...] = ()


@dataclass(frozen=True)
class DraftEvent:
    """A prospective event that only lives inside a planning session."""

    key: str
    date: date
    title: str
    source: DraftSource
    category_id: CategoryId | None = None
    end_date: date | None = None
    description: str | None = None
    invitation_text: str | None = None
    template_id: TemplateId | None = None
    recurring_rule_id: RecurringRuleId | None = None
    is_mandatory: bool = False
    duration_minutes: int | None = None


@dataclass(frozen=True)
class MandatoryPlacement:
    """Pairs a mandatory template with the date chosen for it, if any."""

    template: EventTemplate
    date: date | None
    invitation_text: str = ""
    is_placed: bool = False

    @property
    def template_id(self) -> TemplateId:
        return self.template.id

    @property
    def is_resolved(self) -> bool:
        return self.is_placed and self.date is not None


@dataclass(frozen=True)
class CategoryCount:
    category_id: CategoryId
    count: int


@dataclass(frozen=True)
class PlanStatistics:
    """Review figures for a merged plan. Display only."""

    total: int
    by_category: tuple[CategoryCount, ...]
    by_source: dict[DraftSource, int]
    mandatory_total: int
    mandatory_placed: int

    @property
    def unplaced_mandatory_count(self) -> int:
        return self.mandatory_total - self.mandatory_placed


@dataclass(frozen=True)
class Plan:
    """The merged, date-ordered plan ready for review and commit."""

    entries: tuple[DraftEvent, ...]
    statistics: PlanStatistics
    dropped: tuple[DraftEvent, ...] = ()
    unplaced: tuple[MandatoryPlacement, ...] = ()

    @property
    def unplaced_mandatory_count(self) -> int:
        return len(self.unplaced)

    @property
    def has_warnings(self) -> bool:
        # Unplaced mandatory templates and dropped drafts never block a commit.
        return bool(self.unplaced or self.dropped)


@dataclass(frozen=True)
class CommitRequest:
    """Everything needed to persist one operating year."""

    organization_id: OrganizationId
    year_name: str
    start_date: date
    end_date: date
    set_active: bool
    drafts: tuple[DraftEvent, ...] = field(default_factory=tuple)
