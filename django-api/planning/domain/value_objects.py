"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import Self
from uuid import UUID

from planning.domain.errors import InvalidIdError


@dataclass(frozen=True)
class Identifier:
    value: UUID

    kind = "record"

    @classmethod
    def from_string(cls, value: str) -> Self:
        try:
            return cls(value=UUID(str(value)))
        except ValueError:
            raise InvalidIdError(cls.kind) from None

    def __str__(self) -> str:
        return str(self.value)


class OrganizationId(Identifier):
    """Unique identifier for an Organization."""

    kind = "organization"


class CategoryId(Identifier):
    """Unique identifier for a Category."""

    kind = "category"


class RecurringRuleId(Identifier):
    """Unique identifier for a RecurringRule."""

    kind = "recurring rule"


class TemplateId(Identifier):
    """Unique identifier for an EventTemplate."""

    kind = "template"


class YearId(Identifier):
    """Unique identifier for an OperatingYear."""

    kind = "year"


class PlannedEventId(Identifier):
    """Unique identifier for a PlannedEvent."""

    kind = "planned event"


class PublishedEventId(Identifier):
    """Unique identifier for an event in the live calendar."""

    kind = "published event"


class Frequency(str, Enum):
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class YearStatus(str, Enum):
    """Lifecycle of an operating year."""

    DRAFT = "DRAFT"
    PLANNING = "PLANNING"
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class EventStatus(str, Enum):
    PLANNED = "PLANNED"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class DraftSource(str, Enum):
    """Where a draft event came from; the order here is the same-day merge order."""

    RECURRING = "RECURRING"
    TEMPLATE = "TEMPLATE"
    MANUAL = "MANUAL"


# Forward moves may skip states; ARCHIVED is reachable from everywhere and
# an archived or planning year may be re-activated.
ALLOWED_STATUS_TRANSITIONS: dict[YearStatus, frozenset[YearStatus]] = {
    YearStatus.DRAFT: frozenset({YearStatus.PLANNING, YearStatus.ACTIVE, YearStatus.ARCHIVED}),
    YearStatus.PLANNING: frozenset({YearStatus.ACTIVE, YearStatus.ARCHIVED}),
    YearStatus.ACTIVE: frozenset({YearStatus.ARCHIVED}),
    YearStatus.ARCHIVED: frozenset({YearStatus.ACTIVE}),
}


def can_transition(current: YearStatus, requested: YearStatus) -> bool:
    """Return True if a year may move from ``current`` to ``requested``."""
    if current == requested:
        return True
    return requested in ALLOWED_STATUS_TRANSITIONS[current]
