"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Write methods are meant
to be called inside ``atomic()``; any exception escaping that block rolls
back everything written in it.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import AbstractContextManager
from datetime import date
from typing import Any

from planning.domain import (
    Category,
    DraftEvent,
    EventStatus,
    EventTemplate,
    OperatingYear,
    OrganizationId,
    PlannedEvent,
    PlannedEventId,
    PublishedEventId,
    RecurringRule,
    YearId,
    YearStatus,
)


class StoreError(Exception):
    """The backing store failed to read or write."""


class StoreConflictError(StoreError):
    """A uniqueness constraint was violated."""


class PlanningStore(ABC):
    """Interface for planning persistence operations."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[Any]:
        """Return a context manager wrapping one all-or-nothing transaction."""
        ...

    @abstractmethod
    def organization_exists(self, organization_id: OrganizationId) -> bool:
        ...

    @abstractmethod
    def list_categories(self, organization_id: OrganizationId) -> list[Category]:
        """Return the organization's categories ordered by name."""
        ...

    @abstractmethod
    def list_recurring_rules(
        self, organization_id: OrganizationId, active_only: bool = True
    ) -> list[RecurringRule]:
        """Return the organization's recurring rules ordered by name."""
        ...

    @abstractmethod
    def list_event_templates(
        self, organization_id: OrganizationId, active_only: bool = True
    ) -> list[EventTemplate]:
        """Return the organization's event templates ordered by name."""
        ...

    @abstractmethod
    def year_name_exists(self, organization_id: OrganizationId, name: str) -> bool:
        ...

    @abstractmethod
    def get_year(self, year_id: YearId) -> OperatingYear | None:
        """Return a year by ID, or None if not found."""
        ...

    @abstractmethod
    def list_years(self, organization_id: OrganizationId) -> list[OperatingYear]:
        """Return the organization's years with event counts, newest start first."""
        ...

    @abstractmethod
    def get_events_for_year(self, year_id: YearId) -> list[PlannedEvent]:
        """Return a year's events ordered by date, then plan position."""
        ...

    @abstractmethod
    def get_planned_event(
        self, event_id: PlannedEventId, for_update: bool = False
    ) -> PlannedEvent | None:
        """Return a planned event by ID, optionally locking its row."""
        ...

    @abstractmethod
    def list_upcoming_events(
        self, organization_id: OrganizationId, today: date, limit: int
    ) -> list[PlannedEvent]:
        """Return non-cancelled events of the ACTIVE year dated today or later."""
        ...

    @abstractmethod
    def lock_organization(self, organization_id: OrganizationId) -> bool:
        """Lock the organization row for this transaction; False if it does not exist."""
        ...

    @abstractmethod
    def archive_active_years(
        self, organization_id: OrganizationId, exclude: YearId | None = None
    ) -> int:
        """Move every ACTIVE year of the organization to ARCHIVED; return how many."""
        ...

    @abstractmethod
    def create_year(
        self,
        organization_id: OrganizationId,
        name: str,
        start_date: date,
        end_date: date,
        status: YearStatus,
    ) -> OperatingYear:
        """Insert a year.

        Raises:
            StoreConflictError: If the name is already used in the organization.
        """
        ...

    @abstractmethod
    def create_events(self, year_id: YearId, drafts: Sequence[DraftEvent]) -> list[PlannedEventId]:
        """Insert one PLANNED event per draft, keeping the draft order as position."""
        ...

    @abstractmethod
    def set_year_status(self, year_id: YearId, status: YearStatus) -> None:
        ...

    @abstractmethod
    def delete_year(self, year_id: YearId) -> None:
        """Delete a year and its events."""
        ...

    @abstractmethod
    def update_event(self, event_id: PlannedEventId, **changes: Any) -> PlannedEvent:
        ...

    @abstractmethod
    def delete_event(self, event_id: PlannedEventId) -> None:
        ...

    @abstractmethod
    def create_published_event(
        self, organization_id: OrganizationId, event: PlannedEvent
    ) -> PublishedEventId:
        """Copy a planned event into the organization's live calendar."""
        ...

    @abstractmethod
    def mark_published(
        self,
        event_id: PlannedEventId,
        published_event_id: PublishedEventId,
        status: EventStatus = EventStatus.CONFIRMED,
    ) -> None:
        ...
