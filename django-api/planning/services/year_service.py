"""Year service - lifecycle of committed years and their planned events."""

import logging
from datetime import date
from typing import Any

from django.utils import timezone

from planning.conf import planning_setting
from planning.domain.errors import (
    AlreadyPublishedError,
    EventOutsideWindowError,
    InvalidEventChangeError,
    InvalidEventDatesError,
    InvalidStatusTransitionError,
    MissingCategoryError,
    OrganizationNotFoundError,
    PlannedEventNotFoundError,
    UnknownCategoryError,
    YearArchivedError,
    YearNotDeletableError,
    YearNotFoundError,
)
from planning.domain.models import (
    EDITABLE_EVENT_FIELDS,
    DraftEvent,
    OperatingYear,
    PlannedEvent,
    YearWithEvents,
)
from planning.domain.value_objects import (
    CategoryId,
    DraftSource,
    OrganizationId,
    PlannedEventId,
    PublishedEventId,
    YearId,
    YearStatus,
    can_transition,
)
from planning.services.guards import store_failures_as_persistence_error
from planning.stores.interfaces import PlanningStore

logger = logging.getLogger(__name__)


class YearService:
    """Service for operating-year status changes and single-event edits."""

    def __init__(self, store: PlanningStore) -> None:
        self._store = store

    def _year(self, year_id: YearId) -> OperatingYear:
        year = self._store.get_year(year_id)
        if year is None:
            raise YearNotFoundError(str(year_id))
        return year

    def _editable_year(self, year_id: YearId) -> OperatingYear:
        year = self._year(year_id)
        if year.status is YearStatus.ARCHIVED:
            raise YearArchivedError()
        return year

    def _check_category(self, year: OperatingYear, category_id: CategoryId | None) -> None:
        if category_id is None:
            raise MissingCategoryError()
        known = {category.id for category in self._store.list_categories(year.organization_id)}
        if category_id not in known:
            raise UnknownCategoryError(str(category_id))

    def _event(self, event_id: PlannedEventId, for_update: bool = False) -> PlannedEvent:
        event = self._store.get_planned_event(event_id, for_update=for_update)
        if event is None:
            raise PlannedEventNotFoundError(str(event_id))
        return event

    def list_years(self, organization_id: str) -> list[OperatingYear]:
        """Return the organization's years, newest first.

        Raises:
            InvalidIdError: If the organization_id is not a valid UUID.
            OrganizationNotFoundError: If the organization does not exist.
        """
        org_id = OrganizationId.from_string(organization_id)
        if not self._store.organization_exists(org_id):
            raise OrganizationNotFoundError(organization_id)
        return self._store.list_years(org_id)

    def get_year(self, year_id: str) -> YearWithEvents:
        """Return a year with its events.

        Raises:
            InvalidIdError: If the year_id is not a valid UUID.
            YearNotFoundError: If the year does not exist.
        """
        year = self._year(YearId.from_string(year_id))
        return YearWithEvents(year=year, events=tuple(self._store.get_events_for_year(year.id)))

    def change_status(self, year_id: str, status: YearStatus | str) -> OperatingYear:
        """Move a year to ``status``.

        Activating a year archives the organization's other ACTIVE year in the
        same transaction, the same way a plan commit does.

        Raises:
            InvalidIdError: If the year_id is not a valid UUID.
            YearNotFoundError: If the year does not exist.
            InvalidStatusTransitionError: If the lifecycle forbids the move.
        """
        requested = YearStatus(status)
        year_key = YearId.from_string(year_id)
        organization_id = self._year(year_key).organization_id
        with store_failures_as_persistence_error("change year status"), self._store.atomic():
            self._store.lock_organization(organization_id)
            year = self._year(year_key)
            if not can_transition(year.status, requested):
                raise InvalidStatusTransitionError(year.status.value, requested.value)
            if year.status is requested:
                return year
            if requested is YearStatus.ACTIVE:
                archived = self._store.archive_active_years(organization_id, exclude=year.id)
                if archived:
                    logger.info("Archived %d active year(s) of organization %s", archived, organization_id)
            self._store.set_year_status(year.id, requested)
        logger.info("Year %s moved from %s to %s", year.id, year.status.value, requested.value)
        return self._year(year.id)

    def archive_year(self, year_id: str) -> OperatingYear:
        return self.change_status(year_id, YearStatus.ARCHIVED)

    def delete_year(self, year_id: str) -> None:
        """Delete a draft year together with its events.

        Raises:
            YearNotFoundError: If the year does not exist.
            YearNotDeletableError: If the year is no longer a draft.
        """
        year = self._year(YearId.from_string(year_id))
        if year.status is not YearStatus.DRAFT:
            raise YearNotDeletableError(year.status.value)
        with store_failures_as_persistence_error("delete year"), self._store.atomic():
            self._store.delete_year(year.id)
        logger.info("Deleted draft year %s", year.id)

    def add_event(
        self,
        year_id: str,
        day: date,
        title: str,
        category_id: CategoryId | None,
        *,
        end_date: date | None = None,
        description: str | None = None,
        invitation_text: str | None = None,
        is_mandatory: bool = False,
    ) -> PlannedEvent:
        """Add one planned event to a year that is not archived.

        Raises:
            YearNotFoundError: If the year does not exist.
            YearArchivedError: If the year is archived.
            MissingCategoryError: If no category is given.
            UnknownCategoryError: If the category belongs to another organization.
            EventOutsideWindowError: If ``day`` lies outside the year.
            InvalidEventDatesError: If ``end_date`` is before ``day``.
        """
        year = self._editable_year(YearId.from_string(year_id))
        self._check_category(year, category_id)
        if not year.contains(day):
            raise EventOutsideWindowError(title, day)
        if end_date is not None and end_date < day:
            raise InvalidEventDatesError(title, day, end_date)
        draft = DraftEvent(
            key="manual",
            date=day,
            title=title,
            source=DraftSource.MANUAL,
            category_id=category_id,
            end_date=end_date,
            description=description,
            invitation_text=invitation_text,
            is_mandatory=is_mandatory,
        )
        with store_failures_as_persistence_error("add planned event"), self._store.atomic():
            (event_id,) = self._store.create_events(year.id, [draft])
        return self._event(event_id)

    def update_event(self, event_id: str, **changes: Any) -> PlannedEvent:
        """Change fields of a planned event in a year that is not archived.

        Raises:
            PlannedEventNotFoundError: If the event does not exist.
            YearArchivedError: If the event's year is archived.
            InvalidEventChangeError: If a field cannot be changed.
            MissingCategoryError: If the category would be removed.
            UnknownCategoryError: If the new category belongs to another organization.
            EventOutsideWindowError: If the new date lies outside the year.
            InvalidEventDatesError: If the event would end before it starts.
        """
        unknown = set(changes) - EDITABLE_EVENT_FIELDS
        if unknown:
            raise InvalidEventChangeError(sorted(unknown))
        event = self._event(PlannedEventId.from_string(event_id))
        year = self._editable_year(event.year_id)
        title = changes.get("title", event.title)
        if "category_id" in changes:
            self._check_category(year, changes["category_id"])
        day = changes.get("date", event.date)
        if "date" in changes and not year.contains(day):
            raise EventOutsideWindowError(title, day)
        end_date = changes.get("end_date", event.end_date)
        if end_date is not None and end_date < day:
            raise InvalidEventDatesError(title, day, end_date)
        with store_failures_as_persistence_error("update planned event"), self._store.atomic():
            return self._store.update_event(event.id, **changes)

    def delete_event(self, event_id: str) -> None:
        event = self._event(PlannedEventId.from_string(event_id))
        self._editable_year(event.year_id)
        with store_failures_as_persistence_error("delete planned event"), self._store.atomic():
            self._store.delete_event(event.id)

    def publish_event(self, event_id: str) -> PublishedEventId:
        """Promote a planned event into the organization's live calendar.

        The event is confirmed and linked to the new calendar entry. An event
        can only be published once.

        Raises:
            PlannedEventNotFoundError: If the event does not exist.
            AlreadyPublishedError: If the event has already been published.
        """
        event_key = PlannedEventId.from_string(event_id)
        with store_failures_as_persistence_error("publish planned event"), self._store.atomic():
            event = self._event(event_key, for_update=True)
            if event.is_published:
                raise AlreadyPublishedError(event_id)
            year = self._year(event.year_id)
            published_id = self._store.create_published_event(year.organization_id, event)
            self._store.mark_published(event.id, published_id)
        logger.info("Published planned event %s as %s", event.id, published_id)
        return published_id

    def upcoming_events(
        self,
        organization_id: str,
        today: date | None = None,
        limit: int | None = None,
    ) -> list[PlannedEvent]:
        """Return the next events of the organization's active year."""
        org_id = OrganizationId.from_string(organization_id)
        return self._store.list_upcoming_events(
            org_id,
            today or timezone.localdate(),
            limit if limit is not None else planning_setting("UPCOMING_EVENTS_LIMIT"),
        )
