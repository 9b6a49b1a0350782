"""Django ORM implementation of the PlanningStore."""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import date
from enum import Enum
from typing import Any

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count
from django.utils import timezone

from planning import models
from planning.domain import (
    Category,
    CategoryId,
    DraftEvent,
    EventStatus,
    EventTemplate,
    Frequency,
    OperatingYear,
    OrganizationId,
    PlannedEvent,
    PlannedEventId,
    PublishedEventId,
    RecurringRule,
    RecurringRuleId,
    TemplateId,
    YearId,
    YearStatus,
)
from planning.domain.errors import InvalidEventChangeError, PlannedEventNotFoundError
from planning.domain.models import EDITABLE_EVENT_FIELDS
from planning.domain.value_objects import Identifier
from planning.stores.interfaces import PlanningStore, StoreConflictError, StoreError

logger = logging.getLogger(__name__)


def _optional(id_type: type[Identifier], value) -> Any:
    return id_type(value) if value is not None else None


def _to_category(row: models.Category) -> Category:
    return Category(
        id=CategoryId(row.id),
        organization_id=OrganizationId(row.organization_id),
        name=row.name,
        color=row.color,
    )


def _to_rule(row: models.RecurringRule) -> RecurringRule:
    return RecurringRule(
        id=RecurringRuleId(row.id),
        organization_id=OrganizationId(row.organization_id),
        name=row.name,
        frequency=Frequency(row.frequency),
        day_of_week=row.day_of_week,
        week_of_month=row.week_of_month,
        description=row.description,
        default_category_id=_optional(CategoryId, row.default_category_id),
        default_title=row.default_title,
        is_active=row.is_active,
    )


def _to_template(row: models.EventTemplate) -> EventTemplate:
    return EventTemplate(
        id=TemplateId(row.id),
        organization_id=OrganizationId(row.organization_id),
        name=row.name,
        category_id=CategoryId(row.category_id),
        default_duration_minutes=row.default_duration_minutes,
        description=row.description,
        default_invitation_text=row.default_invitation_text,
        is_mandatory=row.is_mandatory,
        default_month=row.default_month,
        is_active=row.is_active,
    )


def _to_year(row: models.OperatingYear) -> OperatingYear:
    return OperatingYear(
        id=YearId(row.id),
        organization_id=OrganizationId(row.organization_id),
        name=row.name,
        start_date=row.start_date,
        end_date=row.end_date,
        status=YearStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
        event_count=getattr(row, "event_count", 0),
    )


def _to_event(row: models.PlannedEvent) -> PlannedEvent:
    return PlannedEvent(
        id=PlannedEventId(row.id),
        year_id=YearId(row.year_id),
        date=row.date,
        title=row.title,
        category_id=CategoryId(row.category_id),
        status=EventStatus(row.status),
        end_date=row.end_date,
        description=row.description,
        template_id=_optional(TemplateId, row.template_id),
        recurring_rule_id=_optional(RecurringRuleId, row.recurring_rule_id),
        is_mandatory=row.is_mandatory,
        invitation_text=row.invitation_text,
        published_event_id=_optional(PublishedEventId, row.published_event_id),
    )


def _raw(value: Any) -> Any:
    if isinstance(value, Identifier):
        return value.value
    if isinstance(value, Enum):
        return value.value
    return value


class DjangoPlanningStore(PlanningStore):
    """Relational planning store using the Django ORM."""

    @contextmanager
    def atomic(self) -> Iterator[None]:
        # Deferred foreign keys are only checked when the outermost block commits.
        try:
            with transaction.atomic():
                yield
        except DatabaseError as exc:
            raise StoreError("transaction failed") from exc

    def organization_exists(self, organization_id: OrganizationId) -> bool:
        return models.Organization.objects.filter(pk=organization_id.value).exists()

    def list_categories(self, organization_id: OrganizationId) -> list[Category]:
        rows = models.Category.objects.filter(organization_id=organization_id.value)
        return [_to_category(row) for row in rows]

    def list_recurring_rules(
        self, organization_id: OrganizationId, active_only: bool = True
    ) -> list[RecurringRule]:
        rows = models.RecurringRule.objects.filter(organization_id=organization_id.value)
        if active_only:
            rows = rows.filter(is_active=True)
        return [_to_rule(row) for row in rows]

    def list_event_templates(
        self, organization_id: OrganizationId, active_only: bool = True
    ) -> list[EventTemplate]:
        rows = models.EventTemplate.objects.filter(organization_id=organization_id.value)
        if active_only:
            rows = rows.filter(is_active=True)
        return [_to_template(row) for row in rows]

    def year_name_exists(self, organization_id: OrganizationId, name: str) -> bool:
        return models.OperatingYear.objects.filter(
            organization_id=organization_id.value, name=name
        ).exists()

    def get_year(self, year_id: YearId) -> OperatingYear | None:
        row = (
            models.OperatingYear.objects.annotate(event_count=Count("events"))
            .filter(pk=year_id.value)
            .first()
        )
        return _to_year(row) if row is not None else None

    def list_years(self, organization_id: OrganizationId) -> list[OperatingYear]:
        rows = models.OperatingYear.objects.filter(
            organization_id=organization_id.value
        ).annotate(event_count=Count("events"))
        return [_to_year(row) for row in rows]

    def get_events_for_year(self, year_id: YearId) -> list[PlannedEvent]:
        rows = models.PlannedEvent.objects.filter(year_id=year_id.value)
        return [_to_event(row) for row in rows]

    def get_planned_event(
        self, event_id: PlannedEventId, for_update: bool = False
    ) -> PlannedEvent | None:
        rows = models.PlannedEvent.objects.filter(pk=event_id.value)
        if for_update:
            rows = rows.select_for_update()
        row = rows.first()
        return _to_event(row) if row is not None else None

    def list_upcoming_events(
        self, organization_id: OrganizationId, today: date, limit: int
    ) -> list[PlannedEvent]:
        rows = (
            models.PlannedEvent.objects.filter(
                year__organization_id=organization_id.value,
                year__status=models.OperatingYear.Status.ACTIVE,
                date__gte=today,
            )
            .exclude(status=models.PlannedEvent.Status.CANCELLED)
            .order_by("date", "position")[:limit]
        )
        return [_to_event(row) for row in rows]

    def lock_organization(self, organization_id: OrganizationId) -> bool:
        locked = (
            models.Organization.objects.select_for_update()
            .filter(pk=organization_id.value)
            .values_list("pk", flat=True)
        )
        return bool(list(locked))

    def archive_active_years(
        self, organization_id: OrganizationId, exclude: YearId | None = None
    ) -> int:
        active = models.OperatingYear.objects.filter(
            organization_id=organization_id.value,
            status=models.OperatingYear.Status.ACTIVE,
        )
        if exclude is not None:
            active = active.exclude(pk=exclude.value)
        try:
            return active.update(
                status=models.OperatingYear.Status.ARCHIVED, updated_at=timezone.now()
            )
        except DatabaseError as exc:
            raise StoreError("could not archive active years") from exc

    def create_year(
        self,
        organization_id: OrganizationId,
        name: str,
        start_date: date,
        end_date: date,
        status: YearStatus,
    ) -> OperatingYear:
        try:
            # Savepoint so the outer transaction stays usable after a conflict.
            with transaction.atomic():
                row = models.OperatingYear.objects.create(
                    organization_id=organization_id.value,
                    name=name,
                    start_date=start_date,
                    end_date=end_date,
                    status=status.value,
                )
        except IntegrityError as exc:
            if self.year_name_exists(organization_id, name):
                raise StoreConflictError(f"year name {name!r} already used") from exc
            raise StoreError("could not create year") from exc
        except DatabaseError as exc:
            raise StoreError("could not create year") from exc
        return _to_year(row)

    def create_events(self, year_id: YearId, drafts: Sequence[DraftEvent]) -> list[PlannedEventId]:
        rows = [
            models.PlannedEvent(
                year_id=year_id.value,
                title=draft.title,
                description=draft.description,
                date=draft.date,
                end_date=draft.end_date,
                category_id=_raw(draft.category_id),
                template_id=_raw(draft.template_id),
                recurring_rule_id=_raw(draft.recurring_rule_id),
                status=models.PlannedEvent.Status.PLANNED,
                is_mandatory=draft.is_mandatory,
                invitation_text=draft.invitation_text,
                position=position,
            )
            for position, draft in enumerate(drafts)
        ]
        try:
            created = models.PlannedEvent.objects.bulk_create(rows)
        except DatabaseError as exc:
            raise StoreError("could not create planned events") from exc
        return [PlannedEventId(row.id) for row in created]

    def set_year_status(self, year_id: YearId, status: YearStatus) -> None:
        try:
            models.OperatingYear.objects.filter(pk=year_id.value).update(
                status=status.value, updated_at=timezone.now()
            )
        except DatabaseError as exc:
            raise StoreError("could not update year status") from exc

    def delete_year(self, year_id: YearId) -> None:
        try:
            models.OperatingYear.objects.filter(pk=year_id.value).delete()
        except DatabaseError as exc:
            raise StoreError("could not delete year") from exc

    def update_event(self, event_id: PlannedEventId, **changes: Any) -> PlannedEvent:
        unknown = set(changes) - EDITABLE_EVENT_FIELDS
        if unknown:
            raise InvalidEventChangeError(sorted(unknown))
        try:
            row = models.PlannedEvent.objects.get(pk=event_id.value)
        except models.PlannedEvent.DoesNotExist:
            raise PlannedEventNotFoundError(str(event_id)) from None
        for name, value in changes.items():
            setattr(row, name, _raw(value))
        try:
            row.save(update_fields=[*changes, "updated_at"])
        except DatabaseError as exc:
            raise StoreError("could not update planned event") from exc
        return _to_event(row)

    def delete_event(self, event_id: PlannedEventId) -> None:
        try:
            models.PlannedEvent.objects.filter(pk=event_id.value).delete()
        except DatabaseError as exc:
            raise StoreError("could not delete planned event") from exc

    def create_published_event(
        self, organization_id: OrganizationId, event: PlannedEvent
    ) -> PublishedEventId:
        try:
            row = models.PublishedEvent.objects.create(
                organization_id=organization_id.value,
                title=event.title,
                description=event.description or "",
                start_date=event.date,
                end_date=event.end_date,
                is_published=False,
            )
        except DatabaseError as exc:
            raise StoreError("could not create published event") from exc
        logger.debug("Created live calendar entry %s for planned event %s", row.id, event.id)
        return PublishedEventId(row.id)

    def mark_published(
        self,
        event_id: PlannedEventId,
        published_event_id: PublishedEventId,
        status: EventStatus = EventStatus.CONFIRMED,
    ) -> None:
        try:
            models.PlannedEvent.objects.filter(pk=event_id.value).update(
                published_event_id=published_event_id.value,
                status=status.value,
                updated_at=timezone.now(),
            )
        except DatabaseError as exc:
            raise StoreError("could not mark planned event as published") from exc
