"""Integration tests for DjangoPlanningStore and the database constraints.

Run with: pytest tests/test_django_store.py -v
"""

import uuid
from datetime import date

import pytest
from django.db import DatabaseError, IntegrityError, transaction

from planning import models
from planning.domain import (
    CategoryId,
    CommitRequest,
    DraftEvent,
    DraftSource,
    EventStatus,
    OrganizationId,
    PlannedEventId,
    YearStatus,
)
from planning.domain.errors import (
    InvalidEventChangeError,
    PersistenceError,
    PlannedEventNotFoundError,
)
from planning.services import PlanService, YearService
from planning.stores.django_store import DjangoPlanningStore
from planning.stores.interfaces import StoreConflictError, StoreError

START, END = date(2026, 7, 1), date(2027, 6, 30)


@pytest.fixture
def store() -> DjangoPlanningStore:
    return DjangoPlanningStore()


@pytest.fixture
def org_id(organization) -> OrganizationId:
    return OrganizationId(organization.id)


def _draft(meetings, day, key="manual-1", **kwargs) -> DraftEvent:
    return DraftEvent(
        key=key,
        date=day,
        title=kwargs.pop("title", "Club evening"),
        source=kwargs.pop("source", DraftSource.MANUAL),
        category_id=CategoryId(meetings.id),
        **kwargs,
    )


def _commit(org_id, name, drafts=(), set_active=True, start=START, end=END):
    return CommitRequest(
        organization_id=org_id,
        year_name=name,
        start_date=start,
        end_date=end,
        set_active=set_active,
        drafts=tuple(drafts),
    )


@pytest.mark.django_db
class TestReads:
    def test_rules_and_templates_map_to_domain(self, store, organization, meetings, org_id):
        models.RecurringRule.objects.create(
            organization=organization,
            name="Board",
            frequency="MONTHLY",
            day_of_week=2,
            week_of_month=-1,
            default_category=meetings,
        )
        models.RecurringRule.objects.create(
            organization=organization, name="Old", frequency="WEEKLY", day_of_week=1, is_active=False
        )
        models.EventTemplate.objects.create(
            organization=organization, name="Assembly", category=meetings, is_mandatory=True, default_month=9
        )
        (board,) = store.list_recurring_rules(org_id)
        assert board.week_of_month == -1
        assert board.default_category_id == CategoryId(meetings.id)
        assert len(store.list_recurring_rules(org_id, active_only=False)) == 2
        (assembly,) = store.list_event_templates(org_id)
        assert assembly.default_month == 9
        assert store.list_categories(org_id)[0].name == "Meetings"

    def test_organization_exists(self, store, org_id):
        assert store.organization_exists(org_id)
        assert not store.organization_exists(OrganizationId(uuid.uuid4()))


@pytest.mark.django_db
class TestCommitPlan:
    def test_events_keep_plan_order_on_same_day(self, store, org_id, meetings):
        drafts = [
            _draft(meetings, date(2026, 9, 1), key="r", title="Recurring", source=DraftSource.RECURRING),
            _draft(meetings, date(2026, 9, 1), key="t", title="Template", source=DraftSource.TEMPLATE),
            _draft(meetings, date(2026, 9, 1), key="m", title="Manual"),
        ]
        year_id = PlanService(store).commit_plan(_commit(org_id, "2026/2027", drafts))
        events = store.get_events_for_year(year_id)
        assert [e.title for e in events] == ["Recurring", "Template", "Manual"]
        assert all(e.status is EventStatus.PLANNED for e in events)
        assert store.get_year(year_id).event_count == 3

    def test_second_active_commit_leaves_one_active_year(self, store, org_id, organization):
        service = PlanService(store)
        first = service.commit_plan(_commit(org_id, "2026/2027"))
        second = service.commit_plan(
            _commit(org_id, "2027/2028", start=date(2027, 7, 1), end=date(2028, 6, 30))
        )
        assert store.get_year(first).status is YearStatus.ARCHIVED
        assert store.get_year(second).status is YearStatus.ACTIVE
        assert organization.years.filter(status="ACTIVE").count() == 1

    def test_failed_event_insert_leaves_no_year(self, store, org_id, meetings, organization, monkeypatch):
        service = PlanService(store)
        first = service.commit_plan(_commit(org_id, "2026/2027"))

        def broken_bulk_create(*args, **kwargs):
            raise DatabaseError("disk full")

        monkeypatch.setattr(models.PlannedEvent.objects, "bulk_create", broken_bulk_create)
        with pytest.raises(PersistenceError):
            service.commit_plan(_commit(org_id, "2027/2028", [_draft(meetings, START)]))
        assert not organization.years.filter(name="2027/2028").exists()
        assert store.get_year(first).status is YearStatus.ACTIVE

    def test_duplicate_name_in_store_is_a_conflict(self, store, org_id):
        store.create_year(org_id, "2026/2027", START, END, YearStatus.PLANNING)
        with pytest.raises(StoreConflictError):
            store.create_year(org_id, "2026/2027", START, END, YearStatus.PLANNING)


@pytest.mark.django_db
class TestConstraints:
    def test_database_rejects_second_active_year(self, organization):
        models.OperatingYear.objects.create(
            organization=organization, name="A", start_date=START, end_date=END, status="ACTIVE"
        )
        with pytest.raises(IntegrityError), transaction.atomic():
            models.OperatingYear.objects.create(
                organization=organization, name="B", start_date=START, end_date=END, status="ACTIVE"
            )

    def test_database_rejects_inverted_window(self, organization):
        with pytest.raises(IntegrityError), transaction.atomic():
            models.OperatingYear.objects.create(
                organization=organization, name="A", start_date=END, end_date=START
            )


@pytest.mark.django_db
class TestYearLifecycle:
    def test_activation_swaps_active_year(self, store, org_id):
        current = store.create_year(org_id, "Current", START, END, YearStatus.ACTIVE)
        planned = store.create_year(org_id, "Next", START, END, YearStatus.PLANNING)
        YearService(store).change_status(str(planned.id), YearStatus.ACTIVE)
        assert store.get_year(current.id).status is YearStatus.ARCHIVED
        assert store.get_year(planned.id).status is YearStatus.ACTIVE

    def test_publish_creates_calendar_entry(self, store, org_id, meetings):
        year = store.create_year(org_id, "Current", START, END, YearStatus.ACTIVE)
        (event_id,) = store.create_events(year.id, [_draft(meetings, date(2026, 9, 1), title="Open day")])
        published_id = YearService(store).publish_event(str(event_id))
        row = models.PublishedEvent.objects.get(pk=published_id.value)
        assert row.title == "Open day"
        assert row.start_date == date(2026, 9, 1)
        assert row.is_published is False
        event = store.get_planned_event(event_id)
        assert event.published_event_id == published_id
        assert event.status is EventStatus.CONFIRMED

    def test_update_event_fields(self, store, org_id, meetings):
        year = store.create_year(org_id, "Current", START, END, YearStatus.ACTIVE)
        (event_id,) = store.create_events(year.id, [_draft(meetings, date(2026, 9, 1))])
        updated = YearService(store).update_event(
            str(event_id), title="Renamed", status=EventStatus.CANCELLED
        )
        assert updated.title == "Renamed"
        assert updated.status is EventStatus.CANCELLED

    def test_delete_draft_year_cascades(self, store, org_id, meetings):
        year = store.create_year(org_id, "Draft", START, END, YearStatus.DRAFT)
        store.create_events(year.id, [_draft(meetings, date(2026, 9, 1))])
        YearService(store).delete_year(str(year.id))
        assert not models.PlannedEvent.objects.exists()


@pytest.mark.django_db(transaction=True)
class TestCommittedTransactions:
    """Foreign keys are checked when the outermost transaction commits."""

    def test_deferred_foreign_key_failure_is_a_store_error(self, store, org_id, organization):
        with pytest.raises(StoreError):
            with store.atomic():
                year = store.create_year(org_id, "2026/2027", START, END, YearStatus.PLANNING)
                store.create_events(
                    year.id,
                    [
                        DraftEvent(
                            key="manual-1",
                            date=date(2026, 9, 1),
                            title="Orphan",
                            source=DraftSource.MANUAL,
                            category_id=CategoryId(uuid.uuid4()),
                        )
                    ],
                )
        assert not organization.years.exists()

    def test_commit_skips_unknown_category(self, store, org_id, meetings, organization):
        orphan = DraftEvent(
            key="manual-1",
            date=date(2026, 9, 1),
            title="Orphan",
            source=DraftSource.MANUAL,
            category_id=CategoryId(uuid.uuid4()),
        )
        year_id = PlanService(store).commit_plan(
            _commit(org_id, "2026/2027", [orphan, _draft(meetings, date(2026, 9, 2), key="manual-2")])
        )
        assert [e.title for e in store.get_events_for_year(year_id)] == ["Club evening"]

    def test_commit_skips_category_of_another_organization(self, store, org_id, organization):
        other = models.Organization.objects.create(name="Other club")
        theirs = models.Category.objects.create(organization=other, name="Theirs")
        year_id = PlanService(store).commit_plan(
            _commit(org_id, "2026/2027", [_draft(theirs, date(2026, 9, 1))])
        )
        assert store.get_events_for_year(year_id) == []
        assert not models.PlannedEvent.objects.filter(category=theirs).exists()


@pytest.mark.django_db
class TestUpdateEventErrors:
    def test_unknown_field_is_a_domain_error(self, store, org_id, meetings):
        year = store.create_year(org_id, "Current", START, END, YearStatus.ACTIVE)
        (event_id,) = store.create_events(year.id, [_draft(meetings, date(2026, 9, 1))])
        with pytest.raises(InvalidEventChangeError):
            store.update_event(event_id, year_id=None)

    def test_missing_row_is_not_found(self, store):
        with pytest.raises(PlannedEventNotFoundError):
            store.update_event(PlannedEventId(uuid.uuid4()), title="Gone")
