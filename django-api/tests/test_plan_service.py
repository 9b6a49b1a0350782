"""Unit tests for PlanService.

These test commit validation, transaction behaviour and error mapping
against an in-memory store.
Run with: pytest tests/test_plan_service.py -v
"""

import logging
import uuid
from dataclasses import replace
from datetime import date

import pytest

from builders import MEETINGS, ORG, draft, rule, template
from planning.domain import (
    Category,
    CategoryId,
    CommitRequest,
    DraftSource,
    Frequency,
    OrganizationId,
    YearStatus,
)
from planning.domain.errors import (
    DuplicateYearNameError,
    EventOutsideWindowError,
    InvalidDateWindowError,
    InvalidIdError,
    InvalidYearNameError,
    OrganizationNotFoundError,
    PersistenceError,
)
from planning.services import ManualEntry, PlanService

START, END = date(2026, 7, 1), date(2027, 6, 30)


def _request(name="Operating year 2026/2027", set_active=True, drafts=(), **kwargs):
    return CommitRequest(
        organization_id=ORG,
        year_name=name,
        start_date=kwargs.pop("start_date", START),
        end_date=kwargs.pop("end_date", END),
        set_active=set_active,
        drafts=tuple(drafts),
    )


@pytest.fixture
def service(store):
    return PlanService(store)


class TestCommitValidation:
    """Refused commits write nothing."""

    def test_blank_name(self, service, store):
        with pytest.raises(InvalidYearNameError):
            service.commit_plan(_request(name="   "))
        assert store.years == {}

    def test_end_not_after_start(self, service, store):
        with pytest.raises(InvalidDateWindowError):
            service.commit_plan(_request(start_date=END, end_date=START))
        assert store.years == {}

    def test_unknown_organization(self, service):
        request = replace(_request(), organization_id=OrganizationId(uuid.uuid4()))
        with pytest.raises(OrganizationNotFoundError):
            service.commit_plan(request)

    def test_duplicate_name(self, service, store):
        service.commit_plan(_request())
        with pytest.raises(DuplicateYearNameError):
            service.commit_plan(_request())
        assert len(store.years) == 1

    def test_event_outside_window_names_the_event(self, service, store):
        late = draft("manual-1", date(2027, 7, 1), title="Too late")
        with pytest.raises(EventOutsideWindowError) as excinfo:
            service.commit_plan(_request(drafts=[late]))
        assert "Too late" in excinfo.value.message
        assert store.years == {}
        assert store.locked == []


class TestCommit:
    def test_creates_active_year_with_events(self, service, store):
        drafts = [
            draft("recurring-1", date(2026, 7, 7), DraftSource.RECURRING),
            draft("manual-1", date(2026, 12, 18), title="Winter party", invitation_text="Bring a dish"),
        ]
        year_id = service.commit_plan(_request(drafts=drafts))
        year = store.get_year(year_id)
        assert year.status is YearStatus.ACTIVE
        assert year.event_count == 2
        events = store.get_events_for_year(year_id)
        assert events[1].title == "Winter party"
        assert events[1].invitation_text == "Bring a dish"

    def test_inactive_commit_creates_planning_year(self, service, store):
        year_id = service.commit_plan(_request(set_active=False))
        assert store.get_year(year_id).status is YearStatus.PLANNING

    def test_name_is_trimmed(self, service, store):
        year_id = service.commit_plan(_request(name="  Season 26  "))
        assert store.get_year(year_id).name == "Season 26"

    def test_uncategorized_drafts_are_skipped(self, service, store, caplog):
        drafts = [draft("manual-1", date(2026, 8, 1), category_id=None), draft("manual-2", date(2026, 8, 2))]
        with caplog.at_level(logging.WARNING, logger="planning.services.plan_service"):
            year_id = service.commit_plan(_request(drafts=drafts))
        assert [e.date for e in store.get_events_for_year(year_id)] == [date(2026, 8, 2)]
        assert "without a category" in caplog.text

    def test_unknown_category_is_skipped(self, service, store):
        stray = CategoryId(uuid.uuid4())
        drafts = [draft("manual-1", date(2026, 8, 1), category_id=stray), draft("manual-2", date(2026, 8, 2))]
        year_id = service.commit_plan(_request(drafts=drafts))
        assert [e.date for e in store.get_events_for_year(year_id)] == [date(2026, 8, 2)]

    def test_category_of_another_organization_is_skipped(self, service, store):
        elsewhere = CategoryId(uuid.uuid4())
        store.categories.append(
            Category(id=elsewhere, organization_id=OrganizationId(uuid.uuid4()), name="Theirs")
        )
        year_id = service.commit_plan(
            _request(drafts=[draft("manual-1", date(2026, 8, 1), category_id=elsewhere)])
        )
        assert store.get_events_for_year(year_id) == []

    def test_uncategorized_draft_outside_window_does_not_block(self, service, store):
        stray = draft("manual-1", date(2030, 1, 1), category_id=None)
        service.commit_plan(_request(drafts=[stray]))
        assert len(store.years) == 1


class TestSingleActiveYear:
    def test_second_active_commit_archives_first(self, service, store):
        first = service.commit_plan(_request(name="2026/2027"))
        second = service.commit_plan(
            _request(name="2027/2028", start_date=date(2027, 7, 1), end_date=date(2028, 6, 30))
        )
        assert store.get_year(first).status is YearStatus.ARCHIVED
        assert store.get_year(second).status is YearStatus.ACTIVE
        active = [y for y in store.list_years(ORG) if y.status is YearStatus.ACTIVE]
        assert len(active) == 1

    def test_inactive_commit_keeps_active_year(self, service, store):
        first = service.commit_plan(_request(name="2026/2027"))
        service.commit_plan(_request(name="Draft", set_active=False))
        assert store.get_year(first).status is YearStatus.ACTIVE

    def test_commit_locks_organization(self, service, store):
        service.commit_plan(_request())
        assert store.locked == [ORG]


class TestCommitFailures:
    def test_failed_event_insert_rolls_back_year_and_demotion(self, service, store):
        first = service.commit_plan(_request(name="2026/2027"))
        store.failing.add("create_events")
        with pytest.raises(PersistenceError):
            service.commit_plan(_request(name="2027/2028", drafts=[draft("manual-1", START)]))
        assert not store.year_name_exists(ORG, "2027/2028")
        assert store.get_year(first).status is YearStatus.ACTIVE

    def test_concurrent_name_conflict_maps_to_duplicate(self, service, store):
        store.failing.add("create_year_conflict")
        with pytest.raises(DuplicateYearNameError):
            service.commit_plan(_request())
        assert store.years == {}

    def test_store_failure_is_logged(self, service, store, caplog):
        store.failing.add("create_year")
        with caplog.at_level(logging.ERROR, logger="planning.services.plan_service"):
            with pytest.raises(PersistenceError) as excinfo:
                service.commit_plan(_request())
        assert excinfo.value.message == "The plan could not be saved"
        assert "Could not commit year" in caplog.text


class TestPreview:
    def test_preview_merges_all_sources(self, service, store):
        board = rule(2, Frequency.MONTHLY, week_of_month=1, name="Board meeting")
        store.rules.append(board)
        store.templates.append(template("Annual assembly", 9))
        session, plan = service.preview(
            str(ORG),
            "Autumn",
            date(2026, 7, 1),
            date(2026, 9, 30),
            manual_entries=[ManualEntry(date=date(2026, 9, 1), title="Open day", category_id=MEETINGS)],
        )
        assert session.year_name == "Autumn"
        assert [(e.date, e.source) for e in plan.entries] == [
            (date(2026, 7, 7), DraftSource.RECURRING),
            (date(2026, 8, 4), DraftSource.RECURRING),
            (date(2026, 9, 1), DraftSource.RECURRING),
            (date(2026, 9, 1), DraftSource.TEMPLATE),
            (date(2026, 9, 1), DraftSource.MANUAL),
        ]
        assert store.years == {}

    def test_preview_with_placement_override(self, service, store):
        assembly = template("Annual assembly", 9)
        store.templates.append(assembly)
        _, plan = service.preview(
            str(ORG), "Year", START, END, placements={assembly.id: None}
        )
        assert plan.unplaced_mandatory_count == 1

    def test_preview_with_no_rules_selected(self, service, store):
        store.rules.append(rule(3))
        _, plan = service.preview(str(ORG), "Year", START, END, selected_rule_ids=[])
        assert plan.entries == ()

    def test_inactive_rules_are_not_offered(self, service, store):
        store.rules.append(rule(3, is_active=False))
        session = service.start_session(str(ORG), today=date(2026, 3, 1))
        assert session.rules == ()

    def test_invalid_organization_id(self, service):
        with pytest.raises(InvalidIdError):
            service.start_session("nope")


class TestCommitSession:
    def test_commits_wizard_result(self, service, store):
        store.rules.append(rule(3))
        session = service.start_session(str(ORG), today=date(2026, 3, 1))
        year_id = service.commit_session(session)
        year = store.get_year(year_id)
        assert year.name == "Operating year 2026/2027"
        assert year.event_count == 53
