"""Plan service - building and committing the plan of an operating year.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date

from django.utils import timezone

from planning.conf import planning_setting
from planning.domain import wizard
from planning.domain.aggregation import has_category
from planning.domain.errors import (
    DuplicateYearNameError,
    EventOutsideWindowError,
    InvalidDateWindowError,
    InvalidYearNameError,
    OrganizationNotFoundError,
    PersistenceError,
)
from planning.domain.models import CommitRequest, Plan
from planning.domain.value_objects import (
    CategoryId,
    OrganizationId,
    RecurringRuleId,
    TemplateId,
    YearId,
    YearStatus,
)
from planning.stores.interfaces import PlanningStore, StoreConflictError, StoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManualEntry:
    """An operator-entered event as received from outside the domain."""

    date: date
    title: str
    category_id: CategoryId | None
    end_date: date | None = None
    description: str | None = None
    invitation_text: str | None = None


class PlanService:
    """Service for building and committing annual plans."""

    def __init__(self, store: PlanningStore) -> None:
        self._store = store

    def _require_organization(self, organization_id: str) -> OrganizationId:
        org_id = OrganizationId.from_string(organization_id)
        if not self._store.organization_exists(org_id):
            raise OrganizationNotFoundError(organization_id)
        return org_id

    def known_category_ids(self, organization_id: OrganizationId) -> set[CategoryId]:
        return {category.id for category in self._store.list_categories(organization_id)}

    def start_session(self, organization_id: str, today: date | None = None) -> wizard.WizardSession:
        """Open a wizard session for the organization's next operating year.

        Raises:
            InvalidIdError: If the organization_id is not a valid UUID.
            OrganizationNotFoundError: If the organization does not exist.
        """
        org_id = self._require_organization(organization_id)
        return wizard.start_session(
            org_id,
            self._store.list_recurring_rules(org_id, active_only=True),
            self._store.list_event_templates(org_id, active_only=True),
            today or timezone.localdate(),
            first_month=planning_setting("YEAR_START_MONTH"),
            name_format=planning_setting("YEAR_NAME_FORMAT"),
        )

    def preview(
        self,
        organization_id: str,
        year_name: str,
        start_date: date,
        end_date: date,
        selected_rule_ids: Iterable[RecurringRuleId] | None = None,
        placements: Mapping[TemplateId, date | None] | None = None,
        manual_entries: Iterable[ManualEntry] = (),
    ) -> tuple[wizard.WizardSession, Plan]:
        """Run every wizard step from explicit inputs and return the reviewable plan.

        Nothing is written. ``selected_rule_ids`` of None keeps every rule
        selected; ``placements`` overrides suggested template dates.
        """
        session = self.start_session(organization_id)
        session = wizard.define_year(session, year_name, start_date, end_date)
        if selected_rule_ids is not None:
            session = wizard.select_rules(session, selected_rule_ids)
        for template_id, day in (placements or {}).items():
            session = wizard.place_template(session, template_id, day)
        for entry in manual_entries:
            session = wizard.add_manual_event(
                session,
                entry.date,
                entry.title,
                entry.category_id,
                end_date=entry.end_date,
                description=entry.description,
                invitation_text=entry.invitation_text,
            )
        plan = wizard.build_plan(session, self.known_category_ids(session.organization_id))
        return session, plan

    def commit_session(self, session: wizard.WizardSession) -> YearId:
        request = wizard.to_commit_request(session, self.known_category_ids(session.organization_id))
        return self.commit_plan(request)

    def commit_plan(self, request: CommitRequest) -> YearId:
        """Persist a year and its events in one transaction.

        When ``set_active`` is requested, every other ACTIVE year of the
        organization is archived first, inside the same transaction.
        Drafts without a category of the organization are skipped.

        Raises:
            InvalidYearNameError: If the year name is blank.
            InvalidDateWindowError: If the end date is not after the start date.
            OrganizationNotFoundError: If the organization does not exist.
            DuplicateYearNameError: If the organization already has a year with this name.
            EventOutsideWindowError: If an event lies outside the year.
            PersistenceError: If the store fails; nothing is kept.
        """
        org_id = request.organization_id
        name = request.year_name.strip()
        if not name:
            raise InvalidYearNameError()
        if request.end_date <= request.start_date:
            raise InvalidDateWindowError(request.start_date, request.end_date)
        if not self._store.organization_exists(org_id):
            raise OrganizationNotFoundError(str(org_id))
        if self._store.year_name_exists(org_id, name):
            raise DuplicateYearNameError(name)

        known = self.known_category_ids(org_id)
        events = [draft for draft in request.drafts if has_category(draft, known)]
        skipped = len(request.drafts) - len(events)
        if skipped:
            logger.warning(
                "Skipping %d draft events without a category of organization %s for year %r",
                skipped,
                org_id,
                name,
            )
        for draft in events:
            if not request.start_date <= draft.date <= request.end_date:
                raise EventOutsideWindowError(draft.title, draft.date)

        status = YearStatus.ACTIVE if request.set_active else YearStatus.PLANNING
        try:
            with self._store.atomic():
                if not self._store.lock_organization(org_id):
                    raise OrganizationNotFoundError(str(org_id))
                if request.set_active:
                    archived = self._store.archive_active_years(org_id)
                    if archived:
                        logger.info("Archived %d active year(s) of organization %s", archived, org_id)
                year = self._store.create_year(
                    org_id, name, request.start_date, request.end_date, status
                )
                self._store.create_events(year.id, events)
        except StoreConflictError:
            logger.info("Year name %r was taken concurrently in organization %s", name, org_id)
            raise DuplicateYearNameError(name) from None
        except StoreError:
            logger.exception("Could not commit year %r for organization %s", name, org_id)
            raise PersistenceError() from None

        logger.info(
            "Committed year %s (%r, %s) with %d events for organization %s",
            year.id,
            name,
            status.value,
            len(events),
            org_id,
        )
        return year.id
