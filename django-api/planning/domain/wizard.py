"""Planning wizard session as an immutable value.

Every step is a pure function that takes a ``WizardSession`` and returns a
new one. Abandoning a session is simply dropping the value; nothing is
persisted until ``to_commit_request`` is handed to the plan service.
"""

from collections.abc import Collection, Iterable
from dataclasses import dataclass, field, replace
from datetime import date

from planning.domain.aggregation import aggregate
from planning.domain.calendar_math import (
    DEFAULT_YEAR_NAME_FORMAT,
    default_year_name,
    default_year_window,
)
from planning.domain.errors import (
    EventOutsideWindowError,
    InvalidDateWindowError,
    InvalidYearNameError,
    MissingCategoryError,
    TemplateNotFoundError,
)
from planning.domain.models import (
    CommitRequest,
    DraftEvent,
    EventTemplate,
    MandatoryPlacement,
    Plan,
    RecurringRule,
)
from planning.domain.placement import DEFAULT_FIRST_MONTH, initial_placements, place
from planning.domain.recurrence import generate_recurring_drafts
from planning.domain.value_objects import (
    CategoryId,
    DraftSource,
    OrganizationId,
    RecurringRuleId,
    TemplateId,
)


@dataclass(frozen=True)
class WizardSession:
    organization_id: OrganizationId
    year_name: str
    start_date: date
    end_date: date
    rules: tuple[RecurringRule, ...] = ()
    templates: tuple[EventTemplate, ...] = ()
    selected_rule_ids: frozenset[RecurringRuleId] = field(default_factory=frozenset)
    recurring_drafts: tuple[DraftEvent, ...] = ()
    placements: tuple[MandatoryPlacement, ...] = ()
    manual_drafts: tuple[DraftEvent, ...] = ()
    set_active: bool = True
    first_month: int = DEFAULT_FIRST_MONTH
    next_manual_seq: int = 1

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


def _check_window(name: str, start: date, end: date) -> None:
    if not name.strip():
        raise InvalidYearNameError()
    if end <= start:
        raise InvalidDateWindowError(start, end)


def _regenerate(session: WizardSession) -> WizardSession:
    return replace(
        session,
        recurring_drafts=tuple(
            generate_recurring_drafts(
                session.rules, session.selected_rule_ids, session.start_date, session.end_date
            )
        ),
        placements=tuple(
            initial_placements(
                session.templates, session.start_date, session.end_date, session.first_month
            )
        ),
    )


def start_session(
    organization_id: OrganizationId,
    rules: Iterable[RecurringRule],
    templates: Iterable[EventTemplate],
    today: date,
    first_month: int = DEFAULT_FIRST_MONTH,
    name_format: str = DEFAULT_YEAR_NAME_FORMAT,
) -> WizardSession:
    """Open a session for the next operating year with every rule selected."""
    rules = tuple(rules)
    start, end = default_year_window(today, first_month)
    session = WizardSession(
        organization_id=organization_id,
        year_name=default_year_name(start, end, name_format),
        start_date=start,
        end_date=end,
        rules=rules,
        templates=tuple(templates),
        selected_rule_ids=frozenset(rule.id for rule in rules),
        first_month=first_month,
    )
    return _regenerate(session)


def define_year(session: WizardSession, name: str, start: date, end: date) -> WizardSession:
    """Set the name and window; recurring drafts and placements are recomputed.

    Manual drafts stay in the session. Those outside the new window are left
    out of the plan and reported as dropped until the window covers them again.

    Raises:
        InvalidYearNameError: If ``name`` is blank.
        InvalidDateWindowError: If ``end`` is not after ``start``.
    """
    _check_window(name, start, end)
    return _regenerate(replace(session, year_name=name.strip(), start_date=start, end_date=end))


def select_rules(session: WizardSession, rule_ids: Iterable[RecurringRuleId]) -> WizardSession:
    """Select which recurring rules feed the plan; unknown ids are ignored."""
    known = {rule.id for rule in session.rules}
    selected = frozenset(rule_id for rule_id in rule_ids if rule_id in known)
    drafts = generate_recurring_drafts(session.rules, selected, session.start_date, session.end_date)
    return replace(session, selected_rule_ids=selected, recurring_drafts=tuple(drafts))


def place_template(
    session: WizardSession,
    template_id: TemplateId,
    day: date | None,
    invitation_text: str | None = None,
) -> WizardSession:
    """Move a mandatory template to ``day``, or unplace it when ``day`` is None.

    Raises:
        TemplateNotFoundError: If the template is not a mandatory template of this session.
        EventOutsideWindowError: If ``day`` lies outside the year.
    """
    index = next(
        (i for i, placement in enumerate(session.placements) if placement.template_id == template_id),
        None,
    )
    if index is None:
        raise TemplateNotFoundError(str(template_id))
    current = session.placements[index]
    if day is not None and not session.contains(day):
        raise EventOutsideWindowError(current.template.name, day)
    placements = list(session.placements)
    placements[index] = place(current, day, invitation_text)
    return replace(session, placements=tuple(placements))


def add_manual_event(
    session: WizardSession,
    day: date,
    title: str,
    category_id: CategoryId | None,
    *,
    end_date: date | None = None,
    description: str | None = None,
    invitation_text: str | None = None,
    template_id: TemplateId | None = None,
    is_mandatory: bool = False,
    duration_minutes: int | None = None,
) -> WizardSession:
    """Append an operator-entered draft keyed ``manual-<n>``.

    Raises:
        MissingCategoryError: If no category is given.
        EventOutsideWindowError: If ``day`` lies outside the year.
    """
    if category_id is None:
        raise MissingCategoryError()
    if not session.contains(day):
        raise EventOutsideWindowError(title, day)
    draft = DraftEvent(
        key=f"manual-{session.next_manual_seq}",
        date=day,
        title=title,
        source=DraftSource.MANUAL,
        category_id=category_id,
        end_date=end_date,
        description=description,
        invitation_text=invitation_text,
        template_id=template_id,
        is_mandatory=is_mandatory,
        duration_minutes=duration_minutes,
    )
    return replace(
        session,
        manual_drafts=session.manual_drafts + (draft,),
        next_manual_seq=session.next_manual_seq + 1,
    )


def remove_manual_event(session: WizardSession, key: str) -> WizardSession:
    return replace(
        session,
        manual_drafts=tuple(draft for draft in session.manual_drafts if draft.key != key),
    )


def set_activation(session: WizardSession, set_active: bool) -> WizardSession:
    return replace(session, set_active=set_active)


def build_plan(session: WizardSession, known_category_ids: Collection[CategoryId] | None = None) -> Plan:
    return aggregate(
        session.recurring_drafts,
        session.placements,
        session.manual_drafts,
        known_category_ids,
        window=(session.start_date, session.end_date),
    )


def to_commit_request(
    session: WizardSession,
    known_category_ids: Collection[CategoryId] | None = None,
) -> CommitRequest:
    """Freeze the session into the request the plan service commits."""
    _check_window(session.year_name, session.start_date, session.end_date)
    plan = build_plan(session, known_category_ids)
    return CommitRequest(
        organization_id=session.organization_id,
        year_name=session.year_name,
        start_date=session.start_date,
        end_date=session.end_date,
        set_active=session.set_active,
        drafts=plan.entries,
    )
