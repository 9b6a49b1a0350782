"""Domain error codes for the planning module."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_ID = "INVALID_ID"
    INVALID_RECURRENCE_RULE = "INVALID_RECURRENCE_RULE"
    INVALID_TEMPLATE = "INVALID_TEMPLATE"
    INVALID_YEAR_NAME = "INVALID_YEAR_NAME"
    INVALID_DATE_WINDOW = "INVALID_DATE_WINDOW"
    DUPLICATE_YEAR_NAME = "DUPLICATE_YEAR_NAME"
    EVENT_OUTSIDE_WINDOW = "EVENT_OUTSIDE_WINDOW"
    MISSING_CATEGORY = "MISSING_CATEGORY"
    UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"
    INVALID_EVENT_DATES = "INVALID_EVENT_DATES"
    INVALID_EVENT_CHANGE = "INVALID_EVENT_CHANGE"
    ORGANIZATION_NOT_FOUND = "ORGANIZATION_NOT_FOUND"
    YEAR_NOT_FOUND = "YEAR_NOT_FOUND"
    PLANNED_EVENT_NOT_FOUND = "PLANNED_EVENT_NOT_FOUND"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    YEAR_NOT_DELETABLE = "YEAR_NOT_DELETABLE"
    YEAR_ARCHIVED = "YEAR_ARCHIVED"
    ALREADY_PUBLISHED = "ALREADY_PUBLISHED"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InputError(DomainError):
    """Malformed rule, template or identifier data."""


class ValidationError(DomainError):
    """A plan or year change was refused before anything was written."""


class NotFoundError(DomainError):
    """A referenced record does not exist."""


class ConflictError(DomainError):
    """The requested change conflicts with the current state."""


class InvalidIdError(InputError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, kind: str = "record") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} ID format",
        )
        self.kind = kind


class InvalidRecurrenceRuleError(InputError):
    """Raised when a recurring rule cannot be expanded."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_RECURRENCE_RULE,
            message=f"Invalid recurring rule: {reason}",
        )
        self.reason = reason


class InvalidTemplateError(InputError):
    """Raised when an event template carries malformed placement data."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TEMPLATE,
            message=f"Invalid event template: {reason}",
        )
        self.reason = reason


class InvalidEventChangeError(InputError):
    """Raised when an update names fields a planned event does not allow changing."""

    def __init__(self, fields: list[str]) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_CHANGE,
            message=f"Cannot change planned event fields: {', '.join(fields)}",
        )
        self.fields = fields


class InvalidYearNameError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_YEAR_NAME,
            message="Year name must not be empty",
        )


class InvalidDateWindowError(ValidationError):
    """Raised when a year's end date is not after its start date."""

    def __init__(self, start_date: date, end_date: date) -> None:
        super().__init__(
            code=ErrorCode.INVALID_DATE_WINDOW,
            message=f"End date {end_date.isoformat()} must be after start date {start_date.isoformat()}",
        )
        self.start_date = start_date
        self.end_date = end_date


class DuplicateYearNameError(ValidationError):
    """Raised when the organization already has a year with this name."""

    def __init__(self, name: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_YEAR_NAME,
            message=f"A year named '{name}' already exists",
        )
        self.name = name


class EventOutsideWindowError(ValidationError):
    """Raised when an event date falls outside its year's window."""

    def __init__(self, title: str, event_date: date) -> None:
        super().__init__(
            code=ErrorCode.EVENT_OUTSIDE_WINDOW,
            message=f"Event '{title}' on {event_date.isoformat()} lies outside the year",
        )
        self.title = title
        self.event_date = event_date


class MissingCategoryError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.MISSING_CATEGORY,
            message="A planned event requires a category",
        )


class UnknownCategoryError(ValidationError):
    """Raised when a category does not belong to the year's organization."""

    def __init__(self, category_id: str) -> None:
        super().__init__(
            code=ErrorCode.UNKNOWN_CATEGORY,
            message="Category not found in this organization",
        )
        self.category_id = category_id


class InvalidEventDatesError(ValidationError):
    def __init__(self, title: str, event_date: date, end_date: date) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_DATES,
            message=f"Event '{title}' ends on {end_date.isoformat()} before it starts on {event_date.isoformat()}",
        )
        self.title = title
        self.event_date = event_date
        self.end_date = end_date


class OrganizationNotFoundError(NotFoundError):
    def __init__(self, organization_id: str) -> None:
        super().__init__(
            code=ErrorCode.ORGANIZATION_NOT_FOUND,
            message="Organization not found",
        )
        self.organization_id = organization_id


class YearNotFoundError(NotFoundError):
    def __init__(self, year_id: str) -> None:
        super().__init__(
            code=ErrorCode.YEAR_NOT_FOUND,
            message="Year not found",
        )
        self.year_id = year_id


class PlannedEventNotFoundError(NotFoundError):
    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.PLANNED_EVENT_NOT_FOUND,
            message="Planned event not found",
        )
        self.event_id = event_id


class TemplateNotFoundError(NotFoundError):
    def __init__(self, template_id: str) -> None:
        super().__init__(
            code=ErrorCode.TEMPLATE_NOT_FOUND,
            message="Mandatory template not found in session",
        )
        self.template_id = template_id


class InvalidStatusTransitionError(ConflictError):
    """Raised when a year cannot move from its current status to the requested one."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_STATUS_TRANSITION,
            message=f"Cannot change year status from {current} to {requested}",
        )
        self.current = current
        self.requested = requested


class YearNotDeletableError(ConflictError):
    def __init__(self, status: str) -> None:
        super().__init__(
            code=ErrorCode.YEAR_NOT_DELETABLE,
            message=f"Only draft years can be deleted (status is {status})",
        )
        self.status = status


class YearArchivedError(ConflictError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.YEAR_ARCHIVED,
            message="Events of an archived year cannot be changed",
        )


class AlreadyPublishedError(ConflictError):
    """Raised when a planned event already carries a published event."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_PUBLISHED,
            message="Planned event has already been published",
        )
        self.event_id = event_id


class PersistenceError(DomainError):
    """Raised when the store fails; the transaction has been rolled back."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PERSISTENCE_ERROR,
            message="The plan could not be saved",
        )
