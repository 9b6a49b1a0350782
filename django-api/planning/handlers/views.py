"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from planning.domain import (
    CategoryId,
    CommitRequest,
    DraftEvent,
    DraftSource,
    OrganizationId,
    RecurringRuleId,
    TemplateId,
)
from planning.domain.errors import (
    ConflictError,
    DomainError,
    InputError,
    NotFoundError,
    ValidationError,
)
from planning.handlers.serializers import (
    CommitPlanRequestSerializer,
    MandatoryPlacementSerializer,
    OperatingYearSerializer,
    PlannedEventSerializer,
    PlanPreviewRequestSerializer,
    PlanSerializer,
    YearStatusRequestSerializer,
    YearWithEventsSerializer,
)
from planning.services import ManualEntry, PlanService, YearService
from planning.stores.django_store import DjangoPlanningStore


def plan_service() -> PlanService:
    return PlanService(DjangoPlanningStore())


def year_service() -> YearService:
    return YearService(DjangoPlanningStore())


def error_response(error: DomainError) -> Response:
    """Map a domain error onto an HTTP status with a user-safe body."""
    if isinstance(error, (InputError, ValidationError)):
        http_status = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, NotFoundError):
        http_status = status.HTTP_404_NOT_FOUND
    elif isinstance(error, ConflictError):
        http_status = status.HTTP_409_CONFLICT
    else:
        http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    return Response({"code": error.code.value, "message": error.message}, status=http_status)


def invalid_request(errors) -> Response:
    return Response(
        {"code": "INVALID_REQUEST", "message": "Invalid request", "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def _optional_id(id_type, value):
    return id_type(value) if value is not None else None


class PlanPreviewView(APIView):
    """Handler for POST /api/organizations/{organization_id}/plans/preview"""

    def post(self, request: Request, organization_id: str) -> Response:
        serializer = PlanPreviewRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request(serializer.errors)
        data = serializer.validated_data
        selected = data["selected_rule_ids"]
        try:
            session, plan = plan_service().preview(
                organization_id,
                data["year_name"],
                data["start_date"],
                data["end_date"],
                selected_rule_ids=(
                    [RecurringRuleId(rule_id) for rule_id in selected] if selected is not None else None
                ),
                placements={
                    TemplateId(placement["template_id"]): placement["date"]
                    for placement in data["placements"]
                },
                manual_entries=[
                    ManualEntry(
                        date=entry["date"],
                        title=entry["title"],
                        category_id=_optional_id(CategoryId, entry["category_id"]),
                        end_date=entry.get("end_date"),
                        description=entry.get("description"),
                        invitation_text=entry.get("invitation_text"),
                    )
                    for entry in data["manual_events"]
                ],
            )
        except DomainError as error:
            return error_response(error)
        return Response(
            {
                "year_name": session.year_name,
                "start_date": session.start_date.isoformat(),
                "end_date": session.end_date.isoformat(),
                "placements": MandatoryPlacementSerializer(session.placements, many=True).data,
                "plan": PlanSerializer(plan).data,
            }
        )


class PlanCommitView(APIView):
    """Handler for POST /api/organizations/{organization_id}/plans"""

    def post(self, request: Request, organization_id: str) -> Response:
        serializer = CommitPlanRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request(serializer.errors)
        data = serializer.validated_data
        try:
            commit = CommitRequest(
                organization_id=OrganizationId.from_string(organization_id),
                year_name=data["year_name"],
                start_date=data["start_date"],
                end_date=data["end_date"],
                set_active=data["set_active"],
                drafts=tuple(
                    DraftEvent(
                        key=event.get("key") or f"{event['source'].lower()}-{index}",
                        date=event["date"],
                        title=event["title"],
                        source=DraftSource(event["source"]),
                        category_id=_optional_id(CategoryId, event.get("category_id")),
                        end_date=event.get("end_date"),
                        description=event.get("description"),
                        invitation_text=event.get("invitation_text"),
                        template_id=_optional_id(TemplateId, event.get("template_id")),
                        recurring_rule_id=_optional_id(RecurringRuleId, event.get("recurring_rule_id")),
                        is_mandatory=event["is_mandatory"],
                    )
                    for index, event in enumerate(data["events"])
                ),
            )
            year_id = plan_service().commit_plan(commit)
        except DomainError as error:
            return error_response(error)
        return Response({"year_id": str(year_id)}, status=status.HTTP_201_CREATED)


class YearListView(APIView):
    """Handler for GET /api/organizations/{organization_id}/years"""

    def get(self, request: Request, organization_id: str) -> Response:
        try:
            years = year_service().list_years(organization_id)
        except DomainError as error:
            return error_response(error)
        return Response(OperatingYearSerializer(years, many=True).data)


class UpcomingEventsView(APIView):
    """Handler for GET /api/organizations/{organization_id}/upcoming-events"""

    def get(self, request: Request, organization_id: str) -> Response:
        try:
            events = year_service().upcoming_events(organization_id)
        except DomainError as error:
            return error_response(error)
        return Response(PlannedEventSerializer(events, many=True).data)


class YearDetailView(APIView):
    """Handler for GET and DELETE /api/years/{year_id}"""

    def get(self, request: Request, year_id: str) -> Response:
        try:
            year = year_service().get_year(year_id)
        except DomainError as error:
            return error_response(error)
        return Response(YearWithEventsSerializer(year).data)

    def delete(self, request: Request, year_id: str) -> Response:
        try:
            year_service().delete_year(year_id)
        except DomainError as error:
            return error_response(error)
        return Response(status=status.HTTP_204_NO_CONTENT)


class YearStatusView(APIView):
    """Handler for POST /api/years/{year_id}/status"""

    def post(self, request: Request, year_id: str) -> Response:
        serializer = YearStatusRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request(serializer.errors)
        try:
            year = year_service().change_status(year_id, serializer.validated_data["status"])
        except DomainError as error:
            return error_response(error)
        return Response(OperatingYearSerializer(year).data)


class PlannedEventPublishView(APIView):
    """Handler for POST /api/planned-events/{event_id}/publish"""

    def post(self, request: Request, event_id: str) -> Response:
        try:
            published_id = year_service().publish_event(event_id)
        except DomainError as error:
            return error_response(error)
        return Response({"published_event_id": str(published_id)}, status=status.HTTP_201_CREATED)
