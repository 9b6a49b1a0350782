from django.urls import path

from planning.handlers import (
    PlanCommitView,
    PlannedEventPublishView,
    PlanPreviewView,
    UpcomingEventsView,
    YearDetailView,
    YearListView,
    YearStatusView,
)

urlpatterns = [
    path(
        "organizations/<str:organization_id>/plans/preview",
        PlanPreviewView.as_view(),
        name="plan-preview",
    ),
    path(
        "organizations/<str:organization_id>/plans",
        PlanCommitView.as_view(),
        name="plan-commit",
    ),
    path(
        "organizations/<str:organization_id>/years",
        YearListView.as_view(),
        name="year-list",
    ),
    path(
        "organizations/<str:organization_id>/upcoming-events",
        UpcomingEventsView.as_view(),
        name="upcoming-events",
    ),
    path("years/<str:year_id>", YearDetailView.as_view(), name="year-detail"),
    path("years/<str:year_id>/status", YearStatusView.as_view(), name="year-status"),
    path(
        "planned-events/<str:event_id>/publish",
        PlannedEventPublishView.as_view(),
        name="planned-event-publish",
    ),
]
