from planning.handlers.views import (
    PlanCommitView,
    PlannedEventPublishView,
    PlanPreviewView,
    UpcomingEventsView,
    YearDetailView,
    YearListView,
    YearStatusView,
)

__all__ = [
    "PlanCommitView",
    "PlannedEventPublishView",
    "PlanPreviewView",
    "UpcomingEventsView",
    "YearDetailView",
    "YearListView",
    "YearStatusView",
]
