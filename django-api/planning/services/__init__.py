from planning.services.plan_service import ManualEntry, PlanService
from planning.services.year_service import YearService

__all__ = ["ManualEntry", "PlanService", "YearService"]
