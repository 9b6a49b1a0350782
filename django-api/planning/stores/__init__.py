from planning.stores.interfaces import PlanningStore, StoreConflictError, StoreError

__all__ = ["PlanningStore", "StoreConflictError", "StoreError"]
