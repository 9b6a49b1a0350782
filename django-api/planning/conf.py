"""App settings read from ``settings.PLANNING`` with defaults."""

from django.conf import settings

from planning.domain.calendar_math import DEFAULT_YEAR_NAME_FORMAT
from planning.domain.placement import DEFAULT_FIRST_MONTH

DEFAULTS = {
    "YEAR_START_MONTH": DEFAULT_FIRST_MONTH,
    "YEAR_NAME_FORMAT": DEFAULT_YEAR_NAME_FORMAT,
    "UPCOMING_EVENTS_LIMIT": 3,
}


def planning_setting(name: str):
    if name not in DEFAULTS:
        raise KeyError(f"Unknown planning setting: {name}")
    return getattr(settings, "PLANNING", {}).get(name, DEFAULTS[name])
