"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from builders import ASSEMBLIES, MEETINGS, ORG, category
from fakes import InMemoryPlanningStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def store() -> InMemoryPlanningStore:
    """Fake store holding one organization with two categories."""
    fake = InMemoryPlanningStore()
    fake.organizations.add(ORG)
    fake.categories.extend([category(MEETINGS, "Meetings"), category(ASSEMBLIES, "Assemblies")])
    return fake


@pytest.fixture
def organization():
    from planning import models

    return models.Organization.objects.create(name="Harbour Rowing Club")


@pytest.fixture
def meetings(organization):
    from planning import models

    return models.Category.objects.create(organization=organization, name="Meetings")
