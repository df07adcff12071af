"""
Pytest configuration and fixtures for mood insights tests.
"""
import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from mood.tests.factories import NOW, UserFactory
from mood.utils.time_utils import FixedClock


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    """Clock frozen at NOW (a Monday, noon UTC)."""
    return FixedClock(NOW)


@pytest.fixture
def user(db):
    return UserFactory.create()


@pytest.fixture
def other_user(db):
    return UserFactory.create()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def authenticated_client(api_client, user):
    api_client.force_login(user)
    return api_client


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()
