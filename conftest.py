"""
Root conftest: shared pytest fixtures and factory-boy factories.

Tests opt into the database with ``@pytest.mark.django_db``.  The default
categories seeded by the ``tasks`` data migration are present in every
database test.
"""

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

import factory
from django.contrib.auth import get_user_model
from apps.tasks.models import Category, Task

User = get_user_model()

PASSWORD = "TestPass123!"


# ===================================================================
# Factories
# ===================================================================

class UserFactory(factory.django.DjangoModelFactory):
    """Create a User with a hashed password and unique email."""

    class Meta:
        model = User
        skip_postgeneration_save = True

    name = factory.Sequence(lambda n: f"Test User {n}")
    email = factory.Sequence(lambda n: f"testuser{n}@example.com")
    password = factory.PostGeneration(
        lambda obj, create, extracted, **kw: obj.set_password(extracted or PASSWORD)
        or obj.save()
    )


class CategoryFactory(factory.django.DjangoModelFactory):
    """Create a Category owned by a given user."""

    class Meta:
        model = Category

    name = factory.Sequence(lambda n: f"Category {n}")
    color = "#6366F1"
    user = factory.SubFactory(UserFactory)


class TaskFactory(factory.django.DjangoModelFactory):
    """Create a Task owned by a given user."""

    class Meta:
        model = Task

    title = factory.Sequence(lambda n: f"Task {n}")
    description = "A test task"
    status = Task.Status.PENDING
    priority = Task.Priority.MEDIUM
    user = factory.SubFactory(UserFactory)


# ===================================================================
# Fixtures
# ===================================================================

@pytest.fixture(autouse=True)
def _clear_cache():
    """The rate limiter lives in the cache; start each test with a clean one."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture
def user(db):
    """A persisted User instance (password: TestPass123!)."""
    return UserFactory()


@pytest.fixture
def other_user(db):
    """A second user for cross-user isolation tests."""
    return UserFactory()


@pytest.fixture
def auth_client(user):
    """Authenticated DRF client for ``user``."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def other_auth_client(other_user):
    """Authenticated DRF client for ``other_user``."""
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client


@pytest.fixture
def token_client(user):
    """Client sending a real bearer access token for ``user``."""
    client = APIClient()
    token = RefreshToken.for_user(user).access_token
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture
def category(user):
    """A Category owned by ``user``."""
    return CategoryFactory(user=user)


@pytest.fixture
def default_category(db):
    """One of the global categories seeded by migration."""
    return Category.objects.defaults().get(name="Work")


@pytest.fixture
def task(user):
    """A Task owned by ``user``."""
    return TaskFactory(user=user)
