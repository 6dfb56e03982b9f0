"""
Careers Platform Test Configuration - pytest fixtures and factories

This module provides:
- pytest-django configuration
- factory_boy factories for users, companies, applications, interview
  processes and calendar credentials
- Shared fixtures for API clients and scheduled interviews

RUNNING TESTS:
# Run all tests
pytest -v

# Run by app
pytest ats/tests -v
pytest integrations/tests -v

# Run by marker
pytest -m integration -v
"""

import uuid
from datetime import timedelta

import factory
import pytest
from django.contrib.auth.models import Group
from django.utils import timezone
from factory.django import DjangoModelFactory
from rest_framework.test import APIClient


# ============================================================================
# USER FACTORIES
# ============================================================================

class UserFactory(DjangoModelFactory):
    """Factory for the Django user model."""

    class Meta:
        model = 'auth.User'
        django_get_or_create = ('username',)

    username = factory.LazyAttribute(lambda o: f"user_{uuid.uuid4().hex[:8]}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    password = factory.PostGenerationMethodCall('set_password', 'testpass123')
    is_active = True

    @factory.post_generation
    def roles(self, create, extracted, **kwargs):
        """Usage: UserFactory(roles=['recruiter'])"""
        if not create or not extracted:
            return
        for role in extracted:
            group, _ = Group.objects.get_or_create(name=role)
            self.groups.add(group)


class SuperUserFactory(UserFactory):
    is_staff = True
    is_superuser = True


# ============================================================================
# ATS FACTORIES
# ============================================================================

class CompanyFactory(DjangoModelFactory):

    class Meta:
        model = 'ats.Company'

    name = factory.Faker('company')
    calendar_provider = 'other'


class ApplicationFactory(DjangoModelFactory):
    """Factory for Application with no interviews."""

    class Meta:
        model = 'ats.Application'

    company = factory.SubFactory(CompanyFactory)
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    email = factory.LazyAttribute(
        lambda o: f"{o.first_name.lower()}.{o.last_name.lower()}@candidate.example.com"
    )
    job_title = 'Software Engineer'
    status = 'screening'
    interviews = factory.LazyFunction(list)


class InterviewProcessFactory(DjangoModelFactory):

    class Meta:
        model = 'ats.InterviewProcess'

    company = factory.SubFactory(CompanyFactory)
    job_role_id = factory.LazyAttribute(lambda o: f"role-{uuid.uuid4().hex[:8]}")
    created_by = None


class InterviewStageFactory(DjangoModelFactory):

    class Meta:
        model = 'ats.InterviewStage'

    process = factory.SubFactory(InterviewProcessFactory)
    title = factory.Sequence(lambda n: f"Stage {n}")
    description = ''
    considerations = factory.LazyFunction(lambda: [{'title': 'Communication', 'description': ''}])
    order = factory.Sequence(lambda n: n)
    duration_minutes = 60


# ============================================================================
# INTEGRATION FACTORIES
# ============================================================================

class CalendarCredentialFactory(DjangoModelFactory):
    """Factory for CalendarCredential (one per provider type)."""

    class Meta:
        model = 'integrations.CalendarCredential'
        django_get_or_create = ('type',)

    type = 'google'
    client_id = factory.LazyAttribute(lambda o: f"{o.type}-client-id")
    client_secret = factory.LazyAttribute(lambda o: f"{o.type}-client-secret")
    redirect_uri = 'https://careers.test/oauth/callback'
    refresh_token = factory.LazyAttribute(lambda o: f"{o.type}-refresh-token")
    tenant_id = ''


# ============================================================================
# FACTORY FIXTURES
# ============================================================================

@pytest.fixture
def user_factory(db):
    """Provide UserFactory for tests."""
    return UserFactory


@pytest.fixture
def superuser_factory(db):
    return SuperUserFactory


@pytest.fixture
def company_factory(db):
    return CompanyFactory


@pytest.fixture
def application_factory(db):
    return ApplicationFactory


@pytest.fixture
def interview_process_factory(db):
    return InterviewProcessFactory


@pytest.fixture
def interview_stage_factory(db):
    return InterviewStageFactory


@pytest.fixture
def calendar_credential_factory(db):
    return CalendarCredentialFactory


# ============================================================================
# COMMON FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """Provide a DRF API test client."""
    return APIClient()


@pytest.fixture
def interviewers(user_factory):
    """Two interviewer users."""
    return [user_factory(), user_factory()]


@pytest.fixture
def interviewer_payload(interviewers):
    """Interviewer references as submitted by the scheduling form."""
    return [
        {'user_id': str(user.pk), 'name': user.get_full_name()}
        for user in interviewers
    ]


@pytest.fixture
def tomorrow():
    return (timezone.now() + timedelta(days=1)).replace(microsecond=0)


@pytest.fixture
def scheduled_interview(application_factory, interviewer_payload, tomorrow):
    """An application with one scheduled interview; returns (application, interview)."""
    from ats.scheduling import InterviewLifecycleManager

    application = application_factory()
    result = InterviewLifecycleManager().schedule_interview(
        application_id=application.pk,
        scheduled_date=tomorrow,
        title='Technical Interview',
        interviewers=interviewer_payload,
        send_invite=False,
    )
    application.refresh_from_db()
    return application, result.interview


@pytest.fixture
def recruiter(user_factory):
    return user_factory(roles=['recruiter'])


@pytest.fixture
def recruiter_client(api_client, recruiter):
    """API client authenticated as a recruiter."""
    api_client.force_authenticate(user=recruiter)
    return api_client, recruiter
