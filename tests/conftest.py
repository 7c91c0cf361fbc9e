"""
Pytest configuration and shared fixtures for the test suite.
"""

from datetime import time, timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from donations.models import (
    Barangay,
    DonationSchedule,
    FamilyMember,
    Role,
    SMSSettings,
    User,
)

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def sample_registration_data():
    """Registration body as sent by the signup form."""
    return {
        "email": "juan.delacruz@example.com",
        "password": DEFAULT_PASSWORD,
        "firstName": "Juan",
        "lastName": "Dela Cruz",
        "phone": "0917 123 4567",
        "purok": "Purok 3",
        "municipality": "Glan",
        "gender": "MALE",
        "dateOfBirth": "1985-04-12",
    }


@pytest.fixture
def sample_schedule_data():
    """Schedule body for a distribution later today."""
    return {
        "title": "Rice distribution",
        "description": "5kg of rice per family",
        "date": timezone.localdate().isoformat(),
        "startTime": "08:00",
        "endTime": "12:00",
        "location": "Barangay Hall",
    }


@pytest.fixture
def create_barangay(db):
    """Factory fixture to create a test barangay."""
    counter = {"n": 0}

    def _create_barangay(**kwargs):
        counter["n"] += 1
        data = {
            "name": f"Barangay {counter['n']}",
            "code": f"BRGY{counter['n']:03d}",
            "description": "Test barangay",
            **kwargs,
        }
        return Barangay.objects.create(**data)

    return _create_barangay


@pytest.fixture
def create_user(db):
    """Factory fixture to create a test user of any role."""
    counter = {"n": 0}

    def _create_user(role=Role.RESIDENT, **kwargs):
        counter["n"] += 1
        data = {
            "email": f"user{counter['n']}@example.com",
            "password": DEFAULT_PASSWORD,
            "first_name": "Test",
            "last_name": f"User{counter['n']}",
            "role": role,
            "is_active": True,
            **kwargs,
        }
        return User.objects.create_user(**data)

    return _create_user


@pytest.fixture
def admin_user(create_user):
    return create_user(role=Role.ADMIN, email="admin@example.com", first_name="Ada")


@pytest.fixture
def barangay(create_barangay):
    return create_barangay(name="Poblacion", code="POB")


@pytest.fixture
def other_barangay(create_barangay):
    return create_barangay(name="San Jose", code="SJ")


@pytest.fixture
def create_official(create_user):
    """Factory fixture for a barangay official managing the given barangay."""

    def _create_official(barangay, **kwargs):
        official = create_user(role=Role.BARANGAY, barangay=barangay, **kwargs)
        barangay.manager = official
        barangay.save()
        return official

    return _create_official


@pytest.fixture
def official(create_official, barangay):
    return create_official(barangay, first_name="Maria", last_name="Santos")


@pytest.fixture
def create_resident(create_user):
    """Factory fixture for an active resident; the family is created by the post_save signal."""

    def _create_resident(barangay, **kwargs):
        kwargs.setdefault("phone", "09171234567")
        kwargs.setdefault("purok", "Purok 1")
        kwargs.setdefault("municipality", "Glan")
        return create_user(role=Role.RESIDENT, barangay=barangay, **kwargs)

    return _create_resident


@pytest.fixture
def resident(create_resident, barangay):
    return create_resident(barangay, first_name="Juan", last_name="Dela Cruz")


@pytest.fixture
def create_schedule(db):
    """Factory fixture to create a donation schedule."""

    def _create_schedule(barangay, **kwargs):
        data = {
            "title": "Relief goods",
            "description": "Canned goods and rice",
            "date": timezone.localdate(),
            "start_time": time(8, 0),
            "end_time": time(12, 0),
            "location": "Barangay Hall",
            **kwargs,
        }
        return DonationSchedule.objects.create(barangay=barangay, **data)

    return _create_schedule


@pytest.fixture
def schedule(create_schedule, barangay):
    return create_schedule(barangay)


@pytest.fixture
def past_schedule(create_schedule, barangay):
    return create_schedule(barangay, title="Last week", date=timezone.localdate() - timedelta(days=7))


@pytest.fixture
def create_member(db):
    """Factory fixture to add a member to a family."""

    def _create_member(family, **kwargs):
        data = {"name": "Ana Dela Cruz", "relation": "CHILD", "age": 12, **kwargs}
        return FamilyMember.objects.create(family=family, **data)

    return _create_member


@pytest.fixture
def sms_settings(db):
    """Active SMS gateway account."""
    return SMSSettings.objects.create(username="gateway-user", password="gateway-pass", is_active=True)


@pytest.fixture
def mock_gateway_send(mocker):
    """Mock the gateway send call; every recipient is reported as Pending."""

    def _accept(message, phone_numbers):
        return {
            "id": "msg-123",
            "state": "Pending",
            "recipients": [{"phoneNumber": number, "state": "Pending"} for number in phone_numbers],
        }

    return mocker.patch("donations.sms.gateway.SMSGatewayClient.send", side_effect=_accept)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    """Factory fixture for an APIClient authenticated as the given user."""

    def _client_for(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client_for
