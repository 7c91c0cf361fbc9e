"""
Tests for admin management of users and barangays.
"""

import pytest
from django.core.management import call_command

from donations.exceptions import NotFound, ValidationFailed
from donations.models import AuditLog, Barangay, Family, Role
from donations.services.directory_service import DirectoryService


@pytest.mark.django_db
class TestUsers:
    """Tests for user management."""

    def setup_method(self):
        self.service = DirectoryService()

    def test_list_users_paginates(self, admin_user, create_user):
        for _ in range(4):
            create_user(role=Role.RESIDENT)

        result = self.service.list_users(page=2, limit=2)

        assert len(result["users"]) == 2
        assert result["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}

    def test_list_users_filters(self, admin_user, create_user):
        create_user(role=Role.RESIDENT, first_name="Josefa")
        create_user(role=Role.RESIDENT, first_name="Pedro")

        residents = self.service.list_users(role=Role.RESIDENT)
        search = self.service.list_users(search="josefa")

        assert residents["pagination"]["total"] == 2
        assert [u.first_name for u in search["users"]] == ["Josefa"]

    def test_list_users_counts_families(self, resident):
        user = self.service.list_users(role=Role.RESIDENT)["users"][0]

        assert user.family_count == 1
        assert user.claim_count == 0

    def test_create_official_becomes_manager(self, admin_user, barangay):
        user = self.service.create_user(
            admin_user,
            {
                "email": "kap@example.com",
                "password": "secret123",
                "first_name": "Kap",
                "last_name": "Tan",
                "role": Role.BARANGAY,
                "barangay_id": barangay.pk,
            },
        )

        barangay.refresh_from_db()
        assert barangay.manager == user
        assert user.is_active is True
        assert AuditLog.objects.filter(action="USER_CREATED").exists()

    def test_create_official_requires_barangay(self, admin_user):
        with pytest.raises(ValidationFailed, match="Barangay is required for Barangay Manager role"):
            self.service.create_user(
                admin_user, {"email": "kap@example.com", "password": "secret123", "role": Role.BARANGAY}
            )

    def test_create_duplicate_email(self, admin_user):
        with pytest.raises(ValidationFailed, match="User with this email already exists"):
            self.service.create_user(
                admin_user, {"email": "ADMIN@example.com", "password": "secret123", "role": Role.ADMIN}
            )

    def test_update_user_email_taken(self, admin_user, resident):
        with pytest.raises(ValidationFailed, match="Email already taken"):
            self.service.update_user(admin_user, resident.pk, {"email": admin_user.email})

    def test_update_user_password(self, admin_user, resident):
        self.service.update_user(admin_user, resident.pk, {"password": "newpass123", "first_name": "Jun"})

        resident.refresh_from_db()
        assert resident.check_password("newpass123")
        assert resident.first_name == "Jun"
        assert AuditLog.objects.filter(action="USER_UPDATED").exists()

    def test_demoting_official_releases_barangay(self, admin_user, official, barangay):
        self.service.update_user(admin_user, official.pk, {"role": Role.ADMIN})

        barangay.refresh_from_db()
        assert barangay.manager is None

    def test_deactivate_user(self, admin_user, resident):
        self.service.deactivate_user(admin_user, resident.pk)

        resident.refresh_from_db()
        assert resident.is_active is False
        assert AuditLog.objects.filter(action="USER_DELETED").exists()

    def test_cannot_deactivate_self(self, admin_user):
        with pytest.raises(ValidationFailed, match="Cannot delete your own account"):
            self.service.deactivate_user(admin_user, admin_user.pk)

    def test_get_unknown_user(self):
        with pytest.raises(NotFound, match="User not found"):
            self.service.get_user(9999)


@pytest.mark.django_db
class TestBarangays:
    """Tests for barangay management."""

    def setup_method(self):
        self.service = DirectoryService()

    def test_create_barangay_with_manager(self, admin_user, create_user):
        manager = create_user(role=Role.BARANGAY)

        barangay = self.service.create_barangay(
            admin_user, {"name": "Baliton", "code": "BAL", "manager_id": manager.pk}
        )

        manager.refresh_from_db()
        assert barangay.manager == manager
        assert manager.barangay == barangay
        assert AuditLog.objects.filter(action="BARANGAY_CREATED").exists()

    def test_create_duplicate_code(self, admin_user, barangay):
        with pytest.raises(ValidationFailed, match="Barangay code already exists"):
            self.service.create_barangay(admin_user, {"name": "Other", "code": barangay.code})

    def test_manager_already_assigned(self, admin_user, official):
        with pytest.raises(ValidationFailed, match="already assigned to another barangay"):
            self.service.create_barangay(
                admin_user, {"name": "New", "code": "NEW", "manager_id": official.pk}
            )

    def test_manager_must_be_official(self, admin_user, resident):
        with pytest.raises(ValidationFailed, match="Invalid manager selected"):
            self.service.create_barangay(
                admin_user, {"name": "New", "code": "NEW", "manager_id": resident.pk}
            )

    def test_update_code_taken(self, admin_user, barangay, other_barangay):
        with pytest.raises(ValidationFailed, match="Barangay code already taken"):
            self.service.update_barangay(admin_user, barangay.pk, {"code": other_barangay.code})

    def test_list_barangays_counts(self, barangay, resident, schedule):
        listed = self.service.list_barangays().get(pk=barangay.pk)

        assert listed.resident_count == 1
        assert listed.schedule_count == 1
        assert listed.claim_count == 0

    def test_active_barangays_only(self, barangay, create_barangay):
        create_barangay(is_active=False)

        assert list(self.service.list_active_barangays()) == [barangay]

    def test_deactivate_empty_barangay(self, admin_user, create_barangay):
        empty = create_barangay()

        self.service.deactivate_barangay(admin_user, empty.pk)

        assert Barangay.objects.get(pk=empty.pk).is_active is False
        assert AuditLog.objects.filter(action="BARANGAY_DELETED").exists()

    def test_deactivate_barangay_with_residents_refused(self, admin_user, barangay, resident):
        with pytest.raises(ValidationFailed, match="existing residents or schedules"):
            self.service.deactivate_barangay(admin_user, barangay.pk)


@pytest.mark.django_db
class TestSeedDemoData:
    """Tests for the seed_demo_data management command."""

    def test_seed_is_repeatable(self):
        call_command("seed_demo_data", "--residents-per-barangay", "2")
        call_command("seed_demo_data", "--residents-per-barangay", "2")

        assert Barangay.objects.count() == 4
        assert Barangay.objects.filter(manager__isnull=True).count() == 0
        assert Family.objects.count() == 8
        assert DirectoryService().list_users(role=Role.ADMIN)["pagination"]["total"] == 1
