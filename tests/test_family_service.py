"""
Tests for family records, member verification and barangay resident management.
"""

from datetime import date

import pytest
from django.utils import timezone

from donations.exceptions import NotFound, ValidationFailed
from donations.models import (
    AuditLog,
    Claim,
    FamilyClassification,
    FamilyMember,
    VerificationStatus,
)
from donations.services.family_service import FamilyService
from donations.services.verification_service import VerificationService


def years_ago(years):
    today = timezone.localdate()
    return date(today.year - years, 1, 1)


@pytest.mark.django_db
class TestFamilyMembers:
    """Tests for resident-side family management."""

    def setup_method(self):
        self.service = FamilyService()

    def test_add_member_with_requested_flags(self, resident):
        member = self.service.add_member(
            resident,
            {
                "name": "Ana Dela Cruz",
                "relation": "child",
                "age": 15,
                "is_student": True,
                "student_id_path": "/uploads/ids/school.png",
                "is_pwd": True,
            },
        )

        assert member.relation == "CHILD"
        assert member.is_student is False
        assert member.student_verification_status == VerificationStatus.PENDING
        assert member.student_id_path == "/uploads/ids/school.png"
        assert member.is_pwd is False
        assert member.pwd_verification_status == VerificationStatus.PENDING
        assert member.indigent_verification_status is None
        assert AuditLog.objects.filter(action="FAMILY_MEMBER_ADDED").exists()

    def test_senior_by_age_is_auto_approved(self, resident):
        member = self.service.add_member(
            resident, {"name": "Lola Dela Cruz", "relation": "PARENT", "date_of_birth": years_ago(70)}
        )

        assert member.age >= 69
        assert member.is_senior_citizen is True
        assert member.senior_verification_status == VerificationStatus.APPROVED

    def test_senior_flag_below_sixty_rejected(self, resident):
        with pytest.raises(ValidationFailed, match="only be set when age is 60 or above"):
            self.service.add_member(
                resident,
                {"name": "Tito", "relation": "SIBLING", "age": 45, "is_senior_citizen": True},
            )

    def test_name_and_relation_required(self, resident):
        with pytest.raises(ValidationFailed, match="Name and relation are required"):
            self.service.add_member(resident, {"name": "", "relation": "CHILD"})

    def test_invalid_relation(self, resident):
        with pytest.raises(ValidationFailed, match="Invalid relation"):
            self.service.add_member(resident, {"name": "Rex", "relation": "PET"})

    def test_add_member_without_family(self, resident):
        resident.families.all().delete()

        with pytest.raises(NotFound, match="Family not found"):
            self.service.add_member(resident, {"name": "Ana", "relation": "CHILD", "age": 12})

    def test_get_family_refreshes_ages_and_approves_seniors(self, resident, create_member):
        member = create_member(
            resident.family, name="Lolo", relation="PARENT", age=59, date_of_birth=years_ago(61)
        )

        family = self.service.get_family(resident)

        refreshed = family.members.all()[0]
        assert refreshed.age >= 60
        member.refresh_from_db()
        assert member.is_senior_citizen is True
        assert member.senior_verification_status == VerificationStatus.APPROVED

    def test_update_member_recomputes_age(self, resident, create_member):
        member = create_member(resident.family, age=10)

        updated = self.service.update_member(
            resident, member.pk, {"name": "Ana D. Cruz", "date_of_birth": years_ago(12)}
        )

        assert updated.name == "Ana D. Cruz"
        assert updated.age in (11, 12)
        assert AuditLog.objects.filter(action="FAMILY_MEMBER_UPDATED").exists()

    def test_remove_member(self, resident, create_member):
        member = create_member(resident.family)

        self.service.remove_member(resident, member.pk)

        assert not FamilyMember.objects.filter(pk=member.pk).exists()
        assert AuditLog.objects.filter(action="FAMILY_MEMBER_REMOVED").exists()

    def test_cannot_touch_other_family_member(self, resident, create_resident, barangay, create_member):
        neighbour = create_resident(barangay)
        member = create_member(neighbour.family)

        with pytest.raises(NotFound, match="Family member not found"):
            self.service.remove_member(resident, member.pk)


@pytest.mark.django_db
class TestBarangayResidents:
    """Tests for barangay-side resident management."""

    def setup_method(self):
        self.service = FamilyService()

    def test_list_residents_of_barangay(self, barangay, other_barangay, create_resident, official):
        mine = create_resident(barangay)
        create_resident(other_barangay)

        assert list(self.service.list_residents(barangay)) == [mine]

    def test_classify_resident(self, official, barangay, resident):
        updated = self.service.classify_resident(
            official, barangay, resident.pk, FamilyClassification.LOW_CLASS
        )

        assert updated.family_classification == FamilyClassification.LOW_CLASS
        assert AuditLog.objects.filter(action="RESIDENT_CLASSIFIED", user=official).exists()

    def test_classify_invalid_value(self, official, barangay, resident):
        with pytest.raises(ValidationFailed, match="Invalid classification value"):
            self.service.classify_resident(official, barangay, resident.pk, "RICH")

    def test_classify_resident_of_other_barangay(self, official, barangay, other_barangay, create_resident):
        outsider = create_resident(other_barangay)

        with pytest.raises(NotFound, match="does not belong to your barangay"):
            self.service.classify_resident(official, barangay, outsider.pk, "LOW_CLASS")

    def test_unclaimed_residents(self, barangay, create_resident, schedule):
        claimed = create_resident(barangay, first_name="Ben")
        waiting = create_resident(barangay, first_name="Ana")
        create_resident(barangay, first_name="Pending", is_active=False)
        Claim.objects.create(
            family=claimed.family, schedule=schedule, claimed_by=claimed, barangay=barangay
        )

        assert list(self.service.list_unclaimed_residents(barangay, schedule.pk)) == [waiting]

    def test_unclaimed_requires_schedule(self, barangay):
        with pytest.raises(ValidationFailed, match="Schedule ID is required"):
            self.service.list_unclaimed_residents(barangay, None)

    def test_unclaimed_unknown_schedule(self, barangay):
        with pytest.raises(NotFound, match="Schedule not found"):
            self.service.list_unclaimed_residents(barangay, 9999)


@pytest.mark.django_db
class TestVerifyMember:
    """Tests for VerificationService.verify_member."""

    def setup_method(self):
        self.service = VerificationService()

    def test_approve_sets_flag_and_status(self, official, barangay, resident, create_member):
        member = create_member(resident.family, pwd_verification_status=VerificationStatus.PENDING)

        updated = self.service.verify_member(official, barangay, member.pk, "pwd", "APPROVE")

        assert updated.is_pwd is True
        assert updated.pwd_verification_status == VerificationStatus.APPROVED
        assert AuditLog.objects.filter(action="FAMILY_MEMBER_VERIFICATION_UPDATED").exists()

    def test_reject_clears_flag(self, official, barangay, resident, create_member):
        member = create_member(resident.family, is_student=True)

        updated = self.service.verify_member(official, barangay, member.pk, "student", "REJECT")

        assert updated.is_student is False
        assert updated.student_verification_status == VerificationStatus.REJECTED

    @pytest.mark.parametrize(
        "field, action, message",
        [
            ("", "APPROVE", "field and action are required"),
            ("wealthy", "APPROVE", "Invalid field"),
            ("pwd", "MAYBE", "Invalid action"),
        ],
    )
    def test_invalid_input(self, official, barangay, resident, create_member, field, action, message):
        member = create_member(resident.family)

        with pytest.raises(ValidationFailed, match=message):
            self.service.verify_member(official, barangay, member.pk, field, action)

    def test_member_of_other_barangay_not_found(
        self, official, barangay, other_barangay, create_resident, create_member
    ):
        outsider = create_resident(other_barangay)
        member = create_member(outsider.family)

        with pytest.raises(NotFound, match="Family member not found in your barangay"):
            self.service.verify_member(official, barangay, member.pk, "pwd", "APPROVE")
