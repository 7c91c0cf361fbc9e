import logging

from django.db.models import Prefetch
from django.utils import timezone

from donations.exceptions import NotFound, ValidationFailed
from donations.models import (
    DonationSchedule,
    EducationLevel,
    Family,
    FamilyClassification,
    FamilyMember,
    Relation,
    Role,
    User,
    VerificationStatus,
)
from donations.models.family import SENIOR_CITIZEN_AGE
from donations.services.audit_service import AuditService

logger = logging.getLogger(__name__)

# request flag -> (status attribute, document path attribute)
REQUESTABLE_FLAGS = {
    "is_indigent": ("indigent_verification_status", "indigency_cert_path"),
    "is_pwd": ("pwd_verification_status", "pwd_proof_path"),
    "is_student": ("student_verification_status", "student_id_path"),
}


def _is_senior_age(age) -> bool:
    return age is not None and age >= SENIOR_CITIZEN_AGE


class FamilyService:
    """Family records: resident self-service and barangay-side resident management."""

    def __init__(self):
        self.audit = AuditService()

    # Resident side

    def get_family(self, resident) -> Family:
        """
        Return the resident's family with ages refreshed from dates of birth.

        Members who have reached senior age are approved as senior citizens
        and the approval is saved.
        """
        family = (
            Family.objects.filter(head=resident)
            .select_related("barangay")
            .prefetch_related("members")
            .order_by("created_at")
            .first()
        )
        if family is None:
            raise NotFound("Family not found")

        today = timezone.localdate()
        auto_approved = []
        for member in family.members.all():
            member.age = member.current_age(today)
            if (
                _is_senior_age(member.age)
                and member.senior_verification_status != VerificationStatus.APPROVED
            ):
                member.is_senior_citizen = True
                member.senior_verification_status = VerificationStatus.APPROVED
                auto_approved.append(member.pk)

        if auto_approved:
            FamilyMember.objects.filter(pk__in=auto_approved).update(
                is_senior_citizen=True,
                senior_verification_status=VerificationStatus.APPROVED,
            )
            logger.info(f"Auto-approved {len(auto_approved)} senior members in family {family.pk}")
        return family

    def _own_family(self, resident) -> Family:
        family = resident.family
        if family is None:
            raise NotFound("Family not found")
        return family

    def _own_member(self, resident, member_id) -> FamilyMember:
        family = self._own_family(resident)
        member = FamilyMember.objects.filter(pk=member_id, family=family).first()
        if member is None:
            raise NotFound("Family member not found")
        return member

    @staticmethod
    def _clean_relation(relation):
        relation = (relation or "").upper()
        if relation not in Relation.values:
            raise ValidationFailed("Invalid relation")
        return relation

    @staticmethod
    def _clean_education_level(value):
        return value if value in EducationLevel.values else None

    def add_member(self, resident, data: dict) -> FamilyMember:
        """
        Add a member to the resident's family.

        Args:
            resident: The family head
            data: Member fields; is_indigent, is_pwd, is_student and
                is_senior_citizen request a verification

        Returns:
            FamilyMember: The created member
        """
        if not data.get("name") or not data.get("relation"):
            raise ValidationFailed("Name and relation are required")
        relation = self._clean_relation(data["relation"])

        age = data.get("age")
        if data.get("date_of_birth"):
            age = FamilyMember(date_of_birth=data["date_of_birth"]).current_age(
                timezone.localdate()
            )
        senior_by_age = _is_senior_age(age)
        if data.get("is_senior_citizen") and not senior_by_age:
            raise ValidationFailed("Senior Citizen can only be set when age is 60 or above.")

        family = self._own_family(resident)
        member = FamilyMember(
            family=family,
            name=data["name"],
            relation=relation,
            age=age,
            date_of_birth=data.get("date_of_birth"),
            education_level=self._clean_education_level(data.get("education_level")),
            is_senior_citizen=senior_by_age,
            senior_card_path=data.get("senior_card_path") or None,
            senior_verification_status=VerificationStatus.APPROVED if senior_by_age else None,
        )
        # Requested flags stay off until a barangay official approves them.
        for flag, (status_attr, path_attr) in REQUESTABLE_FLAGS.items():
            setattr(member, path_attr, data.get(path_attr) or None)
            if data.get(flag):
                setattr(member, status_attr, VerificationStatus.PENDING)
        member.save()

        self.audit.record(
            resident, "FAMILY_MEMBER_ADDED", f"Added family member: {member.name} ({relation})"
        )
        return member

    def update_member(self, resident, member_id, data: dict) -> FamilyMember:
        member = self._own_member(resident, member_id)
        if "name" in data:
            if not data["name"]:
                raise ValidationFailed("Name is required")
            member.name = data["name"]
        if "relation" in data:
            member.relation = self._clean_relation(data["relation"])
        if "age" in data:
            member.age = data["age"]
        if "date_of_birth" in data:
            member.date_of_birth = data["date_of_birth"]
            if member.date_of_birth:
                member.age = member.current_age(timezone.localdate())
        if "education_level" in data:
            member.education_level = self._clean_education_level(data["education_level"])
        member.save()

        self.audit.record(
            resident,
            "FAMILY_MEMBER_UPDATED",
            f"Updated family member: {member.name} ({member.relation})",
        )
        return member

    def remove_member(self, resident, member_id) -> None:
        member = self._own_member(resident, member_id)
        name, relation = member.name, member.relation
        member.delete()
        self.audit.record(
            resident, "FAMILY_MEMBER_REMOVED", f"Removed family member: {name} ({relation})"
        )

    # Barangay side

    def _residents_with_families(self, barangay):
        return (
            User.objects.filter(barangay=barangay, role=Role.RESIDENT)
            .select_related("barangay")
            .prefetch_related(
                Prefetch("families", queryset=Family.objects.prefetch_related("members"))
            )
        )

    def list_residents(self, barangay):
        return self._residents_with_families(barangay).order_by("-created_at")

    def classify_resident(self, official, barangay, resident_id, classification) -> User:
        resident = User.objects.filter(
            pk=resident_id, barangay=barangay, role=Role.RESIDENT
        ).first()
        if resident is None:
            raise NotFound("Resident not found or does not belong to your barangay")

        classification = classification or FamilyClassification.UNCLASSIFIED
        if classification not in FamilyClassification.values:
            raise ValidationFailed("Invalid classification value")

        resident.family_classification = classification
        resident.save(update_fields=["family_classification", "updated_at"])
        self.audit.record(
            official,
            "RESIDENT_CLASSIFIED",
            f"Classified {resident.get_full_name()} as {classification}",
        )
        return resident

    def list_unclaimed_residents(self, barangay, schedule_id):
        """Active residents whose family has not claimed the given schedule."""
        if not schedule_id:
            raise ValidationFailed("Schedule ID is required")
        schedule = DonationSchedule.objects.filter(pk=schedule_id, barangay=barangay).first()
        if schedule is None:
            raise NotFound("Schedule not found")

        return (
            self._residents_with_families(barangay)
            .filter(is_active=True, families__isnull=False)
            .exclude(families__claims__schedule=schedule)
            .distinct()
            .order_by("first_name")
        )
