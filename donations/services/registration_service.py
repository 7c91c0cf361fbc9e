import logging

from django.db import transaction
from rest_framework.authtoken.models import Token

from donations.exceptions import NotFound, ValidationFailed
from donations.models import (
    AuditLog,
    Barangay,
    Claim,
    Family,
    FamilyMember,
    Role,
    User,
)
from donations.services.audit_service import AuditService
from donations.sms.phone import to_local

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "gender",
    "date_of_birth",
    "purok",
    "municipality",
    "educational_attainment",
    "is_head_of_family",
    "id_file_path",
    "id_back_file_path",
    "barangay_clearance_path",
    "certificate_of_indigency_path",
    "proof_of_residency_path",
    "senior_citizen_id_path",
    "pwd_id_path",
    "ip_certificate_path",
    "school_id_path",
    "solo_parent_id_path",
)


class RegistrationService:
    """Resident self-registration and the admin approval workflow."""

    def __init__(self):
        self.audit = AuditService()

    def register_resident(self, data: dict) -> User:
        """
        Create an inactive resident account waiting for admin approval.

        Args:
            data: Validated registration fields (snake_case)

        Returns:
            User: The created, inactive resident

        Raises:
            ValidationFailed: On a non-resident role, a taken email or an unknown barangay
        """
        role = data.get("role") or Role.RESIDENT
        if role != Role.RESIDENT:
            raise ValidationFailed("Only residents can register")

        email = data["email"].lower()
        if User.objects.filter(email__iexact=email).exists():
            raise ValidationFailed("Email already registered")

        barangay_id = data.get("barangay_id")
        if not barangay_id:
            raise ValidationFailed("Barangay is required")
        barangay = Barangay.objects.filter(pk=barangay_id, is_active=True).first()
        if barangay is None:
            raise ValidationFailed("Invalid barangay")

        profile = {field: data[field] for field in PROFILE_FIELDS if data.get(field) is not None}

        # The post_save signal creates the resident's family.
        user = User.objects.create_user(
            email=email,
            password=data["password"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            phone=to_local(data["phone"]) if data.get("phone") else None,
            role=Role.RESIDENT,
            barangay=barangay,
            is_active=False,
            **profile,
        )
        logger.info(f"Resident {user.pk} registered in barangay {barangay.code}, pending approval")
        return user

    def list_pending(self):
        return (
            User.objects.filter(role=Role.RESIDENT, is_active=False)
            .select_related("barangay")
            .order_by("-created_at")
        )

    def _get_pending(self, user_id) -> User:
        user = User.objects.filter(pk=user_id, role=Role.RESIDENT, is_active=False).first()
        if user is None:
            raise NotFound("Pending registration not found")
        return user

    def approve(self, admin, user_id) -> User:
        user = self._get_pending(user_id)
        user.is_active = True
        user.save(update_fields=["is_active", "updated_at"])
        self.audit.record(admin, "USER_APPROVED", f"Approved registration for {user.email}")
        logger.info(f"Registration for user {user.pk} approved")
        return user

    def reject(self, admin, user_id) -> None:
        """
        Delete a pending resident together with every dependent row.

        The deletes run in foreign key dependency order: family members,
        claims of the families, claims made by the user, families, audit
        logs, auth tokens and finally the user. All of it happens in one
        transaction so a failure leaves nothing half deleted.
        """
        user = self._get_pending(user_id)
        email = user.email

        with transaction.atomic():
            families = Family.objects.filter(head=user)
            FamilyMember.objects.filter(family__in=families).delete()
            Claim.objects.filter(family__in=families).delete()
            Claim.objects.filter(claimed_by=user).delete()
            families.delete()
            AuditLog.objects.filter(user=user).delete()
            Token.objects.filter(user=user).delete()
            user.delete()

        self.audit.record(admin, "USER_REJECTED", f"Rejected and deleted registration for {email}")
        logger.info(f"Registration for {email} rejected and removed")
