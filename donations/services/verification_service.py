import logging

from donations.exceptions import NotFound, ValidationFailed
from donations.models import FamilyMember, VerificationStatus
from donations.services.audit_service import AuditService

logger = logging.getLogger(__name__)

APPROVE = "APPROVE"
REJECT = "REJECT"


class VerificationService:
    """Barangay officials approve or reject eligibility flags on family members."""

    def __init__(self):
        self.audit = AuditService()

    def verify_member(self, official, barangay, member_id, field: str, action: str) -> FamilyMember:
        """
        Set one eligibility flag and its verification status.

        Args:
            official: The acting barangay official
            barangay: The official's barangay
            member_id: FamilyMember primary key
            field: One of indigent, senior, pwd, student
            action: APPROVE or REJECT

        Returns:
            FamilyMember: The updated member

        Raises:
            ValidationFailed: On a missing or unknown field or action
            NotFound: If the member does not belong to a family in this barangay
        """
        if not field or not action:
            raise ValidationFailed("field and action are required")
        if field not in FamilyMember.ELIGIBILITY_FIELDS:
            raise ValidationFailed("Invalid field")
        if action not in (APPROVE, REJECT):
            raise ValidationFailed("Invalid action")

        # Members of other barangays look the same as missing ones.
        member = FamilyMember.objects.filter(pk=member_id, family__barangay=barangay).first()
        if member is None:
            raise NotFound("Family member not found in your barangay")

        approved = action == APPROVE
        flag_attr, status_attr = FamilyMember.ELIGIBILITY_FIELDS[field]
        setattr(member, flag_attr, approved)
        setattr(
            member,
            status_attr,
            VerificationStatus.APPROVED if approved else VerificationStatus.REJECTED,
        )
        member.save(update_fields=[flag_attr, status_attr, "updated_at"])

        self.audit.record(
            official,
            "FAMILY_MEMBER_VERIFICATION_UPDATED",
            f"Updated {field} verification for {member.name} to {action}",
        )
        logger.info(f"Member {member.pk} {field} verification set to {action}")
        return member
