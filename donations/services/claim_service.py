import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from donations.exceptions import DuplicateClaim, NotFound, ValidationFailed
from donations.models import (
    Claim,
    ClaimStatus,
    DonationSchedule,
    Family,
    Role,
    ScheduleStatus,
    User,
)
from donations.services.audit_service import AuditService
from donations.services.notification_service import NotificationService
from donations.services.schedule_service import is_eligible

logger = logging.getLogger(__name__)


class ClaimService:
    """
    Records that a family took a schedule's distribution.

    A family claims a schedule at most once. The check before the insert
    gives the friendly error; the (family, schedule) unique constraint is
    what holds under concurrent requests, and its IntegrityError is
    reported as the same duplicate claim.
    """

    def __init__(self, notifications: NotificationService = None):
        self.notifications = notifications or NotificationService()
        self.audit = AuditService()

    def _family_of(self, resident) -> Family:
        family = resident.family
        if family is None:
            raise NotFound("Resident has no family record")
        return family

    def _check_claimable(self, family, schedule):
        if Claim.objects.filter(family=family, schedule=schedule).exists():
            raise DuplicateClaim()
        if schedule.status != ScheduleStatus.SCHEDULED:
            raise ValidationFailed("Schedule is not available for claiming")
        if schedule.max_recipients is not None:
            if Claim.objects.filter(schedule=schedule).count() >= schedule.max_recipients:
                raise ValidationFailed("This donation has reached its maximum number of recipients")

    def _insert(self, **fields) -> Claim:
        try:
            with transaction.atomic():
                return Claim.objects.create(**fields)
        except IntegrityError as e:
            logger.warning(f"Concurrent duplicate claim rejected: {str(e)}")
            raise DuplicateClaim() from e

    def claim_as_resident(self, resident, schedule_id) -> Claim:
        """
        Claim a schedule for the resident's own family.

        Args:
            resident: The acting resident
            schedule_id: DonationSchedule primary key

        Returns:
            Claim: The created claim, status CLAIMED and not yet verified
        """
        if not schedule_id:
            raise ValidationFailed("Schedule ID is required")
        schedule = DonationSchedule.objects.filter(
            pk=schedule_id, barangay_id=resident.barangay_id
        ).first()
        if schedule is None:
            raise NotFound("Schedule not found")

        family = self._family_of(resident)
        self._check_claimable(family, schedule)
        if not is_eligible(resident, schedule):
            raise ValidationFailed("You are not eligible for this donation")

        claim = self._insert(
            family=family,
            schedule=schedule,
            claimed_by=resident,
            barangay_id=family.barangay_id,
            status=ClaimStatus.CLAIMED,
            is_verified=False,
        )
        self.audit.record(
            resident, "RESIDENT_CLAIMED_DONATION", f"Claimed donation: {schedule.title}"
        )
        logger.info(f"Family {family.pk} claimed schedule {schedule.pk}")
        return claim

    def claim_for_resident(
        self, official, barangay, resident_id, schedule_id, family_member_id=None, notes=None
    ) -> Claim:
        """
        Record a claim picked up at the barangay office on a resident's behalf.

        The claim is verified by the official straight away and the resident
        gets a best-effort SMS confirmation.
        """
        if not schedule_id or not resident_id:
            raise ValidationFailed("Schedule ID and Resident ID are required")

        resident = User.objects.filter(
            pk=resident_id, barangay=barangay, role=Role.RESIDENT
        ).first()
        if resident is None:
            raise NotFound("Resident not found")
        family = self._family_of(resident)

        schedule = DonationSchedule.objects.filter(pk=schedule_id, barangay=barangay).first()
        if schedule is None:
            raise NotFound("Schedule not found")
        self._check_claimable(family, schedule)

        claimer_name = resident.get_full_name()
        if family_member_id:
            member = family.members.filter(pk=family_member_id).first()
            if member is None:
                raise ValidationFailed("Selected family member not found")
            claimer_name = member.name

        now = timezone.now()
        note = (
            f"Claimed by {claimer_name} "
            f"(processed by barangay official: {official.get_full_name()})"
        )
        if notes:
            note = f"{note} - {notes}"

        claim = self._insert(
            family=family,
            schedule=schedule,
            claimed_by=resident,
            barangay_id=family.barangay_id,
            status=ClaimStatus.CLAIMED,
            is_verified=True,
            verified_at=now,
            verified_by=official,
            claimed_at_physical=now,
            notes=note,
        )
        self.audit.record(
            official,
            "BARANGAY_CLAIMED_FOR_RESIDENT",
            f"Barangay official claimed donation for resident: {resident.get_full_name()} "
            f"({claimer_name}) - Schedule: {schedule.title}",
        )

        try:
            result = self.notifications.notify_claim_recorded(claim, claimer_name)
            if not result["success"]:
                logger.warning(f"Claim SMS for claim {claim.pk} not sent: {result['errors']}")
        except Exception as e:
            logger.exception(f"Error sending claim SMS notification: {str(e)}")

        claim.claimer_name = claimer_name
        return claim

    def list_for_barangay(self, barangay):
        return (
            Claim.objects.filter(barangay=barangay)
            .select_related("family__head", "schedule", "claimed_by", "verified_by")
            .order_by("-claimed_at")
        )

    def list_for_resident(self, resident):
        return (
            Claim.objects.filter(family__head=resident)
            .select_related("schedule", "family", "claimed_by", "verified_by")
            .order_by("-claimed_at")
        )
