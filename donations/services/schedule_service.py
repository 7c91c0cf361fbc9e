import logging

from django.db import transaction
from django.db.models import Count, Prefetch
from django.utils import timezone

from donations.exceptions import NotFound, ValidationFailed
from donations.models import (
    Claim,
    DonationSchedule,
    FamilyClassification,
    ScheduleStatus,
    ScheduleType,
)
from donations.services.audit_service import AuditService
from donations.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "date", "start_time", "end_time", "location")
STATUS_CHANGES = (ScheduleStatus.DISTRIBUTED, ScheduleStatus.CANCELLED)
IN_SCHOOL_ATTAINMENTS = (
    "ELEMENTARY_LEVEL",
    "HIGH_SCHOOL_LEVEL",
    "SENIOR_HIGH_SCHOOL",
    "COLLEGE_LEVEL",
)
PAST_DATE_MESSAGE = "Schedule date cannot be in the past. Please select today or a future date."


def distribute_past_schedules(barangay=None, actor=None) -> int:
    """
    Mark SCHEDULED schedules dated before today as DISTRIBUTED.

    Safe to call repeatedly: already distributed schedules are not touched and
    the audit entry is only written when rows changed.

    Args:
        barangay: Limit the transition to one barangay (all barangays when None)
        actor: User to attribute the audit entry to, None for the system

    Returns:
        int: Number of schedules transitioned
    """
    past = DonationSchedule.objects.filter(
        status=ScheduleStatus.SCHEDULED, date__lt=timezone.localdate()
    )
    if barangay is not None:
        past = past.filter(barangay=barangay)

    updated = past.update(status=ScheduleStatus.DISTRIBUTED, updated_at=timezone.now())
    if updated:
        AuditService().record(
            actor,
            "SCHEDULE_AUTO_UPDATED",
            f"Auto-updated {updated} past schedules from SCHEDULED to DISTRIBUTED",
        )
        logger.info(f"Auto-updated {updated} past schedules to DISTRIBUTED")
    return updated


def is_eligible(resident, schedule) -> bool:
    """Whether the resident matches the schedule's classification and type."""
    if schedule.target_classification and (
        resident.family_classification != schedule.target_classification
    ):
        return False

    if schedule.type == ScheduleType.EDUCATION:
        return bool(resident.school_id_path) or (
            resident.educational_attainment in IN_SCHOOL_ATTAINMENTS
        )
    if schedule.type == ScheduleType.WHEELCHAIR:
        return bool(resident.pwd_id_path or resident.ip_certificate_path)
    if schedule.type == ScheduleType.PWD:
        return bool(resident.pwd_id_path)
    if schedule.type == ScheduleType.IP:
        return bool(resident.ip_certificate_path)
    if schedule.type == ScheduleType.SENIOR_CITIZEN:
        return bool(resident.senior_citizen_id_path)
    if schedule.type == ScheduleType.SOLO_PARENT:
        return bool(resident.solo_parent_id_path)
    return True


class ScheduleService:
    """Donation schedules of a barangay."""

    def __init__(self, notifications: NotificationService = None):
        self.notifications = notifications or NotificationService()
        self.audit = AuditService()

    def _validate(self, data: dict, require_all=True):
        if require_all and any(not data.get(field) for field in REQUIRED_FIELDS):
            raise ValidationFailed("All fields are required")
        if data.get("date") and data["date"] < timezone.localdate():
            raise ValidationFailed(PAST_DATE_MESSAGE)
        if data.get("start_time") and data.get("end_time"):
            if data["end_time"] <= data["start_time"]:
                raise ValidationFailed("End time must be after start time")

        classification = data.get("target_classification")
        if classification in ("", "all"):
            data["target_classification"] = None
        elif classification and classification not in FamilyClassification.values:
            raise ValidationFailed("Invalid target classification")

        schedule_type = data.get("type")
        if schedule_type and schedule_type not in ScheduleType.values:
            raise ValidationFailed("Invalid schedule type")

    def _with_claims(self, queryset):
        return queryset.annotate(claim_count=Count("claims")).prefetch_related(
            Prefetch(
                "claims",
                queryset=Claim.objects.select_related("family__head", "claimed_by"),
            )
        )

    def create(self, official, barangay, data: dict) -> DonationSchedule:
        """
        Create a schedule and announce it to the targeted residents.

        The announcement is best effort: an SMS failure is logged and the
        schedule is still created.
        """
        self._validate(data)
        schedule = DonationSchedule.objects.create(
            barangay=barangay,
            title=data["title"],
            description=data["description"],
            date=data["date"],
            start_time=data["start_time"],
            end_time=data["end_time"],
            location=data["location"],
            max_recipients=data.get("max_recipients"),
            target_classification=data.get("target_classification"),
            type=data.get("type") or ScheduleType.GENERAL,
            status=ScheduleStatus.SCHEDULED,
        )
        self.audit.record(official, "SCHEDULE_CREATED", f"Created donation schedule: {schedule.title}")

        try:
            result = self.notifications.notify_schedule_created(schedule, actor=official)
            if not result["success"]:
                logger.error(f"SMS announcement for schedule {schedule.pk} failed: {result['errors']}")
        except Exception as e:
            logger.exception(f"Error sending SMS announcement for schedule {schedule.pk}: {str(e)}")
        return schedule

    def list_for_barangay(self, official, barangay):
        """All schedules of the barangay, newest date first, after past ones are distributed."""
        distribute_past_schedules(barangay, actor=official)
        return self._with_claims(
            DonationSchedule.objects.filter(barangay=barangay)
        ).order_by("-date", "-start_time")

    def get(self, barangay, schedule_id) -> DonationSchedule:
        schedule = self._with_claims(
            DonationSchedule.objects.filter(pk=schedule_id, barangay=barangay)
        ).first()
        if schedule is None:
            raise NotFound("Schedule not found")
        return schedule

    def update(self, official, barangay, schedule_id, data: dict) -> DonationSchedule:
        """
        Update a schedule.

        A body carrying only a status is a status change (DISTRIBUTED or
        CANCELLED); anything else is a full update and is validated like a
        new schedule. Cancelling notifies the barangay's residents.
        """
        schedule = self.get(barangay, schedule_id)
        status_only = bool(data.get("status")) and not any(data.get(f) for f in REQUIRED_FIELDS)

        if status_only:
            if data["status"] not in STATUS_CHANGES:
                raise ValidationFailed("Status can only be changed to DISTRIBUTED or CANCELLED")
            schedule.status = data["status"]
            schedule.save(update_fields=["status", "updated_at"])
            self.audit.record(
                official, "SCHEDULE_STATUS_UPDATED", f"Updated schedule status to: {schedule.status}"
            )
            if schedule.status == ScheduleStatus.CANCELLED:
                self._notify_cancelled(schedule)
            return schedule

        self._validate(data)
        new_status = data.get("status")
        if new_status and new_status != schedule.status and new_status not in STATUS_CHANGES:
            raise ValidationFailed("Status can only be changed to DISTRIBUTED or CANCELLED")
        for field in REQUIRED_FIELDS:
            setattr(schedule, field, data[field])
        schedule.max_recipients = data.get("max_recipients")
        schedule.target_classification = data.get("target_classification")
        schedule.type = data.get("type") or ScheduleType.GENERAL
        if data.get("status"):
            schedule.status = data["status"]
        schedule.save()
        self.audit.record(official, "SCHEDULE_UPDATED", f"Updated donation schedule: {schedule.title}")
        return schedule

    def delete(self, official, barangay, schedule_id) -> None:
        schedule = self.get(barangay, schedule_id)
        if schedule.claim_count:
            raise ValidationFailed(
                "Cannot delete schedule with existing claims. Change status to CANCELLED instead."
            )

        self._notify_cancelled(schedule)
        title = schedule.title
        with transaction.atomic():
            schedule.delete()
        self.audit.record(official, "SCHEDULE_DELETED", f"Deleted donation schedule: {title}")

    def send_reminders(self, official, barangay, schedule_id) -> dict:
        """Remind residents who have not claimed yet. Returns the notification result."""
        if not schedule_id:
            raise ValidationFailed("Schedule ID is required")
        schedule = self.get(barangay, schedule_id)
        result = self.notifications.send_claim_reminders(schedule, actor=official)
        self.audit.record(
            official, "REMINDER_SENT", f"Sent reminder notifications for schedule: {schedule.title}"
        )
        return result

    def list_for_resident(self, resident):
        """
        Open schedules of the resident's barangay that the resident is eligible for.

        Each returned schedule carries a has_claimed attribute.
        """
        if not resident.barangay_id:
            raise ValidationFailed("User not assigned to a barangay")

        schedules = DonationSchedule.objects.filter(
            barangay_id=resident.barangay_id, status=ScheduleStatus.SCHEDULED
        ).order_by("date", "start_time")
        claimed = set(
            Claim.objects.filter(family__head=resident).values_list("schedule_id", flat=True)
        )

        eligible = []
        for schedule in schedules:
            if not is_eligible(resident, schedule):
                continue
            schedule.has_claimed = schedule.pk in claimed
            eligible.append(schedule)
        return eligible

    def _notify_cancelled(self, schedule):
        try:
            result = self.notifications.notify_schedule_cancelled(
                schedule, "Schedule has been cancelled"
            )
            if result["success"]:
                logger.info(f"Cancellation SMS sent to {result['sent_count']} residents")
            else:
                logger.error(f"Cancellation SMS for schedule {schedule.pk} failed: {result['errors']}")
        except Exception as e:
            logger.exception(f"Error sending cancellation SMS for schedule {schedule.pk}: {str(e)}")
