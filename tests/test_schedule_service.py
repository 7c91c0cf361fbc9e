"""
Tests for donation schedules, eligibility and the past-schedule distribution job.
"""

from datetime import time, timedelta

import pytest
from django.core.management import call_command
from django.utils import timezone

from donations.exceptions import NotFound, ValidationFailed
from donations.models import (
    AuditLog,
    Claim,
    DonationSchedule,
    FamilyClassification,
    ScheduleStatus,
    ScheduleType,
)
from donations.services.schedule_service import (
    PAST_DATE_MESSAGE,
    ScheduleService,
    distribute_past_schedules,
    is_eligible,
)


def schedule_data(**overrides):
    data = {
        "title": "Rice distribution",
        "description": "5kg of rice per family",
        "date": timezone.localdate() + timedelta(days=3),
        "start_time": time(8, 0),
        "end_time": time(12, 0),
        "location": "Barangay Hall",
    }
    data.update(overrides)
    return data


@pytest.fixture
def notifications(mocker):
    service = mocker.Mock()
    service.notify_schedule_created.return_value = {"success": True, "sent_count": 1, "errors": []}
    service.notify_schedule_cancelled.return_value = {"success": True, "sent_count": 1, "errors": []}
    service.send_claim_reminders.return_value = {"success": True, "sent_count": 2, "errors": []}
    return service


@pytest.mark.django_db
class TestCreateSchedule:
    """Tests for ScheduleService.create."""

    def test_create_schedule(self, official, barangay, notifications):
        schedule = ScheduleService(notifications).create(official, barangay, schedule_data())

        assert schedule.status == ScheduleStatus.SCHEDULED
        assert schedule.type == ScheduleType.GENERAL
        assert schedule.barangay == barangay
        notifications.notify_schedule_created.assert_called_once_with(schedule, actor=official)
        assert AuditLog.objects.filter(action="SCHEDULE_CREATED", user=official).exists()

    def test_today_is_allowed(self, official, barangay, notifications):
        schedule = ScheduleService(notifications).create(
            official, barangay, schedule_data(date=timezone.localdate())
        )

        assert schedule.date == timezone.localdate()

    def test_past_date_rejected(self, official, barangay, notifications):
        with pytest.raises(ValidationFailed, match="cannot be in the past"):
            ScheduleService(notifications).create(
                official, barangay, schedule_data(date=timezone.localdate() - timedelta(days=1))
            )

        assert PAST_DATE_MESSAGE.startswith("Schedule date cannot be in the past")
        assert DonationSchedule.objects.count() == 0

    def test_end_before_start_rejected(self, official, barangay, notifications):
        with pytest.raises(ValidationFailed, match="End time must be after start time"):
            ScheduleService(notifications).create(
                official, barangay, schedule_data(start_time=time(13, 0), end_time=time(9, 0))
            )

    def test_missing_field_rejected(self, official, barangay, notifications):
        with pytest.raises(ValidationFailed, match="All fields are required"):
            ScheduleService(notifications).create(official, barangay, schedule_data(location=""))

    def test_all_classification_means_everyone(self, official, barangay, notifications):
        schedule = ScheduleService(notifications).create(
            official, barangay, schedule_data(target_classification="all")
        )

        assert schedule.target_classification is None

    def test_sms_failure_does_not_block_creation(self, official, barangay, notifications):
        notifications.notify_schedule_created.side_effect = RuntimeError("gateway down")

        schedule = ScheduleService(notifications).create(official, barangay, schedule_data())

        assert DonationSchedule.objects.filter(pk=schedule.pk).exists()


@pytest.mark.django_db
class TestUpdateSchedule:
    """Tests for status changes, full updates and deletion."""

    def test_status_only_cancel_notifies(self, official, barangay, schedule, notifications):
        updated = ScheduleService(notifications).update(
            official, barangay, schedule.pk, {"status": ScheduleStatus.CANCELLED}
        )

        assert updated.status == ScheduleStatus.CANCELLED
        notifications.notify_schedule_cancelled.assert_called_once()
        assert AuditLog.objects.filter(action="SCHEDULE_STATUS_UPDATED").exists()

    def test_invalid_status_rejected(self, official, barangay, schedule, notifications):
        with pytest.raises(ValidationFailed, match="DISTRIBUTED or CANCELLED"):
            ScheduleService(notifications).update(official, barangay, schedule.pk, {"status": "DONE"})

    @pytest.mark.parametrize("closed", [ScheduleStatus.CANCELLED, ScheduleStatus.DISTRIBUTED])
    def test_closed_schedule_cannot_be_reopened(
        self, official, barangay, create_schedule, notifications, closed
    ):
        closed_schedule = create_schedule(barangay, status=closed)

        with pytest.raises(ValidationFailed, match="DISTRIBUTED or CANCELLED"):
            ScheduleService(notifications).update(
                official, barangay, closed_schedule.pk, {"status": ScheduleStatus.SCHEDULED}
            )

        closed_schedule.refresh_from_db()
        assert closed_schedule.status == closed
        assert not AuditLog.objects.filter(action="SCHEDULE_STATUS_UPDATED").exists()

    def test_full_update_cannot_reopen(self, official, barangay, create_schedule, notifications):
        cancelled = create_schedule(barangay, status=ScheduleStatus.CANCELLED)

        with pytest.raises(ValidationFailed, match="DISTRIBUTED or CANCELLED"):
            ScheduleService(notifications).update(
                official, barangay, cancelled.pk, schedule_data(status=ScheduleStatus.SCHEDULED)
            )

        cancelled.refresh_from_db()
        assert cancelled.status == ScheduleStatus.CANCELLED

    def test_full_update_is_validated(self, official, barangay, schedule, notifications):
        updated = ScheduleService(notifications).update(
            official, barangay, schedule.pk, schedule_data(title="Canned goods", max_recipients=50)
        )

        assert updated.title == "Canned goods"
        assert updated.max_recipients == 50
        assert AuditLog.objects.filter(action="SCHEDULE_UPDATED").exists()
        notifications.notify_schedule_cancelled.assert_not_called()

    def test_update_other_barangay_schedule_not_found(
        self, official, barangay, other_barangay, create_schedule, notifications
    ):
        foreign = create_schedule(other_barangay)

        with pytest.raises(NotFound, match="Schedule not found"):
            ScheduleService(notifications).update(
                official, barangay, foreign.pk, {"status": ScheduleStatus.CANCELLED}
            )

    def test_delete_without_claims(self, official, barangay, schedule, notifications):
        ScheduleService(notifications).delete(official, barangay, schedule.pk)

        assert not DonationSchedule.objects.filter(pk=schedule.pk).exists()
        notifications.notify_schedule_cancelled.assert_called_once()
        assert AuditLog.objects.filter(action="SCHEDULE_DELETED").exists()

    def test_delete_with_claims_refused(self, official, barangay, schedule, resident, notifications):
        Claim.objects.create(
            family=resident.family, schedule=schedule, claimed_by=resident, barangay=barangay
        )

        with pytest.raises(ValidationFailed, match="Cannot delete schedule with existing claims"):
            ScheduleService(notifications).delete(official, barangay, schedule.pk)

        assert DonationSchedule.objects.filter(pk=schedule.pk).exists()

    def test_send_reminders(self, official, barangay, schedule, notifications):
        result = ScheduleService(notifications).send_reminders(official, barangay, schedule.pk)

        assert result["sent_count"] == 2
        notifications.send_claim_reminders.assert_called_once()
        assert AuditLog.objects.filter(action="REMINDER_SENT").exists()

    def test_send_reminders_requires_schedule(self, official, barangay, notifications):
        with pytest.raises(ValidationFailed, match="Schedule ID is required"):
            ScheduleService(notifications).send_reminders(official, barangay, None)


@pytest.mark.django_db
class TestDistributePastSchedules:
    """Tests for the SCHEDULED -> DISTRIBUTED transition of past schedules."""

    def test_transitions_only_past_scheduled(self, barangay, create_schedule, past_schedule, schedule):
        cancelled = create_schedule(
            barangay, date=timezone.localdate() - timedelta(days=2), status=ScheduleStatus.CANCELLED
        )

        assert distribute_past_schedules() == 1

        past_schedule.refresh_from_db()
        schedule.refresh_from_db()
        cancelled.refresh_from_db()
        assert past_schedule.status == ScheduleStatus.DISTRIBUTED
        assert schedule.status == ScheduleStatus.SCHEDULED
        assert cancelled.status == ScheduleStatus.CANCELLED

    def test_is_idempotent(self, past_schedule):
        distribute_past_schedules()
        assert distribute_past_schedules() == 0

        assert AuditLog.objects.filter(action="SCHEDULE_AUTO_UPDATED").count() == 1
        assert AuditLog.objects.get(action="SCHEDULE_AUTO_UPDATED").actor == "system"

    def test_limited_to_barangay(self, other_barangay, create_schedule, past_schedule):
        foreign = create_schedule(other_barangay, date=timezone.localdate() - timedelta(days=1))

        distribute_past_schedules(other_barangay)

        past_schedule.refresh_from_db()
        foreign.refresh_from_db()
        assert past_schedule.status == ScheduleStatus.SCHEDULED
        assert foreign.status == ScheduleStatus.DISTRIBUTED

    def test_effective_status_reads_past_as_distributed(self, past_schedule, schedule):
        assert past_schedule.effective_status() == ScheduleStatus.DISTRIBUTED
        assert schedule.effective_status() == ScheduleStatus.SCHEDULED

    def test_listing_distributes_first(self, official, barangay, past_schedule):
        schedules = list(ScheduleService().list_for_barangay(official, barangay))

        assert schedules[0].status == ScheduleStatus.DISTRIBUTED
        assert schedules[0].claim_count == 0

    def test_management_command(self, past_schedule):
        call_command("distribute_past_schedules")

        past_schedule.refresh_from_db()
        assert past_schedule.status == ScheduleStatus.DISTRIBUTED


@pytest.mark.django_db
class TestEligibility:
    """Tests for is_eligible and the resident schedule listing."""

    @pytest.mark.parametrize(
        "schedule_type, profile, expected",
        [
            (ScheduleType.GENERAL, {}, True),
            (ScheduleType.EDUCATION, {}, False),
            (ScheduleType.EDUCATION, {"school_id_path": "/uploads/ids/school.png"}, True),
            (ScheduleType.EDUCATION, {"educational_attainment": "COLLEGE_LEVEL"}, True),
            (ScheduleType.EDUCATION, {"educational_attainment": "COLLEGE_GRADUATE"}, False),
            (ScheduleType.WHEELCHAIR, {"ip_certificate_path": "/uploads/certificates/ip.pdf"}, True),
            (ScheduleType.PWD, {"ip_certificate_path": "/uploads/certificates/ip.pdf"}, False),
            (ScheduleType.PWD, {"pwd_id_path": "/uploads/ids/pwd.png"}, True),
            (ScheduleType.SENIOR_CITIZEN, {"senior_citizen_id_path": "/uploads/ids/sc.png"}, True),
            (ScheduleType.SOLO_PARENT, {}, False),
        ],
    )
    def test_type_requirements(
        self, create_resident, barangay, create_schedule, schedule_type, profile, expected
    ):
        resident = create_resident(barangay, **profile)
        schedule = create_schedule(barangay, type=schedule_type)

        assert is_eligible(resident, schedule) is expected

    def test_target_classification(self, create_resident, barangay, create_schedule):
        schedule = create_schedule(barangay, target_classification=FamilyClassification.LOW_CLASS)
        poor = create_resident(barangay, family_classification=FamilyClassification.LOW_CLASS)
        middle = create_resident(barangay, family_classification=FamilyClassification.MIDDLE_CLASS)

        assert is_eligible(poor, schedule) is True
        assert is_eligible(middle, schedule) is False

    def test_resident_listing_marks_claimed(
        self, resident, barangay, other_barangay, create_schedule, schedule
    ):
        later = create_schedule(barangay, title="Later", date=timezone.localdate() + timedelta(days=5))
        create_schedule(barangay, title="Cancelled", status=ScheduleStatus.CANCELLED)
        create_schedule(barangay, title="Solo parents", type=ScheduleType.SOLO_PARENT)
        create_schedule(other_barangay, title="Elsewhere")
        Claim.objects.create(
            family=resident.family, schedule=schedule, claimed_by=resident, barangay=barangay
        )

        schedules = ScheduleService().list_for_resident(resident)

        assert [s.title for s in schedules] == [schedule.title, later.title]
        assert [s.has_claimed for s in schedules] == [True, False]
