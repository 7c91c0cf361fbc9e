import logging

from django.conf import settings
from django.utils import timezone

from donations.exceptions import ValidationFailed
from donations.models import SMSSettings, User, Role
from donations.services.audit_service import AuditService
from donations.sms.gateway import SMSGatewayClient, SMSGatewayError
from donations.sms.phone import to_international

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "SMS is not enabled or configured"
FAILED_STATE = "Failed"


def format_time_12h(value) -> str:
    """08:00 -> 8:00 AM, 13:30 -> 1:30 PM."""
    hour = value.hour % 12 or 12
    suffix = "PM" if value.hour >= 12 else "AM"
    return f"{hour}:{value.minute:02d} {suffix}"


def format_long_date(value) -> str:
    """2026-10-18 -> Sunday, October 18, 2026."""
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def _result(success, sent=0, failed=0, errors=None, message_id=None, recipients=None) -> dict:
    return {
        "success": success,
        "sent_count": sent,
        "failed_count": failed,
        "errors": errors or [],
        "message_id": message_id,
        "recipients": recipients or [],
    }


class NotificationService:
    """
    Sends SMS notifications to barangay residents.

    The gateway credentials are passed in explicitly; request handlers build
    the service once with from_active_settings() and hand it to the services
    that notify.
    """

    def __init__(self, sms_settings: SMSSettings = None, client: SMSGatewayClient = None):
        self.sms_settings = sms_settings
        self.client = client
        if self.client is None and sms_settings is not None:
            self.client = SMSGatewayClient(sms_settings.username, sms_settings.password)
        self.audit = AuditService()

    @classmethod
    def from_active_settings(cls):
        return cls(SMSSettings.get_active())

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def recipients_for(self, barangay_id, target_classification=None, exclude_claimed_schedule=None):
        """Active residents with a phone number in the barangay."""
        residents = User.objects.filter(
            barangay_id=barangay_id,
            role=Role.RESIDENT,
            is_active=True,
            phone__isnull=False,
        ).exclude(phone="")
        if target_classification:
            residents = residents.filter(family_classification=target_classification)
        if exclude_claimed_schedule is not None:
            residents = residents.exclude(families__claims__schedule=exclude_claimed_schedule)
        return residents.distinct()

    def notify_schedule_created(self, schedule, actor=None) -> dict:
        """Announce a new schedule to its targeted residents."""
        residents = self.recipients_for(schedule.barangay_id, schedule.target_classification)
        message = (
            f"NEW DONATION SCHEDULE!\n\n{schedule.title}\n\n{schedule.description}\n\n"
            f"{self._schedule_block(schedule)}\n\n"
            f"Please check your resident dashboard for more details.\n\n{settings.SMS_SIGNATURE}"
        )
        result = self.dispatch(message, residents)
        if result["success"] and result["sent_count"] and actor is not None:
            self.audit.record(
                actor,
                "SMS_NOTIFICATION_SENT",
                f"SMS notification sent to {result['sent_count']} residents for schedule: {schedule.title}",
            )
        return result

    def send_claim_reminders(self, schedule, actor=None) -> dict:
        """Remind targeted residents whose family has not claimed the schedule yet."""
        residents = self.recipients_for(
            schedule.barangay_id,
            schedule.target_classification,
            exclude_claimed_schedule=schedule,
        )
        message = (
            f"REMINDER: DONATION NOT YET CLAIMED\n\n{schedule.title}\n\n"
            f"{self._schedule_block(schedule)}\n\n"
            f"Please claim your donation at the barangay before the schedule ends.\n\n"
            f"{settings.SMS_SIGNATURE}"
        )
        result = self.dispatch(message, residents)
        if result["success"] and result["sent_count"] and actor is not None:
            self.audit.record(
                actor,
                "SMS_NOTIFICATION_SENT",
                f"SMS reminder sent to {result['sent_count']} residents for schedule: {schedule.title}",
            )
        return result

    def notify_schedule_cancelled(self, schedule, reason: str = None) -> dict:
        residents = self.recipients_for(schedule.barangay_id)
        reason_line = f"Reason: {reason}\n\n" if reason else ""
        message = (
            f"SCHEDULE CANCELLED!\n\n{schedule.title}\n\n"
            f"{self._schedule_block(schedule)}\n\n{reason_line}"
            f"We apologize for any inconvenience. Please check your resident dashboard for updates.\n\n"
            f"{settings.SMS_SIGNATURE}"
        )
        return self.dispatch(message, residents)

    def notify_claim_recorded(self, claim, claimer_name: str) -> dict:
        """Tell the family head that a donation was claimed for their family."""
        resident = claim.claimed_by
        claimed_at = timezone.localtime(claim.claimed_at_physical or claim.claimed_at)
        message = (
            f"DONATION CLAIMED\n\nHi {resident.get_full_name()},\n\n"
            f'{claimer_name} has claimed the donation "{claim.schedule.title}" on '
            f"{format_long_date(claimed_at)} {format_time_12h(claimed_at)}.\n\n"
            f"{settings.SMS_SIGNATURE}"
        )
        return self.dispatch(message, [resident])

    def dispatch(self, message: str, residents) -> dict:
        """
        Send one batched message to the given residents.

        Returns:
            dict: Contains 'success', 'sent_count', 'failed_count', 'errors',
            'message_id' and per-recipient 'recipients'
        """
        if not self.enabled:
            logger.info("SMS is not enabled or configured, skipping notification")
            return _result(False, errors=[NOT_CONFIGURED])

        phone_numbers = []
        for resident in residents:
            number = to_international(resident.phone)
            if number is None:
                logger.warning(f"Skipping invalid phone number for user {resident.pk}")
                continue
            if number not in phone_numbers:
                phone_numbers.append(number)

        if not phone_numbers:
            return _result(True)

        try:
            response = self.client.send(message, phone_numbers)
        except SMSGatewayError as e:
            logger.error(f"SMS sending failed: {str(e)}")
            return _result(False, failed=len(phone_numbers), errors=[str(e)])

        recipients = response.get("recipients") or [
            {"phoneNumber": number, "state": response.get("state", "Pending")}
            for number in phone_numbers
        ]
        failed = [r for r in recipients if r.get("state") == FAILED_STATE]
        errors = [f"{r.get('phoneNumber')}: {r.get('error') or 'failed'}" for r in failed]
        sent = len(recipients) - len(failed)
        logger.info(f"SMS dispatched: {sent} sent, {len(failed)} failed")

        return _result(
            sent > 0,
            sent=sent,
            failed=len(failed),
            errors=errors,
            message_id=response.get("id"),
            recipients=recipients,
        )

    def test_connection(self) -> dict:
        """Check the configured credentials against the gateway."""
        if not self.enabled:
            return {"success": False, "error": NOT_CONFIGURED}
        try:
            self.client.health()
        except SMSGatewayError as e:
            return {"success": False, "error": str(e)}
        return {"success": True, "error": None}

    @staticmethod
    def _schedule_block(schedule) -> str:
        return (
            f"Date: {format_long_date(schedule.date)}\n"
            f"Time: {format_time_12h(schedule.start_time)} - {format_time_12h(schedule.end_time)}\n"
            f"Location: {schedule.location}"
        )


class SMSSettingsService:
    """Admin management of the SMS gateway account."""

    def __init__(self):
        self.audit = AuditService()

    def get(self):
        return SMSSettings.objects.order_by("-created_at").first()

    def save(self, admin, username: str, password: str, is_active: bool = False) -> SMSSettings:
        """Create or overwrite the single SMS settings record."""
        if not username or not password:
            raise ValidationFailed("Username and password are required")

        sms_settings = SMSSettings.objects.order_by("created_at").first() or SMSSettings()
        sms_settings.username = username
        sms_settings.password = password
        sms_settings.is_active = bool(is_active)
        sms_settings.save()

        self.audit.record(
            admin, "SMS_SETTINGS_UPDATED", f"Updated SMS settings for username: {username}"
        )
        return sms_settings

    def test_connection(self, admin, username: str, password: str) -> dict:
        if not username or not password:
            raise ValidationFailed("Username and password are required")

        logger.info(f"Testing SMS connection with username: {username}")
        result = NotificationService(
            client=SMSGatewayClient(username, password)
        ).test_connection()
        self.audit.record(
            admin,
            "SMS_CONNECTION_TESTED",
            f"SMS connection test {'succeeded' if result['success'] else 'failed'}: "
            f"{result['error'] or 'Success'}",
        )
        return result
