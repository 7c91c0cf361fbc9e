import logging

from django.db.models import Count, Q
from django.utils import timezone
from django.utils.dateparse import parse_date

from donations.exceptions import ValidationFailed
from donations.models import (
    AuditLog,
    Barangay,
    Claim,
    DonationSchedule,
    Family,
    Role,
    ScheduleStatus,
    User,
)

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 20
REPORT_TITLE = "Donation Distribution Report"


def _parse_report_date(value, name):
    if not value:
        return None
    try:
        parsed = parse_date(value)
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationFailed(f"Invalid {name}, expected YYYY-MM-DD")
    return parsed


class ReportService:
    """Dashboard counters and the donation distribution report."""

    def system_stats(self) -> dict:
        today = timezone.localdate()
        return {
            "total_users": User.objects.count(),
            "active_users": User.objects.filter(is_active=True).count(),
            "total_barangays": Barangay.objects.count(),
            "total_schedules": DonationSchedule.objects.count(),
            "total_claims": Claim.objects.count(),
            "upcoming_schedules": DonationSchedule.objects.filter(
                date__gt=today, status=ScheduleStatus.SCHEDULED
            ).count(),
        }

    def barangay_stats(self) -> list:
        barangays = Barangay.objects.annotate(
            total_schedules=Count("schedules", distinct=True),
            total_claims=Count("claims", distinct=True),
            total_residents=Count("users", filter=Q(users__role=Role.RESIDENT), distinct=True),
        ).order_by("name")
        return [
            {
                "id": barangay.pk,
                "name": barangay.name,
                "code": barangay.code,
                "total_schedules": barangay.total_schedules,
                "total_claims": barangay.total_claims,
                "total_residents": barangay.total_residents,
                "is_active": barangay.is_active,
            }
            for barangay in barangays
        ]

    def recent_activity(self, limit=RECENT_ACTIVITY_LIMIT):
        return AuditLog.objects.select_related("user").order_by("-created_at", "-pk")[:limit]

    def donation_report(self, barangay_id=None, start_date=None, end_date=None) -> dict:
        """
        Claims report, newest first.

        Args:
            barangay_id: Optional barangay filter
            start_date: Optional first claim day (YYYY-MM-DD), inclusive
            end_date: Optional last claim day (YYYY-MM-DD), inclusive

        Returns:
            dict: Contains 'title', 'date', 'rows' and 'summary'
        """
        start = _parse_report_date(start_date, "startDate")
        end = _parse_report_date(end_date, "endDate")

        claims = Claim.objects.select_related(
            "schedule", "family__head", "claimed_by", "barangay"
        ).order_by("-claimed_at")
        schedules = DonationSchedule.objects.all()
        families = Family.objects.all()
        if barangay_id:
            claims = claims.filter(barangay_id=barangay_id)
            schedules = schedules.filter(barangay_id=barangay_id)
            families = families.filter(barangay_id=barangay_id)
        if start:
            claims = claims.filter(claimed_at__date__gte=start)
        if end:
            claims = claims.filter(claimed_at__date__lte=end)

        rows = [
            {
                "schedule_title": claim.schedule.title,
                "family_head": claim.family.head.get_full_name(),
                "claimed_by": claim.claimed_by.get_full_name(),
                "barangay": claim.barangay.name,
                "claim_date": timezone.localtime(claim.claimed_at).date().isoformat(),
                "status": claim.status,
                "notes": claim.notes or "",
            }
            for claim in claims
        ]
        period = f"{start_date} to {end_date}" if start and end else "All Time"
        logger.info(f"Donation report generated with {len(rows)} claims ({period})")

        return {
            "title": REPORT_TITLE,
            "date": timezone.localdate().isoformat(),
            "rows": rows,
            "summary": {
                "total_claims": len(rows),
                "total_schedules": schedules.count(),
                "total_families": families.count(),
                "report_period": period,
            },
        }

    def barangay_summary(self, barangay) -> dict:
        """Counters for a barangay official's dashboard."""
        today = timezone.localdate()
        residents = User.objects.filter(barangay=barangay, role=Role.RESIDENT)
        schedules = DonationSchedule.objects.filter(barangay=barangay)
        claims = Claim.objects.filter(barangay=barangay)
        return {
            "barangay": {"id": barangay.pk, "name": barangay.name, "code": barangay.code},
            "total_residents": residents.count(),
            "active_residents": residents.filter(is_active=True).count(),
            "pending_residents": residents.filter(is_active=False).count(),
            "total_families": Family.objects.filter(barangay=barangay).count(),
            "total_schedules": schedules.count(),
            "upcoming_schedules": schedules.filter(
                date__gte=today, status=ScheduleStatus.SCHEDULED
            ).count(),
            "total_claims": claims.count(),
            "claims_this_month": claims.filter(
                claimed_at__year=today.year, claimed_at__month=today.month
            ).count(),
        }
