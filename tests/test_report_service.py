"""
Tests for dashboard counters and the donation report.
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from donations.exceptions import ValidationFailed
from donations.models import Claim, ClaimStatus
from donations.services.audit_service import AuditService
from donations.services.report_service import ReportService


@pytest.fixture
def claim(resident, schedule, barangay):
    return Claim.objects.create(
        family=resident.family,
        schedule=schedule,
        claimed_by=resident,
        barangay=barangay,
        status=ClaimStatus.CLAIMED,
        notes="Picked up at the hall",
    )


@pytest.mark.django_db
class TestReportService:
    """Tests for ReportService."""

    def setup_method(self):
        self.service = ReportService()

    def test_system_stats(self, admin_user, official, resident, schedule, create_schedule, barangay, claim):
        create_schedule(barangay, date=timezone.localdate() + timedelta(days=2))

        stats = self.service.system_stats()

        assert stats["total_users"] == 3
        assert stats["total_barangays"] == 1
        assert stats["total_schedules"] == 2
        assert stats["total_claims"] == 1
        assert stats["upcoming_schedules"] == 1

    def test_barangay_stats(self, barangay, other_barangay, claim):
        stats = {row["code"]: row for row in self.service.barangay_stats()}

        assert stats["POB"]["total_claims"] == 1
        assert stats["POB"]["total_residents"] == 1
        assert stats["SJ"]["total_schedules"] == 0

    def test_recent_activity_newest_first(self, admin_user):
        audit = AuditService()
        for number in range(25):
            audit.record(admin_user, "USER_UPDATED", f"update {number}")

        activity = list(self.service.recent_activity())

        assert len(activity) == 20
        assert activity[0].details == "update 24"

    def test_donation_report(self, claim, barangay):
        report = self.service.donation_report(barangay_id=barangay.pk)

        assert report["title"] == "Donation Distribution Report"
        assert report["summary"]["total_claims"] == 1
        assert report["summary"]["total_families"] == 1
        assert report["summary"]["report_period"] == "All Time"
        row = report["rows"][0]
        assert row["family_head"] == "Juan Dela Cruz"
        assert row["barangay"] == "Poblacion"
        assert row["notes"] == "Picked up at the hall"

    def test_donation_report_date_range(self, claim):
        tomorrow = (timezone.localdate() + timedelta(days=1)).isoformat()

        report = self.service.donation_report(start_date=tomorrow, end_date=tomorrow)

        assert report["rows"] == []
        assert report["summary"]["report_period"] == f"{tomorrow} to {tomorrow}"

    def test_donation_report_invalid_date(self, db):
        with pytest.raises(ValidationFailed, match="Invalid startDate"):
            self.service.donation_report(start_date="18/10/2026")

    def test_barangay_summary(self, barangay, resident, create_resident, claim):
        create_resident(barangay, is_active=False)

        summary = self.service.barangay_summary(barangay)

        assert summary["total_residents"] == 2
        assert summary["active_residents"] == 1
        assert summary["pending_residents"] == 1
        assert summary["total_families"] == 2
        assert summary["upcoming_schedules"] == 1
        assert summary["claims_this_month"] == 1
