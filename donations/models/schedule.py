from django.db import models
from django.utils import timezone


class ScheduleStatus(models.TextChoices):
    SCHEDULED = "SCHEDULED", "Scheduled"
    DISTRIBUTED = "DISTRIBUTED", "Distributed"
    CANCELLED = "CANCELLED", "Cancelled"


class ScheduleType(models.TextChoices):
    GENERAL = "GENERAL", "General"
    EDUCATION = "EDUCATION", "Education"
    WHEELCHAIR = "WHEELCHAIR", "Wheelchair"
    PWD = "PWD", "Persons with Disability"
    IP = "IP", "Indigenous People"
    SENIOR_CITIZEN = "SENIOR_CITIZEN", "Senior Citizen"
    SOLO_PARENT = "SOLO_PARENT", "Solo Parent"


class DonationSchedule(models.Model):
    """A donation distribution event organised by a barangay."""

    barangay = models.ForeignKey(
        "donations.Barangay", on_delete=models.PROTECT, related_name="schedules"
    )
    title = models.CharField(max_length=255)
    description = models.TextField()
    date = models.DateField(db_index=True)
    start_time = models.TimeField()
    end_time = models.TimeField()
    location = models.CharField(max_length=255)
    max_recipients = models.PositiveIntegerField(blank=True, null=True)
    target_classification = models.CharField(
        max_length=20,
        blank=True,
        null=True,
        help_text="Only residents with this family classification are targeted",
    )
    type = models.CharField(
        max_length=20, choices=ScheduleType.choices, default=ScheduleType.GENERAL
    )
    status = models.CharField(
        max_length=20,
        choices=ScheduleStatus.choices,
        default=ScheduleStatus.SCHEDULED,
        db_index=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "donation_schedules"
        ordering = ["-date"]
        indexes = [
            models.Index(fields=["barangay", "status", "date"]),
        ]

    def __str__(self):
        return f"{self.title} on {self.date} ({self.status})"

    def effective_status(self, today=None):
        """Status as it should be read today, without touching the database."""
        today = today or timezone.localdate()
        if self.status == ScheduleStatus.SCHEDULED and self.date < today:
            return ScheduleStatus.DISTRIBUTED
        return self.status
