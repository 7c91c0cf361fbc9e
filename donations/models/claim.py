from django.conf import settings
from django.db import models


class ClaimStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    VERIFIED = "VERIFIED", "Verified"
    CLAIMED = "CLAIMED", "Claimed"
    REJECTED = "REJECTED", "Rejected"


class Claim(models.Model):
    """
    Record that a family took a schedule's distribution.
    A family can claim a given schedule at most once.
    """

    family = models.ForeignKey(
        "donations.Family", on_delete=models.PROTECT, related_name="claims"
    )
    schedule = models.ForeignKey(
        "donations.DonationSchedule", on_delete=models.PROTECT, related_name="claims"
    )
    claimed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="claims"
    )
    barangay = models.ForeignKey(
        "donations.Barangay", on_delete=models.PROTECT, related_name="claims"
    )
    status = models.CharField(
        max_length=20, choices=ClaimStatus.choices, default=ClaimStatus.PENDING
    )
    is_verified = models.BooleanField(default=False)
    verified_at = models.DateTimeField(blank=True, null=True)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="verified_claims",
        blank=True,
        null=True,
    )
    claimed_at = models.DateTimeField(auto_now_add=True, db_index=True)
    claimed_at_physical = models.DateTimeField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    class Meta:
        db_table = "claims"
        ordering = ["-claimed_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["family", "schedule"], name="unique_family_schedule_claim"
            ),
        ]

    def __str__(self):
        return f"Claim {self.pk}: family {self.family_id} / schedule {self.schedule_id}"
