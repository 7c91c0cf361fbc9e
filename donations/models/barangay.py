from django.conf import settings
from django.db import models


class Barangay(models.Model):
    """Local-government unit; partitions residents, schedules and claims."""

    name = models.CharField(max_length=255)
    code = models.CharField(max_length=50, unique=True, db_index=True)
    description = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    manager = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="managed_barangay",
        blank=True,
        null=True,
        help_text="Barangay official managing this barangay",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "barangays"
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.code})"
