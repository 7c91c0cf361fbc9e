from django.conf import settings
from django.db import models

SYSTEM_ACTOR = "system"


class AuditLog(models.Model):
    """Append-only trail of state-changing actions."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="audit_logs",
        blank=True,
        null=True,
    )
    actor = models.CharField(
        max_length=64, default=SYSTEM_ACTOR, help_text="User id, or 'system' for automated actions"
    )
    action = models.CharField(max_length=100, db_index=True)
    details = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "audit_logs"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.action} by {self.actor}"
