from django.db import models


class SMSSettings(models.Model):
    """Credentials for the SMS gateway account."""

    username = models.CharField(max_length=255)
    password = models.CharField(max_length=255)
    is_active = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "sms_settings"
        ordering = ["-created_at"]
        verbose_name = "SMS settings"
        verbose_name_plural = "SMS settings"

    def __str__(self):
        return f"{self.username} ({'active' if self.is_active else 'inactive'})"

    @classmethod
    def get_active(cls):
        return cls.objects.filter(is_active=True).first()
