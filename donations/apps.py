from django.apps import AppConfig


class DonationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "donations"

    def ready(self):
        """Import signal handlers and other app initialization code."""
        import donations.signals  # noqa
