"""
Django management command that marks past schedules as distributed.

Schedules still SCHEDULED after their date are moved to DISTRIBUTED. Listing
schedules in the barangay dashboard does the same for one barangay; this
command covers every barangay and is meant to run daily from cron.

Usage:
    python manage.py distribute_past_schedules
"""

from django.core.management.base import BaseCommand

from donations.services.schedule_service import distribute_past_schedules


class Command(BaseCommand):
    help = "Mark SCHEDULED donation schedules dated before today as DISTRIBUTED"

    def handle(self, *args, **options):
        updated = distribute_past_schedules()
        self.stdout.write(self.style.SUCCESS(f"{updated} schedules marked as DISTRIBUTED"))
