"""
Django management command to snapshot the SQLite database.

Usage:
    python manage.py create_backup [--name before-upgrade]
"""

from django.core.management.base import BaseCommand, CommandError

from donations.exceptions import DonationError
from donations.services.backup_service import BackupService, backup_size_label


class Command(BaseCommand):
    help = "Copy the database file into BACKUP_DIR"

    def add_arguments(self, parser):
        parser.add_argument("--name", help="Backup name without extension (default: timestamp)")

    def handle(self, *args, **options):
        try:
            backup = BackupService().create(None, options.get("name"))
        except DonationError as e:
            raise CommandError(e.message) from e
        self.stdout.write(
            self.style.SUCCESS(
                f"Backup {backup['filename']} created ({backup_size_label(backup['size'])})"
            )
        )
