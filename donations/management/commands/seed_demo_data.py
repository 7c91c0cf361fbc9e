"""
Django management command to load demo data.

Creates a set of barangays, an administrator, one official per barangay and
a few active residents (families are created by the resident post_save
signal). Existing records with the same email or code are left alone.

Usage:
    python manage.py seed_demo_data [--residents-per-barangay 3]
"""

from datetime import date

from django.core.management.base import BaseCommand
from django.db import transaction

from donations.models import Barangay, FamilyClassification, Role, User

BARANGAYS = [
    ("Barangay San Antonio", "SA001", "A peaceful community in the heart of the city"),
    ("Barangay San Jose", "SJ002", "A vibrant community with strong social bonds"),
    ("Barangay Santa Maria", "SM003", "A growing community focused on development"),
    ("Barangay San Pedro", "SP004", "A coastal community with fishing traditions"),
]
OFFICIAL_NAMES = [("Maria", "Santos"), ("Juan", "Cruz"), ("Carmen", "Reyes"), ("Pedro", "Lopez")]
RESIDENT_NAMES = [
    ("Ana", "Garcia"),
    ("Jose", "Torres"),
    ("Elena", "Morales"),
    ("Miguel", "Gonzalez"),
    ("Rosa", "Hernandez"),
    ("Carlos", "Martinez"),
]
CLASSIFICATIONS = [
    FamilyClassification.LOW_CLASS,
    FamilyClassification.MIDDLE_CLASS,
    FamilyClassification.UNCLASSIFIED,
]


class Command(BaseCommand):
    help = "Load demo barangays, an admin, barangay officials and residents"

    def add_arguments(self, parser):
        parser.add_argument("--residents-per-barangay", type=int, default=3)

    @transaction.atomic
    def handle(self, *args, **options):
        per_barangay = options["residents_per_barangay"]

        if not User.objects.filter(email="admin@cbds.com").exists():
            User.objects.create_superuser(
                email="admin@cbds.com",
                password="admin123",
                first_name="System",
                last_name="Administrator",
                phone="09123456789",
            )
            self.stdout.write("Created admin admin@cbds.com")

        resident_number = 1
        for index, (name, code, description) in enumerate(BARANGAYS):
            barangay, created = Barangay.objects.get_or_create(
                code=code, defaults={"name": name, "description": description}
            )
            if created:
                self.stdout.write(f"Created {barangay}")

            first_name, last_name = OFFICIAL_NAMES[index]
            official_email = f"manager{index + 1}@cbds.com"
            official = User.objects.filter(email=official_email).first()
            if official is None:
                official = User.objects.create_user(
                    email=official_email,
                    password="manager123",
                    first_name=first_name,
                    last_name=last_name,
                    phone=f"0912345678{index}",
                    role=Role.BARANGAY,
                    barangay=barangay,
                )
            if barangay.manager_id is None:
                barangay.manager = official
                barangay.save(update_fields=["manager", "updated_at"])

            for offset in range(per_barangay):
                email = f"resident{resident_number}@cbds.com"
                first_name, last_name = RESIDENT_NAMES[(resident_number - 1) % len(RESIDENT_NAMES)]
                if not User.objects.filter(email=email).exists():
                    User.objects.create_user(
                        email=email,
                        password="resident123",
                        first_name=first_name,
                        last_name=last_name,
                        phone=f"0917{resident_number:07d}",
                        role=Role.RESIDENT,
                        barangay=barangay,
                        family_classification=CLASSIFICATIONS[offset % len(CLASSIFICATIONS)],
                        date_of_birth=date(1960 + resident_number % 40, 1 + offset % 12, 15),
                        purok=f"Purok {offset + 1}",
                        municipality="Glan",
                        is_head_of_family=True,
                    )
                resident_number += 1

        self.stdout.write(self.style.SUCCESS("Demo data loaded"))
