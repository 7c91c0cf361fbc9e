from django.contrib.auth.models import AbstractUser, UserManager as DjangoUserManager
from django.db import models


class Role(models.TextChoices):
    ADMIN = "ADMIN", "Administrator"
    BARANGAY = "BARANGAY", "Barangay Official"
    RESIDENT = "RESIDENT", "Resident"


class FamilyClassification(models.TextChoices):
    HIGH_CLASS = "HIGH_CLASS", "High Class"
    MIDDLE_CLASS = "MIDDLE_CLASS", "Middle Class"
    LOW_CLASS = "LOW_CLASS", "Low Class"
    UNCLASSIFIED = "UNCLASSIFIED", "Unclassified"


class UserManager(DjangoUserManager):
    """Manager for users that log in with their email address."""

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("An email address is required")
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", Role.ADMIN)
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Account for administrators, barangay officials and residents.

    Residents register themselves and stay inactive until an administrator
    approves them. A BARANGAY user belongs to exactly one barangay and is
    that barangay's manager.
    """

    username = None
    email = models.EmailField(unique=True)

    role = models.CharField(
        max_length=20, choices=Role.choices, default=Role.RESIDENT, db_index=True
    )
    barangay = models.ForeignKey(
        "donations.Barangay",
        on_delete=models.PROTECT,
        related_name="users",
        blank=True,
        null=True,
    )
    phone = models.CharField(max_length=20, blank=True, null=True)
    family_classification = models.CharField(
        max_length=20,
        choices=FamilyClassification.choices,
        default=FamilyClassification.UNCLASSIFIED,
    )

    # Registration profile
    gender = models.CharField(max_length=20, blank=True, null=True)
    date_of_birth = models.DateField(blank=True, null=True)
    purok = models.CharField(max_length=100, blank=True, null=True)
    municipality = models.CharField(max_length=100, blank=True, null=True)
    educational_attainment = models.CharField(max_length=50, blank=True, null=True)
    is_head_of_family = models.BooleanField(default=False)

    # Uploaded document paths, as returned by the upload endpoint
    id_file_path = models.CharField(max_length=255, blank=True, null=True)
    id_back_file_path = models.CharField(max_length=255, blank=True, null=True)
    barangay_clearance_path = models.CharField(max_length=255, blank=True, null=True)
    certificate_of_indigency_path = models.CharField(max_length=255, blank=True, null=True)
    proof_of_residency_path = models.CharField(max_length=255, blank=True, null=True)
    senior_citizen_id_path = models.CharField(max_length=255, blank=True, null=True)
    pwd_id_path = models.CharField(max_length=255, blank=True, null=True)
    ip_certificate_path = models.CharField(max_length=255, blank=True, null=True)
    school_id_path = models.CharField(max_length=255, blank=True, null=True)
    solo_parent_id_path = models.CharField(max_length=255, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["first_name", "last_name"]

    objects = UserManager()

    class Meta:
        db_table = "users"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["role", "is_active"]),
            models.Index(fields=["barangay", "role"]),
        ]

    def __str__(self):
        return f"{self.get_full_name()} <{self.email}> ({self.role})"

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def family(self):
        """The family this user heads, if any."""
        return self.families.order_by("created_at").first()
