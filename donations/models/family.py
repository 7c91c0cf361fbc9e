from django.conf import settings
from django.db import models


class VerificationStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    APPROVED = "APPROVED", "Approved"
    REJECTED = "REJECTED", "Rejected"


class Relation(models.TextChoices):
    SPOUSE = "SPOUSE", "Spouse"
    CHILD = "CHILD", "Child"
    PARENT = "PARENT", "Parent"
    SIBLING = "SIBLING", "Sibling"
    OTHER = "OTHER", "Other"


class EducationLevel(models.TextChoices):
    ELEMENTARY = "ELEMENTARY", "Elementary"
    HIGH_SCHOOL = "HIGH_SCHOOL", "High School"
    COLLEGE = "COLLEGE", "College"


SENIOR_CITIZEN_AGE = 60


class Family(models.Model):
    """Household headed by a registered resident."""

    head = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="families"
    )
    barangay = models.ForeignKey(
        "donations.Barangay", on_delete=models.PROTECT, related_name="families"
    )
    address = models.CharField(max_length=500)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "families"
        ordering = ["-created_at"]
        verbose_name_plural = "Families"

    def __str__(self):
        return f"Family of {self.head.get_full_name()}"


class FamilyMember(models.Model):
    """
    Member of a family. Each eligibility flag (indigent, senior citizen, PWD,
    student) has its own verification status, set by barangay officials.
    A null status means the flag was never requested.
    """

    family = models.ForeignKey(Family, on_delete=models.CASCADE, related_name="members")
    name = models.CharField(max_length=255)
    relation = models.CharField(max_length=20, choices=Relation.choices)
    age = models.PositiveIntegerField(blank=True, null=True)
    date_of_birth = models.DateField(blank=True, null=True)
    education_level = models.CharField(
        max_length=20, choices=EducationLevel.choices, blank=True, null=True
    )

    is_indigent = models.BooleanField(default=False)
    indigency_cert_path = models.CharField(max_length=255, blank=True, null=True)
    indigent_verification_status = models.CharField(
        max_length=20, choices=VerificationStatus.choices, blank=True, null=True
    )

    is_senior_citizen = models.BooleanField(default=False)
    senior_card_path = models.CharField(max_length=255, blank=True, null=True)
    senior_verification_status = models.CharField(
        max_length=20, choices=VerificationStatus.choices, blank=True, null=True
    )

    is_pwd = models.BooleanField(default=False)
    pwd_proof_path = models.CharField(max_length=255, blank=True, null=True)
    pwd_verification_status = models.CharField(
        max_length=20, choices=VerificationStatus.choices, blank=True, null=True
    )

    is_student = models.BooleanField(default=False)
    student_id_path = models.CharField(max_length=255, blank=True, null=True)
    student_verification_status = models.CharField(
        max_length=20, choices=VerificationStatus.choices, blank=True, null=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # eligibility field name -> (flag attribute, status attribute)
    ELIGIBILITY_FIELDS = {
        "indigent": ("is_indigent", "indigent_verification_status"),
        "senior": ("is_senior_citizen", "senior_verification_status"),
        "pwd": ("is_pwd", "pwd_verification_status"),
        "student": ("is_student", "student_verification_status"),
    }

    class Meta:
        db_table = "family_members"
        ordering = ["created_at"]

    def __str__(self):
        return f"{self.name} ({self.relation})"

    def current_age(self, today):
        """Age computed from date of birth when known, otherwise the stored age."""
        if not self.date_of_birth:
            return self.age
        born = self.date_of_birth
        return today.year - born.year - ((today.month, today.day) < (born.month, born.day))
