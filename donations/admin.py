from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from donations.models import (
    AuditLog,
    Barangay,
    Claim,
    DonationSchedule,
    Family,
    FamilyMember,
    SMSSettings,
    User,
)


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ("email", "first_name", "last_name", "role", "barangay", "is_active", "created_at")
    list_filter = ("role", "is_active", "barangay", "family_classification")
    search_fields = ("email", "first_name", "last_name", "phone")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "updated_at", "last_login", "date_joined")
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Personal Information", {"fields": ("first_name", "last_name", "phone", "gender", "date_of_birth")}),
        (
            "Barangay",
            {"fields": ("role", "barangay", "family_classification", "purok", "municipality", "is_head_of_family")},
        ),
        (
            "Documents",
            {
                "fields": (
                    "id_file_path",
                    "id_back_file_path",
                    "barangay_clearance_path",
                    "certificate_of_indigency_path",
                    "proof_of_residency_path",
                    "senior_citizen_id_path",
                    "pwd_id_path",
                    "ip_certificate_path",
                    "school_id_path",
                    "solo_parent_id_path",
                ),
                "classes": ("collapse",),
            },
        ),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
        ("Dates", {"fields": ("last_login", "date_joined", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "first_name", "last_name", "role", "password1", "password2")}),
    )


@admin.register(Barangay)
class BarangayAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "manager", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "code")
    readonly_fields = ("created_at", "updated_at")


class FamilyMemberInline(admin.TabularInline):
    model = FamilyMember
    extra = 0


@admin.register(Family)
class FamilyAdmin(admin.ModelAdmin):
    list_display = ("head", "barangay", "address", "created_at")
    list_filter = ("barangay",)
    search_fields = ("head__email", "head__first_name", "head__last_name", "address")
    inlines = [FamilyMemberInline]


@admin.register(FamilyMember)
class FamilyMemberAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "relation",
        "family",
        "indigent_verification_status",
        "senior_verification_status",
        "pwd_verification_status",
        "student_verification_status",
    )
    list_filter = ("relation", "pwd_verification_status", "student_verification_status")
    search_fields = ("name",)


@admin.register(DonationSchedule)
class DonationScheduleAdmin(admin.ModelAdmin):
    list_display = ("title", "barangay", "date", "start_time", "end_time", "type", "status")
    list_filter = ("status", "type", "barangay", "date")
    search_fields = ("title", "location")
    readonly_fields = ("created_at", "updated_at")


@admin.register(Claim)
class ClaimAdmin(admin.ModelAdmin):
    list_display = ("family", "schedule", "claimed_by", "status", "is_verified", "claimed_at")
    list_filter = ("status", "is_verified", "barangay")
    search_fields = ("family__head__email", "schedule__title", "notes")
    readonly_fields = ("claimed_at",)


@admin.register(SMSSettings)
class SMSSettingsAdmin(admin.ModelAdmin):
    list_display = ("username", "is_active", "updated_at")
    exclude = ("password",)


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("action", "actor", "user", "created_at")
    list_filter = ("action",)
    search_fields = ("action", "details", "actor")
    readonly_fields = ("user", "actor", "action", "details", "created_at")
