from django.urls import path

from donations.api.views import (
    ActiveBarangaysView,
    ActivityView,
    BackupDetailView,
    BackupListView,
    BarangayClaimsView,
    BarangayDetailView,
    BarangayListView,
    BarangayStatsView,
    BarangaySummaryView,
    ClaimForResidentView,
    ClassifyResidentView,
    DonationReportView,
    FamilyMemberDetailView,
    FamilyMemberListView,
    FamilyView,
    LoginView,
    LogoutView,
    PendingRegistrationsView,
    RegisterView,
    ResidentClaimsView,
    ResidentClaimView,
    ResidentListView,
    ResidentSchedulesView,
    RestoreView,
    ScheduleDetailView,
    ScheduleListView,
    SendRemindersView,
    SessionView,
    SMSSettingsView,
    SMSTestView,
    SystemStatsView,
    UnclaimedResidentsView,
    UploadView,
    UserDetailView,
    UserListView,
    VerifyFamilyMemberView,
)

urlpatterns = [
    # Authentication
    path("auth/register/", RegisterView.as_view(), name="auth-register"),
    path("auth/login/", LoginView.as_view(), name="auth-login"),
    path("auth/logout/", LogoutView.as_view(), name="auth-logout"),
    path("auth/session/", SessionView.as_view(), name="auth-session"),
    # Open endpoints
    path("barangays/", ActiveBarangaysView.as_view(), name="barangays-active"),
    path("uploads/", UploadView.as_view(), name="uploads"),
    # Admin endpoints
    path("admin/users/", UserListView.as_view(), name="admin-users"),
    path("admin/users/<int:user_id>/", UserDetailView.as_view(), name="admin-user-detail"),
    path("admin/barangays/", BarangayListView.as_view(), name="admin-barangays"),
    path(
        "admin/barangays/<int:barangay_id>/",
        BarangayDetailView.as_view(),
        name="admin-barangay-detail",
    ),
    path(
        "admin/pending-registrations/",
        PendingRegistrationsView.as_view(),
        name="admin-pending-registrations",
    ),
    path("admin/stats/", SystemStatsView.as_view(), name="admin-stats"),
    path("admin/barangay-stats/", BarangayStatsView.as_view(), name="admin-barangay-stats"),
    path("admin/activity/", ActivityView.as_view(), name="admin-activity"),
    path("admin/reports/donations/", DonationReportView.as_view(), name="admin-donation-report"),
    path("admin/backups/", BackupListView.as_view(), name="admin-backups"),
    path(
        "admin/backups/<str:filename>/", BackupDetailView.as_view(), name="admin-backup-detail"
    ),
    path("admin/restore/", RestoreView.as_view(), name="admin-restore"),
    path("admin/sms-settings/", SMSSettingsView.as_view(), name="admin-sms-settings"),
    path("admin/sms-test/", SMSTestView.as_view(), name="admin-sms-test"),
    # Barangay official endpoints
    path("barangay/schedules/", ScheduleListView.as_view(), name="barangay-schedules"),
    path(
        "barangay/schedules/<int:schedule_id>/",
        ScheduleDetailView.as_view(),
        name="barangay-schedule-detail",
    ),
    path("barangay/send-reminders/", SendRemindersView.as_view(), name="barangay-send-reminders"),
    path("barangay/claims/", BarangayClaimsView.as_view(), name="barangay-claims"),
    path(
        "barangay/claim-for-resident/",
        ClaimForResidentView.as_view(),
        name="barangay-claim-for-resident",
    ),
    path("barangay/residents/", ResidentListView.as_view(), name="barangay-residents"),
    path(
        "barangay/classify-resident/",
        ClassifyResidentView.as_view(),
        name="barangay-classify-resident",
    ),
    path(
        "barangay/unclaimed-residents/",
        UnclaimedResidentsView.as_view(),
        name="barangay-unclaimed-residents",
    ),
    path(
        "barangay/family-members/<int:member_id>/verify/",
        VerifyFamilyMemberView.as_view(),
        name="barangay-verify-member",
    ),
    path("barangay/summary/", BarangaySummaryView.as_view(), name="barangay-summary"),
    # Resident endpoints
    path("resident/schedules/", ResidentSchedulesView.as_view(), name="resident-schedules"),
    path("resident/claim/", ResidentClaimView.as_view(), name="resident-claim"),
    path("resident/claims/", ResidentClaimsView.as_view(), name="resident-claims"),
    path("resident/family/", FamilyView.as_view(), name="resident-family"),
    path(
        "resident/family/members/",
        FamilyMemberListView.as_view(),
        name="resident-family-members",
    ),
    path(
        "resident/family/members/<int:member_id>/",
        FamilyMemberDetailView.as_view(),
        name="resident-family-member-detail",
    ),
]
