from .auth import RegisterView, LoginView, LogoutView, SessionView
from .admin import (
    UserListView,
    UserDetailView,
    BarangayListView,
    BarangayDetailView,
    PendingRegistrationsView,
    SystemStatsView,
    BarangayStatsView,
    ActivityView,
    DonationReportView,
    BackupListView,
    BackupDetailView,
    RestoreView,
    SMSSettingsView,
    SMSTestView,
)
from .barangay import (
    ActiveBarangaysView,
    ScheduleListView,
    ScheduleDetailView,
    SendRemindersView,
    BarangayClaimsView,
    ClaimForResidentView,
    ResidentListView,
    ClassifyResidentView,
    UnclaimedResidentsView,
    VerifyFamilyMemberView,
    BarangaySummaryView,
)
from .resident import (
    ResidentSchedulesView,
    ResidentClaimView,
    ResidentClaimsView,
    FamilyView,
    FamilyMemberListView,
    FamilyMemberDetailView,
)
from .uploads import UploadView
