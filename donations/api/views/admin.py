from django.http import FileResponse
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from donations.api.permissions import IsAdmin
from donations.api.serializers import (
    AuditLogSerializer,
    BackupSerializer,
    BarangayListSerializer,
    BarangaySerializer,
    BarangayStatsSerializer,
    BarangayWriteSerializer,
    DonationReportQuerySerializer,
    DonationReportSerializer,
    RegistrationDecisionSerializer,
    SMSSettingsSerializer,
    SMSSettingsWriteSerializer,
    SystemStatsSerializer,
    UserListQuerySerializer,
    UserListSerializer,
    UserSerializer,
    UserWriteSerializer,
)
from donations.exceptions import ValidationFailed
from donations.services.backup_service import BackupService
from donations.services.directory_service import DirectoryService
from donations.services.notification_service import SMSSettingsService
from donations.services.registration_service import RegistrationService
from donations.services.report_service import ReportService


class AdminView(APIView):
    permission_classes = [IsAdmin]


class UserListView(AdminView):
    """
    GET  /api/v1/admin/users/?page=1&limit=10&role=RESIDENT&search=juan
    POST /api/v1/admin/users/

    Request body (POST):
    {
        "email": "official@example.com",
        "password": "secret123",
        "firstName": "Maria",
        "lastName": "Santos",
        "role": "BARANGAY",
        "barangayId": 1
    }
    """

    def get(self, request):
        query = UserListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result = DirectoryService().list_users(**query.validated_data)
        return Response(
            {
                "users": UserListSerializer(result["users"], many=True).data,
                "pagination": result["pagination"],
            }
        )

    def post(self, request):
        serializer = UserWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = DirectoryService().create_user(request.user, serializer.validated_data)
        return Response(
            {"message": "User created successfully", "user": UserSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )


class UserDetailView(AdminView):
    """GET, PUT, DELETE /api/v1/admin/users/{id}/ (DELETE deactivates)."""

    def get(self, request, user_id):
        return Response(UserSerializer(DirectoryService().get_user(user_id)).data)

    def put(self, request, user_id):
        serializer = UserWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = DirectoryService().update_user(request.user, user_id, serializer.validated_data)
        return Response({"message": "User updated successfully", "user": UserSerializer(user).data})

    def delete(self, request, user_id):
        DirectoryService().deactivate_user(request.user, user_id)
        return Response({"message": "User deactivated successfully"})


class BarangayListView(AdminView):
    """
    GET  /api/v1/admin/barangays/
    POST /api/v1/admin/barangays/

    Request body (POST):
    {
        "name": "Poblacion",
        "code": "POB",
        "description": "Town center",
        "managerId": 7
    }
    """

    def get(self, request):
        return Response(BarangayListSerializer(DirectoryService().list_barangays(), many=True).data)

    def post(self, request):
        serializer = BarangayWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        barangay = DirectoryService().create_barangay(request.user, serializer.validated_data)
        return Response(
            {"message": "Barangay created successfully", "barangay": BarangaySerializer(barangay).data},
            status=status.HTTP_201_CREATED,
        )


class BarangayDetailView(AdminView):
    """GET, PUT, DELETE /api/v1/admin/barangays/{id}/ (DELETE deactivates)."""

    def get(self, request, barangay_id):
        return Response(BarangayListSerializer(DirectoryService().get_barangay(barangay_id)).data)

    def put(self, request, barangay_id):
        serializer = BarangayWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        barangay = DirectoryService().update_barangay(
            request.user, barangay_id, serializer.validated_data
        )
        return Response(
            {"message": "Barangay updated successfully", "barangay": BarangaySerializer(barangay).data}
        )

    def delete(self, request, barangay_id):
        DirectoryService().deactivate_barangay(request.user, barangay_id)
        return Response({"message": "Barangay deactivated successfully"})


class PendingRegistrationsView(AdminView):
    """
    GET /api/v1/admin/pending-registrations/
    PUT /api/v1/admin/pending-registrations/

    Request body (PUT):
    {
        "userId": 12,
        "action": "approve"  # or "reject"
    }
    """

    def get(self, request):
        return Response(UserSerializer(RegistrationService().list_pending(), many=True).data)

    def put(self, request):
        serializer = RegistrationDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user_id = serializer.validated_data.get("user_id")
        action = serializer.validated_data.get("action")
        if not user_id or action not in ("approve", "reject"):
            raise ValidationFailed("userId and action (approve or reject) are required")

        service = RegistrationService()
        if action == "approve":
            service.approve(request.user, user_id)
            return Response({"message": "Registration approved successfully"})
        service.reject(request.user, user_id)
        return Response({"message": "Registration rejected successfully"})


class SystemStatsView(AdminView):
    """GET /api/v1/admin/stats/"""

    def get(self, request):
        return Response(SystemStatsSerializer(ReportService().system_stats()).data)


class BarangayStatsView(AdminView):
    """GET /api/v1/admin/barangay-stats/"""

    def get(self, request):
        return Response(BarangayStatsSerializer(ReportService().barangay_stats(), many=True).data)


class ActivityView(AdminView):
    """GET /api/v1/admin/activity/ - the 20 most recent audit entries."""

    def get(self, request):
        return Response(AuditLogSerializer(ReportService().recent_activity(), many=True).data)


class DonationReportView(AdminView):
    """GET /api/v1/admin/reports/donations/?barangayId=1&startDate=2026-01-01&endDate=2026-01-31"""

    def get(self, request):
        query = DonationReportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        report = ReportService().donation_report(**query.validated_data)
        return Response(DonationReportSerializer(report).data)


class BackupListView(AdminView):
    """
    GET  /api/v1/admin/backups/
    POST /api/v1/admin/backups/  {"name": "before-upgrade"}
    """

    def get(self, request):
        return Response({"backups": BackupSerializer(BackupService().list(), many=True).data})

    def post(self, request):
        backup = BackupService().create(request.user, request.data.get("name"))
        return Response(
            {"message": "Database backup created successfully", "backup": BackupSerializer(backup).data},
            status=status.HTTP_201_CREATED,
        )


class BackupDetailView(AdminView):
    """
    GET    /api/v1/admin/backups/{filename}/  - download
    DELETE /api/v1/admin/backups/{filename}/
    """

    def get(self, request, filename):
        path = BackupService().open_for_download(request.user, filename)
        return FileResponse(
            open(path, "rb"),
            as_attachment=True,
            filename=path.name,
            content_type="application/octet-stream",
        )

    def delete(self, request, filename):
        BackupService().delete(request.user, filename)
        return Response({"message": "Backup deleted successfully"})


class RestoreView(AdminView):
    """POST /api/v1/admin/restore/  {"backupName": "before-upgrade"}"""

    def post(self, request):
        result = BackupService().restore(request.user, request.data.get("backupName"))
        return Response(
            {
                "message": "Database restored successfully",
                "restoredFrom": result["restored_from"],
                "currentBackup": result["pre_restore_backup"],
            }
        )


class SMSSettingsView(AdminView):
    """
    GET  /api/v1/admin/sms-settings/
    POST /api/v1/admin/sms-settings/  {"username": "...", "password": "...", "isActive": true}
    """

    def get(self, request):
        sms_settings = SMSSettingsService().get()
        if sms_settings is None:
            return Response({"settings": None, "message": "No SMS settings configured"})
        return Response({"settings": SMSSettingsSerializer(sms_settings).data})

    def post(self, request):
        serializer = SMSSettingsWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        sms_settings = SMSSettingsService().save(
            request.user, data.get("username"), data.get("password"), data.get("is_active", False)
        )
        return Response({"success": True, "settings": SMSSettingsSerializer(sms_settings).data})


class SMSTestView(AdminView):
    """POST /api/v1/admin/sms-test/  {"username": "...", "password": "..."}"""

    def post(self, request):
        result = SMSSettingsService().test_connection(
            request.user, request.data.get("username"), request.data.get("password")
        )
        return Response(
            {
                "success": result["success"],
                "message": "SMS connection test successful!"
                if result["success"]
                else result["error"] or "SMS connection test failed",
                "details": result,
            }
        )
