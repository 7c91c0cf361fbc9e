from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from donations.api.permissions import BarangayScopedMixin
from donations.api.serializers import (
    BarangayBriefSerializer,
    BarangaySummarySerializer,
    ClaimForResidentSerializer,
    ClaimSerializer,
    ClassifyResidentSerializer,
    FamilyMemberSerializer,
    NotificationResultSerializer,
    ResidentSerializer,
    ScheduleDetailSerializer,
    ScheduleReferenceSerializer,
    ScheduleSerializer,
    ScheduleWriteSerializer,
    UserSerializer,
)
from donations.services.claim_service import ClaimService
from donations.services.directory_service import DirectoryService
from donations.services.family_service import FamilyService
from donations.services.notification_service import NotificationService
from donations.services.report_service import ReportService
from donations.services.schedule_service import ScheduleService
from donations.services.verification_service import VerificationService


class ActiveBarangaysView(APIView):
    """
    Active barangays for the registration form.

    GET /api/v1/barangays/
    """

    permission_classes = [AllowAny]

    def get(self, request):
        barangays = DirectoryService().list_active_barangays()
        return Response(BarangayBriefSerializer(barangays, many=True).data)


class ScheduleListView(BarangayScopedMixin, APIView):
    """
    GET  /api/v1/barangay/schedules/
    POST /api/v1/barangay/schedules/

    Request body (POST):
    {
        "title": "Rice distribution",
        "description": "5kg rice per family",
        "date": "2026-11-02",
        "startTime": "08:00",
        "endTime": "12:00",
        "location": "Barangay Hall",
        "maxRecipients": 200,
        "targetClassification": "LOW_CLASS",
        "type": "GENERAL"
    }

    Listing first marks past SCHEDULED schedules as DISTRIBUTED.
    """

    def get(self, request):
        schedules = ScheduleService().list_for_barangay(request.user, self.get_barangay(request))
        return Response(ScheduleSerializer(schedules, many=True).data)

    def post(self, request):
        serializer = ScheduleWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        service = ScheduleService(NotificationService.from_active_settings())
        schedule = service.create(
            request.user, self.get_barangay(request), dict(serializer.validated_data)
        )
        return Response(
            {"message": "Schedule created successfully", "schedule": ScheduleSerializer(schedule).data},
            status=status.HTTP_201_CREATED,
        )


class ScheduleDetailView(BarangayScopedMixin, APIView):
    """
    GET    /api/v1/barangay/schedules/{id}/
    PUT    /api/v1/barangay/schedules/{id}/  (full update, or {"status": "CANCELLED"})
    DELETE /api/v1/barangay/schedules/{id}/
    """

    def get(self, request, schedule_id):
        schedule = ScheduleService().get(self.get_barangay(request), schedule_id)
        return Response(ScheduleDetailSerializer(schedule).data)

    def put(self, request, schedule_id):
        serializer = ScheduleWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        service = ScheduleService(NotificationService.from_active_settings())
        schedule = service.update(
            request.user, self.get_barangay(request), schedule_id, dict(serializer.validated_data)
        )
        return Response(
            {"message": "Schedule updated successfully", "schedule": ScheduleSerializer(schedule).data}
        )

    def delete(self, request, schedule_id):
        service = ScheduleService(NotificationService.from_active_settings())
        service.delete(request.user, self.get_barangay(request), schedule_id)
        return Response({"message": "Schedule deleted successfully"})


class SendRemindersView(BarangayScopedMixin, APIView):
    """POST /api/v1/barangay/send-reminders/  {"scheduleId": 3}"""

    def post(self, request):
        serializer = ScheduleReferenceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = ScheduleService(NotificationService.from_active_settings())
        result = service.send_reminders(
            request.user, self.get_barangay(request), serializer.validated_data.get("schedule_id")
        )
        return Response(
            {
                "success": result["success"],
                "message": f"Reminder sent to {result['sent_count']} residents"
                if result["success"]
                else "Failed to send reminders",
                "details": NotificationResultSerializer(result).data,
            }
        )


class BarangayClaimsView(BarangayScopedMixin, APIView):
    """GET /api/v1/barangay/claims/"""

    def get(self, request):
        claims = ClaimService().list_for_barangay(self.get_barangay(request))
        return Response(ClaimSerializer(claims, many=True).data)


class ClaimForResidentView(BarangayScopedMixin, APIView):
    """
    Record a claim picked up at the barangay office for a resident.

    POST /api/v1/barangay/claim-for-resident/

    Request body:
    {
        "scheduleId": 3,
        "residentId": 12,
        "familyMemberId": 40,  # optional, who physically picked it up
        "notes": "Brought own bag"
    }
    """

    def post(self, request):
        serializer = ClaimForResidentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        service = ClaimService(NotificationService.from_active_settings())
        claim = service.claim_for_resident(
            request.user,
            self.get_barangay(request),
            data.get("resident_id"),
            data.get("schedule_id"),
            family_member_id=data.get("family_member_id"),
            notes=data.get("notes"),
        )
        return Response(
            {
                "message": "Donation claimed successfully on behalf of resident",
                "claim": ClaimSerializer(claim).data,
                "resident": {
                    "id": claim.claimed_by_id,
                    "name": claim.claimed_by.get_full_name(),
                    "claimerName": claim.claimer_name,
                },
            },
            status=status.HTTP_201_CREATED,
        )


class ResidentListView(BarangayScopedMixin, APIView):
    """GET /api/v1/barangay/residents/"""

    def get(self, request):
        residents = FamilyService().list_residents(self.get_barangay(request))
        return Response(ResidentSerializer(residents, many=True).data)


class ClassifyResidentView(BarangayScopedMixin, APIView):
    """PUT /api/v1/barangay/classify-resident/  {"residentId": 12, "classification": "LOW_CLASS"}"""

    def put(self, request):
        serializer = ClassifyResidentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        resident = FamilyService().classify_resident(
            request.user,
            self.get_barangay(request),
            serializer.validated_data.get("resident_id"),
            serializer.validated_data.get("classification"),
        )
        return Response(
            {"message": "Classification updated successfully", "resident": UserSerializer(resident).data}
        )

    post = put


class UnclaimedResidentsView(BarangayScopedMixin, APIView):
    """GET /api/v1/barangay/unclaimed-residents/?scheduleId=3"""

    def get(self, request):
        query = ScheduleReferenceSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        residents = FamilyService().list_unclaimed_residents(
            self.get_barangay(request), query.validated_data.get("schedule_id")
        )
        return Response(ResidentSerializer(residents, many=True).data)


class VerifyFamilyMemberView(BarangayScopedMixin, APIView):
    """
    PUT /api/v1/barangay/family-members/{id}/verify/

    Request body:
    {
        "field": "pwd",      # indigent | senior | pwd | student
        "action": "APPROVE"  # or REJECT
    }
    """

    def put(self, request, member_id):
        member = VerificationService().verify_member(
            request.user,
            self.get_barangay(request),
            member_id,
            request.data.get("field"),
            request.data.get("action"),
        )
        return Response(
            {"message": "Verification updated successfully", "member": FamilyMemberSerializer(member).data}
        )

    post = put


class BarangaySummaryView(BarangayScopedMixin, APIView):
    """GET /api/v1/barangay/summary/"""

    def get(self, request):
        summary = ReportService().barangay_summary(self.get_barangay(request))
        return Response(BarangaySummarySerializer(summary).data)
