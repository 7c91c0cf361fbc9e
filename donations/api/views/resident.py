from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from donations.api.permissions import IsResident
from donations.api.serializers import (
    ClaimSerializer,
    FamilyMemberSerializer,
    FamilyMemberWriteSerializer,
    FamilySerializer,
    ResidentScheduleSerializer,
    ScheduleReferenceSerializer,
)
from donations.services.claim_service import ClaimService
from donations.services.family_service import FamilyService
from donations.services.schedule_service import ScheduleService


class ResidentView(APIView):
    permission_classes = [IsResident]


class ResidentSchedulesView(ResidentView):
    """
    Open schedules of the resident's barangay the resident is eligible for.

    GET /api/v1/resident/schedules/
    """

    def get(self, request):
        schedules = ScheduleService().list_for_resident(request.user)
        return Response(ResidentScheduleSerializer(schedules, many=True).data)


class ResidentClaimView(ResidentView):
    """POST /api/v1/resident/claim/  {"scheduleId": 3}"""

    def post(self, request):
        serializer = ScheduleReferenceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        claim = ClaimService().claim_as_resident(
            request.user, serializer.validated_data.get("schedule_id")
        )
        return Response(
            {"message": "Donation claimed successfully", "claim": ClaimSerializer(claim).data},
            status=status.HTTP_201_CREATED,
        )


class ResidentClaimsView(ResidentView):
    """GET /api/v1/resident/claims/"""

    def get(self, request):
        claims = ClaimService().list_for_resident(request.user)
        return Response(ClaimSerializer(claims, many=True).data)


class FamilyView(ResidentView):
    """
    GET /api/v1/resident/family/

    Ages are recomputed from dates of birth on every read.
    """

    def get(self, request):
        return Response(FamilySerializer(FamilyService().get_family(request.user)).data)


class FamilyMemberListView(ResidentView):
    """
    POST /api/v1/resident/family/members/

    Request body:
    {
        "name": "Ana Dela Cruz",
        "relation": "CHILD",
        "dateOfBirth": "2012-05-14",
        "isStudent": true,
        "studentIdPath": "/uploads/ids/1730000000000-abc.png",
        "educationLevel": "HIGH_SCHOOL"
    }
    """

    def post(self, request):
        serializer = FamilyMemberWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        member = FamilyService().add_member(request.user, serializer.validated_data)
        return Response(
            {"message": "Family member added successfully", "member": FamilyMemberSerializer(member).data},
            status=status.HTTP_201_CREATED,
        )


class FamilyMemberDetailView(ResidentView):
    """PUT, DELETE /api/v1/resident/family/members/{id}/"""

    def put(self, request, member_id):
        serializer = FamilyMemberWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        member = FamilyService().update_member(request.user, member_id, serializer.validated_data)
        return Response(
            {"message": "Family member updated successfully", "member": FamilyMemberSerializer(member).data}
        )

    def delete(self, request, member_id):
        FamilyService().remove_member(request.user, member_id)
        return Response({"message": "Family member removed successfully"})
