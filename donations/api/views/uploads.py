from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from donations.api.serializers import UploadResultSerializer
from donations.services.upload_service import UploadService


class UploadView(APIView):
    """
    Upload a registration or eligibility document. Open because residents
    upload their IDs before they have an account.

    POST /api/v1/uploads/  (multipart: file, field)
    """

    permission_classes = [AllowAny]
    authentication_classes = []
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        result = UploadService().store(request.FILES.get("file"), request.data.get("field"))
        return Response(UploadResultSerializer(result).data)
