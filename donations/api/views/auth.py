from django.contrib.auth import authenticate
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from donations.api.serializers import LoginSerializer, RegisterSerializer
from donations.models import User
from donations.services.registration_service import RegistrationService


def session_payload(user):
    return {
        "id": user.pk,
        "email": user.email,
        "name": user.get_full_name(),
        "role": user.role,
        "barangayId": user.barangay_id,
    }


class RegisterView(APIView):
    """
    Resident self-registration. The account stays inactive until an admin approves it.

    POST /api/v1/auth/register/

    Request body:
    {
        "email": "juan@example.com",
        "password": "secret123",
        "firstName": "Juan",
        "lastName": "Dela Cruz",
        "phone": "09171234567",
        "barangayId": 1,
        "purok": "Purok 1",
        "municipality": "Glan"
    }
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = RegistrationService().register_resident(serializer.validated_data)
        return Response(
            {
                "message": "Registration submitted successfully. Please wait for admin approval.",
                "userId": user.pk,
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    """
    Exchange email and password for an API token.

    POST /api/v1/auth/login/

    Keeps the default authenticators so failed logins answer 401 with a
    WWW-Authenticate header instead of 403.
    """

    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"].lower()
        password = serializer.validated_data["password"]

        user = authenticate(request, email=email, password=password)
        if user is None:
            pending = User.objects.filter(email__iexact=email, is_active=False).first()
            if pending is not None and pending.check_password(password):
                raise AuthenticationFailed("Account is pending admin approval")
            raise AuthenticationFailed("Invalid email or password")

        token, _ = Token.objects.get_or_create(user=user)
        return Response({"token": token.key, "user": session_payload(user)})


class LogoutView(APIView):
    """POST /api/v1/auth/logout/"""

    def post(self, request):
        Token.objects.filter(user=request.user).delete()
        return Response({"message": "Logged out"})


class SessionView(APIView):
    """GET /api/v1/auth/session/"""

    def get(self, request):
        return Response({"user": session_payload(request.user)})
