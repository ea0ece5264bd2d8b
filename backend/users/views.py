import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from core_backend.exceptions import get_client_ip

from .auth_cookie_service import AuthCookieService
from .serializers import (
    LoginSerializer,
    ProfileUpdateSerializer,
    RegistrationSerializer,
    UserSerializer,
)
from .services import UserService

logger = logging.getLogger(__name__)


class RegisterView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = RegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        user = UserService.register_customer(
            data.pop("email"), data.pop("password"), ip=get_client_ip(request), **data
        )
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class LoginView(TokenObtainPairView):
    """
    Issues a JWT pair and stores it in httpOnly cookies. The tokens are
    also returned in the body for header-based clients.
    """

    serializer_class = LoginSerializer
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        UserService.record_login(serializer.user, ip=get_client_ip(request))

        response = Response(data, status=status.HTTP_200_OK)
        AuthCookieService.set_auth_cookies(response, data["access"], data["refresh"])
        return response


class LogoutView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        UserService.record_logout(request.user, ip=get_client_ip(request))
        response = Response({"detail": "Successfully logged out."}, status=status.HTTP_200_OK)
        AuthCookieService.clear_auth_cookies(response)
        return response


class CurrentUserView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)

    def patch(self, request):
        serializer = ProfileUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = UserService.update_profile(request.user, **serializer.validated_data)
        return Response(UserSerializer(user).data)
