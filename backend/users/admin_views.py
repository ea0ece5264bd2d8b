import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from core_backend.exceptions import get_client_ip

from .models import User
from .permissions import IsAdmin
from .serializers import (
    AdminUserCreateSerializer,
    AdminUserSerializer,
    BulkEmailSerializer,
    LogQuerySerializer,
    ResetPasswordSerializer,
)
from .services import UserService

logger = logging.getLogger(__name__)


class AdminUserViewSet(BaseViewSet):
    """
    Resident and admin account management.

    - GET/POST /admin/users/                 list (newest first) / create
    - GET/PUT/PATCH/DELETE /admin/users/{id}/
    - GET  /admin/users/admins/              admins only
    - PUT  /admin/users/{id}/reset-password/
    - POST /admin/users/{id}/promote/
    - POST /admin/users/{id}/demote/
    """

    queryset = User.objects.all()
    serializer_class = AdminUserSerializer
    permission_classes = [IsAdmin]
    filterset_fields = ["role", "is_active"]
    search_fields = ["email", "first_name", "last_name", "mobile", "room"]
    ordering_fields = ["date_joined", "email", "floor", "room"]
    ordering = ["-date_joined", "-id"]

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = AdminUserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        user = UserService.create_user(
            request.user,
            data.pop("email"),
            data.pop("password"),
            is_admin=data.pop("is_admin"),
            ip=get_client_ip(request),
            **data,
        )
        return Response(AdminUserSerializer(user).data, status=status.HTTP_201_CREATED)

    def perform_update(self, serializer):
        serializer.instance = UserService.update_user(
            serializer.instance,
            self.request.user,
            ip=get_client_ip(self.request),
            **serializer.validated_data,
        )

    def perform_destroy(self, instance):
        UserService.delete_user(instance, self.request.user, ip=get_client_ip(self.request))

    @action(detail=False, methods=["get"], url_path="admins")
    def admins(self, request: Request) -> Response:
        serializer = self.get_serializer(UserService.list_admins(), many=True)
        return Response(serializer.data)

    @action(detail=True, methods=["put"], url_path="reset-password")
    def reset_password(self, request: Request, pk=None) -> Response:
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = UserService.reset_password(
            self.get_object(),
            serializer.validated_data["new_password"],
            request.user,
            ip=get_client_ip(request),
        )
        return Response({"detail": f"Password reset for {user.email}."})

    @action(detail=True, methods=["post"], url_path="promote")
    def promote(self, request: Request, pk=None) -> Response:
        user = UserService.promote(self.get_object(), request.user, ip=get_client_ip(request))
        return Response(self.get_serializer(user).data)

    @action(detail=True, methods=["post"], url_path="demote")
    def demote(self, request: Request, pk=None) -> Response:
        user = UserService.demote(self.get_object(), request.user, ip=get_client_ip(request))
        return Response(self.get_serializer(user).data)


class AdminDashboardViewSet(viewsets.ViewSet):
    """
    - GET  /admin/dashboard/stats/          user and dish counts
    - POST /admin/dashboard/bulk-email/     message selected users
    - GET  /admin/dashboard/logs/{type}/    tail of app.log or error.log
    """

    permission_classes = [IsAdmin]

    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request: Request) -> Response:
        return Response(UserService.dashboard_stats())

    @action(detail=False, methods=["post"], url_path="bulk-email")
    def bulk_email(self, request: Request) -> Response:
        serializer = BulkEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        queued = UserService.send_bulk_email(
            request.user,
            data["user_ids"],
            data["subject"],
            data["content"],
            ip=get_client_ip(request),
        )
        return Response({"queued": queued}, status=status.HTTP_202_ACCEPTED)

    @action(detail=False, methods=["get"], url_path=r"logs/(?P<log_type>[a-z]+)")
    def logs(self, request: Request, log_type=None) -> Response:
        query = LogQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        content = UserService.read_log(log_type, lines=query.validated_data.get("lines"))
        return Response({"type": log_type, "logs": content})
