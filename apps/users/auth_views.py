"""Views for account flows: register, login, own profile and role assignment."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken  # type: ignore

from shared.application.access import Role, require_role
from shared.interfaces.http import caller_from_request, error_response

from .auth_serializers import LoginSerializer, RegisterSerializer
from .serializers import ProfileUpdateSerializer, RoleAssignmentSerializer, UserSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


def _session_payload(user) -> dict:
    refresh = RefreshToken.for_user(user)
    return {
        "user": UserSerializer(user).data,
        "tokens": {"refresh": str(refresh), "access": str(refresh.access_token)},
    }


class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Registered borrower account {user.pk}")
        return Response(_session_payload(user), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(_session_payload(serializer.validated_data["user"]))


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):  # type: ignore
        return Response(UserSerializer(request.user).data)

    def patch(self, request):  # type: ignore
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UserSerializer(user).data)


class RoleAssignmentView(APIView):
    """Administrators move accounts between borrower, approver and admin."""

    permission_classes = [IsAuthenticated]

    def post(self, request, user_id: int):  # type: ignore
        allowed = require_role(caller_from_request(request), [Role.ADMIN])
        if not allowed.ok:
            return error_response(allowed.error)

        serializer = RoleAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = get_object_or_404(User, pk=user_id)
        previous = user.role
        user.role = serializer.validated_data["role"]
        user.save(update_fields=["role", "updated_at"])
        logger.info(f"User {request.user.pk} changed role of user {user.pk}: {previous} -> {user.role}")
        return Response(UserSerializer(user).data)
