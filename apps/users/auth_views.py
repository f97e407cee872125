"""Views for authentication flows (signup, login, OTP, token refresh, password reset)."""

from __future__ import annotations

import logging

from django.utils import timezone  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.permissions import AllowAny, IsAuthenticated  # type: ignore
from rest_framework.views import APIView  # type: ignore
from rest_framework_simplejwt.views import TokenRefreshView as BaseTokenRefreshView  # type: ignore

from apps.notifications.services import send_otp_email
from shared.api.responses import success_response

from .apps import get_otp_store
from .auth_serializers import (
    ChangePasswordSerializer,
    LoginSerializer,
    LogoutSerializer,
    OtpLoginSerializer,
    OtpRequestSerializer,
    PasswordResetConfirmSerializer,
    SignupSerializer,
    VerifyEmailSerializer,
    find_user_by_email,
    tokens_for_user,
)
from .otp import OtpPurpose
from .serializers import ProfileUpdateSerializer, UserSerializer

logger = logging.getLogger(__name__)

GENERIC_CODE_MESSAGE = "If the account exists, a code has been sent to the email address"


def _issue_code(user, purpose: str) -> None:
    code = get_otp_store().issue(user.email, purpose)
    send_otp_email(user.email, code, purpose)


def _login_payload(user) -> dict:
    user.last_login = timezone.now()
    user.save(update_fields=["last_login"])
    return {"user": UserSerializer(user).data, "tokens": tokens_for_user(user)}


class SignupView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        _issue_code(user, OtpPurpose.SIGNUP)
        return success_response(
            {"user": UserSerializer(user).data, "verification_required": True},
            message="User registered successfully",
            status_code=status.HTTP_201_CREATED,
        )


class VerifyEmailView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = VerifyEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.verify(get_otp_store())
        return success_response(_login_payload(user), message="Email verified successfully")


class LoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        return success_response(_login_payload(user), message="Login successful")


class OtpRequestView(APIView):
    """Запрос кода для входа без пароля."""

    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = OtpRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = find_user_by_email(serializer.validated_data["email"])
        if user is not None and user.is_active:
            _issue_code(user, OtpPurpose.LOGIN)
        return success_response(message=GENERIC_CODE_MESSAGE, status_code=status.HTTP_202_ACCEPTED)


class OtpVerifyView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = OtpLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.verify(get_otp_store())
        return success_response(_login_payload(user), message="Login successful")


class PasswordResetRequestView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = OtpRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = find_user_by_email(serializer.validated_data["email"])
        if user is not None and user.is_active:
            _issue_code(user, OtpPurpose.RESET)
        return success_response(message=GENERIC_CODE_MESSAGE, status_code=status.HTTP_202_ACCEPTED)


class PasswordResetConfirmView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = PasswordResetConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.reset(get_otp_store())
        return success_response(message="Password updated")


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):  # type: ignore
        return success_response(UserSerializer(request.user).data, message="Profile retrieved successfully")


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request):  # type: ignore
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return success_response(UserSerializer(user).data, message="Profile updated successfully")


class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request):  # type: ignore
        serializer = ChangePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return success_response(message="Password changed successfully")


class TokenRefreshView(BaseTokenRefreshView):
    """Rotates the refresh token; the previous one is blacklisted."""

    def post(self, request, *args, **kwargs):  # type: ignore
        response = super().post(request, *args, **kwargs)
        return success_response(response.data, message="Token refreshed successfully")


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):  # type: ignore
        serializer = LogoutSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("User %s logged out", request.user.pk)
        return success_response(message="Logged out successfully")
