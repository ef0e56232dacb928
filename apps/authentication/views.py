"""Authentication: signup, login, session restore, logout, profile."""

import logging
from django.contrib.auth import get_user_model
from django.contrib.auth.signals import user_logged_in, user_logged_out
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework import serializers
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView
from drf_spectacular.utils import extend_schema

from .accounts import AccountDirectory, AccountError
from .models import Profile
from .profiles import resolve_profile, session_restored

logger = logging.getLogger("shiptrack.auth")
directory = AccountDirectory()


# ── Serializers ───────────────────────────────────────────────────────────────
class SignupSerializer(serializers.Serializer):
    email    = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    name     = serializers.CharField(max_length=120)
    role     = serializers.ChoiceField(choices=Profile.Role.choices, default=Profile.Role.CUSTOMER)


class LoginSerializer(serializers.Serializer):
    email    = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()


def _tokens_for(account) -> dict:
    refresh = RefreshToken.for_user(account)
    return {"refresh": str(refresh), "access": str(refresh.access_token)}


# ── Views ─────────────────────────────────────────────────────────────────────
@extend_schema(tags=["Auth"])
class SignupView(APIView):
    """POST /api/auth/signup/ — create an account and its profile."""
    permission_classes = [AllowAny]

    def post(self, request):
        ser = SignupSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        d = ser.validated_data
        try:
            account = directory.create_account(d["email"], d["password"])
        except AccountError:
            return Response({"error": "Signup failed."}, status=status.HTTP_400_BAD_REQUEST)
        directory.save_profile(account, d["name"], d["role"])

        user_logged_in.send(sender=account.__class__, request=request, user=account)
        logger.info("Account %s signed up as %s", account.email, d["role"])
        return Response(
            {**_tokens_for(account), "profile": resolve_profile(account)},
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=["Auth"])
class LoginView(APIView):
    """POST /api/auth/login/ — exchange credentials for JWTs and the resolved profile."""
    permission_classes = [AllowAny]

    def post(self, request):
        ser = LoginSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        account = directory.sign_in(
            ser.validated_data["email"], ser.validated_data["password"], request=request,
        )
        if account is None:
            return Response({"error": "Invalid credentials."}, status=status.HTTP_401_UNAUTHORIZED)

        user_logged_in.send(sender=account.__class__, request=request, user=account)
        return Response({**_tokens_for(account), "profile": resolve_profile(account)})


@extend_schema(tags=["Auth"])
class RefreshView(TokenRefreshView):
    """POST /api/auth/refresh/ — restore a session from a stored refresh token."""

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        token = RefreshToken(request.data["refresh"], verify=False)
        account = get_user_model().objects.filter(pk=token.get(api_settings.USER_ID_CLAIM)).first()
        if account is not None:
            session_restored.send(sender=account.__class__, request=request, user=account)
        return response


@extend_schema(tags=["Auth"])
class LogoutView(APIView):
    """POST /api/auth/logout/ — blacklist the refresh token."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        ser = LogoutSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            RefreshToken(ser.validated_data["refresh"]).blacklist()
        except TokenError:
            return Response({"error": "Logout failed."}, status=status.HTTP_400_BAD_REQUEST)

        user_logged_out.send(sender=request.user.__class__, request=request, user=request.user)
        return Response(status=status.HTTP_205_RESET_CONTENT)


@extend_schema(tags=["Auth"])
class ProfileView(APIView):
    """GET /api/auth/me/ — the caller's resolved profile."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(resolve_profile(request.user))
