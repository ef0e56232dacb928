"""
Auth provider adapter.
Wraps account creation, sign-in and profile writes so the lifecycle code never
touches the user model directly.
"""

import logging
from django.contrib.auth import authenticate, get_user_model
from django.db import transaction

from .models import Profile

logger = logging.getLogger("shiptrack.auth")


class AccountError(Exception):
    """Generic auth-provider failure (duplicate email, bad input)."""


class AccountDirectory:
    """Create, authenticate and rename accounts. Cannot delete other users' accounts."""

    def create_account(self, email: str, password: str):
        Account = get_user_model()
        if Account.objects.filter(email__iexact=email).exists():
            logger.info("Signup rejected: %s already registered", email)
            raise AccountError("Account already exists.")
        with transaction.atomic():
            return Account.objects.create_user(email=email, password=password)

    def sign_in(self, email: str, password: str, request=None):
        """Return the account for valid credentials, else None."""
        return authenticate(request, email=email, password=password)

    def update_display_name(self, account, name: str) -> None:
        account.display_name = name
        account.save(update_fields=["display_name"])

    def save_profile(self, account, name: str, role: str) -> Profile:
        profile, _ = Profile.objects.update_or_create(
            account=account, defaults={"name": name, "role": role},
        )
        return profile
