"""
Profile resolver and auth-state subscription.

resolve_profile() turns an authenticated account into the application-level
profile {id, email, name, role}. on_auth_state_change() registers the single
process-wide listener for login, logout and session restore.
"""

import logging
from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.dispatch import Signal

from .models import Profile

logger = logging.getLogger("shiptrack.auth")

DEFAULT_ROLE = Profile.Role.CUSTOMER

# Sent by the token refresh view when a stored session is brought back
session_restored = Signal()

_active_subscription = None


def resolve_profile(account) -> dict:
    try:
        profile = account.profile
    except Profile.DoesNotExist:
        profile = None
    return {
        "id":    str(account.pk),
        "email": account.email or "",
        "name":  (profile.name if profile else "") or "",
        "role":  (profile.role if profile else "") or DEFAULT_ROLE,
    }


def role_of(account) -> str:
    return resolve_profile(account)["role"]


class AuthStateSubscription:
    """Handle for a registered auth-state callback. cancel() is idempotent."""

    def __init__(self, callback):
        self._callback = callback
        self._uid = f"auth-state-{id(self)}"
        self.active = False

    def _start(self):
        user_logged_in.connect(self._signed_in, weak=False, dispatch_uid=self._uid)
        session_restored.connect(self._signed_in, weak=False, dispatch_uid=self._uid)
        user_logged_out.connect(self._signed_out, weak=False, dispatch_uid=self._uid)
        self.active = True

    def _signed_in(self, sender, user=None, **kwargs):
        self._callback(resolve_profile(user))

    def _signed_out(self, sender, user=None, **kwargs):
        self._callback(None)

    def cancel(self) -> None:
        if not self.active:
            return
        for signal in (user_logged_in, session_restored, user_logged_out):
            signal.disconnect(dispatch_uid=self._uid)
        self.active = False


def on_auth_state_change(callback) -> AuthStateSubscription:
    """Subscribe to auth state changes; replaces any previous subscription."""
    global _active_subscription
    if _active_subscription is not None:
        _active_subscription.cancel()
    _active_subscription = AuthStateSubscription(callback)
    _active_subscription._start()
    logger.debug("Auth state subscription registered")
    return _active_subscription
