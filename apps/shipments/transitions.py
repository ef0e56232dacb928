"""
Shipment status transition policies.

Happy path:  created → picked_up → in_transit → out_for_delivery → delivered
`delayed` may be entered from any non-terminal status.

The default policy accepts every change (agents and admins can correct a
status in either direction). LinearPolicy enforces the progression above.
"""

from django.conf import settings

from .exceptions import InvalidTransition
from .models import Shipment

S = Shipment.Status

PROGRESSION = [S.CREATED, S.PICKED_UP, S.IN_TRANSIT, S.OUT_FOR_DELIVERY, S.DELIVERED]
TERMINAL = (S.DELIVERED,)


class TransitionPolicy:
    name = "base"

    def allows(self, current: str, new: str) -> bool:
        raise NotImplementedError

    def check(self, current: str, new: str) -> None:
        if new not in S.values:
            raise InvalidTransition(f"Unknown status: {new}")
        if not self.allows(current, new):
            raise InvalidTransition(f"Cannot move shipment from {current} to {new}")


class PermissivePolicy(TransitionPolicy):
    name = "permissive"

    def allows(self, current, new):
        return True


class LinearPolicy(TransitionPolicy):
    """Forward-only progression; delayed shipments may resume at any forward step."""
    name = "linear"

    def allows(self, current, new):
        if current == new:
            return True
        if current in TERMINAL:
            return False
        if new == S.DELAYED:
            return True
        if current == S.DELAYED:
            return new in PROGRESSION[1:]
        return PROGRESSION.index(new) > PROGRESSION.index(current)


POLICIES = {cls.name: cls for cls in (PermissivePolicy, LinearPolicy)}


def get_transition_policy(name: str = None) -> TransitionPolicy:
    name = name or getattr(settings, "SHIPMENT_TRANSITION_POLICY", "permissive")
    cls = POLICIES.get(name)
    if not cls:
        raise ValueError(f"Unknown transition policy: {name}")
    return cls()
