"""
Caller identity passed from the HTTP layer into the services.

Authentication (JWT or legacy token) happens in DRF before a view runs,
except on the schedule endpoint, which checks the bearer JWT itself.
Views turn the authenticated ``request.user`` into an :class:`Identity`
so that the services never look at headers and the role claim they act
on is explicit and easy to fake in tests.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

ADMIN_ROLE = 'ADMIN'
STAFF_ROLES = {'STAFF', 'ADMIN'}


@dataclass(frozen=True)
class Identity:
    user_id: Optional[int]
    role: Optional[str]

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.role == ADMIN_ROLE


ANONYMOUS = Identity(user_id=None, role=None)


def identity_from_request(request) -> Identity:
    """Return the identity of the authenticated caller, or ``ANONYMOUS``."""
    user = getattr(request, 'user', None)
    if not (user and getattr(user, 'is_authenticated', False)):
        return ANONYMOUS
    return Identity(user_id=user.id, role=getattr(user, 'role', None))
