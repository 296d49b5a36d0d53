"""
Caller identity and capability checks

The HTTP layer resolves who is calling; the core only ever sees a Caller.
Role checks go through ``require_role`` so every handler enforces them the
same way.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from shared.application.result import Result
from shared.domain.errors import ForbiddenError


class Role(str, Enum):
    PEMINJAM = 'peminjam'    # borrower
    APPROVER = 'approver'
    ADMIN = 'admin'


STAFF_ROLES = frozenset({Role.ADMIN, Role.APPROVER})


@dataclass(frozen=True)
class Caller:
    user_id: int
    role: Role

    @classmethod
    def from_user(cls, user) -> 'Caller':
        return cls(user_id=user.pk, role=Role(user.role))

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES


def require_role(caller: Caller, allowed: Iterable[Role]) -> Result[Caller]:
    """Succeed with the caller if its role is one of ``allowed``"""
    allowed = frozenset(allowed)
    if caller.role in allowed:
        return Result.success(caller)
    return Result.failure(ForbiddenError(
        f"Role '{caller.role.value}' is not allowed to perform this action",
        required=', '.join(sorted(role.value for role in allowed)),
    ))


def require_owner_or_role(caller: Caller, owner_id: int, allowed: Iterable[Role] = ()) -> Result[Caller]:
    """Succeed if the caller owns the resource or holds one of ``allowed``"""
    if caller.user_id == owner_id:
        return Result.success(caller)
    return require_role(caller, allowed)
