from typing import Dict, FrozenSet
import logging

from fastapi import Depends, Request

from api.utils.authentication import get_current_user
from api.utils.exceptions import AuthorizationError
from api.v1.models.user import User, Role

logger = logging.getLogger(__name__)

STAFF = frozenset({Role.admin, Role.chief})
CHIEF_ONLY = frozenset({Role.chief})

# operation -> roles allowed to perform it; anything not listed is denied
POLICY: Dict[str, FrozenSet[Role]] = {
    "users:ban": STAFF,
    "users:unban": STAFF,
    "users:promote-to-admin": CHIEF_ONLY,
    "users:promote-to-chief": CHIEF_ONLY,
    "users:demote-to-user": CHIEF_ONLY,
    "quizzes:hide": STAFF,
}


def is_permitted(operation: str, role: Role) -> bool:
    return role in POLICY.get(operation, frozenset())


def require_permission(operation: str):
    def checker(request: Request, current_user: User = Depends(get_current_user)) -> User:
        principal = request.state.principal
        if not is_permitted(operation, principal.role):
            logger.warning(
                f"User '{principal.nickname}' (authorities: {sorted(principal.authorities)}) "
                f"denied operation '{operation}'"
            )
            raise AuthorizationError("Forbidden : not good roles")
        return current_user

    return checker
