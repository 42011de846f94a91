from enum import Enum

from fastapi import Depends, HTTPException


class Role(Enum):
    ADMIN = "ADMIN"
    ACCOUNTANT = "ACCOUNTANT"
    EMPLOYEE = "EMPLOYEE"


_RANK = {
    Role.EMPLOYEE: 1,
    Role.ACCOUNTANT: 2,
    Role.ADMIN: 3,
}


def require_role(role: Role):
    from workhours.deps.auth import Principal, require_auth

    def dependency(principal: Principal = Depends(require_auth)) -> Principal:
        if _RANK[principal.role] < _RANK[role]:
            raise HTTPException(status_code=403, detail="Insufficient role")
        return principal

    return dependency
