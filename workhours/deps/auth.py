from dataclasses import dataclass

from fastapi import HTTPException, Request

from workhours.core.authorization import Role
from workhours.services.auth_service import verify_token


@dataclass(frozen=True)
class Principal:
    employee_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def _parse_bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    parts = auth_header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise HTTPException(status_code=401, detail="Invalid Authorization header")

    return parts[1].strip()


def require_auth(request: Request) -> Principal:
    token = _parse_bearer_token(request)

    try:
        claims = verify_token(token)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    claim_role = claims.get("role") or Role.EMPLOYEE.value
    try:
        role = Role(str(claim_role).upper())
    except ValueError as exc:
        raise HTTPException(status_code=403, detail="Invalid role claim") from exc

    principal = Principal(employee_id=int(claims["sub"]), role=role)

    request.state.employee_id = principal.employee_id
    request.state.role = role.value

    return principal
