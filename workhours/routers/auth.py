from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from workhours.core.authorization import Role
from workhours.core.config import get_settings
from workhours.services.auth_service import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])


class TokenRequest(BaseModel):
    employee_id: int
    role: Role = Role.EMPLOYEE


@router.post("/token")
def issue_token(payload: TokenRequest):
    # Identity is established upstream; this endpoint only exists for local use.
    if get_settings().env not in {"dev", "local", "test"}:
        raise HTTPException(status_code=404, detail="Not Found")
    try:
        token = create_access_token(employee_id=int(payload.employee_id), role=payload.role.value)
    except Exception as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return {
        "access_token": token,
        "token_type": "bearer",
    }
