from fastapi import APIRouter, Depends

from workhours.core.authorization import Role, require_role
from workhours.schemas.payroll import PayoutOutcomeResponse, PayoutPeriodResponse
from workhours.services.payout_scheduler import PayoutScheduler, build_payout_scheduler

router = APIRouter(prefix="/payroll", tags=["Payroll"])


def get_payout_scheduler() -> PayoutScheduler:
    return build_payout_scheduler()


@router.get("/period", response_model=PayoutPeriodResponse)
def current_payout_period(
    scheduler: PayoutScheduler = Depends(get_payout_scheduler),
    _role=Depends(require_role(Role.ACCOUNTANT)),
):
    period = scheduler.current_period()
    return {"period_start": period.start, "period_end": period.end}


@router.post("/payouts/run", response_model=PayoutOutcomeResponse)
def run_payouts(
    scheduler: PayoutScheduler = Depends(get_payout_scheduler),
    _role=Depends(require_role(Role.ADMIN)),
):
    outcome = scheduler.run_once(trigger="manual")
    return {
        "period_start": outcome.period.start,
        "period_end": outcome.period.end,
        "trigger": outcome.trigger,
        "succeeded": outcome.succeeded,
        "error": outcome.error,
    }
