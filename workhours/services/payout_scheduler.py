import asyncio
import calendar
import logging
import os
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Awaitable, Callable, Optional

from sqlalchemy.orm import Session

from workhours.core.clock import Clock, get_clock
from workhours.core.config import get_settings
from workhours.database import SessionLocal
from workhours.services.payroll_engine import PayrollEngine, StoredProcedurePayrollEngine

logger = logging.getLogger(__name__)

# Upper bound for a single sleep so clock changes are picked up within the hour.
MAX_SLEEP_SECONDS = 3600.0


@dataclass(frozen=True)
class PayoutPeriod:
    start: date
    end: date


@dataclass(frozen=True)
class PayoutOutcome:
    period: PayoutPeriod
    trigger: str
    succeeded: bool
    error: Optional[str] = None
    skipped: bool = False


def previous_month_period(today: date) -> PayoutPeriod:
    """First through last calendar day of the month before ``today``'s month."""
    first_of_this_month = today.replace(day=1)
    last_of_previous = first_of_this_month - timedelta(days=1)
    return PayoutPeriod(start=last_of_previous.replace(day=1), end=last_of_previous)


def next_run_at(now: datetime, day_of_month: int = 1, hour: int = 1, minute: int = 0) -> datetime:
    """Next monthly tick strictly after ``now``, in ``now``'s timezone."""
    day = min(day_of_month, calendar.monthrange(now.year, now.month)[1])
    candidate = now.replace(day=day, hour=hour, minute=minute, second=0, microsecond=0)
    if candidate > now:
        return candidate

    year, month = (now.year + 1, 1) if now.month == 12 else (now.year, now.month + 1)
    day = min(day_of_month, calendar.monthrange(year, month)[1])
    return candidate.replace(year=year, month=month, day=day)


class PayoutScheduler:
    def __init__(
        self,
        engine: PayrollEngine,
        *,
        clock: Optional[Clock] = None,
        session_factory: Callable[[], Session] = SessionLocal,
    ):
        self.engine = engine
        self.clock = clock or get_clock()
        self.session_factory = session_factory
        self.last_completed_period: Optional[PayoutPeriod] = None

    def current_period(self) -> PayoutPeriod:
        return previous_month_period(self.clock.today())

    def run_once(self, trigger: str = "scheduled") -> PayoutOutcome:
        """Generate payouts for the previous month.

        Engine failures are logged and reported in the outcome; they are never
        re-raised and never retried here. The next attempt is the next tick or
        a process restart.

        A period this scheduler already completed is skipped unless the run
        is manual. Runs in other processes are not tracked, so the engine
        still has to tolerate a repeated period after a restart.
        """
        period = self.current_period()
        log_extra = {
            "component": "payout_scheduler",
            "trigger": trigger,
            "period_start": period.start.isoformat(),
            "period_end": period.end.isoformat(),
        }

        if trigger != "manual" and period == self.last_completed_period:
            logger.info("Payout generation skipped; period already completed", extra=log_extra)
            return PayoutOutcome(period=period, trigger=trigger, succeeded=True, skipped=True)

        logger.info("Payout generation started", extra=log_extra)

        db = self.session_factory()
        try:
            self.engine.generate_payouts(db, period.start, period.end)
            db.commit()
        except Exception as exc:
            try:
                db.rollback()
            except Exception:
                pass
            logger.exception("Payout generation failed", extra=log_extra)
            return PayoutOutcome(period=period, trigger=trigger, succeeded=False, error=str(exc))
        finally:
            db.close()

        self.last_completed_period = period
        logger.info("Payout generation completed", extra=log_extra)
        return PayoutOutcome(period=period, trigger=trigger, succeeded=True)


async def _run_tick(scheduler: PayoutScheduler, trigger: str) -> None:
    try:
        await asyncio.to_thread(scheduler.run_once, trigger)
    except asyncio.CancelledError:
        raise
    except Exception:
        # run_once contains engine errors; this covers everything around it.
        logger.exception(
            "Payout scheduler tick failed",
            extra={"component": "payout_scheduler", "trigger": trigger},
        )


async def payout_scheduler_loop(
    scheduler: PayoutScheduler,
    *,
    day_of_month: int = 1,
    hour: int = 1,
    run_on_startup: bool = True,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
    """Run payouts once at startup, then on every monthly tick until cancelled."""
    clock = scheduler.clock
    logger.info(
        "Payout scheduler started",
        extra={"day_of_month": day_of_month, "hour": hour, "run_on_startup": run_on_startup},
    )

    try:
        if run_on_startup:
            await _run_tick(scheduler, "startup")

        while True:
            target = next_run_at(clock.now(), day_of_month=day_of_month, hour=hour)
            logger.info("Next payout run scheduled", extra={"run_at": target.isoformat()})

            while True:
                remaining = (target - clock.now()).total_seconds()
                if remaining <= 0:
                    break
                await sleep(min(remaining, MAX_SLEEP_SECONDS))

            await _run_tick(scheduler, "scheduled")

    except asyncio.CancelledError:
        logger.info("Payout scheduler cancelled; shutting down")
        raise


def payout_scheduler_enabled() -> bool:
    # Disable by default under pytest to keep tests deterministic.
    if os.getenv("PYTEST_CURRENT_TEST"):
        return False
    return get_settings().payout_scheduler_enabled


def build_payout_scheduler() -> PayoutScheduler:
    settings = get_settings()
    return PayoutScheduler(StoredProcedurePayrollEngine(settings.payroll_procedure))


def start_payout_scheduler_task() -> asyncio.Task | None:
    if not payout_scheduler_enabled():
        logger.info("Payout scheduler disabled")
        return None

    settings = get_settings()
    return asyncio.create_task(
        payout_scheduler_loop(
            build_payout_scheduler(),
            day_of_month=settings.payout_day_of_month,
            hour=settings.payout_hour,
            run_on_startup=settings.payout_run_on_startup,
        )
    )
