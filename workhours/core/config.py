import os
from dataclasses import dataclass
from functools import lru_cache


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return default
    return v.strip() not in {"0", "false", "False", "no", "NO"}


@dataclass(frozen=True)
class Settings:
    env: str
    log_level: str
    timezone: str
    payout_scheduler_enabled: bool
    payout_run_on_startup: bool
    payout_day_of_month: int
    payout_hour: int
    payroll_procedure: str


@lru_cache
def get_settings() -> Settings:
    day = _env_int("PAYOUT_DAY_OF_MONTH", 1)
    hour = _env_int("PAYOUT_HOUR", 1)

    return Settings(
        env=os.getenv("ENV", "dev").lower(),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        timezone=os.getenv("APP_TIMEZONE", "UTC"),
        payout_scheduler_enabled=_env_bool("PAYOUT_SCHEDULER_ENABLED", True),
        payout_run_on_startup=_env_bool("PAYOUT_RUN_ON_STARTUP", True),
        # Days past 28 do not exist in every month.
        payout_day_of_month=min(max(day, 1), 28),
        payout_hour=min(max(hour, 0), 23),
        payroll_procedure=os.getenv("PAYROLL_PROCEDURE", "generate_monthly_payouts"),
    )
