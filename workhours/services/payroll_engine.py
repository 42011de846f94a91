import logging
import re
from abc import ABC, abstractmethod
from datetime import date

from sqlalchemy import text
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


class PayrollEngine(ABC):
    """Computes payouts for a closed date range.

    Implementations must tolerate being called more than once for the same
    period: a restart or a manual run can repeat a period that already ran.
    """

    @abstractmethod
    def generate_payouts(self, db: Session, period_start: date, period_end: date) -> None:
        ...


class StoredProcedurePayrollEngine(PayrollEngine):
    """Delegates payroll arithmetic to a database procedure taking (start, end)."""

    def __init__(self, procedure_name: str = "generate_monthly_payouts"):
        if not _IDENTIFIER.match(procedure_name or ""):
            raise ValueError(f"Invalid payroll procedure name: {procedure_name!r}")
        self.procedure_name = procedure_name

    def generate_payouts(self, db: Session, period_start: date, period_end: date) -> None:
        logger.info(
            "Calling payroll procedure",
            extra={
                "procedure": self.procedure_name,
                "period_start": period_start.isoformat(),
                "period_end": period_end.isoformat(),
            },
        )
        db.execute(
            text(f"CALL {self.procedure_name}(:period_start, :period_end)"),
            {"period_start": period_start, "period_end": period_end},
        )
