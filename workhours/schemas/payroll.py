from datetime import date
from typing import Optional

from pydantic import BaseModel


class PayoutPeriodResponse(BaseModel):
    period_start: date
    period_end: date


class PayoutOutcomeResponse(BaseModel):
    period_start: date
    period_end: date
    trigger: str
    succeeded: bool
    error: Optional[str]
