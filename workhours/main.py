"""Work hours service application. Run with ``uvicorn workhours.main:app``."""

from contextlib import asynccontextmanager
import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from workhours.core.logging import configure_logging
from workhours.services.payout_scheduler import start_payout_scheduler_task
from workhours.models import employee, project, work_hours, work_type  # noqa: F401
from workhours.routers.auth import router as auth_router
from workhours.routers.payroll import router as payroll_router
from workhours.routers.statistics import router as statistics_router
from workhours.routers.work_hours import router as work_hours_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()

    task = start_payout_scheduler_task()
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:
                # scheduler crash during shutdown; already logged.
                pass


app = FastAPI(
    title="Work Hours & Payroll Scheduler",
    lifespan=lifespan,
)


@app.middleware("http")
async def catch_unhandled_exceptions(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled exception", extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


app.include_router(auth_router)
app.include_router(work_hours_router)
app.include_router(statistics_router)
app.include_router(payroll_router)


@app.get("/")
def root():
    return {"status": "Work hours service running"}


@app.get("/health")
def health():
    return {
        "status": "ok",
        "version": "1.0.0",
    }
