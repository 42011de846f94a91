from datetime import date, datetime, timezone

from fastapi.testclient import TestClient

from workhours.core.clock import FixedClock
from workhours.core.errors import EngineFailure
from workhours.main import app
from workhours.routers.payroll import get_payout_scheduler
from workhours.services.payout_scheduler import PayoutScheduler
from workhours.services.payroll_engine import PayrollEngine

client = TestClient(app)


class _Engine(PayrollEngine):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    def generate_payouts(self, db, period_start, period_end):
        self.calls.append((period_start, period_end))
        if self.fail:
            raise EngineFailure("procedure missing")


def _log(employee_id, work_type_id, auth_headers, work_date, start, end):
    r = client.post(
        "/work_hours",
        json={"work_date": work_date, "work_type_id": work_type_id, "start_time": start, "end_time": end},
        headers=auth_headers(employee_id),
    )
    assert r.status_code == 201, r.text


def test_issue_token_in_test_env():
    r = client.post("/auth/token", json={"employee_id": 3, "role": "ADMIN"})
    assert r.status_code == 200, r.text
    assert r.json()["token_type"] == "bearer"

    me = client.get("/statistics/me", headers={"Authorization": f"Bearer {r.json()['access_token']}"})
    assert me.status_code == 200
    assert me.json() == {"employee_id": 3, "total_hours": 0.0, "weeks_count": 0, "average_weekly_hours": 0.0}


def test_weekly_statistics_follow_week_offset(employee_factory, work_type_factory, auth_headers, fixed_clock):
    e = employee_factory()
    wt = work_type_factory()
    fixed_clock(datetime(2024, 6, 19, 10, 0, tzinfo=timezone.utc))

    _log(e.id, wt.id, auth_headers, "2024-06-10", "09:00:00", "17:00:00")
    _log(e.id, wt.id, auth_headers, "2024-06-12", "09:00:00", "13:00:00")

    current = client.get("/statistics/weekly", headers=auth_headers(e.id))
    assert current.status_code == 200, current.text
    assert current.json()["week_start"] == "2024-06-17"
    assert current.json()["total_hours"] == 0
    assert current.json()["average_daily_hours"] == 0

    previous = client.get("/statistics/weekly", params={"week_offset": -1}, headers=auth_headers(e.id)).json()
    assert previous == {
        "employee_id": e.id,
        "week_offset": -1,
        "week_start": "2024-06-10",
        "week_end": "2024-06-16",
        "total_hours": 12.0,
        "days_worked": 2,
        "average_daily_hours": 6.0,
    }


def test_employee_statistics_access(employee_factory, work_type_factory, auth_headers):
    e = employee_factory()
    other = employee_factory(name="Other")
    accountant = employee_factory(name="Accountant")
    wt = work_type_factory()

    _log(e.id, wt.id, auth_headers, "2024-06-10", "09:00:00", "17:00:00")
    _log(e.id, wt.id, auth_headers, "2024-06-18", "09:00:00", "13:00:00")

    assert client.get(f"/statistics/employees/{e.id}", headers=auth_headers(other.id)).status_code == 403

    r = client.get(f"/statistics/employees/{e.id}", headers=auth_headers(accountant.id, "ACCOUNTANT"))
    assert r.status_code == 200, r.text
    assert r.json() == {"employee_id": e.id, "total_hours": 12.0, "weeks_count": 2, "average_weekly_hours": 6.0}


def test_manual_payout_run(employee_factory, auth_headers):
    admin = employee_factory(name="Admin")
    engine = _Engine()
    app.dependency_overrides[get_payout_scheduler] = lambda: PayoutScheduler(
        engine, clock=FixedClock(date(2024, 3, 15))
    )
    try:
        period = client.get("/payroll/period", headers=auth_headers(admin.id, "ADMIN"))
        assert period.json() == {"period_start": "2024-02-01", "period_end": "2024-02-29"}

        assert client.post("/payroll/payouts/run", headers=auth_headers(admin.id)).status_code == 403

        r = client.post("/payroll/payouts/run", headers=auth_headers(admin.id, "ADMIN"))
        assert r.status_code == 200, r.text
        assert r.json()["succeeded"] is True
        assert r.json()["trigger"] == "manual"
        assert engine.calls == [(date(2024, 2, 1), date(2024, 2, 29))]
    finally:
        app.dependency_overrides.clear()


def test_failed_payout_run_is_reported_not_raised(employee_factory, work_type_factory, auth_headers):
    admin = employee_factory(name="Admin")
    wt = work_type_factory()
    app.dependency_overrides[get_payout_scheduler] = lambda: PayoutScheduler(
        _Engine(fail=True), clock=FixedClock(date(2024, 3, 15))
    )
    try:
        r = client.post("/payroll/payouts/run", headers=auth_headers(admin.id, "ADMIN"))
        assert r.status_code == 200, r.text
        assert r.json()["succeeded"] is False
        assert "procedure missing" in r.json()["error"]
    finally:
        app.dependency_overrides.clear()

    created = client.post(
        "/work_hours",
        json={"work_date": "2024-03-14", "work_type_id": wt.id},
        headers=auth_headers(admin.id),
    )
    approved = client.post(f"/work_hours/{created.json()['id']}/approve", headers=auth_headers(admin.id, "ADMIN"))
    assert approved.status_code == 200
    assert approved.json()["approved"] is True


def test_health():
    assert client.get("/health").json()["status"] == "ok"
