from datetime import datetime

import pytest

from taskflow.models import Checklist, HelpTicket, Project, ProjectStep, Task
from taskflow.services import mis_report
from taskflow.services.errors import DataUnavailable


@pytest.fixture
def february_data(db_session, make_user):
    alice = make_user("Alice", designation="Store Keeper")
    bob = make_user("Bob")
    carol = make_user("Carol")

    db_session.add_all([
        Task(title="Pay vendor", task_type="one-time", status="completed", assigned_to=alice.id,
             created_at=datetime(2024, 2, 1, 0, 0, 0)),
        Task(title="Stock count", task_type="daily", status="pending", assigned_to=bob.id,
             created_at=datetime(2024, 2, 29, 23, 59, 59)),
        Task(title="Unassigned", task_type="weekly", status="overdue",
             created_at=datetime(2024, 2, 15)),
        # Outside the month on both sides
        Task(title="January", task_type="daily", status="pending", assigned_to=alice.id,
             created_at=datetime(2024, 1, 31, 23, 59, 59)),
        Task(title="March", task_type="daily", status="pending", assigned_to=alice.id,
             created_at=datetime(2024, 3, 1, 0, 0, 0)),
    ])

    po = Project(project_name="PO-1", fms_name="Purchase", created_at=datetime(2024, 2, 10))
    po.steps.append(ProjectStep(position=0, step_no=1, status="Done", who_id=alice.id))
    po.steps.append(ProjectStep(position=1, step_no=2, status="Pending", who_id=bob.id))
    idle = Project(project_name="PO-2", fms_name="Purchase", created_at=datetime(2024, 2, 11))
    idle.steps.append(ProjectStep(position=0, step_no=1, status="Not Started", who_id=carol.id))
    db_session.add_all([po, idle])

    db_session.add_all([
        Checklist(title="Opening", status="Submitted", assigned_to=alice.id, created_at=datetime(2024, 2, 2)),
        Checklist(title="Closing", status="Pending", assigned_to=alice.id, created_at=datetime(2024, 2, 2)),
    ])

    db_session.add_all([
        HelpTicket(title="Printer", status=None, raised_by=carol.id, created_at=datetime(2024, 2, 3)),
        HelpTicket(title="ERP", status="Verified & Closed", assigned_to=bob.id, raised_by=carol.id,
                   created_at=datetime(2024, 2, 4)),
    ])
    db_session.commit()
    return alice, bob, carol


def test_requires_authentication(client):
    response = client.get("/mis-report/data?year=2024&month=2")

    assert response.status_code == 401


def test_requires_superadmin(client, make_user, headers_for):
    member = make_user("Member", role="admin")

    response = client.get("/mis-report/data?year=2024&month=2", headers=headers_for(member))

    assert response.status_code == 403


@pytest.mark.parametrize("query,detail", [
    ("", "Year and month are required"),
    ("?year=2024", "Year and month are required"),
    ("?year=abc&month=2", "Invalid year or month"),
    ("?year=2024&month=13", "Invalid year or month"),
])
def test_invalid_period_is_rejected(client, admin_headers, query, detail):
    response = client.get(f"/mis-report/data{query}", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == detail


def test_report_for_leap_february(client, admin_headers, february_data):
    alice, bob, carol = february_data

    response = client.get("/mis-report/data?year=2024&month=2", headers=admin_headers)

    assert response.status_code == 200
    report = response.json()
    assert report["success"] is True
    assert report["period"] == {
        "year": 2024,
        "month": 2,
        "startDate": "2024-02-01T00:00:00.000",
        "endDate": "2024-02-29T23:59:59.999",
    }

    tasks = report["tasks"]
    assert tasks["total"] == 3
    assert (tasks["oneOff"], tasks["cyclic"]) == (1, 2)
    assert tasks["byStatus"] == {"pending": 1, "in-progress": 0, "completed": 1, "overdue": 1}
    assert [p["username"] for p in tasks["byPerson"]] == ["Alice", "Bob"]
    assert tasks["byPerson"][0]["completed"] == 1
    assert tasks["total"] == sum(p["total"] for p in tasks["byPerson"]) + 1

    fms = report["fms"]
    assert (fms["total"], fms["completed"], fms["inProgress"]) == (2, 0, 1)
    assert fms["stepStatusBreakdown"] == {"2": 1, "1": 1}
    by_user = {p["userId"]: p for p in fms["byPerson"]}
    assert by_user[str(alice.id)]["completed"] == 1
    assert by_user[str(bob.id)]["pendingSteps"] == [2]
    assert by_user[str(carol.id)]["pendingSteps"] == [1]

    assert report["checklists"]["done"] == 1
    assert report["checklists"]["notDone"] == 1

    tickets = report["helpTickets"]
    assert (tickets["total"], tickets["open"], tickets["in-progress"], tickets["closed"]) == (2, 1, 0, 1)
    people = {p["username"]: p for p in tickets["byPerson"]}
    assert people["Carol"]["open"] == 1
    assert people["Bob"]["closed"] == 1

    # The admin making the request is listed too, even with no activity
    assert [u["username"] for u in report["users"]] == ["Admin", "Alice", "Bob", "Carol"]
    assert set(report["users"][0]) == {"_id", "username", "email"}


def test_empty_month_still_reports_seeded_buckets(client, admin_headers, february_data):
    response = client.get("/mis-report/data?year=2023&month=6", headers=admin_headers)

    report = response.json()
    assert report["tasks"]["total"] == 0
    assert report["tasks"]["byType"]["quarterly"] == 0
    assert report["fms"]["stepStatusBreakdown"] == {}
    assert len(report["users"]) == 4


def test_report_is_repeatable(client, admin_headers, february_data):
    first = client.get("/mis-report/data?year=2024&month=2", headers=admin_headers)
    second = client.get("/mis-report/data?year=2024&month=2", headers=admin_headers)

    assert first.content == second.content


def test_store_failure_returns_server_error(client, admin_headers, monkeypatch):
    def broken_fetch(db, period):
        raise DataUnavailable("Unable to load checklists")

    monkeypatch.setattr(mis_report, "fetch_checklists", broken_fetch)

    response = client.get("/mis-report/data?year=2024&month=2", headers=admin_headers)

    assert response.status_code == 500
    assert "Unable to load checklists" in response.json()["detail"]
