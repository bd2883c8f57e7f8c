import json
from datetime import datetime
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

from taskflow.services.errors import DataUnavailable, InvalidInput
from taskflow.services.mis_report import (
    _run_query,
    aggregate_checklists,
    aggregate_help_tickets,
    aggregate_projects,
    aggregate_tasks,
    first_pending_step,
    resolve_period,
    ticket_bucket,
)


def user(user_id, username="user", email=None):
    return SimpleNamespace(id=user_id, username=username, email=email or f"{username}@example.com")


def task(task_type, status, assignee=None):
    return SimpleNamespace(task_type=task_type, status=status, assignee=assignee)


def step(step_no, status, who=None):
    return SimpleNamespace(step_no=step_no, status=status, who=who)


def project(*steps):
    return SimpleNamespace(steps=list(steps))


def checklist(status, assignee=None):
    return SimpleNamespace(status=status, assignee=assignee)


def ticket(status, assignee=None, raiser=None):
    return SimpleNamespace(status=status, assignee=assignee, raiser=raiser)


ALICE = user(1, "alice")
BOB = user(2, "bob")
CAROL = user(3, "carol")


# ---------------------------------------------------------------- period

@pytest.mark.parametrize("year,month,last_day", [
    (2024, 2, 29),
    (2023, 2, 28),
    (2024, 4, 30),
    (2024, 12, 31),
    (2025, 1, 31),
])
def test_period_covers_exactly_one_month(year, month, last_day):
    period = resolve_period(year, month)

    assert period.start == datetime(year, month, 1, 0, 0, 0)
    assert period.end == datetime(year, month, last_day, 23, 59, 59, 999000)
    assert (period.start.year, period.start.month) == (period.end.year, period.end.month)


def test_period_accepts_query_strings():
    period = resolve_period("2024", " 2 ")

    assert period.to_dict() == {
        "year": 2024,
        "month": 2,
        "startDate": "2024-02-01T00:00:00.000",
        "endDate": "2024-02-29T23:59:59.999",
    }


@pytest.mark.parametrize("year,month", [
    (None, 5),
    (2024, None),
    ("", "5"),
    ("2024", ""),
])
def test_period_requires_year_and_month(year, month):
    with pytest.raises(InvalidInput, match="required"):
        resolve_period(year, month)


@pytest.mark.parametrize("year,month", [
    ("twenty", "5"),
    ("2024", "may"),
    ("2024", "0"),
    ("2024", "13"),
    ("0", "1"),
    ("10000", "1"),
    ("2024", "1.5"),
])
def test_period_rejects_invalid_values(year, month):
    with pytest.raises(InvalidInput, match="Invalid"):
        resolve_period(year, month)


# ---------------------------------------------------------------- tasks

def test_one_time_completed_task_scenario():
    summary = aggregate_tasks([task("one-time", "completed", ALICE)]).to_dict()

    assert summary["oneOff"] == 1
    assert summary["cyclic"] == 0
    assert summary["byStatus"]["completed"] == 1
    assert summary["byType"]["one-time"] == 1
    person = summary["byPerson"][0]
    assert person["userId"] == "1"
    assert person["completed"] == 1
    assert person["oneOff"] == 1
    assert person["total"] == 1


def test_task_histograms_are_seeded_with_known_buckets():
    summary = aggregate_tasks([]).to_dict()

    assert summary["total"] == 0
    assert summary["byStatus"] == {"pending": 0, "in-progress": 0, "completed": 0, "overdue": 0}
    assert summary["byType"] == {
        "one-time": 0, "daily": 0, "weekly": 0, "monthly": 0, "quarterly": 0, "yearly": 0,
    }
    assert summary["byPerson"] == []


def test_cyclic_is_everything_that_is_not_one_time():
    tasks = [
        task("one-time", "pending"),
        task("daily", "pending"),
        task("fortnightly", "pending"),
        task("adhoc", "pending"),
    ]

    summary = aggregate_tasks(tasks).to_dict()

    assert summary["oneOff"] == 1
    assert summary["cyclic"] == 3
    assert summary["byType"]["fortnightly"] == 1
    assert summary["byType"]["adhoc"] == 1


def test_unrecognized_task_status_gets_its_own_bucket():
    summary = aggregate_tasks([
        task("daily", "on-hold", ALICE),
        task("daily", "pending", ALICE),
    ]).to_dict()

    assert summary["byStatus"]["on-hold"] == 1
    assert sum(summary["byStatus"].values()) == summary["total"]
    person = summary["byPerson"][0]
    assert person["on-hold"] == 1
    assert person["pending"] == 1
    assert person["total"] == person["pending"] + person["in-progress"] + person["completed"] + person["overdue"] + person["on-hold"]


def test_unassigned_tasks_count_in_totals_only():
    tasks = [
        task("daily", "pending", ALICE),
        task("weekly", "overdue", BOB),
        task("one-time", "completed", None),
        task("one-time", "in-progress", ALICE),
    ]

    summary = aggregate_tasks(tasks).to_dict()

    assert summary["total"] == 4
    assert [p["userId"] for p in summary["byPerson"]] == ["1", "2"]
    assigned_total = sum(p["total"] for p in summary["byPerson"])
    assert summary["total"] == assigned_total + 1
    assert summary["byPerson"][0]["in-progress"] == 1
    assert summary["byPerson"][0]["oneOff"] == 1
    assert summary["byPerson"][0]["cyclic"] == 1


def test_person_with_missing_identity_fields_gets_defaults():
    nameless = SimpleNamespace(id=9, username=None, email=None)

    person = aggregate_tasks([task("daily", "pending", nameless)]).to_dict()["byPerson"][0]

    assert person["username"] == "Unknown"
    assert person["email"] == ""


# ---------------------------------------------------------------- fms

def test_done_then_pending_workflow_scenario():
    summary = aggregate_projects([
        project(step(1, "Done", ALICE), step(2, "Pending", BOB)),
    ]).to_dict()

    assert summary["total"] == 1
    assert summary["completed"] == 0
    assert summary["inProgress"] == 1
    assert summary["stepStatusBreakdown"] == {"2": 1}
    alice, bob = summary["byPerson"]
    assert alice["userId"] == "1" and alice["completed"] == 1 and alice["pendingSteps"] == []
    assert bob["userId"] == "2" and bob["pendingSteps"] == [2] and bob["inProgress"] == 0


def test_all_done_workflow_is_completed():
    summary = aggregate_projects([project(step(1, "Done"), step(2, "Done"))]).to_dict()

    assert summary["completed"] == 1
    assert summary["inProgress"] == 0
    assert summary["stepStatusBreakdown"] == {}


def test_all_not_started_workflow_lands_in_neither_bucket():
    summary = aggregate_projects([
        project(step(1, "Not Started", ALICE), step(2, "Not Started", BOB)),
    ]).to_dict()

    assert summary["total"] == 1
    assert summary["completed"] == 0
    assert summary["inProgress"] == 0
    assert summary["stepStatusBreakdown"] == {"1": 1}


def test_workflow_without_steps_counts_as_completed():
    summary = aggregate_projects([project()]).to_dict()

    assert summary["completed"] == 1
    assert summary["inProgress"] == 0
    assert summary["byPerson"] == []


def test_first_pending_step_follows_stored_order():
    steps = [step(5, "Done"), step(3, "Not Started"), step(1, "In Progress")]

    assert first_pending_step(steps).step_no == 3
    assert first_pending_step([step(1, "Done")]) is None


def test_missing_step_number_defaults_to_zero():
    summary = aggregate_projects([project(step(None, "Pending", ALICE))]).to_dict()

    assert summary["stepStatusBreakdown"] == {"0": 1}
    assert summary["byPerson"][0]["pendingSteps"] == [0]


def test_person_walks_every_step_and_keeps_duplicate_pending_steps():
    projects = [
        project(step(1, "In Progress", ALICE), step(2, "Not Started", ALICE), step(3, "Pending", BOB)),
        project(step(1, "Done", ALICE), step(2, "Pending", ALICE), step(3, "Done", None)),
    ]

    summary = aggregate_projects(projects).to_dict()

    alice = summary["byPerson"][0]
    assert alice["total"] == 4
    assert alice["inProgress"] == 1
    assert alice["completed"] == 1
    assert alice["pendingSteps"] == [2, 2]
    assert alice["total"] == alice["inProgress"] + alice["completed"] + len(alice["pendingSteps"])
    assert summary["stepStatusBreakdown"] == {"1": 1, "2": 1}


# ---------------------------------------------------------------- checklists

def test_checklists_split_on_submitted():
    summary = aggregate_checklists([
        checklist("Submitted", ALICE),
        checklist("Pending", ALICE),
        checklist("submitted", BOB),
        checklist(None, None),
    ]).to_dict()

    assert summary["total"] == 4
    assert summary["done"] == 1
    assert summary["notDone"] == 3
    assert summary["done"] + summary["notDone"] == summary["total"]
    alice, bob = summary["byPerson"]
    assert (alice["total"], alice["done"], alice["notDone"]) == (2, 1, 1)
    assert (bob["total"], bob["done"], bob["notDone"]) == (1, 0, 1)


# ---------------------------------------------------------------- help tickets

@pytest.mark.parametrize("status", ["CLOSED", "closed", "Verified & Closed", "VERIFIED & CLOSED"])
def test_closed_statuses_match_case_insensitively(status):
    assert ticket_bucket(status) == "closed"


@pytest.mark.parametrize("status,bucket", [
    (None, "open"),
    ("", "open"),
    ("Open", "open"),
    ("In Progress", "in_progress"),
    ("in-progress", None),
    ("Escalated", None),
])
def test_ticket_buckets(status, bucket):
    assert ticket_bucket(status) == bucket


def test_ticket_without_status_falls_back_to_raiser():
    summary = aggregate_help_tickets([ticket(None, assignee=None, raiser=CAROL)]).to_dict()

    assert summary["open"] == 1
    person = summary["byPerson"][0]
    assert person["userId"] == "3"
    assert person["username"] == "carol"
    assert person["open"] == 1


def test_unrecognized_ticket_status_only_counts_in_total():
    summary = aggregate_help_tickets([
        ticket("Escalated", assignee=ALICE),
        ticket("In Progress", assignee=ALICE, raiser=BOB),
        ticket("Closed"),
    ]).to_dict()

    assert summary["total"] == 3
    assert (summary["open"], summary["in-progress"], summary["closed"]) == (0, 1, 1)
    assert len(summary["byPerson"]) == 1
    alice = summary["byPerson"][0]
    assert alice["total"] == 2
    assert alice["in-progress"] == 1
    assert alice["open"] == 0 and alice["closed"] == 0


# ---------------------------------------------------------------- idempotence / errors

def test_aggregation_is_deterministic():
    tasks = [task("daily", "pending", BOB), task("one-time", "odd", ALICE), task("weekly", "completed", BOB)]

    first = json.dumps(aggregate_tasks(tasks).to_dict())
    second = json.dumps(aggregate_tasks(tasks).to_dict())

    assert first == second
    assert [p["userId"] for p in aggregate_tasks(tasks).to_dict()["byPerson"]] == ["2", "1"]


def test_store_errors_become_data_unavailable():
    class BrokenQuery:
        def all(self):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    with pytest.raises(DataUnavailable, match="tasks"):
        _run_query("tasks", BrokenQuery())
