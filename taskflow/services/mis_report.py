# taskflow/services/mis_report.py
"""
Monthly MIS report: task, FMS workflow, checklist and help ticket statistics
for one calendar month, with a per-assignee breakdown for each.

The pipeline is resolve_period -> fetch_* -> aggregate_* -> build_mis_report.
Nothing is cached or persisted; every call recomputes from the database.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import datetime, MINYEAR, MAXYEAR
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from taskflow.models import (
    Checklist,
    HelpTicket,
    HelpTicketStatus,
    Project,
    ProjectStep,
    StepStatus,
    Task,
    TaskStatus,
    TaskType,
    User,
)
from taskflow.services.errors import DataUnavailable, InvalidInput

logger = logging.getLogger(__name__)

CHECKLIST_SUBMITTED = "Submitted"

# ============================================
# PERIOD
# ============================================

@dataclass(frozen=True)
class ReportPeriod:
    year: int
    month: int
    start: datetime
    end: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "startDate": self.start.isoformat(timespec="milliseconds"),
            "endDate": self.end.isoformat(timespec="milliseconds"),
        }


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, int):
        return value
    return int(str(value).strip())


def resolve_period(year: Any, month: Any) -> ReportPeriod:
    """Turn a (year, month) pair into the inclusive range covering that month"""
    if year is None or month is None or str(year).strip() == "" or str(month).strip() == "":
        raise InvalidInput("Year and month are required")

    try:
        year_num = _parse_int(year)
        month_num = _parse_int(month)
    except (TypeError, ValueError):
        raise InvalidInput("Invalid year or month")

    if not 1 <= month_num <= 12 or not MINYEAR <= year_num <= MAXYEAR:
        raise InvalidInput("Invalid year or month")

    last_day = calendar.monthrange(year_num, month_num)[1]
    start = datetime(year_num, month_num, 1, 0, 0, 0, 0)
    end = datetime(year_num, month_num, last_day, 23, 59, 59, 999000)
    return ReportPeriod(year=year_num, month=month_num, start=start, end=end)


# ============================================
# FETCHERS
# ============================================

def _run_query(entity: str, query):
    try:
        return query.all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching {entity} for MIS report: {e}")
        raise DataUnavailable(f"Unable to load {entity}") from e


def fetch_tasks(db: Session, period: ReportPeriod) -> List[Task]:
    query = (
        db.query(Task)
        .options(joinedload(Task.assignee))
        .filter(Task.created_at >= period.start, Task.created_at <= period.end)
        .order_by(Task.created_at, Task.id)
    )
    return _run_query("tasks", query)


def fetch_projects(db: Session, period: ReportPeriod) -> List[Project]:
    query = (
        db.query(Project)
        .options(selectinload(Project.steps).joinedload(ProjectStep.who))
        .filter(Project.created_at >= period.start, Project.created_at <= period.end)
        .order_by(Project.created_at, Project.id)
    )
    return _run_query("FMS projects", query)


def fetch_checklists(db: Session, period: ReportPeriod) -> List[Checklist]:
    query = (
        db.query(Checklist)
        .options(joinedload(Checklist.assignee))
        .filter(Checklist.created_at >= period.start, Checklist.created_at <= period.end)
        .order_by(Checklist.created_at, Checklist.id)
    )
    return _run_query("checklists", query)


def fetch_help_tickets(db: Session, period: ReportPeriod) -> List[HelpTicket]:
    query = (
        db.query(HelpTicket)
        .options(joinedload(HelpTicket.assignee), joinedload(HelpTicket.raiser))
        .filter(HelpTicket.created_at >= period.start, HelpTicket.created_at <= period.end)
        .order_by(HelpTicket.created_at, HelpTicket.id)
    )
    return _run_query("help tickets", query)


def fetch_users(db: Session) -> List[User]:
    return _run_query("users", db.query(User).order_by(User.id))


# ============================================
# SHARED PIECES
# ============================================

class Histogram:
    """Counts keyed by a known set of values plus any value seen at runtime"""

    def __init__(self, known: Iterable[str] = ()):
        self.counts: Dict[str, int] = {key: 0 for key in known}

    def add(self, key: str) -> None:
        self.counts[key] = self.counts.get(key, 0) + 1

    def to_dict(self) -> Dict[str, int]:
        return dict(self.counts)


def _is_resolved(user: Optional[User]) -> bool:
    return user is not None and getattr(user, "id", None) is not None


@dataclass
class PersonStats:
    user_id: str
    username: str
    email: str
    total: int = 0

    @classmethod
    def for_user(cls, user: User):
        return cls(
            user_id=str(user.id),
            username=user.username or "Unknown",
            email=user.email or "",
        )

    def identity(self) -> Dict[str, Any]:
        return {"userId": self.user_id, "username": self.username, "email": self.email}


def _person(by_person: Dict[str, Any], record_cls, user: User):
    key = str(user.id)
    if key not in by_person:
        by_person[key] = record_cls.for_user(user)
    return by_person[key]


# ============================================
# TASKS
# ============================================

_TASK_STATUS_FIELDS = {
    TaskStatus.PENDING: "pending",
    TaskStatus.IN_PROGRESS: "in_progress",
    TaskStatus.COMPLETED: "completed",
    TaskStatus.OVERDUE: "overdue",
}


@dataclass
class TaskPersonStats(PersonStats):
    one_off: int = 0
    cyclic: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    overdue: int = 0
    other_statuses: Dict[str, int] = field(default_factory=dict)

    def add(self, task_type: Optional[str], status: Optional[str]) -> None:
        self.total += 1
        if task_type == TaskType.ONE_TIME.value:
            self.one_off += 1
        else:
            self.cyclic += 1

        if not status:
            return
        try:
            attr = _TASK_STATUS_FIELDS[TaskStatus(status)]
        except ValueError:
            self.other_statuses[status] = self.other_statuses.get(status, 0) + 1
        else:
            setattr(self, attr, getattr(self, attr) + 1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.identity(),
            **self.other_statuses,
            "total": self.total,
            "oneOff": self.one_off,
            "cyclic": self.cyclic,
            "pending": self.pending,
            "in-progress": self.in_progress,
            "completed": self.completed,
            "overdue": self.overdue,
        }


@dataclass
class TaskSummary:
    total: int = 0
    one_off: int = 0
    cyclic: int = 0
    by_status: Histogram = field(default_factory=lambda: Histogram(s.value for s in TaskStatus))
    by_type: Histogram = field(default_factory=lambda: Histogram(t.value for t in TaskType))
    by_person: Dict[str, TaskPersonStats] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "oneOff": self.one_off,
            "cyclic": self.cyclic,
            "byStatus": self.by_status.to_dict(),
            "byType": self.by_type.to_dict(),
            "byPerson": [person.to_dict() for person in self.by_person.values()],
        }


def aggregate_tasks(tasks: Iterable[Task]) -> TaskSummary:
    summary = TaskSummary()
    for task in tasks:
        summary.total += 1
        # Anything that is not one-time counts as cyclic, including unknown types
        if task.task_type == TaskType.ONE_TIME.value:
            summary.one_off += 1
        else:
            summary.cyclic += 1

        if task.status:
            summary.by_status.add(task.status)
        if task.task_type:
            summary.by_type.add(task.task_type)

        if _is_resolved(task.assignee):
            person = _person(summary.by_person, TaskPersonStats, task.assignee)
            person.add(task.task_type, task.status)
    return summary


# ============================================
# FMS (workflow instances)
# ============================================

_OPEN_STEP_STATUSES = {StepStatus.PENDING.value, StepStatus.IN_PROGRESS.value}
_PENDING_STEP_STATUSES = {
    StepStatus.PENDING.value,
    StepStatus.IN_PROGRESS.value,
    StepStatus.NOT_STARTED.value,
}


@dataclass
class FmsPersonStats(PersonStats):
    in_progress: int = 0
    completed: int = 0
    pending_steps: List[int] = field(default_factory=list)

    def add(self, step: ProjectStep) -> None:
        self.total += 1
        if step.status == StepStatus.IN_PROGRESS.value:
            self.in_progress += 1
        elif step.status == StepStatus.DONE.value:
            self.completed += 1
        else:
            self.pending_steps.append(step.step_no or 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.identity(),
            "total": self.total,
            "inProgress": self.in_progress,
            "completed": self.completed,
            "pendingSteps": list(self.pending_steps),
        }


@dataclass
class FmsSummary:
    total: int = 0
    in_progress: int = 0
    completed: int = 0
    by_person: Dict[str, FmsPersonStats] = field(default_factory=dict)
    step_status_breakdown: Dict[int, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "inProgress": self.in_progress,
            "completed": self.completed,
            "byPerson": [person.to_dict() for person in self.by_person.values()],
            "stepStatusBreakdown": {
                str(step_no): count for step_no, count in self.step_status_breakdown.items()
            },
        }


def first_pending_step(steps: List[ProjectStep]) -> Optional[ProjectStep]:
    """The first step, in stored order, that has not been finished"""
    for step in steps:
        if step.status in _PENDING_STEP_STATUSES:
            return step
    return None


def aggregate_projects(projects: Iterable[Project]) -> FmsSummary:
    summary = FmsSummary()
    for project in projects:
        steps = list(project.steps or [])
        summary.total += 1

        # A project with no steps is vacuously complete. A project whose steps
        # are all Not Started lands in neither bucket.
        if all(step.status == StepStatus.DONE.value for step in steps):
            summary.completed += 1
        elif any(step.status in _OPEN_STEP_STATUSES for step in steps):
            summary.in_progress += 1

        pending = first_pending_step(steps)
        if pending is not None:
            step_no = pending.step_no or 0
            summary.step_status_breakdown[step_no] = summary.step_status_breakdown.get(step_no, 0) + 1

        for step in steps:
            if _is_resolved(step.who):
                _person(summary.by_person, FmsPersonStats, step.who).add(step)
    return summary


# ============================================
# CHECKLISTS
# ============================================

@dataclass
class ChecklistPersonStats(PersonStats):
    done: int = 0
    not_done: int = 0

    def add(self, submitted: bool) -> None:
        self.total += 1
        if submitted:
            self.done += 1
        else:
            self.not_done += 1

    def to_dict(self) -> Dict[str, Any]:
        return {**self.identity(), "total": self.total, "done": self.done, "notDone": self.not_done}


@dataclass
class ChecklistSummary:
    total: int = 0
    done: int = 0
    not_done: int = 0
    by_person: Dict[str, ChecklistPersonStats] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "done": self.done,
            "notDone": self.not_done,
            "byPerson": [person.to_dict() for person in self.by_person.values()],
        }


def aggregate_checklists(checklists: Iterable[Checklist]) -> ChecklistSummary:
    summary = ChecklistSummary()
    for checklist in checklists:
        submitted = checklist.status == CHECKLIST_SUBMITTED
        summary.total += 1
        if submitted:
            summary.done += 1
        else:
            summary.not_done += 1

        if _is_resolved(checklist.assignee):
            _person(summary.by_person, ChecklistPersonStats, checklist.assignee).add(submitted)
    return summary


# ============================================
# HELP TICKETS
# ============================================

_TICKET_BUCKETS = {
    HelpTicketStatus.OPEN: "open",
    HelpTicketStatus.IN_PROGRESS: "in_progress",
    HelpTicketStatus.CLOSED: "closed",
    HelpTicketStatus.VERIFIED_CLOSED: "closed",
}


def ticket_bucket(status: Optional[str]) -> Optional[str]:
    """Bucket attribute for a raw ticket status, or None when unrecognized"""
    normalized = (status or "").lower() or HelpTicketStatus.OPEN.value
    try:
        return _TICKET_BUCKETS[HelpTicketStatus(normalized)]
    except ValueError:
        return None


def _count_bucket(record, bucket: Optional[str]) -> None:
    if bucket is not None:
        setattr(record, bucket, getattr(record, bucket) + 1)


@dataclass
class HelpTicketPersonStats(PersonStats):
    open: int = 0
    in_progress: int = 0
    closed: int = 0

    def add(self, bucket: Optional[str]) -> None:
        self.total += 1
        _count_bucket(self, bucket)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.identity(),
            "total": self.total,
            "open": self.open,
            "in-progress": self.in_progress,
            "closed": self.closed,
        }


@dataclass
class HelpTicketSummary:
    total: int = 0
    open: int = 0
    in_progress: int = 0
    closed: int = 0
    by_person: Dict[str, HelpTicketPersonStats] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "open": self.open,
            "in-progress": self.in_progress,
            "closed": self.closed,
            "byPerson": [person.to_dict() for person in self.by_person.values()],
        }


def aggregate_help_tickets(tickets: Iterable[HelpTicket]) -> HelpTicketSummary:
    summary = HelpTicketSummary()
    for ticket in tickets:
        bucket = ticket_bucket(ticket.status)
        summary.total += 1
        _count_bucket(summary, bucket)

        # Attribute to the assignee, falling back to whoever raised the ticket
        if _is_resolved(ticket.assignee):
            person = ticket.assignee
        elif _is_resolved(ticket.raiser):
            person = ticket.raiser
        else:
            continue
        _person(summary.by_person, HelpTicketPersonStats, person).add(bucket)
    return summary


# ============================================
# REPORT
# ============================================

def build_mis_report(db: Session, year: Any, month: Any) -> Dict[str, Any]:
    """Assemble the MIS report document for one month"""
    period = resolve_period(year, month)
    logger.info(f"Generating MIS report for {period.year:04d}-{period.month:02d}")

    tasks = fetch_tasks(db, period)
    projects = fetch_projects(db, period)
    checklists = fetch_checklists(db, period)
    tickets = fetch_help_tickets(db, period)
    users = fetch_users(db)

    logger.info(
        f"MIS report {period.year:04d}-{period.month:02d}: {len(tasks)} tasks, "
        f"{len(projects)} projects, {len(checklists)} checklists, {len(tickets)} help tickets"
    )

    return {
        "success": True,
        "period": period.to_dict(),
        "tasks": aggregate_tasks(tasks).to_dict(),
        "fms": aggregate_projects(projects).to_dict(),
        "checklists": aggregate_checklists(checklists).to_dict(),
        "helpTickets": aggregate_help_tickets(tickets).to_dict(),
        "users": [
            {"_id": str(user.id), "username": user.username, "email": user.email}
            for user in users
        ],
    }
