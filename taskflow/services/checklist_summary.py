# taskflow/services/checklist_summary.py
from collections import Counter
from typing import Any, Dict, List

from sqlalchemy.orm import Session, joinedload

from taskflow.models import ChecklistOccurrence, ChecklistTemplate

FREQUENCY_ORDER = {
    "daily": 1,
    "weekly": 2,
    "fortnightly": 3,
    "monthly": 4,
    "quarterly": 5,
    "yearly": 6,
}


def _template_entry(template: ChecklistTemplate, occurrences: Counter) -> Dict[str, Any]:
    has_range = template.start_date is not None or template.end_date is not None
    return {
        "templateId": str(template.id),
        "name": template.name,
        "category": template.category or "General",
        "frequency": template.frequency,
        "itemCount": len(template.items or []),
        "totalOccurrences": occurrences[(template.id, None)],
        "pendingOccurrences": occurrences[(template.id, "pending")],
        "completedOccurrences": occurrences[(template.id, "completed")],
        "status": template.status,
        "dateRange": {
            "startDate": template.start_date.isoformat() if template.start_date else None,
            "endDate": template.end_date.isoformat() if template.end_date else None,
        } if has_range else None,
        "weeklyDays": template.weekly_days or [],
        "monthlyDates": template.monthly_dates or [],
        "excludeSunday": bool(template.exclude_sunday),
    }


def checklists_by_person(db: Session) -> Dict[str, Any]:
    """Active checklist templates grouped by assignee, with all-time occurrence counts"""
    templates = (
        db.query(ChecklistTemplate)
        .options(joinedload(ChecklistTemplate.assignee))
        .filter(ChecklistTemplate.status == "active")
        .order_by(ChecklistTemplate.id)
        .all()
    )

    # (template_id, None) holds the total, (template_id, status) the per-status count
    occurrences: Counter = Counter()
    for template_id, status in db.query(ChecklistOccurrence.template_id, ChecklistOccurrence.status).all():
        if template_id is None:
            continue
        occurrences[(template_id, None)] += 1
        occurrences[(template_id, status)] += 1

    people: Dict[str, Dict[str, Any]] = {}
    for template in templates:
        assignee = template.assignee
        if assignee is None:
            continue
        person = people.setdefault(str(assignee.id), {
            "userId": str(assignee.id),
            "username": assignee.username or "Unknown",
            "email": assignee.email or "",
            "department": assignee.department or "General",
            "checklists": [],
        })
        person["checklists"].append(_template_entry(template, occurrences))

    result: List[Dict[str, Any]] = []
    for person in people.values():
        checklists = sorted(
            person["checklists"],
            key=lambda c: (FREQUENCY_ORDER.get(c["frequency"], 99), c["name"]),
        )
        result.append({
            **person,
            "checklists": checklists,
            "totalChecklists": len(checklists),
            "totalPending": sum(c["pendingOccurrences"] for c in checklists),
            "totalCompleted": sum(c["completedOccurrences"] for c in checklists),
        })
    result.sort(key=lambda p: p["username"].lower())

    return {
        "success": True,
        "data": result,
        "summary": {
            "totalPersons": len(result),
            "totalChecklists": sum(p["totalChecklists"] for p in result),
            "totalPending": sum(p["totalPending"] for p in result),
            "totalCompleted": sum(p["totalCompleted"] for p in result),
        },
    }
