"""
Master Database Seeding Script
Creates database tables and populates them with a month of demo data
for the MIS report, designations and checklist screens
"""

import sys
from datetime import datetime, timedelta

from create_tables import create_tables, create_default_admin
from taskflow.database import SessionLocal
from taskflow.models import (
    User, Task, Project, ProjectStep, Checklist, ChecklistTemplate,
    ChecklistOccurrence, HelpTicket,
)
from taskflow.utils.security import hash_password

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {"username": "Rajesh Kumar", "email": "rajesh.kumar@company.com", "designation": "Operations Manager", "department": "Operations", "role": "admin"},
    {"username": "Priya Sharma", "email": "priya.sharma@company.com", "designation": "Purchase Executive", "department": "Purchase", "role": "user"},
    {"username": "Arjun Singh", "email": "arjun.singh@company.com", "designation": "Store Keeper", "department": "Stores", "role": "user"},
    {"username": "Deepika Patel", "email": "deepika.patel@company.com", "designation": "Accounts Executive", "department": "Accounts", "role": "user"},
]

DEMO_TASKS = [
    ("Vendor payment follow-up", "one-time", "completed", 0),
    ("Daily stock register", "daily", "pending", 2),
    ("Weekly purchase review", "weekly", "in-progress", 1),
    ("Monthly GST filing", "monthly", "overdue", 3),
    ("Quarterly audit prep", "quarterly", "pending", 3),
    ("Annual insurance renewal", "yearly", "completed", 0),
    ("Update price list", "one-time", "in-progress", None),
]

# (project name, fms, [(step_no, status, user index)])
DEMO_PROJECTS = [
    ("PO-1001 Cement", "Purchase Order FMS", [(1, "Done", 1), (2, "Done", 2), (3, "Done", 3)]),
    ("PO-1002 Steel", "Purchase Order FMS", [(1, "Done", 1), (2, "Pending", 2), (3, "Not Started", 3)]),
    ("PO-1003 Paint", "Purchase Order FMS", [(1, "In Progress", 1), (2, "Not Started", 2), (3, "Not Started", 3)]),
    ("Hiring - Site Engineer", "Recruitment FMS", [(1, "Not Started", 0), (2, "Not Started", 3)]),
]

def seed_demo_data():
    """Populate users, tasks, FMS projects, checklists and help tickets"""
    session = SessionLocal()
    try:
        users = []
        for data in DEMO_USERS:
            user = session.query(User).filter(User.email == data["email"]).first()
            if user is None:
                user = User(hashed_password=hash_password(DEMO_PASSWORD), is_active=True, **data)
                session.add(user)
            users.append(user)
        session.flush()

        base = datetime.utcnow().replace(day=1, hour=9, minute=0, second=0, microsecond=0)

        for offset, (title, task_type, status, user_index) in enumerate(DEMO_TASKS):
            session.add(Task(
                title=title,
                task_type=task_type,
                status=status,
                assigned_to=users[user_index].id if user_index is not None else None,
                created_at=base + timedelta(hours=offset),
            ))

        for offset, (name, fms_name, steps) in enumerate(DEMO_PROJECTS):
            project = Project(project_name=name, fms_name=fms_name, created_at=base + timedelta(days=offset))
            for position, (step_no, status, user_index) in enumerate(steps):
                project.steps.append(ProjectStep(
                    position=position,
                    step_no=step_no,
                    status=status,
                    who_id=users[user_index].id,
                ))
            session.add(project)

        for offset, user in enumerate(users):
            session.add(Checklist(title="Opening checklist", status="Submitted", assigned_to=user.id, created_at=base + timedelta(days=offset)))
            session.add(Checklist(title="Closing checklist", status="Pending", assigned_to=user.id, created_at=base + timedelta(days=offset)))

        template = ChecklistTemplate(
            name="Store opening",
            category="Stores",
            frequency="daily",
            items=["Unlock store", "Check stock register", "Verify receipts"],
            status="active",
            assigned_to=users[2].id,
            created_by=users[0].id,
            exclude_sunday=True,
        )
        session.add(template)
        session.flush()
        for day in range(5):
            session.add(ChecklistOccurrence(
                template_id=template.id,
                assigned_to=users[2].id,
                status="completed" if day < 3 else "pending",
                due_date=base + timedelta(days=day),
            ))

        for offset, (title, status, assignee, raiser) in enumerate([
            ("Printer not working", "Open", None, 3),
            ("ERP login issue", "In Progress", 0, 1),
            ("New laptop request", "Verified & Closed", 0, 2),
            ("Email quota", None, None, 1),
        ]):
            session.add(HelpTicket(
                title=title,
                status=status,
                assigned_to=users[assignee].id if assignee is not None else None,
                raised_by=users[raiser].id,
                created_at=base + timedelta(days=offset),
            ))

        session.commit()
        print(f"[SUCCESS] Demo data created for {base.strftime('%B %Y')}")
        return True

    except Exception as e:
        print(f"[ERROR] Error creating demo data: {e}")
        session.rollback()
        return False
    finally:
        session.close()

def main():
    """Main function to run all seeding operations"""
    print("🌱 MASTER DATABASE SEEDING SCRIPT")
    print("=" * 60)
    print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    create_tables()
    create_default_admin()
    if not seed_demo_data():
        sys.exit(1)

    print(f"\n[INFO] Login Credentials:")
    print(f"   - Superadmin: admin@example.com / admin123")
    print(f"   - All demo users: {DEMO_PASSWORD}")
    print(f"\nCompleted at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

if __name__ == "__main__":
    main()
