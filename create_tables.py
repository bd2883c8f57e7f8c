# create_tables.py
import os

from taskflow.database import Base, engine, SessionLocal
from taskflow.models import User
from taskflow.utils.security import hash_password

DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@example.com")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")

def create_tables(drop_existing: bool = False):
    """Create all tables, optionally dropping them first"""
    if drop_existing:
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    print("✅ All tables created successfully!")

def create_default_admin():
    """Create the default superadmin user if it does not exist yet"""
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == DEFAULT_ADMIN_EMAIL).first():
            print(f"[SKIP] Superadmin {DEFAULT_ADMIN_EMAIL} already exists")
            return
        db.add(User(
            username="System Administrator",
            email=DEFAULT_ADMIN_EMAIL,
            hashed_password=hash_password(DEFAULT_ADMIN_PASSWORD),
            role="superadmin",
            designation="Administrator",
            department="IT",
            is_active=True,
        ))
        db.commit()
        print(f"✅ Default superadmin created: {DEFAULT_ADMIN_EMAIL} / {DEFAULT_ADMIN_PASSWORD}")
    except Exception as e:
        db.rollback()
        print(f"❌ Error creating default superadmin: {e}")
        raise
    finally:
        db.close()

if __name__ == "__main__":
    create_tables(drop_existing=os.getenv("DROP_EXISTING", "false").lower() == "true")
    create_default_admin()
