from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from taskflow.config import settings

DATABASE_URL = settings.DATABASE_URL

# If you're using PostgreSQL on Render or similar, keep sslmode=require
if DATABASE_URL.startswith("postgresql"):
    connect_args = {"sslmode": "require"}
elif DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}
else:
    connect_args = {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Imported wherever a request-scoped DB session is needed
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
