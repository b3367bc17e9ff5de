from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from config.settings import settings

DATABASE_URL = settings.database_url

# SQLite connections are shared across FastAPI's worker threads
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# echo=True will log all SQL statements issued to the database
engine = create_engine(DATABASE_URL, echo=settings.sql_echo, connect_args=connect_args)

# Create a configured "Session" class
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db() -> None:
    """Creates the tables if they do not exist yet."""
    from src.db.models import Base
    Base.metadata.create_all(bind=engine)
