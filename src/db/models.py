from datetime import datetime, timezone

from sqlalchemy import (
    MetaData,
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Index,
    JSON,
)
from sqlalchemy.orm import declarative_base, relationship

# Define naming conventions for constraints and indexes
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)
Base = declarative_base(metadata=metadata)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), nullable=False)
    grade = Column(String(8), nullable=False)
    phone = Column(String(11), unique=True, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    assessments = relationship("Assessment", back_populates="user", cascade="all, delete-orphan")


class Assessment(Base):
    __tablename__ = "assessments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    total_score = Column(Integer, nullable=False)
    module_scores = Column(JSON, nullable=False)  # module -> normalized 0-5 score
    answers = Column(JSON, nullable=False)  # question index (as str) -> option index
    timestamp = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    user = relationship("User", back_populates="assessments")

    __table_args__ = (
        Index("ix_assessments_user_id_timestamp", "user_id", "timestamp"),
    )
