import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from services.assessment_engine.models import AssessmentResult
from src.db.models import Assessment, User

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for persistence failures the API reports to the caller."""
    pass


class DuplicatePhoneError(StorageError):
    pass


class UserNotFoundError(StorageError):
    pass


def find_user_by_phone(db: Session, phone: str) -> Optional[User]:
    return db.execute(select(User).where(User.phone == phone)).scalar_one_or_none()


def create_user(db: Session, username: str, grade: str, phone: str, timestamp: Optional[datetime] = None) -> User:
    """
    Stores a new participant. Each phone number may take the assessment once.
    """
    if find_user_by_phone(db, phone) is not None:
        logger.info(f"Rejected duplicate registration for phone ending {phone[-4:]}")
        raise DuplicatePhoneError("该手机号已参与测评")

    user = User(username=username, grade=grade, phone=phone)
    if timestamp is not None:
        user.timestamp = timestamp
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Stored user {user.id} (grade {grade})")
    return user


def store_assessment(db: Session, phone: str, result: AssessmentResult, timestamp: Optional[datetime] = None) -> Assessment:
    """Persists a computed result verbatim for the user registered with `phone`."""
    user = find_user_by_phone(db, phone)
    if user is None:
        raise UserNotFoundError("用户不存在")

    assessment = Assessment(
        user_id=user.id,
        total_score=result.total_score,
        module_scores=dict(result.module_scores),
        answers={str(k): v for k, v in result.answers.items()},
    )
    if timestamp is not None:
        assessment.timestamp = timestamp
    db.add(assessment)
    db.commit()
    db.refresh(assessment)
    logger.info(f"Stored assessment {assessment.id} for user {user.id}: total={result.total_score}")
    return assessment


def list_users_with_assessments(db: Session) -> List[Dict[str, Any]]:
    """One row per (user, assessment) pair, users without results included. Newest users first."""
    rows = db.execute(
        select(User, Assessment)
        .outerjoin(Assessment, Assessment.user_id == User.id)
        .order_by(User.timestamp.desc(), User.id.desc())
    ).all()

    return [
        {
            "id": user.id,
            "username": user.username,
            "grade": user.grade,
            "phone": user.phone,
            "totalScore": assessment.total_score if assessment else None,
            "moduleScores": assessment.module_scores if assessment else None,
            "userTime": user.timestamp,
            "assessmentTime": assessment.timestamp if assessment else None,
        }
        for user, assessment in rows
    ]


def get_stats(db: Session) -> Dict[str, int]:
    total_users = db.execute(select(func.count(User.id))).scalar_one()
    total_assessments = db.execute(select(func.count(Assessment.id))).scalar_one()
    average = db.execute(select(func.avg(Assessment.total_score))).scalar_one()

    return {
        "totalUsers": total_users,
        "totalAssessments": total_assessments,
        "averageScore": int(float(average or 0) + 0.5),
    }


def delete_user(db: Session, user_id: int) -> None:
    """Removes a user and all of their assessments."""
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError("用户不存在")
    db.execute(delete(Assessment).where(Assessment.user_id == user_id))
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {user_id} and their assessments")
