import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from src.db.session import get_db
from src.schemas.assessment import UserCreateRequest, UserCreateResponse
from src.services import storage

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/users", response_model=UserCreateResponse)
def create_user(request: UserCreateRequest, db: Session = Depends(get_db)):
    """Registers a participant before they start the questionnaire."""
    try:
        user = storage.create_user(db, request.username, request.grade, request.phone, request.timestamp)
    except storage.DuplicatePhoneError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error while storing user: {e}")
        raise HTTPException(status_code=500, detail="用户数据保存失败")

    return UserCreateResponse(id=user.id, message="用户信息保存成功")
