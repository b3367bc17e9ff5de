import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from src.db.session import get_db
from src.schemas.assessment import AdminUserRow, MessageResponse, StatsResponse
from src.services import storage

router = APIRouter(prefix="/admin")
logger = logging.getLogger(__name__)


@router.get("/users", response_model=List[AdminUserRow])
def list_users(db: Session = Depends(get_db)):
    try:
        return storage.list_users_with_assessments(db)
    except Exception as e:
        logger.exception(f"Admin user listing failed: {e}")
        raise HTTPException(status_code=500, detail="数据查询失败")


@router.get("/stats", response_model=StatsResponse)
def get_stats(db: Session = Depends(get_db)):
    try:
        return storage.get_stats(db)
    except Exception as e:
        logger.exception(f"Stats query failed: {e}")
        raise HTTPException(status_code=500, detail="统计查询失败")


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    try:
        storage.delete_user(db, user_id)
    except storage.UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception(f"Deleting user {user_id} failed: {e}")
        raise HTTPException(status_code=500, detail="删除用户数据失败")
    return MessageResponse(message="用户数据删除成功")
