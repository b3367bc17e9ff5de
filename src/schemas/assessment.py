import re
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from services.assessment_engine.definitions import VALID_GRADES, PHONE_PATTERN
from services.assessment_engine.models import AssessmentResult, Suggestions

PHONE_RE = re.compile(PHONE_PATTERN)


class UserInfo(BaseModel):
    """Participant identity collected before the questionnaire."""
    username: str = Field(..., description="Participant's name")
    grade: str = Field(..., description="Study year, e.g. 大三 or 研一")
    phone: str = Field(..., description="11-digit mainland mobile number")

    @field_validator('username')
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("请输入有效的姓名")
        return v

    @field_validator('grade')
    @classmethod
    def validate_grade(cls, v: str) -> str:
        if v not in VALID_GRADES:
            raise ValueError("年级格式不正确")
        return v

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v: str) -> str:
        if not PHONE_RE.match(v):
            raise ValueError("手机号格式不正确")
        return v


class UserCreateRequest(UserInfo):
    timestamp: Optional[datetime] = None


class UserCreateResponse(BaseModel):
    id: int
    message: str


class ScoreRequest(BaseModel):
    answers: Dict[int, int]  # question index -> option index


class ScoreResponse(BaseModel):
    result: AssessmentResult
    suggestions: Suggestions
    levels: Dict[str, str]


class AssessmentSubmitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_info: UserInfo = Field(..., alias="userInfo")
    answers: Dict[int, int]
    timestamp: Optional[datetime] = None


class AssessmentSubmitResponse(BaseModel):
    id: int
    message: str
    result: AssessmentResult
    suggestions: Suggestions


class AdminUserRow(BaseModel):
    id: int
    username: str
    grade: str
    phone: str
    totalScore: Optional[int] = None
    moduleScores: Optional[Dict[str, float]] = None
    userTime: Optional[datetime] = None
    assessmentTime: Optional[datetime] = None


class StatsResponse(BaseModel):
    totalUsers: int
    totalAssessments: int
    averageScore: int


class QuestionView(BaseModel):
    index: int
    id: Optional[str] = None
    module: str
    text: str
    options: List[str]


class MessageResponse(BaseModel):
    message: str
