import pytest
from pydantic import ValidationError

from services.assessment_engine.definitions import VALID_GRADES
from src.schemas.assessment import AssessmentSubmitRequest, ScoreRequest, UserInfo


@pytest.mark.parametrize("grade", VALID_GRADES)
def test_user_info_accepts_every_grade(grade):
    info = UserInfo(username="王五", grade=grade, phone="15900001111")
    assert info.grade == grade


def test_user_info_strips_username():
    info = UserInfo(username="  王五 ", grade="大一", phone="15900001111")
    assert info.username == "王五"


@pytest.mark.parametrize("phone", [
    "12812345678",   # second digit must be 3-9
    "1381234567",    # too short
    "138123456789",  # too long
    "1381234567a",
    "",
])
def test_user_info_rejects_phone(phone):
    with pytest.raises(ValidationError, match="手机号格式不正确"):
        UserInfo(username="王五", grade="大一", phone=phone)


def test_user_info_rejects_grade():
    with pytest.raises(ValidationError, match="年级格式不正确"):
        UserInfo(username="王五", grade="大五", phone="15900001111")


def test_user_info_rejects_blank_username():
    with pytest.raises(ValidationError, match="请输入有效的姓名"):
        UserInfo(username="", grade="大一", phone="15900001111")


def test_score_request_coerces_string_keys():
    request = ScoreRequest.model_validate({"answers": {"0": 1, "3": 2}})
    assert request.answers == {0: 1, 3: 2}


def test_submit_request_uses_camel_case_alias():
    request = AssessmentSubmitRequest.model_validate({
        "userInfo": {"username": "王五", "grade": "研二", "phone": "15900001111"},
        "answers": {"0": 0},
    })
    assert request.user_info.grade == "研二"
    assert request.timestamp is None
