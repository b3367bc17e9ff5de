import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import httpx
from pydantic import BaseModel

from config.settings import settings
from services.assessment_engine.models import AssessmentResult, Suggestions
from src.schemas.assessment import UserInfo

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "网络错误"

# Characters that cannot appear in a file name on common filesystems
UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


class SubmitOutcome(BaseModel):
    success: bool
    error: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


class AssessmentClient:
    """
    Talks to the assessment API. Every call reports success or failure with a
    message instead of raising.
    """
    def __init__(self, base_url: Optional[str] = None, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client = httpx.AsyncClient(base_url=base_url or settings.api_base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "AssessmentClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(self, path: str, payload: Dict[str, Any]) -> SubmitOutcome:
        try:
            response = await self._client.post(path, json=payload)
        except httpx.RequestError as exc:
            logger.error(f"HTTP request error posting to {path}: {exc}", exc_info=True)
            return SubmitOutcome(success=False, error=NETWORK_ERROR_MESSAGE)

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_success:
            return SubmitOutcome(success=True, data=body)

        detail = body.get("detail") if isinstance(body, dict) else None
        logger.warning(f"POST {path} failed with status {response.status_code}: {detail}")
        return SubmitOutcome(success=False, error=str(detail) if detail else f"HTTP {response.status_code}")

    async def save_user_info(self, user_info: UserInfo) -> SubmitOutcome:
        payload = user_info.model_dump()
        payload["timestamp"] = datetime.now(timezone.utc).isoformat()
        return await self._post("/api/users", payload)

    async def save_assessment(self, user_info: UserInfo, answers: Mapping[int, int]) -> SubmitOutcome:
        payload = {
            "userInfo": user_info.model_dump(),
            "answers": {str(k): v for k, v in answers.items()},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        return await self._post("/api/assessments", payload)


def build_export(
    user_info: UserInfo,
    result: Optional[AssessmentResult],
    suggestions: Optional[Suggestions],
    export_time: Optional[datetime] = None,
) -> Dict[str, Any]:
    if result is None:
        raise ValueError("没有可导出的测评数据")
    export_time = export_time or datetime.now(timezone.utc)
    return {
        "userInfo": user_info.model_dump(),
        "results": result.model_dump(mode="json", by_alias=True),
        "suggestions": suggestions.model_dump(mode="json") if suggestions else None,
        "exportTime": export_time.isoformat(),
    }


def safe_filename_part(value: str) -> str:
    """Replaces characters that cannot appear in a file name, the way a browser download does."""
    cleaned = UNSAFE_FILENAME_CHARS.sub("_", value).strip(". ")
    return cleaned or "user"


def export_assessment_data(
    directory: Union[str, Path],
    user_info: UserInfo,
    result: Optional[AssessmentResult],
    suggestions: Optional[Suggestions] = None,
    export_time: Optional[datetime] = None,
) -> Path:
    """Writes the export as assessment_result_<username>_<date>.json and returns its path."""
    export_time = export_time or datetime.now(timezone.utc)
    data = build_export(user_info, result, suggestions, export_time)

    filename = f"assessment_result_{safe_filename_part(user_info.username)}_{export_time.date().isoformat()}.json"
    path = Path(directory) / filename
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    logger.info(f"Exported assessment data to {path}")
    return path
