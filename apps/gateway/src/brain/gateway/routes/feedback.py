"""反馈路由

POST /api/v1/feedback 提交前先做滑动窗口限流：
超限返回 429，响应体带 reset_in；所有响应带 X-RateLimit-* 头。
"""

from brain.core.config import FEEDBACK_MESSAGE_MAX_LENGTH
from brain.core.models import Feedback, RateLimitResult
from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from ..deps import get_feedback_service
from ..services.feedback_service import FeedbackService
from ._errors import error_response, not_found

router = APIRouter(prefix="/api/v1/feedback")


class SubmitFeedbackRequest(BaseModel):
    message: str = Field(min_length=1, max_length=FEEDBACK_MESSAGE_MAX_LENGTH)
    user_id: str = Field(min_length=1, max_length=100)
    username: str = Field(min_length=1, max_length=100)
    guild_name: str | None = Field(default=None, max_length=100)


class FeedbackListResponse(BaseModel):
    feedback: list[Feedback]
    total: int
    limit: int
    offset: int


def _rate_limit_headers(rate_limit: RateLimitResult, consumed: bool) -> dict[str, str]:
    remaining = rate_limit.remaining - 1 if consumed else rate_limit.remaining
    headers = {
        "X-RateLimit-Limit": str(rate_limit.limit),
        "X-RateLimit-Remaining": str(max(0, remaining)),
    }
    if rate_limit.reset_in is not None:
        headers["X-RateLimit-Reset"] = str(rate_limit.reset_in)
    return headers


@router.post("", status_code=201)
async def submit_feedback(
    body: SubmitFeedbackRequest,
    service: FeedbackService = Depends(get_feedback_service),
):
    feedback, rate_limit = await service.submit_feedback(
        message=body.message,
        user_id=body.user_id,
        username=body.username,
        guild_name=body.guild_name,
    )
    if feedback is None:
        response = error_response(
            429,
            "RATE_LIMITED",
            f"Feedback limit of {rate_limit.limit} reached",
            reset_in=rate_limit.reset_in,
        )
        response.headers.update(_rate_limit_headers(rate_limit, consumed=False))
        return response

    return JSONResponse(
        status_code=201,
        content=feedback.model_dump(mode="json"),
        headers=_rate_limit_headers(rate_limit, consumed=True),
    )


@router.get("", response_model=FeedbackListResponse)
async def list_feedback(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: FeedbackService = Depends(get_feedback_service),
):
    page = await service.list_feedback(limit, offset)
    return FeedbackListResponse(
        feedback=page.data,
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/{feedback_id}")
async def get_feedback(
    feedback_id: str = Path(max_length=100),
    service: FeedbackService = Depends(get_feedback_service),
):
    feedback = await service.get_feedback(feedback_id)
    if feedback is None:
        return not_found("feedback", feedback_id)
    return feedback.model_dump(mode="json")
