"""Behavior features: applicant-side signals."""

import logging
from datetime import datetime, timezone

from pydantic import BaseModel

from models.requests import PredictionRequest
from models.schemas.feature_vector import BehaviorFeatures
from services.prediction.extractors.base import BaseFeatureExtractor

logger = logging.getLogger(__name__)

# Relative effectiveness of the application channel
CHANNEL_SCORES: dict[str, float] = {
    "referral": 1.5,
    "recruiter": 1.2,
    "direct": 1.0,
    "job_board": 0.8,
}
EDITS_FOR_FULL_OPTIMIZATION = 10


def _aware(ts: datetime) -> datetime:
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


class BehaviorFeatureExtractor(BaseFeatureExtractor):
    name = "behavior"
    sub_vector_type = BehaviorFeatures
    request_scoped = True

    async def extract(self, request: PredictionRequest, upstream: dict[str, BaseModel] | None = None) -> BehaviorFeatures:
        ctx = request.context
        defaults = BehaviorFeatures()
        applied_at = _aware(ctx.timestamp) if ctx.timestamp else datetime.now(timezone.utc)

        days_since_posting = defaults.days_since_posting
        if request.job.posted_at is not None:
            delta = applied_at - _aware(request.job.posted_at)
            days_since_posting = max(0.0, round(delta.total_seconds() / 86400, 2))

        channel = ctx.application_channel.lower().strip()
        if channel not in CHANNEL_SCORES:
            logger.debug("Unknown application channel %r, scoring as direct", channel)

        return BehaviorFeatures(
            days_since_posting=days_since_posting,
            weekday_application=1.0 if applied_at.weekday() < 5 else 0.0,
            hour_of_day=float(applied_at.hour),
            channel_score=CHANNEL_SCORES.get(channel, 1.0),
            cv_optimization_level=min(1.0, request.cv.edit_count / EDITS_FOR_FULL_OPTIMIZATION),
            platform_engagement=ctx.engagement_score if ctx.engagement_score is not None else defaults.platform_engagement,
            previous_applications=float(ctx.previous_applications),
        )
