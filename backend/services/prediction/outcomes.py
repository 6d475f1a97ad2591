"""Outcome tracker: append-only real-world results for offline calibration.

Storage is separate from the prediction cache and never expires. Recording
is idempotent per (fingerprint, outcome type): the first report wins and
repeats are ignored, so aggregates never double count.

The index of issued predictions used for pairing is bounded; the oldest
snapshots are dropped first and their outcomes then count as unpaired.
"""

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timezone

import numpy as np

from models.requests import OutcomeReport
from models.responses import CalibrationStats, SuccessPrediction
from models.schemas.outcome import OutcomeRecord, OutcomeType
from models.schemas.prediction import Dimension

logger = logging.getLogger(__name__)

DIMENSION_OUTCOMES: dict[Dimension, OutcomeType] = {
    Dimension.INTERVIEW: OutcomeType.INTERVIEW,
    Dimension.OFFER: OutcomeType.OFFER,
    Dimension.SALARY: OutcomeType.SALARY,
    Dimension.TIME_TO_HIRE: OutcomeType.DAYS_TO_HIRE,
}
PROBABILITY_DIMENSIONS = {Dimension.INTERVIEW, Dimension.OFFER}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(ts: datetime | None) -> datetime | None:
    if ts is not None and ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def _report_values(report: OutcomeReport) -> dict[OutcomeType, float]:
    values: dict[OutcomeType, float] = {}
    if report.interview_obtained is not None:
        values[OutcomeType.INTERVIEW] = 1.0 if report.interview_obtained else 0.0
    if report.offer_obtained is not None:
        values[OutcomeType.OFFER] = 1.0 if report.offer_obtained else 0.0
    if report.actual_salary is not None:
        values[OutcomeType.SALARY] = float(report.actual_salary)
    if report.actual_days_to_hire is not None:
        values[OutcomeType.DAYS_TO_HIRE] = float(report.actual_days_to_hire)
    return values


def _predicted_value(prediction: SuccessPrediction, dimension: Dimension) -> float:
    if dimension is Dimension.INTERVIEW:
        return prediction.interview_probability
    if dimension is Dimension.OFFER:
        return prediction.offer_probability
    if dimension is Dimension.SALARY:
        return prediction.salary.median
    if dimension is Dimension.TIME_TO_HIRE:
        return float(prediction.time_to_hire_days)
    return prediction.competitiveness_score


class OutcomeTracker:
    def __init__(self, clock: Callable[[], datetime] = _utcnow, max_predictions: int = 10_000) -> None:
        self._clock = clock
        self._max_predictions = max_predictions
        self._lock = threading.Lock()
        self._records: list[OutcomeRecord] = []
        self._seen: set[tuple[str, OutcomeType]] = set()
        self._predictions: dict[str, dict[Dimension, float]] = {}

    async def record_outcome(self, fingerprint: str, report: OutcomeReport) -> list[OutcomeRecord]:
        """Append one record per reported outcome type. Returns only the newly stored records."""
        recorded_at = self._clock()
        stored: list[OutcomeRecord] = []
        with self._lock:
            for outcome_type, value in _report_values(report).items():
                key = (fingerprint, outcome_type)
                if key in self._seen:
                    logger.info("Duplicate %s outcome for %s ignored", outcome_type.value, fingerprint[:16])
                    continue
                record = OutcomeRecord(
                    fingerprint=fingerprint,
                    outcome_type=outcome_type,
                    value=value,
                    recorded_at=recorded_at,
                )
                self._seen.add(key)
                self._records.append(record)
                stored.append(record)
        return stored

    def register_prediction(self, prediction: SuccessPrediction) -> None:
        """Remember what was predicted so outcomes can be paired with it."""
        snapshot = {d: _predicted_value(prediction, d) for d in DIMENSION_OUTCOMES}
        with self._lock:
            # re-registering moves the fingerprint to the newest position
            self._predictions.pop(prediction.fingerprint, None)
            self._predictions[prediction.fingerprint] = snapshot
            overflow = len(self._predictions) - self._max_predictions
            for fp in list(self._predictions)[:max(0, overflow)]:
                del self._predictions[fp]
        if overflow > 0:
            logger.info("Prediction index full, dropped %d oldest snapshots", overflow)

    def tracked_predictions(self) -> int:
        with self._lock:
            return len(self._predictions)

    def records(self, fingerprint: str | None = None) -> list[OutcomeRecord]:
        with self._lock:
            return [r for r in self._records if fingerprint is None or r.fingerprint == fingerprint]

    def get_calibration_data(
        self,
        dimension: Dimension,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> CalibrationStats:
        start, end = _aware(start), _aware(end)
        stats = CalibrationStats(dimension=dimension, start=start, end=end)
        outcome_type = DIMENSION_OUTCOMES.get(dimension)
        if outcome_type is None:
            return stats

        with self._lock:
            window = [
                r for r in self._records
                if r.outcome_type is outcome_type
                and (start is None or r.recorded_at >= start)
                and (end is None or r.recorded_at < end)
            ]
            pairs = [
                (self._predictions[r.fingerprint][dimension], r.value)
                for r in window if r.fingerprint in self._predictions
            ]
        if not window:
            return stats

        actual = np.array([r.value for r in window])
        update: dict = {"count": len(window), "paired_count": len(pairs), "mean_actual": float(actual.mean())}
        if pairs:
            predicted, paired_actual = (np.array(xs) for xs in zip(*pairs))
            update["mean_predicted"] = float(predicted.mean())
            update["mean_absolute_error"] = float(np.abs(predicted - paired_actual).mean())
            if dimension in PROBABILITY_DIMENSIONS:
                update["brier_score"] = float(np.mean((predicted - paired_actual) ** 2))
        return stats.model_copy(update=update)
