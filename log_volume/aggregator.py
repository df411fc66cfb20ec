"""
Aggregation of samples into per-log rate estimates.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from .constants import DAYS_PER_WEEK, ROUND_PLACES, WEEKS_PER_MONTH
from .exceptions import NoDataForAggregationError
from .logging_config import get_logger
from .samples import AggregatedAverage, Sample

logger = get_logger(__name__)


def round_half_away(value: Optional[float], places: int = ROUND_PLACES) -> Optional[float]:
    """Round to ``places`` decimals, halves away from zero (2.345 -> 2.35)."""
    if value is None:
        return None
    quantum = Decimal(1).scaleb(-places)
    # repr() gives the shortest decimal that round-trips to the same float
    exact = Decimal(repr(float(value)))
    with localcontext() as ctx:
        # Precision must cover the integer digits plus the decimals
        ctx.prec = max(ctx.prec, exact.adjusted() + places + 2)
        rounded = exact.quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


def _mean(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    # Sorting first makes the sum independent of sample order
    return float(np.mean(np.sort(np.asarray(values, dtype=float))))


def _scale(value: Optional[float], factor: float) -> Optional[float]:
    if value is None:
        return None
    return value * factor


def aggregate(samples: Sequence[Sample], log_id: str) -> AggregatedAverage:
    """Reduce a log's samples to an AggregatedAverage.

    Per-hour and per-day rates are plain means over the non-degenerate
    samples; week and month figures are scaled from the day mean. Degenerate
    samples still count toward the time bounds and sample count. If every
    sample is degenerate the averages are None.

    Raises:
        NoDataForAggregationError: If ``samples`` is empty.
    """
    if not samples:
        raise NoDataForAggregationError("No samples available", log_id)

    rated = [s for s in samples if not s.is_degenerate]
    degenerate_count = len(samples) - len(rated)
    if not rated:
        logger.warning(
            "All %d samples for %s have a zero-width time range; average undefined",
            len(samples),
            log_id,
        )

    count_per_hour = _mean([s.rate_count_per_hour for s in rated])
    bytes_per_hour = _mean([s.rate_bytes_per_hour for s in rated])
    count_per_day = _mean([s.rate_count_per_day for s in rated])
    bytes_per_day = _mean([s.rate_bytes_per_day for s in rated])

    count_per_week = _scale(count_per_day, DAYS_PER_WEEK)
    bytes_per_week = _scale(bytes_per_day, DAYS_PER_WEEK)
    count_per_month = _scale(count_per_week, WEEKS_PER_MONTH)
    bytes_per_month = _scale(bytes_per_week, WEEKS_PER_MONTH)

    return AggregatedAverage(
        log_id=log_id,
        oldest_record=min(s.start_time for s in samples),
        newest_record=max(s.end_time for s in samples),
        sample_count=len(samples),
        avg_count_per_hour=round_half_away(count_per_hour),
        avg_bytes_per_hour=round_half_away(bytes_per_hour),
        avg_count_per_day=round_half_away(count_per_day),
        avg_bytes_per_day=round_half_away(bytes_per_day),
        avg_count_per_week=round_half_away(count_per_week),
        avg_bytes_per_week=round_half_away(bytes_per_week),
        avg_count_per_month=round_half_away(count_per_month),
        avg_bytes_per_month=round_half_away(bytes_per_month),
        degenerate_samples=degenerate_count,
    )


def aggregate_all(
    samples_by_log: Mapping[str, List[Sample]],
    log_ids: Iterable[str],
) -> Dict[str, AggregatedAverage]:
    """Aggregate each requested log, skipping logs without samples."""
    averages: Dict[str, AggregatedAverage] = {}
    for log_id in log_ids:
        if log_id in averages:
            continue
        try:
            averages[log_id] = aggregate(samples_by_log.get(log_id, []), log_id)
        except NoDataForAggregationError as e:
            logger.warning("Omitting log from results: %s", e)
    return averages
