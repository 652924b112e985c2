"""Job service-level agreement (SLA) calculations."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
import math

from core.utils.datetime import now, ensure_utc, add_days, days_between

SLA_DAYS = 14


@dataclass(frozen=True)
class SLAProgress:
    """Point-in-time view of a job's SLA; never persisted."""

    days_passed: int
    days_remaining: int
    percentage: int
    is_overdue: bool
    deadline: datetime

    def to_dict(self) -> dict:
        return {
            "days_passed": self.days_passed,
            "days_remaining": self.days_remaining,
            "percentage": self.percentage,
            "is_overdue": self.is_overdue,
            "deadline": self.deadline.isoformat(),
        }


def compute_sla_deadline(created_at: datetime) -> datetime:
    """Deadline fixed at job creation: ``created_at + 14 days``."""
    return add_days(ensure_utc(created_at), SLA_DAYS)


def calculate_sla_progress(
    created_at: datetime,
    sla_deadline: datetime,
    at: Optional[datetime] = None,
) -> SLAProgress:
    """
    Compute SLA progress for a job.

    Args:
        created_at: Job creation instant
        sla_deadline: Stored deadline
        at: Instant to evaluate at (defaults to now)

    Returns:
        SLAProgress with whole days passed, percentage capped at 100 and
        the overdue flag
    """
    created_at = ensure_utc(created_at)
    sla_deadline = ensure_utc(sla_deadline)
    at = ensure_utc(at) if at is not None else now()

    days_passed = days_between(created_at, at)
    percentage = min(100, max(0, round(100 * days_passed / SLA_DAYS)))
    remaining = (sla_deadline - at) / timedelta(days=1)

    return SLAProgress(
        days_passed=days_passed,
        days_remaining=max(0, math.ceil(remaining)),
        percentage=percentage,
        is_overdue=at > sla_deadline,
        deadline=sla_deadline,
    )
