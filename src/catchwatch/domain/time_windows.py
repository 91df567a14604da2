"""Retrospective compliance window for pending landing records."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING, Protocol

from .model import LandingStatus, WindowState

if TYPE_CHECKING:
    from .model import CcQueryRow

RETROSPECTIVE_PERIOD = timedelta(days=14)
END_DATE_GRACE = timedelta(days=1)


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and normalise aware ones to UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def classify(
    now: datetime,
    created_at: datetime,
    expected_date: date | None = None,
    end_date: date | None = None,
) -> WindowState:
    """Place a record at ``now`` relative to its retrospective window.

    Without an expected date, or once the expected date is reached with no end
    date, the window is the exact fourteen days following ``created_at``. With
    an end date the window stays open through the day after it.
    """

    now = ensure_aware(now)
    today = now.date()

    if expected_date is not None and today < expected_date:
        return WindowState.NOT_YET_DUE

    if expected_date is not None and end_date is not None:
        if today <= end_date + END_DATE_GRACE:
            return WindowState.DUE
        return WindowState.EXCEEDED

    if now - ensure_aware(created_at) <= RETROSPECTIVE_PERIOD:
        return WindowState.DUE
    return WindowState.EXCEEDED


def row_window_state(now: datetime, row: CcQueryRow) -> WindowState:
    return classify(
        now,
        row.created_at,
        row.landing_data_expected_date,
        row.landing_data_end_date,
    )


def is_within_retrospective_window(now: datetime, row: CcQueryRow) -> bool:
    return row_window_state(now, row) is WindowState.DUE


def exceeded_retrospective_window(now: datetime, row: CcQueryRow) -> bool:
    return row_window_state(now, row) is WindowState.EXCEEDED


def retrospective_validation_required(now: datetime, row: CcQueryRow) -> bool:
    """A pending row with a resolved vessel that is currently due for a fetch."""

    if row.landing_status not in {LandingStatus.PENDING, None}:
        return False
    if not row.rss_number:
        return False
    return is_within_retrospective_window(now, row)


__all__ = [
    "Clock",
    "classify",
    "ensure_aware",
    "exceeded_retrospective_window",
    "is_within_retrospective_window",
    "retrospective_validation_required",
    "row_window_state",
    "utcnow",
]
