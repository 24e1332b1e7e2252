from __future__ import annotations

from datetime import datetime

from ..common.datetime_utils import hours_between
from ..core.constants import HOURS_PRECISION, MIN_RECORDED_HOURS
from ..core.enums import SessionStatus
from .model import ClockSession


def round_hours(hours: float) -> float:
    return round(hours, HOURS_PRECISION)


def elapsed_hours(start: datetime, end: datetime) -> float:
    return hours_between(start, end)


def paused_hours_at(session: ClockSession, now: datetime) -> float:
    """Accumulated pause time, including the pause still open at ``now``."""
    paused = float(session.paused_duration_hours or 0.0)
    if session.status == SessionStatus.PAUSED and session.pause_start is not None:
        paused += max(0.0, hours_between(session.pause_start, now))
    return paused


def worked_hours(clock_in: datetime, clock_out: datetime, paused_hours: float = 0.0) -> float:
    """Hours to record for a finished session.

    A session with any positive elapsed time records at least
    ``MIN_RECORDED_HOURS``, even when pauses cover all of it.
    """
    raw = elapsed_hours(clock_in, clock_out)
    worked = raw - float(paused_hours or 0.0)
    if raw > 0 and worked < MIN_RECORDED_HOURS:
        worked = MIN_RECORDED_HOURS
    return round_hours(worked)


def live_worked_hours(session: ClockSession, now: datetime) -> float:
    """Worked time so far for an active session (no floor, never negative)."""
    if session.total_hours is not None:
        return session.total_hours
    worked = elapsed_hours(session.clock_in, now) - paused_hours_at(session, now)
    return round_hours(max(0.0, worked))
