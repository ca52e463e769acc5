"""
Attendance derived from daily reports.

A day counts as attended when the intern filed a report for it. The
denominator is the number of days elapsed since joining for ongoing
internships and the whole internship window for completed ones.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional


@dataclass(frozen=True)
class AttendanceSummary:
    days_elapsed: int
    days_attended: int
    attendance_pct: float


def attendance_pct(days_attended: int, denominator: int) -> float:
    if denominator <= 0:
        return 0.0
    return round(days_attended / denominator * 100, 1)


def days_since_start(date_of_joining: Optional[date], today: date) -> int:
    if date_of_joining is None:
        return 0
    return max(1, (today - date_of_joining).days)


def total_days(date_of_joining: Optional[date], date_of_leaving: Optional[date]) -> int:
    if date_of_joining is None or date_of_leaving is None:
        return 0
    return max(1, (date_of_leaving - date_of_joining).days)


def count_attended(report_dates: Iterable[date]) -> int:
    return len(set(report_dates))


def ongoing_attendance(
    date_of_joining: Optional[date],
    report_dates: Iterable[date],
    today: date,
) -> AttendanceSummary:
    elapsed = days_since_start(date_of_joining, today)
    attended = count_attended(report_dates)
    return AttendanceSummary(elapsed, attended, attendance_pct(attended, elapsed))


def completed_attendance(
    date_of_joining: Optional[date],
    date_of_leaving: Optional[date],
    report_dates: Iterable[date],
) -> AttendanceSummary:
    window = total_days(date_of_joining, date_of_leaving)
    attended = count_attended(report_dates)
    return AttendanceSummary(window, attended, attendance_pct(attended, window))
