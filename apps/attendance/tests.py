from datetime import date, timedelta

from django.test import SimpleTestCase

from .services import (
    attendance_pct,
    completed_attendance,
    days_since_start,
    ongoing_attendance,
    total_days,
)


class AttendanceDerivationTests(SimpleTestCase):
    def test_first_day_counts_as_one_elapsed_day(self):
        today = date(2026, 3, 10)
        self.assertEqual(days_since_start(today, today), 1)

    def test_elapsed_days_since_joining(self):
        self.assertEqual(days_since_start(date(2026, 3, 1), date(2026, 3, 11)), 10)

    def test_missing_joining_date_gives_zero(self):
        summary = ongoing_attendance(None, [date(2026, 3, 1)], date(2026, 3, 5))
        self.assertEqual(summary.days_elapsed, 0)
        self.assertEqual(summary.attendance_pct, 0.0)

    def test_duplicate_report_dates_count_once(self):
        start = date(2026, 3, 1)
        dates = [start, start, start + timedelta(days=1)]
        summary = ongoing_attendance(start, dates, date(2026, 3, 5))
        self.assertEqual(summary.days_attended, 2)
        self.assertEqual(summary.days_elapsed, 4)
        self.assertEqual(summary.attendance_pct, 50.0)

    def test_percentage_rounded_to_one_decimal(self):
        self.assertEqual(attendance_pct(1, 3), 33.3)
        self.assertEqual(attendance_pct(2, 3), 66.7)

    def test_zero_denominator(self):
        self.assertEqual(attendance_pct(3, 0), 0.0)

    def test_completed_uses_whole_window(self):
        start = date(2026, 1, 1)
        end = date(2026, 1, 11)
        dates = [start + timedelta(days=offset) for offset in range(5)]
        summary = completed_attendance(start, end, dates)
        self.assertEqual(summary.days_elapsed, 10)
        self.assertEqual(summary.attendance_pct, 50.0)

    def test_total_days_never_below_one(self):
        day = date(2026, 1, 1)
        self.assertEqual(total_days(day, day), 1)
        self.assertEqual(total_days(None, day), 0)
