from datetime import date, datetime, time, timedelta, timezone

from mentorhub.services.time_accounting import (
    TimeRecord,
    aggregate_records,
    attendance_rate,
    build_leaderboard,
    minutes_to_hours,
    percent,
    round_half_up,
    scheduled_minutes,
    session_minutes,
)

TODAY = date(2026, 10, 21)
NOW = datetime(2026, 10, 21, 18, 0, tzinfo=timezone.utc)


def at(h, m=0, day=TODAY):
    return datetime(day.year, day.month, day.day, h, m, tzinfo=timezone.utc)


def test_closed_session_hours_rounded_to_one_decimal():
    minutes = session_minutes(at(14), at(16, 20), record_date=TODAY, today=TODAY, now=NOW)
    assert minutes == 140
    assert minutes_to_hours(minutes) == 2.3


def test_equal_timestamps_are_zero():
    minutes = session_minutes(at(14), at(14), record_date=TODAY, today=TODAY, now=NOW)
    assert minutes_to_hours(minutes) == 0.0


def test_checkout_before_checkin_never_negative():
    assert session_minutes(at(15), at(14), record_date=TODAY, today=TODAY, now=NOW) == 0.0


def test_open_session_today_counts_until_now():
    assert session_minutes(at(16), None, record_date=TODAY, today=TODAY, now=NOW) == 120


def test_open_session_on_past_day_contributes_nothing():
    past = TODAY - timedelta(days=3)
    assert session_minutes(at(16, day=past), None, record_date=past, today=TODAY, now=NOW) == 0.0


def test_naive_timestamps_are_read_as_utc():
    naive_in = datetime(2026, 10, 21, 16, 0)
    assert session_minutes(naive_in, None, record_date=TODAY, today=TODAY, now=NOW) == 120


def test_scheduled_minutes_floors_inverted_windows():
    assert scheduled_minutes(time(9), time(11, 30)) == 150
    assert scheduled_minutes(time(11), time(9)) == 0


def test_round_half_up():
    assert round_half_up(0.25) == 0.3
    assert round_half_up(0.35) == 0.4
    assert round_half_up(2.45) == 2.5
    assert round_half_up(7.5, 0) == 8.0


def test_percent_and_rates():
    assert percent(0, 0) == 0
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert percent(1, 8) == 13
    assert attendance_rate(3, 4) == 75
    assert attendance_rate(0, 0) == 0


def test_aggregate_records_counts_cohort_days():
    d1, d2 = date(2026, 10, 19), date(2026, 10, 20)
    records = [
        TimeRecord(1, d1, at(14, day=d1), at(16, day=d1)),
        TimeRecord(1, d2, at(14, day=d2), None),  # forgot to check out
        TimeRecord(2, d2, at(15, day=d2), at(16, day=d2)),
        TimeRecord(2, TODAY, at(17), None),
    ]
    totals, cohort_days = aggregate_records(records, today=TODAY, now=NOW)

    assert cohort_days == {d1, d2, TODAY}
    assert totals[1].minutes == 120
    assert totals[1].records == 2
    assert len(totals[1].days) == 2
    assert totals[2].hours == 2.0


def test_aggregate_records_respects_range():
    d1, d2 = date(2026, 10, 1), date(2026, 10, 20)
    records = [
        TimeRecord(1, d1, at(14, day=d1), at(15, day=d1)),
        TimeRecord(1, d2, at(14, day=d2), at(16, day=d2)),
    ]
    totals, cohort_days = aggregate_records(records, today=TODAY, now=NOW, start=date(2026, 10, 15))
    assert cohort_days == {d2}
    assert totals[1].minutes == 120


def test_leaderboard_folds_adjustments():
    mentors = {1: ("Ada", "ada@example.com"), 2: ("Ben", "ben@example.com")}
    entries, stats = build_leaderboard(
        [(1, 300), (1, 300), (2, 300)],
        [(1, 2.0), (2, -1.0)],
        mentors,
    )

    assert [(e.name, e.total_hours, e.shift_count) for e in entries] == [("Ada", 12.0, 2), ("Ben", 4.0, 1)]
    assert stats.total_hours == 16.0
    assert stats.avg_hours_per_mentor == 8.0
    assert stats.total_shifts == 3
    assert stats.mentor_count == 2


def test_leaderboard_adjustment_only_mentor_has_zero_shifts():
    entries, stats = build_leaderboard([], [(3, 1.5)], {3: ("Cy", "cy@example.com")})
    assert entries[0].total_hours == 1.5
    assert entries[0].shift_count == 0
    assert stats.avg_hours_per_mentor == 1.5


def test_empty_leaderboard():
    entries, stats = build_leaderboard([], [], {})
    assert entries == []
    assert stats.avg_hours_per_mentor == 0.0
