from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from mentorhub.services.scheduler import (
    REASON_ALREADY_SENT,
    REASON_DISABLED,
    REASON_OUTSIDE_WINDOW,
    REASON_WRONG_DAY,
    Schedule,
    ScheduleState,
    current_day_key,
    evaluate,
)

TZ = ZoneInfo("America/Chicago")

# Wednesday 2026-10-21, 09:15 local
WED_0915 = datetime(2026, 10, 21, 14, 15, tzinfo=timezone.utc)


def weekly(day="3", time="09:00", enabled=True, last_sent=None):
    return Schedule(enabled=enabled, frequency="weekly", day=day, time=time, last_sent=last_sent)


def test_fires_inside_window_on_scheduled_day():
    decision = evaluate(weekly(), now=WED_0915, tz=TZ)
    assert decision.state is ScheduleState.DUE
    assert decision.due


def test_second_run_same_local_day_is_skipped():
    sent_at = datetime(2026, 10, 21, 14, 16, tzinfo=timezone.utc)
    decision = evaluate(weekly(last_sent=sent_at), now=datetime(2026, 10, 21, 14, 30, tzinfo=timezone.utc), tz=TZ)
    assert decision.state is ScheduleState.SKIPPED
    assert decision.reason == REASON_ALREADY_SENT


def test_last_sent_compared_on_local_date():
    # 03:00 UTC on the 21st is still the 20th in Chicago
    sent_at = datetime(2026, 10, 21, 3, 0, tzinfo=timezone.utc)
    assert evaluate(weekly(last_sent=sent_at), now=WED_0915, tz=TZ).due


def test_disabled_wins_over_everything():
    decision = evaluate(weekly(enabled=False), now=WED_0915, tz=TZ)
    assert decision.state is ScheduleState.DISABLED
    assert decision.reason == REASON_DISABLED

    decision = evaluate(weekly(enabled=False), now=WED_0915, tz=TZ, manual=True)
    assert decision.state is ScheduleState.DISABLED


def test_day_mismatch_checked_before_time():
    decision = evaluate(weekly(day="4", time="20:00"), now=WED_0915, tz=TZ)
    assert decision.reason == REASON_WRONG_DAY


def test_window_is_thirty_minutes_inclusive():
    assert evaluate(weekly(time="08:45"), now=WED_0915, tz=TZ).due
    assert evaluate(weekly(time="09:45"), now=WED_0915, tz=TZ).due

    decision = evaluate(weekly(time="09:46"), now=WED_0915, tz=TZ)
    assert decision.reason == REASON_OUTSIDE_WINDOW


def test_same_day_last_sent_skips_even_inside_window():
    sent_at = datetime(2026, 10, 21, 13, 0, tzinfo=timezone.utc)
    assert evaluate(weekly(last_sent=sent_at), now=WED_0915, tz=TZ).reason == REASON_ALREADY_SENT


def test_manual_send_bypasses_day_window_and_last_sent():
    sent_at = datetime(2026, 10, 21, 13, 0, tzinfo=timezone.utc)
    decision = evaluate(weekly(day="5", time="18:00", last_sent=sent_at), now=WED_0915, tz=TZ, manual=True)
    assert decision.due


def test_monthly_schedule_matches_day_of_month():
    monthly = Schedule(enabled=True, frequency="monthly", day="21", time="09:00")
    assert evaluate(monthly, now=WED_0915, tz=TZ).due

    monthly = Schedule(enabled=True, frequency="monthly", day="3", time="09:00")
    assert evaluate(monthly, now=WED_0915, tz=TZ).reason == REASON_WRONG_DAY


def test_window_does_not_wrap_past_midnight():
    # 00:05 and 23:50 are 15 minutes apart on the wall clock but compared
    # as minutes since midnight, so the trigger is outside the window
    thu_0005 = datetime(2026, 10, 22, 5, 5, tzinfo=timezone.utc)
    decision = evaluate(weekly(day="4", time="23:50"), now=thu_0005, tz=TZ)
    assert decision.reason == REASON_OUTSIDE_WINDOW


def test_day_key_is_sunday_based():
    sunday = datetime(2026, 10, 18, 12, 0, tzinfo=TZ)
    assert current_day_key(sunday, "weekly") == "0"
    assert current_day_key(sunday, "monthly") == "18"
