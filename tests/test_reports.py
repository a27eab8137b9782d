from datetime import date, datetime, time, timezone

import pytest

from mentorhub.models import HourAdjustment, Mentor, Season, Shift, Signup, Student, StudentAttendance


@pytest.fixture
def roster(db):
    ada = Mentor(name="Ada", email="ada@example.com")
    ben = Mentor(name="Ben", email="ben@example.com")
    s1 = Shift(date=date(2026, 10, 3), start_time=time(9), end_time=time(14))
    s2 = Shift(date=date(2026, 10, 10), start_time=time(9), end_time=time(14))
    s3 = Shift(date=date(2026, 10, 17), start_time=time(9), end_time=time(14))
    db.add_all([ada, ben, s1, s2, s3])
    db.flush()
    db.add_all(
        [
            Signup(mentor_id=ada.id, shift_id=s1.id),
            Signup(mentor_id=ada.id, shift_id=s2.id),
            Signup(mentor_id=ben.id, shift_id=s3.id),
            HourAdjustment(mentor_id=ada.id, hours=2, reason="outreach", date=date(2026, 10, 4)),
            HourAdjustment(mentor_id=ben.id, hours=-1, reason="left early", date=date(2026, 10, 17)),
        ]
    )
    db.commit()
    return {"ada": ada.id, "ben": ben.id}


def test_leaderboard_totals_and_average(client, roster):
    r = client.get("/leaderboard")
    assert r.status_code == 200
    body = r.json()

    assert [(m["mentor_name"], m["total_hours"], m["shift_count"]) for m in body["mentors"]] == [
        ("Ada", 12.0, 2),
        ("Ben", 4.0, 1),
    ]
    assert body["stats"]["total_hours"] == 16.0
    assert body["stats"]["avg_hours_per_mentor"] == 8.0
    assert body["stats"]["mentor_count"] == 2


def test_leaderboard_all_means_no_filter(client, roster):
    assert client.get("/leaderboard", params={"season_id": "all"}).json() == client.get("/leaderboard").json()


def test_leaderboard_season_filter(client, db, roster):
    season = Season(name="Fall", start_date=date(2026, 10, 9), end_date=date(2026, 10, 31))
    db.add(season)
    db.commit()

    body = client.get("/leaderboard", params={"season_id": season.id}).json()
    hours = {m["mentor_name"]: m["total_hours"] for m in body["mentors"]}
    # Ada's Oct 3 shift and Oct 4 adjustment fall outside the season
    assert hours == {"Ada": 5.0, "Ben": 4.0}


def test_leaderboard_unknown_season(client):
    assert client.get("/leaderboard", params={"season_id": 42}).status_code == 404


def test_custom_times_override_shift_window(client, db):
    m = Mentor(name="Cy", email="cy@example.com")
    s = Shift(date=date(2026, 10, 3), start_time=time(9), end_time=time(17))
    db.add_all([m, s])
    db.flush()
    db.add(Signup(mentor_id=m.id, shift_id=s.id, custom_start_time=time(10), custom_end_time=time(12)))
    db.commit()

    assert client.get("/leaderboard").json()["mentors"][0]["total_hours"] == 2.0


def test_cancelled_shifts_do_not_count(client, db):
    m = Mentor(name="Cy", email="cy@example.com")
    s = Shift(date=date(2026, 10, 3), start_time=time(9), end_time=time(17), cancelled=True)
    db.add_all([m, s])
    db.flush()
    db.add(Signup(mentor_id=m.id, shift_id=s.id))
    db.commit()

    assert client.get("/leaderboard").json()["mentors"] == []


def test_mentor_attendance_requires_admin(client):
    assert client.get("/admin/attendance").status_code == 401


def test_mentor_attendance_rates(admin_client, db, roster):
    db.expire_all()
    signup = db.query(Signup).filter(Signup.mentor_id == roster["ada"]).order_by(Signup.id).first()
    signup.checked_in_at = datetime(2026, 10, 3, 14, 0, tzinfo=timezone.utc)
    signup.checked_out_at = datetime(2026, 10, 3, 17, 30, tzinfo=timezone.utc)
    db.commit()

    body = admin_client.get("/admin/attendance").json()
    ada = next(m for m in body["mentors"] if m["id"] == roster["ada"])
    assert ada["total_signups"] == 2
    assert ada["check_in_rate"] == 50
    assert ada["worked_hours"] == 3.5
    assert body["stats"]["total_check_ins"] == 1
    assert body["stats"]["check_in_rate"] == 33


@pytest.fixture
def students(db):
    kim = Student(name="Kim")
    lee = Student(name="Lee")
    db.add_all([kim, lee])
    db.flush()

    def at(day, h, m=0):
        return datetime(2026, 10, day, h, m, tzinfo=timezone.utc)

    db.add_all(
        [
            StudentAttendance(student_id=kim.id, date=date(2026, 10, 19), checked_in_at=at(19, 22), checked_out_at=at(20, 0)),
            StudentAttendance(student_id=kim.id, date=date(2026, 10, 20), checked_in_at=at(20, 22), checked_out_at=None),
            StudentAttendance(student_id=lee.id, date=date(2026, 10, 20), checked_in_at=at(20, 22), checked_out_at=at(20, 23)),
        ]
    )
    db.commit()
    return {"kim": kim.id, "lee": lee.id}


def test_student_attendance_summary(admin_client, students):
    body = admin_client.get("/admin/student-attendance").json()
    rows = {s["name"]: s for s in body["students"]}

    assert rows["Kim"]["total_check_ins"] == 2
    # the open record from a past day adds nothing
    assert rows["Kim"]["total_hours"] == 2.0
    assert rows["Kim"]["attendance_rate"] == 100
    assert rows["Lee"]["attendance_rate"] == 50
    assert body["stats"]["total_days"] == 2
    assert body["stats"]["avg_attendance_rate"] == 75


def test_student_attendance_report_groups_by_day(admin_client, students):
    body = admin_client.get("/admin/student-attendance/report").json()

    assert [d["date"] for d in body["days"]] == ["2026-10-20", "2026-10-19"]
    durations = {e["student_name"]: e["duration"] for e in body["days"][0]["entries"]}
    assert durations == {"Kim": None, "Lee": 60}
    assert body["stats"]["total_sessions"] == 3
    assert body["stats"]["total_hours"] == 3.0

    body = admin_client.get("/admin/student-attendance/report", params={"student_id": students["lee"]}).json()
    assert body["stats"]["total_sessions"] == 1


def test_report_duration_rounds_half_up(admin_client, db):
    kim = Student(name="Kim")
    db.add(kim)
    db.flush()
    db.add(
        StudentAttendance(
            student_id=kim.id,
            date=date(2026, 10, 20),
            checked_in_at=datetime(2026, 10, 20, 22, 0, 0, tzinfo=timezone.utc),
            checked_out_at=datetime(2026, 10, 20, 22, 30, 30, tzinfo=timezone.utc),
        )
    )
    db.commit()

    body = admin_client.get("/admin/student-attendance/report").json()
    assert body["days"][0]["entries"][0]["duration"] == 31
