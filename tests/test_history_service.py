from datetime import date, timedelta

import pytest

from conftest import BSIT_1A, at

from attendance_engine.core.enums import DayStatus
from attendance_engine.core.exceptions import ValidationError
from attendance_engine.history.service import HistoryService, attendance_percentage

TODAY = date(2024, 3, 20)


def _flag_days(schedules, requirements, days, **kwargs):
    for d in days:
        schedules.add(d, on_time_end=465, attendance_end=480)
        requirements.require(d, **kwargs)


def test_percentage_over_ten_required_days(resolver, schedules, requirements, roster, attendance):
    roster.add_student("s1", "Ana Cruz", BSIT_1A)
    days = [TODAY - timedelta(days=i) for i in range(10)]
    _flag_days(schedules, requirements, days, sections=[BSIT_1A])
    for d in days[:6]:
        attendance.add("s1", at(d, 7, 30))

    history = HistoryService(resolver, attendance).build_history("s1", now=at(TODAY, 9))

    assert history.present_count == 6
    assert history.absent_count == 4
    assert history.attendance_percentage == 60
    assert [e.day for e in history.present_days] == days[:6]
    assert list(history.absent_days) == days[6:]
    assert all(e.status == DayStatus.VERIFIED for e in history.present_days)
    assert history.present_days[0].record_id is not None


def test_days_outside_window_or_untargeted_are_ignored(resolver, schedules, requirements, roster, attendance):
    roster.add_student("s1", "Ana Cruz", BSIT_1A)
    _flag_days(schedules, requirements, [TODAY - timedelta(days=90)], students=["s1"])
    _flag_days(schedules, requirements, [TODAY - timedelta(days=3)], students=["s2"])
    schedules.add(TODAY - timedelta(days=2), flag=False)
    attendance.add("s1", at(TODAY - timedelta(days=2), 7))

    history = HistoryService(resolver, attendance).build_history("s1", now=at(TODAY, 9))

    assert history.present_days == ()
    assert history.absent_days == ()
    assert history.attendance_percentage == 0


def test_today_without_record_is_waiting_while_window_open(resolver, schedules, requirements, roster, attendance):
    roster.add_student("s1", "Ana Cruz", BSIT_1A)
    _flag_days(schedules, requirements, [TODAY], students=["s1"])
    service = HistoryService(resolver, attendance)

    early = service.build_history("s1", now=at(TODAY, 7, 30))
    assert early.waiting_today
    assert early.present_days[0].status == DayStatus.PENDING
    assert early.present_count == 0
    assert early.absent_days == ()

    late = service.build_history("s1", now=at(TODAY, 9))
    assert not late.waiting_today
    assert late.absent_days == (TODAY,)


def test_unverified_record_counts_neither_way(resolver, schedules, requirements, roster, attendance):
    roster.add_student("s1", "Ana Cruz", BSIT_1A)
    yesterday = TODAY - timedelta(days=1)
    _flag_days(schedules, requirements, [yesterday], students=["s1"])
    attendance.add("s1", at(yesterday, 7, 30), verified=False)

    history = HistoryService(resolver, attendance).build_history("s1", now=at(TODAY, 9))

    assert history.present_days[0].status == DayStatus.UNVERIFIED
    assert history.present_count == 0
    assert history.absent_count == 0


def test_recent_records_are_newest_first(resolver, roster, attendance):
    roster.add_student("s1", "Ana Cruz", BSIT_1A)
    first = attendance.add("s1", at(TODAY - timedelta(days=2), 7))
    second = attendance.add("s1", at(TODAY - timedelta(days=1), 7))

    history = HistoryService(resolver, attendance).build_history("s1", now=at(TODAY, 9), recent_limit=5)

    assert history.recent_records == (second, first)


def test_unreadable_records_give_empty_history(resolver, schedules, requirements, roster, attendance):
    roster.add_student("s1", "Ana Cruz", BSIT_1A)
    _flag_days(schedules, requirements, [TODAY - timedelta(days=1)], students=["s1"])
    attendance.fail = True

    history = HistoryService(resolver, attendance).build_history("s1", now=at(TODAY, 9))

    assert history.absent_days == ()
    assert history.recent_records == ()


def test_negative_range_is_rejected(resolver, attendance):
    with pytest.raises(ValidationError):
        HistoryService(resolver, attendance).build_history("s1", now=at(TODAY, 9), days=-1)


def test_attendance_percentage_rounds_half_up():
    assert attendance_percentage(1, 1) == 50
    assert attendance_percentage(1, 7) == 13
    assert attendance_percentage(2, 1) == 67
    assert attendance_percentage(0, 0) == 0


def test_unreadable_profile_gives_no_days_instead_of_partial_ones(resolver, schedules, requirements, roster, attendance):
    roster.add_student("s1", "Ana Cruz", BSIT_1A)
    named, by_section = TODAY - timedelta(days=2), TODAY - timedelta(days=1)
    _flag_days(schedules, requirements, [named], students=["s1"])
    _flag_days(schedules, requirements, [by_section], sections=[BSIT_1A])
    attendance.add("s1", at(named, 7, 30))
    service = HistoryService(resolver, attendance)

    full = service.build_history("s1", now=at(TODAY, 9))
    assert (full.present_count, full.absent_count, full.attendance_percentage) == (1, 1, 50)

    roster.fail = True
    degraded = service.build_history("s1", now=at(TODAY, 9))
    assert degraded.present_days == ()
    assert degraded.absent_days == ()
    assert degraded.attendance_percentage == 0
