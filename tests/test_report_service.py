import json
import logging
from datetime import date, datetime

import pytest

from conftest import BSIT_1A, at

from attendance_engine.core.exceptions import ValidationError
from attendance_engine.reports.service import ReportService, reconcile_absent
from attendance_engine.roster.model import SectionKey

BSCS_2B = SectionKey("BSCS", "2", "B")
MON_4, MON_11, MON_18 = date(2024, 3, 4), date(2024, 3, 11), date(2024, 3, 18)


@pytest.fixture
def service(resolver, schedules, requirements, roster, attendance, report_cache):
    roster.add_student("s1", "Ana Cruz", BSIT_1A)
    roster.add_student("s2", "Ben Dizon", BSIT_1A)
    roster.add_student("s3", "Cara Evans", BSCS_2B)
    roster.add_teacher("t1", "Teo Flores")

    for d in (MON_4, MON_11, MON_18):
        schedules.add(d, on_time_end=465, attendance_end=480)
    requirements.require(MON_4, students=["s3", "ghost"], teachers=["t1"], sections=[BSIT_1A])
    requirements.require(MON_11, students=["s3"], sections=[BSIT_1A])
    requirements.require(MON_18, sections=[BSIT_1A])

    attendance.add("s1", at(MON_4, 7, 30))
    attendance.add("s1", at(MON_11, 7, 50))
    attendance.add("s2", at(MON_4, 7, 30), verified=False)
    attendance.add("s2", at(MON_11, 7, 35))
    attendance.add("s2", at(MON_11, 7, 55))
    attendance.add("s2", at(MON_18, 7, 30))
    attendance.add("s3", at(MON_4, 7, 30))

    return ReportService(resolver, attendance, roster, cache=report_cache)


def test_per_student_counts(service):
    report = service.build_monthly_report(2024, 3)
    by_id = {s.person_id: s for s in report.students}

    assert (by_id["s1"].present_count, by_id["s1"].late_count, by_id["s1"].absent_count) == (1, 1, 1)
    assert (by_id["s2"].present_count, by_id["s2"].late_count, by_id["s2"].absent_count) == (2, 0, 1)
    assert (by_id["s3"].present_count, by_id["s3"].late_count, by_id["s3"].absent_count) == (1, 0, 1)
    assert "ghost" not in by_id
    for s in report.students:
        assert s.total_scheduled == s.present_count + s.late_count + s.absent_count


def test_program_groups_sum_their_students(service):
    report = service.build_monthly_report(2024, 3)
    programs = {g.key: g for g in report.programs}

    assert programs["BSIT"].students == 2
    assert (programs["BSIT"].present, programs["BSIT"].late, programs["BSIT"].absent) == (3, 1, 2)
    assert programs["BSCS"].scheduled == 2
    assert [g.key for g in report.classes] == ["BSCS 2-B", "BSIT 1-A"]


def test_summary_and_average(service):
    summary = service.build_monthly_report(2024, 3).summary

    assert summary.total_students == 3
    assert (summary.total_present, summary.total_late, summary.total_absent) == (4, 1, 3)
    assert summary.total_scheduled == 8
    assert summary.average_attendance == 62.5


def test_by_date_breakdown(service):
    report = service.build_monthly_report(2024, 3)
    first = report.by_date[0]

    assert [b.day for b in report.by_date] == [MON_4, MON_11, MON_18]
    assert first.total_targeted == 3
    assert first.present_ids == ("s1", "s3")
    assert first.absent_ids == ("s2",)
    assert first.absent_names == ("Ben Dizon",)
    assert first.on_time_end == "07:45"
    assert report.by_date[1].late_ids == ("s1",)


def test_report_is_idempotent(service):
    assert service.build_monthly_report(2024, 3) == service.build_monthly_report(2024, 3)


def test_filters_and_as_of(service):
    report = service.build_monthly_report(2024, 3, program="BSIT", as_of=MON_11)

    assert [s.person_id for s in report.students] == ["s1", "s2"]
    assert [b.day for b in report.by_date] == [MON_4, MON_11]
    assert report.summary.total_scheduled == 4


def test_invalid_month_is_rejected(service):
    with pytest.raises(ValidationError):
        service.build_monthly_report(2024, 13)


@pytest.mark.parametrize("source", ["attendance", "requirements", "schedules", "roster"])
def test_unreadable_source_gives_incomplete_report_and_no_cache_row(
    service, source, attendance, requirements, schedules, roster, report_cache, caplog
):
    {"attendance": attendance, "requirements": requirements, "schedules": schedules, "roster": roster}[source].fail = True

    with caplog.at_level(logging.WARNING):
        report = service.generate_and_cache(2024, 3, generated_at=datetime(2024, 4, 1, 6, 0))

    assert not report.complete
    assert report.summary is None
    assert report.students == () and report.by_date == ()
    assert report_cache.rows == {}
    assert "not caching incomplete report" in caplog.text


def test_failed_refresh_keeps_previous_cache_row(service, attendance, report_cache):
    service.generate_and_cache(2024, 3, generated_at=datetime(2024, 4, 1, 6, 0))
    attendance.fail = True
    service.generate_and_cache(2024, 3, generated_at=datetime(2024, 4, 2, 6, 0))

    cached = report_cache.get(scope="all", year=2024, month=3)
    assert cached.generated_at == datetime(2024, 4, 1, 6, 0)
    assert json.loads(cached.payload)["summary"]["total_present"] == 4


def test_duplicate_scans_and_off_day_checkins_never_over_count(service, attendance, caplog):
    attendance.add("s1", at(MON_4, 7, 40))
    attendance.add("s1", at(MON_4, 7, 55))
    attendance.add("s1", at(date(2024, 3, 5), 7, 30))
    attendance.add("s1", at(date(2024, 3, 6), 7, 30))

    with caplog.at_level(logging.WARNING):
        report = service.build_monthly_report(2024, 3)

    s1 = next(s for s in report.students if s.person_id == "s1")
    assert (s1.present_count, s1.late_count, s1.absent_count, s1.total_scheduled) == (1, 1, 1, 3)
    assert "attendance exceeds schedule" not in caplog.text


def test_reconcile_absent_clamps_and_logs(caplog):
    with caplog.at_level(logging.WARNING):
        assert reconcile_absent("s1", 2, 2, 1) == 0
    assert "attendance exceeds schedule for s1" in caplog.text
    assert reconcile_absent("s1", 5, 2, 1) == 2


def test_generate_and_cache_upserts_one_row(service, report_cache):
    generated_at = datetime(2024, 4, 1, 6, 0)
    service.generate_and_cache(2024, 3, generated_at=generated_at)
    service.generate_and_cache(2024, 3, generated_at=generated_at)

    assert list(report_cache.rows) == [("all", 2024, 3)]
    payload = json.loads(report_cache.get(scope="all", year=2024, month=3).payload)
    assert payload["summary"]["total_scheduled"] == 8
    assert payload["month_name"] == "March"
