from conftest import BSIT_1A, FLAG_DAY, at

from attendance_engine.classification.service import LiveStatusService
from attendance_engine.core.enums import LiveStatus


def _setup(schedules, requirements, roster):
    roster.add_student("s1", "Ana Cruz", BSIT_1A)
    roster.add_student("s2", "Ben Dizon", BSIT_1A)
    roster.add_student("s9", "Nina Ortiz", None)
    schedules.add(FLAG_DAY, on_time_end=465, attendance_end=480)
    requirements.require(FLAG_DAY, sections=[BSIT_1A])


def test_status_for_uses_earliest_record(resolver, schedules, requirements, roster, attendance):
    _setup(schedules, requirements, roster)
    attendance.add("s1", at(FLAG_DAY, 7, 55), verified=True)
    attendance.add("s1", at(FLAG_DAY, 7, 40), verified=True)
    service = LiveStatusService(resolver, attendance)

    assert service.status_for("s1", now=at(FLAG_DAY, 9)) == LiveStatus.PRESENT


def test_statuses_for_only_targeted_people(resolver, schedules, requirements, roster, attendance):
    _setup(schedules, requirements, roster)
    attendance.add("s1", at(FLAG_DAY, 7, 50))
    service = LiveStatusService(resolver, attendance)
    audience = resolver.resolve(FLAG_DAY)

    statuses = service.statuses_for(audience, ["s1", "s2", "s9"], now=at(FLAG_DAY, 9))

    assert statuses == {"s1": LiveStatus.LATE, "s2": LiveStatus.ABSENT}
    assert service.status_for("s9", now=at(FLAG_DAY, 9)) is None


def test_unreadable_records_classify_nobody(resolver, schedules, requirements, roster, attendance):
    _setup(schedules, requirements, roster)
    attendance.fail = True
    service = LiveStatusService(resolver, attendance)

    assert service.statuses_for(resolver.resolve(FLAG_DAY), ["s1"], now=at(FLAG_DAY, 7)) == {}
