from datetime import datetime, timezone
from types import SimpleNamespace

from app.models.event import EventType
from app.schemas.conflict import ConflictPairType
from app.services.conflict_service import MANUAL_RESOLUTION, STUDY_PRIORITY_RESOLUTION, detect_conflicts


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 10, 19, hour, minute, tzinfo=timezone.utc)


def make_event(event_id, event_type, start, end, title=None):
    return SimpleNamespace(
        id=event_id,
        title=title or event_id,
        type=event_type,
        start_time=start,
        end_time=end,
        location=None,
    )


def test_study_overlapping_personal_gives_study_priority():
    study = make_event("A", EventType.study, at(9), at(11))
    personal = make_event("B", EventType.personal, at(10), at(10, 30))

    conflicts = detect_conflicts([personal, study])

    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert {conflict.event1.id, conflict.event2.id} == {"A", "B"}
    assert conflict.pair_type == ConflictPairType.study_personal
    assert conflict.priority == "A"
    assert conflict.resolution == STUDY_PRIORITY_RESOLUTION


def test_study_overlaps_are_not_reported():
    first = make_event("A", EventType.study, at(9), at(10))
    second = make_event("B", EventType.study, at(9, 30), at(10, 30))

    assert detect_conflicts([first, second]) == []


def test_personal_overlap_requires_manual_resolution():
    first = make_event("A", EventType.personal, at(9), at(10))
    second = make_event("B", EventType.personal, at(9, 30), at(10, 30))

    conflicts = detect_conflicts([first, second])

    assert len(conflicts) == 1
    assert conflicts[0].pair_type == ConflictPairType.personal_personal
    assert conflicts[0].priority is None
    assert conflicts[0].resolution == MANUAL_RESOLUTION
    assert conflicts[0].id == "A-B"


def test_touching_intervals_do_not_conflict():
    first = make_event("A", EventType.personal, at(9), at(10))
    second = make_event("B", EventType.study, at(10), at(11))
    third = make_event("C", EventType.personal, at(11), at(12))

    assert detect_conflicts([third, second, first]) == []


def test_long_event_conflicts_with_each_event_inside_it():
    long_personal = make_event("A", EventType.personal, at(9), at(12))
    lecture = make_event("B", EventType.study, at(9, 30), at(10))
    errand = make_event("C", EventType.personal, at(10, 30), at(11))

    conflicts = detect_conflicts([errand, lecture, long_personal])

    assert [(c.event1.id, c.event2.id) for c in conflicts] == [("A", "B"), ("A", "C")]
    assert conflicts[0].priority == "B"
    assert conflicts[1].pair_type == ConflictPairType.personal_personal


def test_equal_start_times_are_ordered_by_id():
    later_id = make_event("b", EventType.personal, at(9), at(10))
    earlier_id = make_event("a", EventType.personal, at(9), at(9, 30))

    conflicts = detect_conflicts([later_id, earlier_id])

    assert len(conflicts) == 1
    assert (conflicts[0].event1.id, conflicts[0].event2.id) == ("a", "b")


def test_detection_is_deterministic_and_does_not_mutate_input():
    events = [
        make_event("A", EventType.study, at(8), at(12)),
        make_event("B", EventType.personal, at(9), at(10)),
        make_event("C", EventType.personal, at(9, 30), at(11)),
        make_event("D", EventType.study, at(10, 30), at(13)),
    ]
    snapshot = list(events)

    first_run = [(c.id, c.pair_type, c.priority) for c in detect_conflicts(events)]
    second_run = [(c.id, c.pair_type, c.priority) for c in detect_conflicts(reversed(events))]

    assert first_run == second_run
    assert events == snapshot
    assert first_run == [
        ("A-B", ConflictPairType.study_personal, "A"),
        ("A-C", ConflictPairType.study_personal, "A"),
        ("B-C", ConflictPairType.personal_personal, None),
        ("C-D", ConflictPairType.study_personal, "D"),
    ]


def test_naive_and_string_typed_events_are_accepted():
    stored = make_event("A", "study", at(9).replace(tzinfo=None), at(10).replace(tzinfo=None))
    personal = make_event("B", "Personal", at(9, 45), at(10, 15))

    conflicts = detect_conflicts([stored, personal])

    assert len(conflicts) == 1
    assert conflicts[0].priority == "A"


def test_empty_input_has_no_conflicts():
    assert detect_conflicts([]) == []
