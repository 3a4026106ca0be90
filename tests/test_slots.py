from care_schedule.logic.slots import merge_into_slot, overlaps, slot_for, sort_by_start
from care_schedule.models.schedule import Assignment


def _a(pid, start, end, slot="24h"):
    return Assignment(date=start[:10], slot=slot, professional_id=pid, start_at=start, end_at=end)


def test_overlaps_is_half_open():
    assert overlaps("2025-08-05T07:00:00", "2025-08-05T19:00:00",
                    "2025-08-05T18:00:00", "2025-08-06T06:00:00")
    assert not overlaps("2025-08-05T07:00:00", "2025-08-05T19:00:00",
                        "2025-08-05T19:00:00", "2025-08-06T07:00:00")


def test_slot_for_exact_containing_and_fallback():
    assert slot_for("2025-08-05", "2025-08-05T19:00:00", "12h") == "12h_night"
    assert slot_for("2025-08-05", "2025-08-05T16:30:00", "8h") == "8h_afternoon"
    assert slot_for("2025-08-05", "2025-08-05T05:00:00", "8h") == "8h_morning"
    assert slot_for("2025-08-05", "2025-08-05T20:00:00", "12h", start_time="08:00") == "12h_night"


def test_sort_by_start():
    late = _a("b", "2025-08-05T19:00:00", "2025-08-06T07:00:00")
    early = _a("a", "2025-08-05T07:00:00", "2025-08-05T19:00:00")
    assert sort_by_start([late, early]) == [early, late]


def test_merge_into_slot_replaces_overlapping_and_same_professional():
    day = _a("a", "2025-08-05T07:00:00", "2025-08-05T19:00:00")
    night = _a("b", "2025-08-05T19:00:00", "2025-08-06T07:00:00")

    merged = merge_into_slot([day, night], _a("c", "2025-08-05T07:00:00", "2025-08-05T19:00:00"))
    assert [x.professional_id for x in merged] == ["c", "b"]

    merged = merge_into_slot([day, night], _a("b", "2025-08-05T07:00:00", "2025-08-05T12:00:00"))
    assert [x.professional_id for x in merged] == ["b"]
