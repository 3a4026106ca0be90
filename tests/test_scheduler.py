import pytest

from care_schedule.exceptions import ValidationError
from care_schedule.logic.scheduler import generate_autofill
from care_schedule.models.schedule import AutoFillConfig
from conftest import make_assignment


def _pick(preview, day, slot="24h"):
    return preview.professional_for(f"2025-08-{day:02d}", slot)


def test_rotation_alternates_daily():
    preview = generate_autofill({}, AutoFillConfig(rotation=["a", "b"]), 2025, 8, "24h")
    assert [_pick(preview, d) for d in (1, 2, 3, 4)] == ["a", "b", "a", "b"]
    assert len(preview.filled) == 31
    assert preview.skipped == []


def test_days_per_professional_groups_blocks():
    config = AutoFillConfig(rotation=["a", "b"], days_per_professional=2)
    preview = generate_autofill({}, config, 2025, 8, "24h")
    assert [_pick(preview, d) for d in range(1, 7)] == ["a", "a", "b", "b", "a", "a"]


def test_rotation_advances_across_slots():
    preview = generate_autofill({}, AutoFillConfig(rotation=["a", "b", "c"]), 2025, 8, "12h")
    assert _pick(preview, 1, "12h_day") == "a"
    assert _pick(preview, 1, "12h_night") == "b"
    assert _pick(preview, 2, "12h_day") == "c"
    assert _pick(preview, 2, "12h_night") == "a"


def test_excluded_weekdays_go_to_substitute():
    config = AutoFillConfig(rotation=["a", "b"], substitute_id="s", weekdays=[1, 2, 3, 4, 5])
    preview = generate_autofill({}, config, 2025, 8, "24h")
    assert _pick(preview, 1) == "a"    # 금
    assert _pick(preview, 2) == "s"    # 토
    assert _pick(preview, 3) == "s"    # 일
    assert _pick(preview, 4) == "b"    # 월
    assert "2025-08-02|24h" in preview.substituted


def test_excluded_weekdays_without_substitute_stay_empty():
    config = AutoFillConfig(rotation=["a"], weekdays=[1, 2, 3, 4, 5])
    preview = generate_autofill({}, config, 2025, 8, "24h")
    assert _pick(preview, 2) is None
    assert _pick(preview, 4) == "a"


def test_busy_professional_replaced_by_substitute_or_skipped():
    def busy(pid, start, end):
        return pid == "a" and start.startswith("2025-08-01")

    with_sub = generate_autofill({}, AutoFillConfig(rotation=["a", "b"], substitute_id="s"),
                                 2025, 8, "24h", is_busy=busy)
    assert _pick(with_sub, 1) == "s"
    assert "2025-08-01|24h" in with_sub.substituted

    without_sub = generate_autofill({}, AutoFillConfig(rotation=["a", "b"]), 2025, 8, "24h", is_busy=busy)
    assert _pick(without_sub, 1) is None
    assert ("2025-08-01|24h", "conflict") in without_sub.skipped
    assert _pick(without_sub, 2) == "b"


def test_locked_days_untouched_and_rotation_starts_after_them():
    existing = {"2025-08-05|24h": [make_assignment("2025-08-05", "24h", "z")]}
    preview = generate_autofill(existing, AutoFillConfig(rotation=["a", "b"]), 2025, 8, "24h",
                                min_editable_date="2025-08-10")
    assert _pick(preview, 5) == "z"
    assert _pick(preview, 9) is None
    assert _pick(preview, 10) == "a"
    assert _pick(preview, 11) == "b"


def test_empty_rotation_returns_copy_and_input_is_not_mutated():
    existing = {"2025-08-05|24h": [make_assignment("2025-08-05", "24h", "z")]}
    empty = generate_autofill(existing, AutoFillConfig(rotation=[]), 2025, 8, "24h")
    assert empty.assignments == existing
    assert empty.filled == []

    generate_autofill(existing, AutoFillConfig(rotation=["a"]), 2025, 8, "24h")
    assert [a.professional_id for a in existing["2025-08-05|24h"]] == ["z"]


def test_store_preview_then_apply(make_store):
    store = make_store(start_date="2025-08-10")
    preview = store.generate_autofill_preview(AutoFillConfig(rotation=["a", "b"]))
    assert store.assignments == {}

    store.apply_autofill(preview)
    assert store.assignments["2025-08-10|24h"][0].professional_id == "a"
    assert "2025-08-09|24h" not in store.assignments
    assert store.is_dirty
    store.undo()
    assert store.assignments == {}


def test_single_slot_rotation_leaves_other_slots_alone():
    existing = {"2025-08-01|12h_day": [make_assignment("2025-08-01", "12h_day", "z")]}
    config = AutoFillConfig(rotation=["a", "b"], slot="12h_night")
    preview = generate_autofill(existing, config, 2025, 8, "12h")
    assert _pick(preview, 1, "12h_day") == "z"
    assert [_pick(preview, d, "12h_night") for d in (1, 2, 3)] == ["a", "b", "a"]
    assert _pick(preview, 2, "12h_day") is None


def test_shift_overlapping_another_slot_is_skipped():
    existing = {"2025-08-01|12h_day": [
        make_assignment("2025-08-01", "12h_day", "x").with_changes(end_at="2025-08-01T21:00:00"),
    ]}
    preview = generate_autofill(existing, AutoFillConfig(rotation=["a"], slot="12h_night"), 2025, 8, "12h")
    assert ("2025-08-01|12h_night", "overlap") in preview.skipped
    assert _pick(preview, 1, "12h_night") is None
    assert _pick(preview, 2, "12h_night") == "a"


def test_slot_outside_regime_is_rejected(make_store):
    with pytest.raises(ValueError):
        generate_autofill({}, AutoFillConfig(rotation=["a"], slot="8h_night"), 2025, 8, "12h")

    store = make_store()
    with pytest.raises(ValidationError):
        store.generate_autofill_preview(AutoFillConfig(rotation=["a"], slot="12h_day"))
