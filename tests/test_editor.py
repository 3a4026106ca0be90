import pytest

from care_schedule.data.data_manager import JsonRepo
from care_schedule.exceptions import StorageError, UnsavedChangesError, ValidationError
from care_schedule.logic.editor import ScheduleEditor
from care_schedule.models.pad import PadItem
from care_schedule.models.professional import Professional
from conftest import make_assignment


@pytest.fixture
def repo(tmp_path):
    repo = JsonRepo(tmp_path)
    repo.save_professional(Professional(id="a", name="Ana", role="técnica"))
    repo.save_professional(Professional(id="b", name="Bruno"))
    repo.save_professional(Professional(id="x", name="Xavier", active=False))
    repo.save_pad_item(PadItem(id="item1", patient_id="p1", pad_id="pad1", start_date="2025-08-03"))
    return repo


def test_open_initializes_store_from_backend(repo):
    editor = ScheduleEditor(repo)
    editor.open("p1", 2025, 8)
    store = editor.store
    assert store.pad_item_id == "item1"
    assert store.min_editable_date == "2025-08-03"
    assert store.is_locked("2025-08-02")
    assert not store.is_dirty

    with pytest.raises(ValidationError):
        editor.open("", 2025, 8)


def test_save_round_trip_and_clean_save_is_noop(repo):
    editor = ScheduleEditor(repo)
    editor.open("p1", 2025, 8)
    assert editor.save() is False

    editor.store.assign_professional("2025-08-05", "24h", "a")
    assert editor.save() is True
    assert not editor.store.is_dirty
    assert not editor.store.is_saving

    editor.reload()
    assert editor.store.assignments["2025-08-05|24h"][0].professional_id == "a"


def test_save_without_pad_item_is_rejected(repo):
    editor = ScheduleEditor(repo)
    editor.open("p2", 2025, 8)
    editor.store.assign_professional("2025-08-05", "24h", "a")
    with pytest.raises(ValidationError):
        editor.save()
    assert editor.store.is_dirty


def test_backend_failure_resets_saving_flag(repo, monkeypatch):
    editor = ScheduleEditor(repo)
    editor.open("p1", 2025, 8)
    editor.store.assign_professional("2025-08-05", "24h", "a")

    def boom(payload):
        raise StorageError("disk full")

    monkeypatch.setattr(repo, "save_month", boom)
    with pytest.raises(StorageError):
        editor.save()
    assert not editor.store.is_saving
    assert editor.store.is_dirty


def test_change_month_guards_unsaved_changes(repo):
    editor = ScheduleEditor(repo)
    editor.open("p1", 2025, 8)
    editor.store.assign_professional("2025-08-05", "24h", "a")

    with pytest.raises(UnsavedChangesError):
        editor.next_month()
    assert editor.store.month == 8

    editor.next_month(discard=True)
    assert (editor.store.year, editor.store.month) == (2025, 9)
    assert editor.store.assignments == {}

    editor.previous_month()
    assert editor.store.month == 8
    assert editor.store.assignments == {}


def test_professional_options_flag_conflicts(repo):
    editor = ScheduleEditor(repo, history_limit=10)
    editor.open("p1", 2025, 8)
    editor.store.add_assignment("2025-08-04", "24h", "a", "2025-08-04T19:00:00", "2025-08-05T09:00:00")

    options = {o.professional.id: o for o in editor.professional_options("2025-08-06", "24h")}
    assert set(options) == {"a", "b"}
    assert not options["a"].conflict

    options = {o.professional.id: o for o in editor.professional_options("2025-08-05", "24h")}
    assert options["a"].conflict
    assert "겹치는" in options["a"].label
    assert not options["b"].conflict

    # 같은 slot의 본인 배정은 교체 대상
    options = {o.professional.id: o for o in editor.professional_options("2025-08-04", "24h")}
    assert options["a"].in_slot
    assert not options["a"].conflict

    assert [o.professional.id for o in editor.professional_options("2025-08-06", "24h", search="técn")] == ["a"]


def test_summary_uses_professional_names(repo):
    editor = ScheduleEditor(repo)
    editor.open("p1", 2025, 8)
    editor.store.assign_professional("2025-08-05", "24h", "b")
    rows = editor.summary()["rows"]
    assert rows[0].professional_name == "Bruno"
    assert editor.professional_name("zzz") == "zzz"


def test_failed_month_load_keeps_current_month(repo, monkeypatch):
    editor = ScheduleEditor(repo)
    editor.open("p1", 2025, 8)
    editor.store.assign_professional("2025-08-05", "24h", "a")
    editor.save()

    def boom(patient_id, year, month):
        raise StorageError("read error")

    monkeypatch.setattr(repo, "load_month", boom)
    with pytest.raises(StorageError):
        editor.next_month()
    assert (editor.store.year, editor.store.month) == (2025, 8)
    assert "2025-08-05|24h" in editor.store.assignments


def test_save_rejects_grid_with_overlapping_day(repo):
    editor = ScheduleEditor(repo)
    editor.open("p1", 2025, 8)
    editor.store.add_assignment("2025-08-05", "24h", "a", "2025-08-05T07:00:00", "2025-08-05T21:00:00")
    # 편집 연산을 거치지 않고 들어온 겹치는 배정
    editor.store.assignments["2025-08-05|24h"].append(
        make_assignment("2025-08-05", "24h", "b").with_changes(start_at="2025-08-05T19:00:00"))

    with pytest.raises(ValidationError):
        editor.save()
    assert editor.store.is_dirty
    assert repo.load_month("p1", 2025, 8).assignments == []
