import json

import pytest

from care_schedule.config import Settings
from care_schedule.data.backends import open_backend
from care_schedule.data.data_manager import JsonRepo
from care_schedule.data.repo import Repo
from care_schedule.exceptions import StorageError, ValidationError
from care_schedule.models.pad import PadItem
from care_schedule.models.professional import Professional
from care_schedule.models.schedule import UpsertSchedulePayload
from conftest import make_assignment


@pytest.fixture(params=["json", "sqlite"])
def backend(request, tmp_path):
    if request.param == "json":
        repo = JsonRepo(tmp_path / "store")
    else:
        repo = Repo(str(tmp_path / "schedule.sqlite3"))
    yield repo
    repo.close()


def _payload(patient_id, pad_item_id, year, month, assignments):
    return UpsertSchedulePayload(patient_id=patient_id, pad_item_id=pad_item_id,
                                 year=year, month=month, assignments=assignments)


def test_professionals_crud(backend):
    bruno = backend.save_professional(Professional(id="", name="Bruno"))
    backend.save_professional(Professional(id="", name="ana", active=False))
    assert bruno.id

    assert [p.display_name for p in backend.list_professionals()] == ["ana", "Bruno"]
    assert [p.name for p in backend.list_professionals(active_only=True)] == ["Bruno"]

    bruno.role = "enfermeiro"
    backend.save_professional(bruno)
    assert [p.role for p in backend.list_professionals(active_only=True)] == ["enfermeiro"]

    assert backend.delete_professional(bruno.id)
    assert not backend.delete_professional(bruno.id)


def test_active_pad_item_is_latest_active(backend):
    backend.save_pad_item(PadItem(id="", patient_id="p1", hours_per_day=24, created_at="2025-07-01T10:00:00"))
    newer = backend.save_pad_item(PadItem(id="", patient_id="p1", hours_per_day=12,
                                          created_at="2025-07-20T10:00:00"))
    backend.save_pad_item(PadItem(id="", patient_id="p1", hours_per_day=8, active=False,
                                  created_at="2025-07-30T10:00:00"))
    backend.save_pad_item(PadItem(id="", patient_id="p2"))

    assert backend.active_pad_item("p1").id == newer.id
    assert backend.active_pad_item("p3") is None
    assert backend.patient_ids() == ["p1", "p2"]
    assert len(backend.list_pad_items("p1")) == 3


def test_load_month_without_pad_item(backend):
    schedule = backend.load_month("p9", 2025, 8)
    assert schedule.pad_item_id is None
    assert schedule.regime == "24h"
    assert schedule.start_time == "07:00"
    assert schedule.assignments == []


def test_save_month_replaces_only_that_month(backend):
    pad = backend.save_pad_item(PadItem(id="", patient_id="p1", start_date="2025-08-10", hours_per_day=12))
    july = make_assignment("2025-07-31", "12h_day", "a")
    backend.save_month(_payload("p1", pad.id, 2025, 7, [july]))

    first = [make_assignment("2025-08-10", "12h_day", "a"), make_assignment("2025-08-10", "12h_night", "b")]
    assert backend.save_month(_payload("p1", pad.id, 2025, 8, first)) == 2
    second = [make_assignment("2025-08-11", "12h_night", "c")]
    backend.save_month(_payload("p1", pad.id, 2025, 8, second))

    august = backend.load_month("p1", 2025, 8)
    assert august.regime == "12h"
    assert august.start_date == "2025-08-10"
    assert august.pad_item_id == pad.id
    assert [(a.date, a.slot, a.professional_id) for a in august.assignments] == [("2025-08-11", "12h_night", "c")]
    assert august.assignments[0].id

    assert [a.professional_id for a in backend.load_month("p1", 2025, 7).assignments] == ["a"]


def test_save_month_requires_pad_item(backend):
    with pytest.raises(ValidationError):
        backend.save_month(_payload("p1", "", 2025, 8, []))


def test_seed_if_empty_runs_once(backend):
    backend.seed_if_empty()
    backend.seed_if_empty()
    profs = backend.list_professionals()
    assert len(profs) == 5
    assert sum(p.is_substitute for p in profs) == 1


def test_json_repo_corrupt_file_raises(tmp_path):
    (tmp_path / "professionals.json").write_text("{not json", encoding="utf-8")
    repo = JsonRepo(tmp_path)
    with pytest.raises(StorageError):
        repo.list_professionals()


def test_json_repo_writes_utf8_and_leaves_no_tmp(tmp_path):
    repo = JsonRepo(tmp_path)
    repo.save_professional(Professional(id="p", name="João"))
    data = json.loads((tmp_path / "professionals.json").read_text(encoding="utf-8"))
    assert data[0]["name"] == "João"
    assert not list(tmp_path.glob("*.tmp"))


def test_repo_in_memory_duplicate_shift_is_storage_error():
    repo = Repo(":memory:")
    pad = repo.save_pad_item(PadItem(id="", patient_id="p1"))
    dup = make_assignment("2025-08-05", "24h", "a")
    with pytest.raises(StorageError):
        repo.save_month(_payload("p1", pad.id, 2025, 8, [dup, dup]))
    assert repo.load_month("p1", 2025, 8).assignments == []
    repo.close()


def test_open_backend_uses_settings(tmp_path):
    json_repo = open_backend(Settings(data_dir=tmp_path, start_time="08:00"))
    assert isinstance(json_repo, JsonRepo)
    assert json_repo.load_month("p1", 2025, 8).start_time == "08:00"

    sqlite_repo = open_backend(Settings(data_dir=tmp_path, backend="sqlite"))
    assert isinstance(sqlite_repo, Repo)
    assert sqlite_repo.db_path == str(tmp_path / "schedule.sqlite3")
    sqlite_repo.close()
