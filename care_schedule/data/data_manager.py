from __future__ import annotations
import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from care_schedule.exceptions import StorageError, ValidationError
from care_schedule.models.pad import PadItem
from care_schedule.models.professional import Professional
from care_schedule.models.schedule import Assignment, MonthSchedule, UpsertSchedulePayload

logger = logging.getLogger(__name__)

PROF_FILE = "professionals.json"
PAD_FILE = "pad_items.json"
SHIFT_FILE = "shifts.json"


def _safe_json_load(path: Path, default):
    """파일 없음/빈 파일 → default, 깨진 JSON → StorageError (덮어쓰기 방지)"""
    if not path.exists():
        return default
    raw = path.read_text(encoding="utf-8").strip()
    if not raw:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageError(f"JSON 파일이 손상되었습니다: {path} ({e})") from e


def _safe_json_save(path: Path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    tmp.replace(path)


def new_id() -> str:
    return uuid.uuid4().hex


def _month_prefix(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}-"


def seed_professionals() -> List[Professional]:
    """예시 직원 5명 (마지막 = 대체 인력)"""
    names = ["Ana Souza", "Bruno Lima", "Carla Dias", "Diego Alves", "Elisa Rocha"]
    colors = ["#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6"]
    return [
        Professional(id="", name=n, role="técnico de enfermagem", color=colors[i],
                     is_substitute=(i == len(names) - 1))
        for i, n in enumerate(names)
    ]


class JsonRepo:
    """
    JSON 파일 저장소
      professionals.json : [Professional, ...]
      pad_items.json     : [PadItem, ...]
      shifts.json        : [{id, patient_id, pad_item_id, date, slot, professional_id, start_at, end_at, status}, ...]
    """

    def __init__(self, data_dir: str | Path, default_start_time: str = "07:00"):
        self.data_dir = Path(data_dir)
        self.default_start_time = default_start_time

    def _path(self, name: str) -> Path:
        return self.data_dir / name

    # ---------- 직원 ----------
    def list_professionals(self, active_only: bool = False) -> List[Professional]:
        data = _safe_json_load(self._path(PROF_FILE), default=[])
        profs = [Professional.from_dict(item) for item in data]
        if active_only:
            profs = [p for p in profs if p.active]
        return sorted(profs, key=lambda p: p.display_name.lower())

    def save_professional(self, prof: Professional) -> Professional:
        data = _safe_json_load(self._path(PROF_FILE), default=[])
        if not prof.id:
            prof.id = new_id()
        data = [item for item in data if str(item.get("id")) != prof.id]
        data.append(prof.to_dict())
        _safe_json_save(self._path(PROF_FILE), data)
        return prof

    def delete_professional(self, prof_id: str) -> bool:
        data = _safe_json_load(self._path(PROF_FILE), default=[])
        kept = [item for item in data if str(item.get("id")) != prof_id]
        if len(kept) == len(data):
            return False
        _safe_json_save(self._path(PROF_FILE), kept)
        return True

    # ---------- PAD ----------
    def list_pad_items(self, patient_id: Optional[str] = None) -> List[PadItem]:
        data = _safe_json_load(self._path(PAD_FILE), default=[])
        items = [PadItem.from_dict(item) for item in data]
        if patient_id is not None:
            items = [p for p in items if p.patient_id == patient_id]
        return items

    def save_pad_item(self, item: PadItem) -> PadItem:
        data = _safe_json_load(self._path(PAD_FILE), default=[])
        if not item.id:
            item.id = new_id()
        if not item.created_at:
            item.created_at = datetime.now().isoformat(timespec="seconds")
        data = [d for d in data if str(d.get("id")) != item.id]
        data.append(item.to_dict())
        _safe_json_save(self._path(PAD_FILE), data)
        return item

    def active_pad_item(self, patient_id: str) -> Optional[PadItem]:
        """활성 PAD 중 가장 최근 생성된 것"""
        items = [p for p in self.list_pad_items(patient_id) if p.active]
        if not items:
            return None
        return max(items, key=lambda p: p.created_at or "")

    def patient_ids(self) -> List[str]:
        return sorted({p.patient_id for p in self.list_pad_items()})

    # ---------- 스케줄 ----------
    def load_month(self, patient_id: str, year: int, month: int) -> MonthSchedule:
        pad = self.active_pad_item(patient_id)
        prefix = _month_prefix(year, month)
        rows = _safe_json_load(self._path(SHIFT_FILE), default=[])
        assignments = [
            Assignment.from_dict(r)
            for r in rows
            if r.get("patient_id") == patient_id
            and r.get("professional_id")
            and str(r.get("start_at", "")).startswith(prefix)
        ]
        return MonthSchedule(
            patient_id=patient_id,
            year=year,
            month=month,
            regime=pad.regime if pad else "24h",
            start_time=pad.start_time if pad else self.default_start_time,
            pad_id=pad.pad_id if pad else None,
            pad_item_id=pad.id if pad else None,
            start_date=pad.start_date if pad else None,
            assignments=assignments,
        )

    def save_month(self, payload: UpsertSchedulePayload) -> int:
        """해당 환자/월의 plantao를 통째로 교체 (한 번에 기록)"""
        if not payload.pad_item_id:
            raise ValidationError("pad_item_id 가 필요합니다.")
        prefix = _month_prefix(payload.year, payload.month)
        rows: List[Dict[str, Any]] = _safe_json_load(self._path(SHIFT_FILE), default=[])
        kept = [
            r for r in rows
            if not (r.get("patient_id") == payload.patient_id and str(r.get("start_at", "")).startswith(prefix))
        ]
        for a in payload.assignments:
            row = a.to_dict()
            row.setdefault("id", new_id())
            row.update(patient_id=payload.patient_id, pad_item_id=payload.pad_item_id, status="planned")
            kept.append(row)
        _safe_json_save(self._path(SHIFT_FILE), kept)
        logger.info("saved %d shift(s) patient=%s %s", len(payload.assignments), payload.patient_id, prefix[:-1])
        return len(payload.assignments)

    def seed_if_empty(self):
        if self.list_professionals():
            return
        for prof in seed_professionals():
            self.save_professional(prof)

    def close(self):
        pass
