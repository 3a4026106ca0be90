import logging
from dataclasses import dataclass
from typing import List, Optional

from care_schedule.exceptions import UnsavedChangesError, ValidationError
from care_schedule.logic.store import ScheduleStore
from care_schedule.models.professional import Professional
from care_schedule.models.schedule import UpsertSchedulePayload, slot_times
from care_schedule.utils.date_helper import next_month, prev_month

logger = logging.getLogger(__name__)


@dataclass
class ProfessionalOption:
    professional: Professional
    conflict: bool = False
    in_slot: bool = False

    @property
    def label(self) -> str:
        p = self.professional
        text = p.display_name
        if p.role:
            text += f" ({p.role})"
        if self.conflict:
            text += " - 겹치는 근무 있음"
        return text


class ScheduleEditor:
    """
    월간 스케줄 화면 컨트롤러
      - 백엔드에서 PAD/월 데이터 로드 → store 초기화
      - 저장: 전체 배정을 한 번에 전송 → mark_saved
      - 달 이동 시 미저장 변경 보호
    """

    def __init__(self, backend, history_limit: int = 50):
        self.backend = backend
        self.store = ScheduleStore(history_limit=history_limit)
        self._professionals: Optional[List[Professional]] = None

    # ---------- 로드 ----------
    def open(self, patient_id: str, year: int, month: int) -> None:
        if not patient_id:
            raise ValidationError("환자를 선택하세요.")
        schedule = self.backend.load_month(patient_id, year, month)
        if schedule.pad_item_id is None:
            logger.warning("patient %s has no active PAD item; schedule is read-only until one exists", patient_id)
        self.store.initialize(schedule)

    def reload(self) -> None:
        self.open(self.store.patient_id, self.store.year, self.store.month)

    def change_month(self, year: int, month: int, discard: bool = False) -> None:
        if self.store.is_dirty and not discard:
            raise UnsavedChangesError("저장하지 않은 변경 사항이 있습니다.")
        # 로드 실패 시 store는 이전 달 그대로
        self.open(self.store.patient_id, year, month)

    def previous_month(self, discard: bool = False) -> None:
        self.change_month(*prev_month(self.store.year, self.store.month), discard=discard)

    def next_month(self, discard: bool = False) -> None:
        self.change_month(*next_month(self.store.year, self.store.month), discard=discard)

    # ---------- 저장 ----------
    def save(self) -> bool:
        """변경 없으면 False. 검증 실패/저장 오류는 예외 그대로 전달"""
        store = self.store
        if not store.patient_id or not store.is_dirty:
            return False
        if not store.pad_item_id:
            raise ValidationError("활성 PAD 항목이 없어 저장할 수 없습니다.")
        problems = store.validate()
        if problems:
            raise ValidationError("스케줄에 오류가 있습니다: " + "; ".join(problems), problems=problems)

        payload = UpsertSchedulePayload(
            patient_id=store.patient_id,
            pad_item_id=store.pad_item_id,
            year=store.year,
            month=store.month,
            assignments=store.full_assignments(),
        )
        store.set_saving(True)
        try:
            self.backend.save_month(payload)
        except Exception:
            logger.exception("error saving schedule patient=%s %04d-%02d", store.patient_id, store.year, store.month)
            raise
        finally:
            store.set_saving(False)
        store.mark_saved()
        return True

    # ---------- 직원 ----------
    def professionals(self, refresh: bool = False) -> List[Professional]:
        if self._professionals is None or refresh:
            self._professionals = self.backend.list_professionals(active_only=True)
        return self._professionals

    def professional_name(self, professional_id: str) -> str:
        for p in self.professionals():
            if p.id == professional_id:
                return p.display_name
        return professional_id

    def professional_options(self, date: str, slot: str, search: str = "") -> List[ProfessionalOption]:
        """picker용 목록: 이름/역할 검색 + 해당 slot 시간대 충돌 표시"""
        start, end = slot_times(slot, date, self.store.start_time)
        current = {a.professional_id for a in self.store.slot_assignments(date, slot)}
        term = search.strip().lower()
        out = []
        for p in self.professionals():
            if term and term not in p.display_name.lower() and term not in (p.role or "").lower():
                continue
            in_slot = p.id in current
            # 현재 slot에 있는 본인 배정은 교체 대상이므로 충돌로 보지 않음
            clashes = [a for a in self.store.conflicts_for(p.id, start, end)
                       if not (a.date == date and a.slot == slot)]
            out.append(ProfessionalOption(professional=p, conflict=bool(clashes), in_slot=in_slot))
        return out

    def summary(self) -> dict:
        return self.store.month_summary(self.professionals())
