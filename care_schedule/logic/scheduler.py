import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from care_schedule.logic.slots import merge_into_slot, overlaps
from care_schedule.models.schedule import (
    SLOTS_BY_REGIME, Assignment, AssignmentMap, AutoFillConfig, assignment_key, regime_max_hours,
    slot_times,
)
from care_schedule.utils.date_helper import day_of_week, days_in_month, is_date_locked

logger = logging.getLogger(__name__)


@dataclass
class AutoFillPreview:
    assignments: AssignmentMap
    filled: List[str] = field(default_factory=list)                 # 채운 key
    substituted: List[str] = field(default_factory=list)            # 대체 인력으로 채운 key
    skipped: List[tuple] = field(default_factory=list)              # (key, 사유)

    def professional_for(self, date: str, slot: str) -> Optional[str]:
        day = self.assignments.get(assignment_key(date, slot)) or []
        return day[0].professional_id if day else None


def clone_map(assignments: AssignmentMap) -> AssignmentMap:
    # Assignment는 frozen → 리스트만 복사
    return {k: list(v) for k, v in assignments.items()}


def _is_busy(preview: AssignmentMap, professional_id: str, start_at: str, end_at: str, skip_key: str) -> bool:
    """skip_key(지금 덮어쓸 slot)를 제외한 그리드 전체에서 겹치는 배정이 있는지"""
    for key, day in preview.items():
        if key == skip_key:
            continue
        for a in day:
            if a.professional_id == professional_id and overlaps(a.start_at, a.end_at, start_at, end_at):
                return True
    return False


def _fits_day(preview: AssignmentMap, date: str, regime: str, key: str, merged: List[Assignment]) -> bool:
    """merged로 key를 바꿨을 때 그 날 배정끼리 겹치지 않고 하루 합계 이내인지"""
    day = list(merged)
    for slot in SLOTS_BY_REGIME[regime]:
        other = assignment_key(date, slot)
        if other != key:
            day.extend(preview.get(other, []))
    for i, a in enumerate(day):
        for b in day[i + 1:]:
            if overlaps(a.start_at, a.end_at, b.start_at, b.end_at):
                return False
    return sum(a.hours for a in day) <= regime_max_hours(regime)


def generate_autofill(
    assignments: AssignmentMap,
    config: AutoFillConfig,
    year: int,
    month: int,
    regime: str,
    start_time: str = "07:00",
    min_editable_date: str | None = None,
    is_busy: Optional[Callable[[str, str, str], bool]] = None,
) -> AutoFillPreview:
    """
    로테이션 자동 채우기 (미리보기 - 원본 map은 건드리지 않음)
    - 잠금 날짜(PAD 시작일 이전)는 스킵
    - config.weekdays에 포함된 날: 로테이션 순서대로, days_per_professional 일 단위로 교대
      slot s (블록 b) → rotation[(b * slot수 + s) % len(rotation)]
    - weekdays에서 빠진 날: substitute_id가 있으면 대체 인력으로 채움
    - 로테이션 인원이 겹치는 시간에 이미 배정돼 있으면 대체 인력 → 그것도 안되면 빈 채로 두고 skipped 기록
    - config.slot: 지정하면 그 slot만 채움 (slot 수 = 1 로 로테이션)
    - 같은 날 다른 slot 배정과 시간이 겹치게 되는 근무는 skipped("overlap")
    - is_busy(professional_id, start_at, end_at): 외부(다른 환자 등) 충돌 확인 훅
    """
    preview = AutoFillPreview(assignments=clone_map(assignments))
    rotation = [pid for pid in config.rotation if pid]
    if not rotation:
        return preview

    if config.slot and config.slot not in SLOTS_BY_REGIME[regime]:
        raise ValueError(f"{regime} 스케줄에 없는 slot: {config.slot}")
    per_prof = max(1, int(config.days_per_professional or 1))
    weekdays = set(config.weekdays)
    slots = [config.slot] if config.slot else SLOTS_BY_REGIME[regime]
    substitute = config.substitute_id

    def busy(pid: str, key: str, start: str, end: str) -> bool:
        if _is_busy(preview.assignments, pid, start, end, key):
            return True
        return bool(is_busy and is_busy(pid, start, end))

    def place(key: str, date: str, slot: str, pid: str, start: str, end: str) -> bool:
        incoming = Assignment(date=date, slot=slot, professional_id=pid, start_at=start, end_at=end)
        merged = merge_into_slot(preview.assignments.get(key, []), incoming)
        if not _fits_day(preview.assignments, date, regime, key, merged):
            preview.skipped.append((key, "overlap"))
            return False
        preview.assignments[key] = merged
        preview.filled.append(key)
        return True

    eligible_idx = 0
    for day in days_in_month(year, month):
        if is_date_locked(day, min_editable_date):
            continue

        in_rotation = day_of_week(day) in weekdays
        if not in_rotation and not substitute:
            continue

        block = eligible_idx // per_prof
        for s, slot in enumerate(slots):
            key = assignment_key(day, slot)
            start, end = slot_times(slot, day, start_time)

            if not in_rotation:
                if busy(substitute, key, start, end):
                    preview.skipped.append((key, "substitute_busy"))
                    continue
                if place(key, day, slot, substitute, start, end):
                    preview.substituted.append(key)
                continue

            pid = rotation[(block * len(slots) + s) % len(rotation)]
            if not busy(pid, key, start, end):
                place(key, day, slot, pid, start, end)
            elif substitute and substitute != pid and not busy(substitute, key, start, end):
                if place(key, day, slot, substitute, start, end):
                    preview.substituted.append(key)
            else:
                preview.skipped.append((key, "conflict"))

        if in_rotation:
            eligible_idx += 1

    logger.debug(
        "autofill %04d-%02d: filled=%d substituted=%d skipped=%d",
        year, month, len(preview.filled), len(preview.substituted), len(preview.skipped),
    )
    return preview
