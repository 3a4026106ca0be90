import logging
from collections import defaultdict
from datetime import date as _date
from typing import Dict, Iterable, List, Optional, Set

from care_schedule.exceptions import ConflictError, LockedDateError, ValidationError
from care_schedule.logic.scheduler import AutoFillPreview, clone_map, generate_autofill
from care_schedule.logic.slots import merge_into_slot, overlaps, slot_for, sort_by_start
from care_schedule.models.schedule import (
    BATCH_PRESETS, SLOT_LABELS, SLOTS_BY_REGIME, Assignment, AssignmentMap, AutoFillConfig,
    HistoryEntry, MonthSchedule, MonthSummary, assignment_key, regime_max_hours, slot_times,
    split_key,
)
from care_schedule.utils.date_helper import (
    day_diff, day_of_week, days_in_month, is_date_locked, make_ts, normalize_ts, parse_ts, shift_ts,
    week_dates,
)

logger = logging.getLogger(__name__)

MAX_HISTORY = 50


class ScheduleStore:
    """
    환자 월간 케어 스케줄 편집 상태 (draft)
      - assignments: "YYYY-MM-DD|slot" → 시작 시각 순 Assignment 리스트
      - original_assignments: 마지막 저장/로드 시점 스냅샷 (dirty 비교용)
      - history / history_index: 전체 map 스냅샷 기반 undo/redo (분기 없음)
    변경 연산은 모두 히스토리 1건 추가 + dirty 재계산.
    """

    def __init__(self, history_limit: int = MAX_HISTORY):
        today = _date.today()
        self.history_limit = max(1, history_limit)

        # 컨텍스트
        self.patient_id: Optional[str] = None
        self.pad_id: Optional[str] = None
        self.pad_item_id: Optional[str] = None
        self.year = today.year
        self.month = today.month
        self.regime = "24h"
        self.start_time = "07:00"
        self.min_editable_date: Optional[str] = None

        # draft
        self.assignments: AssignmentMap = {}
        self.original_assignments: AssignmentMap = {}
        self.is_dirty = False

        # 선택 (일괄 배정용)
        self.selected_dates: Set[str] = set()

        # undo/redo
        self.history: List[HistoryEntry] = []
        self.history_index = -1

        # UI
        self.is_sidebar_open = False
        self.is_saving = False

    # ---------- 초기화 ----------
    def initialize(self, schedule: MonthSchedule) -> None:
        grid: AssignmentMap = defaultdict(list)
        for a in schedule.assignments:
            slot = a.slot if a.slot in SLOTS_BY_REGIME[schedule.regime] else slot_for(
                a.date, a.start_at, schedule.regime, schedule.start_time)
            a = a.with_changes(slot=slot)
            grid[a.key].append(a)
        grid = {k: sort_by_start(v) for k, v in grid.items()}

        self.patient_id = schedule.patient_id
        self.pad_id = schedule.pad_id
        self.pad_item_id = schedule.pad_item_id
        self.year = schedule.year
        self.month = schedule.month
        self.regime = schedule.regime
        self.start_time = schedule.start_time
        self.min_editable_date = schedule.start_date
        self.assignments = clone_map(grid)
        self.original_assignments = clone_map(grid)
        self.is_dirty = False
        self.selected_dates = set()
        self.history = [HistoryEntry(assignments=clone_map(grid), label="초기 상태")]
        self.history_index = 0
        logger.info(
            "schedule loaded patient=%s %04d-%02d regime=%s shifts=%d",
            self.patient_id, self.year, self.month, self.regime, len(schedule.assignments),
        )

    def set_month(self, year: int, month: int) -> None:
        self.year = year
        self.month = month
        self.selected_dates = set()

    # ---------- 내부 유틸 ----------
    def _push_history(self, label: str) -> None:
        trimmed = self.history[: self.history_index + 1]
        trimmed.append(HistoryEntry(assignments=clone_map(self.assignments), label=label))
        self.history = trimmed[-self.history_limit:]
        self.history_index = len(self.history) - 1

    def _mark_dirty(self) -> None:
        self.is_dirty = not _same_grid(self.assignments, self.original_assignments)

    def _commit(self, new_map: AssignmentMap, label: str) -> None:
        self.assignments = {k: v for k, v in new_map.items() if v}
        self._push_history(label)
        self._mark_dirty()
        logger.debug("%s (history=%d/%d)", label, self.history_index + 1, len(self.history))

    def is_locked(self, date: str) -> bool:
        return is_date_locked(date, self.min_editable_date)

    def _check_unlocked(self, *dates: str) -> None:
        for d in dates:
            if self.is_locked(d):
                raise LockedDateError(f"{d} 는 PAD 시작일({self.min_editable_date}) 이전이라 편집할 수 없습니다.", date=d)

    def _check_slot(self, slot: str) -> None:
        if slot not in SLOTS_BY_REGIME[self.regime]:
            raise ValidationError(f"{self.regime} 스케줄에 없는 slot 입니다: {slot}", slot=slot)

    def _check_in_month(self, date: str) -> None:
        if date not in days_in_month(self.year, self.month):
            raise ValidationError(f"{date} 는 {self.year}-{self.month:02d} 범위가 아닙니다.", date=date)

    def _get_day(self, grid: AssignmentMap, date: str, slot: str, index: int) -> List[Assignment]:
        day = grid.get(assignment_key(date, slot))
        if not day or not 0 <= index < len(day):
            raise IndexError(f"배정을 찾을 수 없습니다: {date} {slot} #{index}")
        return day

    def day_assignments(self, date: str, grid: Optional[AssignmentMap] = None) -> List[Assignment]:
        """해당 날짜의 모든 slot 배정 (시작 시각 순)"""
        grid = self.assignments if grid is None else grid
        out = []
        for slot in SLOTS_BY_REGIME[self.regime]:
            out.extend(grid.get(assignment_key(date, slot), []))
        return sort_by_start(out)

    def slot_assignments(self, date: str, slot: str) -> List[Assignment]:
        return list(self.assignments.get(assignment_key(date, slot), []))

    # ---------- 검증 ----------
    def conflicts_for(self, professional_id: str, start_at: str, end_at: str,
                      ignore: Optional[Assignment] = None,
                      grid: Optional[AssignmentMap] = None) -> List[Assignment]:
        """같은 직원의 겹치는 배정 목록 (이중 배정 확인)"""
        grid = self.assignments if grid is None else grid
        out = []
        for day in grid.values():
            for a in day:
                if a is ignore or a.professional_id != professional_id:
                    continue
                if overlaps(a.start_at, a.end_at, start_at, end_at):
                    out.append(a)
        return out

    def _validate_candidate(self, grid: AssignmentMap, cand: Assignment,
                            ignore: Optional[Assignment] = None) -> None:
        """
        - 종료 > 시작, 설정된 시작 시각 이전 시작 금지
        - 같은 slot 같은 직원 중복 금지
        - 같은 직원 겹치는 시간 금지 (그리드 전체)
        - 같은 날 다른 배정과 시간 겹침 금지, 하루 합계 ≤ regime 최대 시간
        """
        if not cand.professional_id:
            raise ValidationError("직원을 선택하세요.")
        start, end = parse_ts(cand.start_at), parse_ts(cand.end_at)
        if end <= start:
            raise ValidationError("종료 시각은 시작 시각 이후여야 합니다.", key=cand.key)
        min_start = parse_ts(make_ts(cand.date, self.start_time))
        if start < min_start:
            raise ValidationError(f"시작 시각은 {self.start_time} 이전일 수 없습니다.", key=cand.key)

        for a in grid.get(cand.key, []):
            if a is not ignore and a.professional_id == cand.professional_id:
                raise ConflictError("같은 slot에 이미 배정된 직원입니다.",
                                    key=cand.key, professional_id=cand.professional_id)

        clash = self.conflicts_for(cand.professional_id, cand.start_at, cand.end_at, ignore=ignore, grid=grid)
        if clash:
            raise ConflictError(
                f"겹치는 근무가 있습니다: {clash[0].date} {SLOT_LABELS.get(clash[0].slot, clash[0].slot)}",
                professional_id=cand.professional_id, conflicts=clash,
            )

        others = [a for a in self.day_assignments(cand.date, grid) if a is not ignore]
        for a in others:
            if overlaps(a.start_at, a.end_at, cand.start_at, cand.end_at):
                raise ValidationError("다른 직원의 근무 시간과 겹칩니다.", key=cand.key)
        max_hours = regime_max_hours(self.regime)
        if sum(a.hours for a in others) + cand.hours > max_hours:
            raise ValidationError(f"하루 총 근무 시간이 {max_hours}h 를 초과합니다.", key=cand.key)

    def _day_problems(self, grid: AssignmentMap, date: str) -> List[str]:
        """하루 단위 검사: 시작 시각, 배정 간 시간 겹침, 하루 합계"""
        problems = []
        day = self.day_assignments(date, grid)
        min_start = parse_ts(make_ts(date, self.start_time))
        for a in day:
            if parse_ts(a.start_at) < min_start:
                problems.append(f"{a.key}: 시작 시각이 {self.start_time} 이전")
        for i, a in enumerate(day):
            for b in day[i + 1:]:
                if overlaps(a.start_at, a.end_at, b.start_at, b.end_at):
                    problems.append(f"{date}: 근무 시간 겹침 ({a.professional_id} / {b.professional_id})")
        max_hours = regime_max_hours(self.regime)
        total = sum(a.hours for a in day)
        if total > max_hours:
            problems.append(f"{date}: 하루 총 근무 {total:g}h > {max_hours}h")
        return problems

    def validate(self) -> List[str]:
        """저장 전 전체 그리드 검사 → 문제 목록 (비어 있으면 OK)"""
        problems = []
        month_days = set(days_in_month(self.year, self.month))
        slots = SLOTS_BY_REGIME[self.regime]
        flat = self.full_assignments()
        for key, day in self.assignments.items():
            date, slot = split_key(key)
            if date not in month_days:
                problems.append(f"{key}: 다른 달의 날짜")
            if slot not in slots:
                problems.append(f"{key}: {self.regime} 에 없는 slot")
            seen = set()
            for a in day:
                if a.professional_id in seen:
                    problems.append(f"{key}: 같은 직원 중복 ({a.professional_id})")
                seen.add(a.professional_id)
                if parse_ts(a.end_at) <= parse_ts(a.start_at):
                    problems.append(f"{key}: 종료 시각 오류")
        for i, a in enumerate(flat):
            for b in flat[i + 1:]:
                if a.professional_id == b.professional_id and a.key != b.key \
                        and overlaps(a.start_at, a.end_at, b.start_at, b.end_at):
                    problems.append(f"{a.key} / {b.key}: {a.professional_id} 이중 배정")
        for date in sorted({a.date for a in flat}):
            problems.extend(self._day_problems(self.assignments, date))
        return problems

    # ---------- 배정 ----------
    def assign_professional(self, date: str, slot: str, professional_id: str) -> None:
        """slot 기본 시간으로 직원 배정 (slot 내용 교체)"""
        self._check_unlocked(date)
        self._check_slot(slot)
        self._check_in_month(date)
        start, end = slot_times(slot, date, self.start_time)
        cand = Assignment(date=date, slot=slot, professional_id=professional_id, start_at=start, end_at=end)
        new_map = clone_map(self.assignments)
        new_map.pop(cand.key, None)
        self._validate_candidate(new_map, cand)
        new_map[cand.key] = [cand]
        self._commit(new_map, f"{date} {SLOT_LABELS[slot]} 배정")

    def add_assignment(self, date: str, slot: str, professional_id: str, start_at: str, end_at: str) -> None:
        """사용자 지정 시간으로 slot에 배정 추가"""
        self._check_unlocked(date)
        self._check_slot(slot)
        self._check_in_month(date)
        cand = Assignment(date=date, slot=slot, professional_id=professional_id,
                          start_at=normalize_ts(start_at), end_at=normalize_ts(end_at))
        new_map = clone_map(self.assignments)
        self._validate_candidate(new_map, cand)
        new_map[cand.key] = sort_by_start(new_map.get(cand.key, []) + [cand])
        self._commit(new_map, f"{date} 직원 배정")

    def update_assignment(self, date: str, slot: str, index: int, /, **changes) -> None:
        allowed = {"professional_id", "start_at", "end_at"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"수정할 수 없는 항목: {sorted(unknown)}")
        self._check_unlocked(date)
        new_map = clone_map(self.assignments)
        day = self._get_day(new_map, date, slot, index)
        current = day[index]
        for k in ("start_at", "end_at"):
            if k in changes:
                changes[k] = normalize_ts(changes[k])
        cand = current.with_changes(**changes)
        self._validate_candidate(new_map, cand, ignore=current)
        day[index] = cand
        new_map[cand.key] = sort_by_start(day)
        self._commit(new_map, f"{date} 배정 수정")

    def remove_assignment(self, date: str, slot: str, index: int) -> None:
        self._check_unlocked(date)
        new_map = clone_map(self.assignments)
        day = self._get_day(new_map, date, slot, index)
        del day[index]
        self._commit(new_map, f"{date} 배정 삭제")

    def remove_professional(self, date: str, slot: str) -> None:
        """slot 비우기"""
        self._check_unlocked(date)
        key = assignment_key(date, slot)
        if key not in self.assignments:
            return
        new_map = clone_map(self.assignments)
        new_map.pop(key, None)
        self._commit(new_map, f"{date} {SLOT_LABELS.get(slot, slot)} 비우기")

    def _relocated(self, a: Assignment, to_date: str) -> Assignment:
        # 시각은 그대로, 날짜만 이동
        diff = day_diff(a.date, to_date)
        return a.with_changes(date=to_date, start_at=shift_ts(a.start_at, diff),
                              end_at=shift_ts(a.end_at, diff), id=None)

    def move_assignment(self, from_date: str, from_slot: str, index: int, to_date: str) -> None:
        self._check_unlocked(from_date, to_date)
        self._check_in_month(to_date)
        new_map = clone_map(self.assignments)
        day = self._get_day(new_map, from_date, from_slot, index)
        src = day.pop(index)
        cand = self._relocated(src, to_date)
        self._validate_candidate(new_map, cand)
        new_map[cand.key] = sort_by_start(new_map.get(cand.key, []) + [cand])
        self._commit(new_map, f"{from_date} → {to_date} 이동")

    def copy_assignment(self, from_date: str, from_slot: str, index: int, to_date: str) -> None:
        self._check_unlocked(from_date, to_date)
        self._check_in_month(to_date)
        new_map = clone_map(self.assignments)
        day = self._get_day(new_map, from_date, from_slot, index)
        cand = self._relocated(day[index], to_date)
        self._validate_candidate(new_map, cand)
        new_map[cand.key] = sort_by_start(new_map.get(cand.key, []) + [cand])
        self._commit(new_map, f"{from_date} → {to_date} 복사")

    def swap_day_assignments(self, date_a: str, date_b: str) -> None:
        """두 날짜의 배정 전체 교환"""
        self._check_unlocked(date_a, date_b)
        if date_a == date_b:
            return
        new_map = clone_map(self.assignments)
        day_a = self.day_assignments(date_a)
        day_b = self.day_assignments(date_b)
        for slot in SLOTS_BY_REGIME[self.regime]:
            new_map.pop(assignment_key(date_a, slot), None)
            new_map.pop(assignment_key(date_b, slot), None)
        for a in day_a:
            moved = self._relocated(a, date_b)
            new_map.setdefault(moved.key, []).append(moved)
        for b in day_b:
            moved = self._relocated(b, date_a)
            new_map.setdefault(moved.key, []).append(moved)
        for d in (date_a, date_b):
            for slot in SLOTS_BY_REGIME[self.regime]:
                key = assignment_key(d, slot)
                if key in new_map:
                    new_map[key] = sort_by_start(new_map[key])
        self._commit(new_map, f"{date_a} ↔ {date_b} 교환")

    def swap_assignments(self, key_a: str, index_a: int, key_b: str, index_b: int) -> None:
        """두 배정의 직원만 교환 (시간은 유지)"""
        date_a, slot_a = split_key(key_a)
        date_b, slot_b = split_key(key_b)
        self._check_unlocked(date_a, date_b)
        if key_a == key_b and index_a == index_b:
            return
        new_map = clone_map(self.assignments)
        day_a = self._get_day(new_map, date_a, slot_a, index_a)
        day_b = self._get_day(new_map, date_b, slot_b, index_b)
        a, b = day_a[index_a], day_b[index_b]
        if a.professional_id == b.professional_id:
            return
        day_a[index_a] = a.with_changes(professional_id=b.professional_id)
        day_b[index_b] = b.with_changes(professional_id=a.professional_id)
        for key, day in ((key_a, day_a), (key_b, day_b)):
            ids = [x.professional_id for x in day]
            if len(ids) != len(set(ids)):
                raise ConflictError("교환하면 같은 slot에 같은 직원이 두 번 배정됩니다.", key=key)
        problems = _double_bookings(new_map, (day_a[index_a], day_b[index_b]))
        if problems:
            raise ConflictError("교환하면 이중 배정이 됩니다.", conflicts=problems)
        self._commit(new_map, f"{date_a} ↔ {date_b} 근무 교환")

    # ---------- 선택 / 일괄 ----------
    def toggle_date_selection(self, date: str) -> None:
        if self.is_locked(date):
            return
        if date in self.selected_dates:
            self.selected_dates.discard(date)
        else:
            self.selected_dates.add(date)

    def select_date_range(self, dates: Iterable[str]) -> None:
        self.selected_dates = {d for d in dates if not self.is_locked(d)}

    def clear_selection(self) -> None:
        self.selected_dates = set()

    def apply_batch_preset(self, preset: str, reference_date: Optional[str] = None) -> None:
        if preset not in BATCH_PRESETS:
            raise ValueError(f"Unknown preset: {preset}")
        days = days_in_month(self.year, self.month)

        if preset == "weekdays":
            selected = [d for d in days if 1 <= day_of_week(d) <= 5]
        elif preset == "saturdays":
            selected = [d for d in days if day_of_week(d) == 6]
        elif preset == "sundays":
            selected = [d for d in days if day_of_week(d) == 0]
        elif preset == "even_days":
            selected = [d for d in days if int(d[8:10]) % 2 == 0]
        elif preset == "odd_days":
            selected = [d for d in days if int(d[8:10]) % 2 != 0]
        elif preset == "full_week":
            # 기준일: 선택된 날짜 중 가장 이른 날 → 없으면 오늘
            ref = reference_date or (min(self.selected_dates) if self.selected_dates else _date.today().isoformat())
            month_days = set(days)
            selected = [d for d in week_dates(ref) if d in month_days]
        else:
            selected = days

        self.selected_dates = {d for d in selected if not self.is_locked(d)}

    def apply_batch_assignment(self, professional_id: str, slot: Optional[str] = None) -> List[str]:
        """
        선택된 날짜 일괄 배정
          - slot 지정: 해당 slot만 병합
          - slot 없음: regime의 모든 slot을 같은 직원으로 채움
        이중 배정, 같은 날 다른 배정과 겹침, 하루 합계 초과가 되는 날짜는 건너뛰고 목록 반환
        (모두 건너뛰면 히스토리 추가 없음)
        """
        if not self.selected_dates:
            return []
        if slot is not None:
            self._check_slot(slot)
        count = len(self.selected_dates)
        new_map = clone_map(self.assignments)
        skipped = []
        applied = 0

        for date in sorted(self.selected_dates):
            if self.is_locked(date):
                continue
            slots = [slot] if slot else SLOTS_BY_REGIME[self.regime]
            trial = clone_map(new_map)
            if not slot:
                for s in slots:
                    trial.pop(assignment_key(date, s), None)
            for s in slots:
                start, end = slot_times(s, date, self.start_time)
                incoming = Assignment(date=date, slot=s, professional_id=professional_id, start_at=start, end_at=end)
                trial[incoming.key] = merge_into_slot(trial.get(incoming.key, []), incoming)
            if _double_bookings(trial, [a for s in slots for a in trial[assignment_key(date, s)]
                                        if a.professional_id == professional_id]):
                skipped.append(date)
                continue
            # 다른 slot 배정과의 겹침 / 하루 합계
            if self._day_problems(trial, date):
                skipped.append(date)
                continue
            new_map = trial
            applied += 1

        self.selected_dates = set()
        if applied:
            self._commit(new_map, f"일괄 배정: {count}일")
        if skipped:
            logger.info("batch assignment skipped %d day(s) due to conflicts: %s", len(skipped), skipped)
        return skipped

    # ---------- 자동 채우기 ----------
    def generate_autofill_preview(self, config: AutoFillConfig, is_busy=None) -> AutoFillPreview:
        if config.slot is not None:
            self._check_slot(config.slot)
        return generate_autofill(
            self.assignments, config, self.year, self.month, self.regime,
            start_time=self.start_time, min_editable_date=self.min_editable_date, is_busy=is_busy,
        )

    def apply_autofill(self, preview) -> None:
        grid = preview.assignments if isinstance(preview, AutoFillPreview) else preview
        # 잠금 날짜는 현재 값 유지
        new_map = {k: list(v) for k, v in grid.items() if not self.is_locked(split_key(k)[0])}
        for k, v in self.assignments.items():
            if self.is_locked(split_key(k)[0]):
                new_map[k] = list(v)
        self._commit(new_map, "자동 채우기 적용")

    # ---------- 주 복제 ----------
    def duplicate_week(self, source_week_start: str) -> None:
        """source 시작 7일 → 이후 7일 단위 블록마다 복사 (원본이 빈 날은 대상도 비움)"""
        self._check_unlocked(source_week_start)
        days = days_in_month(self.year, self.month)
        if source_week_start not in days:
            raise ValidationError(f"{source_week_start} 는 현재 월에 없습니다.")
        start_idx = days.index(source_week_start)
        source_days = days[start_idx:start_idx + 7]
        new_map = clone_map(self.assignments)
        slots = SLOTS_BY_REGIME[self.regime]

        target_start = start_idx + 7
        while target_start < len(days):
            target_days = days[target_start:target_start + 7]
            for src, dst in zip(source_days, target_days):
                if self.is_locked(src) or self.is_locked(dst):
                    continue
                for s in slots:
                    new_map.pop(assignment_key(dst, s), None)
                for a in self.day_assignments(src, new_map):
                    moved = self._relocated(a, dst)
                    new_map.setdefault(moved.key, []).append(moved)
            target_start += 7

        for k in list(new_map):
            new_map[k] = sort_by_start(new_map[k])
        self._commit(new_map, "주 복제")

    # ---------- 월 비우기 ----------
    def clear_month(self) -> None:
        preserved = {k: list(v) for k, v in self.assignments.items() if self.is_locked(split_key(k)[0])}
        self._commit(preserved, "월 전체 비우기")

    # ---------- undo / redo ----------
    @property
    def can_undo(self) -> bool:
        return self.history_index > 0

    @property
    def can_redo(self) -> bool:
        return self.history_index < len(self.history) - 1

    def undo(self) -> bool:
        if not self.can_undo:
            return False
        self.history_index -= 1
        self.assignments = clone_map(self.history[self.history_index].assignments)
        self._mark_dirty()
        return True

    def redo(self) -> bool:
        if not self.can_redo:
            return False
        self.history_index += 1
        self.assignments = clone_map(self.history[self.history_index].assignments)
        self._mark_dirty()
        return True

    # ---------- 저장 ----------
    def full_assignments(self) -> List[Assignment]:
        out = [a for day in self.assignments.values() for a in day]
        return sorted(out, key=lambda a: (a.date, parse_ts(a.start_at)))

    def mark_saved(self) -> None:
        self.original_assignments = clone_map(self.assignments)
        self.is_dirty = False

    # ---------- 요약 ----------
    def month_summary(self, professionals: Iterable = ()) -> Dict:
        """
        직원별 근무 횟수(내림차순) + 채워진 날 / 남은 날
        professionals: id/name/color 속성을 가진 객체 목록 (이름/색 표시용)
        """
        by_id = {p.id: p for p in professionals}
        counts: Dict[str, int] = defaultdict(int)
        filled = set()
        for key, day in self.assignments.items():
            if day:
                filled.add(split_key(key)[0])
            for a in day:
                counts[a.professional_id] += 1
        rows = []
        for pid, n in counts.items():
            p = by_id.get(pid)
            name = (getattr(p, "display_name", None) or getattr(p, "name", None)) if p else None
            rows.append(MonthSummary(professional_id=pid, professional_name=name or pid,
                                     total_shifts=n, color=getattr(p, "color", None)))
        rows.sort(key=lambda r: (-r.total_shifts, r.professional_name))
        total = len(days_in_month(self.year, self.month))
        return {"rows": rows, "total_days": total, "filled_days": len(filled), "pending_days": total - len(filled)}

    # ---------- UI ----------
    def toggle_sidebar(self) -> None:
        self.is_sidebar_open = not self.is_sidebar_open

    def set_saving(self, saving: bool) -> None:
        self.is_saving = saving


def _same_grid(current: AssignmentMap, original: AssignmentMap) -> bool:
    if set(current) != set(original):
        return False
    for key, day in current.items():
        orig = original[key]
        if len(orig) != len(day):
            return False
        if not all(a.same_shift(b) for a, b in zip(day, orig)):
            return False
    return True


def _double_bookings(grid: AssignmentMap, changed: Iterable[Assignment]) -> List[Assignment]:
    """changed 배정과 같은 직원이 겹치는 시간에 있는 다른 배정"""
    out = []
    changed = list(changed)
    for c in changed:
        for day in grid.values():
            for a in day:
                if a is c or a.professional_id != c.professional_id:
                    continue
                if overlaps(a.start_at, a.end_at, c.start_at, c.end_at):
                    out.append(a)
    return out
