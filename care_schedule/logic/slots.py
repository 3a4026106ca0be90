from typing import List

from care_schedule.models.schedule import SLOTS_BY_REGIME, Assignment, slot_times
from care_schedule.utils.date_helper import parse_ts


def overlaps(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """[start, end) 구간 겹침. 끝 = 다음 시작(07:00 교대)은 겹침 아님"""
    return parse_ts(a_start) < parse_ts(b_end) and parse_ts(a_end) > parse_ts(b_start)


def slot_for(date: str, start_at: str, regime: str, start_time: str = "07:00") -> str:
    """
    저장소에서 읽은 plantao가 어느 slot인지 결정
      1) slot 시작 시각과 정확히 일치
      2) slot 구간 안에 시작 시각이 포함
      3) 그래도 없으면 regime 첫 slot
    """
    slots = SLOTS_BY_REGIME[regime]
    start = parse_ts(start_at)
    windows = [(slot, *slot_times(slot, date, start_time)) for slot in slots]
    for slot, s, _e in windows:
        if parse_ts(s) == start:
            return slot
    for slot, s, e in windows:
        if parse_ts(s) <= start < parse_ts(e):
            return slot
    return slots[0]


def sort_by_start(assignments: List[Assignment]) -> List[Assignment]:
    return sorted(assignments, key=lambda a: parse_ts(a.start_at))


def merge_into_slot(existing: List[Assignment], incoming: Assignment) -> List[Assignment]:
    """
    incoming 시간 창과 겹치는 기존 배정은 교체, 나머지는 유지.
    (24h slot은 사실상 통째로 교체)
    같은 직원이 같은 slot에 두 번 들어가지 않도록 기존 중복도 제거.
    """
    out = [
        a for a in existing
        if not overlaps(a.start_at, a.end_at, incoming.start_at, incoming.end_at)
        and a.professional_id != incoming.professional_id
    ]
    out.append(incoming)
    return sort_by_start(out)
