from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import Dict, List, Literal, Optional

from care_schedule.utils.date_helper import format_ts, make_ts, normalize_ts, parse_ts

Regime = Literal["24h", "12h", "8h"]
SlotType = Literal["24h", "12h_day", "12h_night", "8h_morning", "8h_afternoon", "8h_night"]

REGIMES = ("24h", "12h", "8h")

SLOTS_BY_REGIME: Dict[str, List[str]] = {
    "24h": ["24h"],
    "12h": ["12h_day", "12h_night"],
    "8h": ["8h_morning", "8h_afternoon", "8h_night"],
}

SLOT_LABELS: Dict[str, str] = {
    "24h": "24h",
    "12h_day": "주간",
    "12h_night": "야간",
    "8h_morning": "오전",
    "8h_afternoon": "오후",
    "8h_night": "밤",
}

# 시작 시각 기준 (시작, 종료) 시간 오프셋
SLOT_OFFSETS: Dict[str, tuple] = {
    "24h": (0, 24),
    "12h_day": (0, 12),
    "12h_night": (12, 24),
    "8h_morning": (0, 8),
    "8h_afternoon": (8, 16),
    "8h_night": (16, 24),
}

BATCH_PRESETS = ("weekdays", "saturdays", "sundays", "even_days", "odd_days", "full_week", "full_month")

KEY_SEP = "|"


def regime_max_hours(regime: str) -> int:
    """하루 최대 근무 시간 (모든 regime 24h)"""
    return 24


def slot_times(slot: str, date: str, start_time: str = "07:00") -> tuple[str, str]:
    """
    slot + 날짜 + 시작 시각 → (start_at, end_at)
    예) 12h_night, 2025-08-01, 07:00 → 2025-08-01T19:00:00 ~ 2025-08-02T07:00:00
    """
    if slot not in SLOT_OFFSETS:
        raise ValueError(f"Unknown slot: {slot}")
    h0, h1 = SLOT_OFFSETS[slot]
    base = parse_ts(make_ts(date, start_time))
    return format_ts(base + timedelta(hours=h0)), format_ts(base + timedelta(hours=h1))


def default_slots(date: str, regime: str, start_time: str = "07:00") -> list[tuple[str, str, str]]:
    """regime 템플릿 → [(slot, start_at, end_at), ...]"""
    return [(slot, *slot_times(slot, date, start_time)) for slot in SLOTS_BY_REGIME[regime]]


def assignment_key(date: str, slot: str) -> str:
    return f"{date}{KEY_SEP}{slot}"


def split_key(key: str) -> tuple[str, str]:
    date, _, slot = key.partition(KEY_SEP)
    return date, slot


@dataclass(frozen=True)
class Assignment:
    date: str                 # YYYY-MM-DD
    slot: str                 # SlotType
    professional_id: str
    start_at: str             # ISO 8601 (로컬)
    end_at: str
    id: Optional[str] = None  # 저장된 plantao id (신규는 None)

    @property
    def key(self) -> str:
        return assignment_key(self.date, self.slot)

    @property
    def hours(self) -> float:
        return (parse_ts(self.end_at) - parse_ts(self.start_at)).total_seconds() / 3600

    def same_shift(self, other: "Assignment") -> bool:
        return (self.professional_id == other.professional_id
                and self.start_at == other.start_at
                and self.end_at == other.end_at)

    def with_changes(self, **changes) -> "Assignment":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        d = {
            "date": self.date,
            "slot": self.slot,
            "professional_id": self.professional_id,
            "start_at": self.start_at,
            "end_at": self.end_at,
        }
        if self.id:
            d["id"] = self.id
        return d

    @staticmethod
    def from_dict(data: dict, slot: Optional[str] = None) -> "Assignment":
        start_at = normalize_ts(data["start_at"])
        return Assignment(
            date=data.get("date") or start_at[:10],
            slot=data.get("slot") or slot or "",
            professional_id=str(data["professional_id"]),
            start_at=start_at,
            end_at=normalize_ts(data["end_at"]),
            id=data.get("id"),
        )


# "YYYY-MM-DD|slot" → 시작 시각 순 Assignment 리스트
AssignmentMap = Dict[str, List[Assignment]]


@dataclass
class MonthSchedule:
    """백엔드에서 읽어온 월간 스케줄"""
    patient_id: str
    year: int
    month: int
    regime: str = "24h"
    start_time: str = "07:00"
    pad_id: Optional[str] = None
    pad_item_id: Optional[str] = None
    start_date: Optional[str] = None    # PAD 시작일 = 편집 가능한 최소 날짜
    assignments: List[Assignment] = field(default_factory=list)


@dataclass
class UpsertSchedulePayload:
    patient_id: str
    pad_item_id: str
    year: int
    month: int
    assignments: List[Assignment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "patient_id": self.patient_id,
            "pad_item_id": self.pad_item_id,
            "year": self.year,
            "month": self.month,
            "assignments": [a.to_dict() for a in self.assignments],
        }


@dataclass
class AutoFillConfig:
    rotation: List[str]                       # 순서 중요
    substitute_id: Optional[str] = None       # 휴무/충돌 커버용 대체 인력
    days_per_professional: int = 1            # 한 사람이 연속으로 맡는 일수
    weekdays: List[int] = field(default_factory=lambda: [0, 1, 2, 3, 4, 5, 6])  # 0=일..6=토
    slot: Optional[str] = None                # 지정 시 해당 slot만 채움


@dataclass
class HistoryEntry:
    assignments: AssignmentMap
    label: str


@dataclass
class MonthSummary:
    professional_id: str
    professional_name: str
    total_shifts: int
    color: Optional[str] = None
