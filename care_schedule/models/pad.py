from dataclasses import asdict, dataclass
from typing import Optional


def regime_for(hours_per_day: Optional[int], is_split: bool = False) -> str:
    """PAD 하루 시간 → regime (12h, 분할 24h → 12h / 8h / 나머지 24h)"""
    hours = hours_per_day if hours_per_day is not None else 24
    if hours == 12 or (hours == 24 and is_split):
        return "12h"
    if hours == 8:
        return "8h"
    return "24h"


@dataclass
class PadItem:
    """PAD(케어 플랜)의 교대 근무 항목 - 편집 대상 스케줄의 범위"""
    id: str
    patient_id: str
    pad_id: Optional[str] = None
    start_date: Optional[str] = None     # YYYY-MM-DD, 이전 날짜는 잠금
    hours_per_day: int = 24
    start_time: str = "07:00"            # HH:MM
    is_split: bool = False
    active: bool = True
    created_at: Optional[str] = None

    @property
    def regime(self) -> str:
        return regime_for(self.hours_per_day, self.is_split)

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "PadItem":
        return PadItem(
            id=str(data["id"]),
            patient_id=str(data["patient_id"]),
            pad_id=data.get("pad_id"),
            start_date=data.get("start_date"),
            hours_per_day=int(data.get("hours_per_day") or 24),
            start_time=data.get("start_time") or "07:00",
            is_split=bool(data.get("is_split", False)),
            active=bool(data.get("active", True)),
            created_at=data.get("created_at"),
        )
