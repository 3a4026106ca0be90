import pytest

from care_schedule.logic.store import ScheduleStore
from care_schedule.models.schedule import Assignment, MonthSchedule, slot_times


def make_assignment(date, slot, professional_id, start_time="07:00"):
    start, end = slot_times(slot, date, start_time)
    return Assignment(date=date, slot=slot, professional_id=professional_id, start_at=start, end_at=end)


@pytest.fixture
def make_store():
    """2025-08 스케줄 store (08-01 = 금요일)"""
    def _make(regime="24h", start_date=None, assignments=(), history_limit=50):
        store = ScheduleStore(history_limit=history_limit)
        store.initialize(MonthSchedule(
            patient_id="p1",
            year=2025,
            month=8,
            regime=regime,
            start_time="07:00",
            pad_id="pad1",
            pad_item_id="item1",
            start_date=start_date,
            assignments=list(assignments),
        ))
        return store
    return _make
