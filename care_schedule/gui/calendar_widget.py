# gui/calendar_widget.py
import calendar
from PySide6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QLabel, QFrame, QMenu
from PySide6.QtCore import Qt, QPoint

from care_schedule.models.schedule import SLOT_LABELS, SLOTS_BY_REGIME, assignment_key
from care_schedule.utils.date_helper import ts_hhmm

WEEKDAYS = ("일", "월", "화", "수", "목", "금", "토")

# 칩 기본색 (직원 색 미지정)
DEFAULT_CHIP = "#e5e7eb"
EMPTY_CHIP = "#ffffff"


class CalendarWidget(QWidget):
    """
    월 달력 그리드
      - 하루 칸 = 날짜 라벨 + slot별 칩
      - 칩 더블클릭 → on_slot_open(date, slot)
      - Ctrl+클릭 → 일괄 배정용 날짜 선택 토글
      - 우클릭 → on_day_action(action, date)
    """
    def __init__(self, on_slot_open, on_day_action=None, on_day_toggle=None):
        super().__init__()
        self.on_slot_open = on_slot_open
        self.on_day_action = on_day_action
        self.on_day_toggle = on_day_toggle
        self.vbox = QVBoxLayout(self)

        header = QGridLayout()
        self.vbox.addLayout(header)
        for c, w in enumerate(WEEKDAYS):
            lbl = QLabel(w); lbl.setAlignment(Qt.AlignCenter)
            header.addWidget(lbl, 0, c)

        self.grid = QGridLayout()
        self.vbox.addLayout(self.grid)

    def clear_grid(self):
        while self.grid.count():
            item = self.grid.takeAt(0)
            w = item.widget()
            if w is not None:
                w.setParent(None)

    def render_month(self, store, name_of, color_of=None):
        """store: ScheduleStore, name_of(pid) → 표시 이름, color_of(pid) → #RRGGBB | None"""
        self.clear_grid()
        year, month = store.year, store.month
        cal = calendar.Calendar(firstweekday=6)  # Sunday
        weeks = cal.monthdayscalendar(year, month)
        slots = SLOTS_BY_REGIME[store.regime]

        for r, week in enumerate(weeks):
            for c, day in enumerate(week):
                cell = QFrame()
                cell.setFrameShape(QFrame.StyledPanel)
                v = QVBoxLayout(cell)
                v.setSpacing(3)
                if day == 0:
                    self.grid.addWidget(cell, r, c)
                    continue

                key = f"{year:04d}-{month:02d}-{day:02d}"
                locked = store.is_locked(key)
                selected = key in store.selected_dates

                day_lbl = QLabel(("🔒 " if locked else "") + str(day))
                day_lbl.setAlignment(Qt.AlignTop | Qt.AlignRight)
                v.addWidget(day_lbl)

                if locked:
                    cell.setStyleSheet("QFrame { background:#f3f4f6; color:#9ca3af; }")
                elif selected:
                    cell.setStyleSheet("QFrame { background:#dbeafe; }")

                for slot in slots:
                    day_items = store.assignments.get(assignment_key(key, slot), [])
                    v.addWidget(self._chip(key, slot, day_items, name_of, color_of, locked, len(slots) > 1))

                v.addStretch(1)

                def toggle(ev, d=key):
                    if ev.modifiers() & Qt.ControlModifier and self.on_day_toggle:
                        self.on_day_toggle(d)
                cell.mousePressEvent = toggle

                def ctx_menu(point: QPoint, d=key, cell=cell):
                    if not self.on_day_action:
                        return
                    menu = QMenu(self)
                    act_sel = menu.addAction("선택 해제" if d in store.selected_dates else "일괄 배정용 선택")
                    menu.addSeparator()
                    act_swap = menu.addAction("다른 날과 교환…")
                    act_dup = menu.addAction("이 날부터 한 주 복제")
                    act_clear = menu.addAction("이 날 배정 비우기")
                    act = menu.exec(cell.mapToGlobal(point))
                    actions = {act_sel: "toggle", act_swap: "swap", act_dup: "duplicate_week", act_clear: "clear"}
                    if act in actions:
                        self.on_day_action(actions[act], d)

                cell.setContextMenuPolicy(Qt.CustomContextMenu)
                cell.customContextMenuRequested.connect(ctx_menu)

                self.grid.addWidget(cell, r, c)

    def _chip(self, date, slot, items, name_of, color_of, locked, show_label):
        names = []
        for a in items:
            text = name_of(a.professional_id)
            if len(items) > 1:
                text += f" {ts_hhmm(a.start_at)}~{ts_hhmm(a.end_at)}"
            names.append(text)
        prefix = f"{SLOT_LABELS[slot]}: " if show_label else ""
        chip = QLabel(prefix + (", ".join(names) if names else "-"))
        chip.setWordWrap(True)

        color = EMPTY_CHIP
        if items:
            color = (color_of(items[0].professional_id) if color_of else None) or DEFAULT_CHIP
        chip.setStyleSheet(
            f"QLabel {{ background:{color}; border:1px solid #d1d5db; border-radius:4px; padding:2px 4px; }}"
        )
        chip.setToolTip("잠금 (PAD 시작일 이전)" if locked else "더블클릭: 직원 배정")

        def open_picker(_ev=None, d=date, s=slot):
            self.on_slot_open(d, s)
        chip.mouseDoubleClickEvent = open_picker
        return chip
