# gui/professional_picker.py
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QCheckBox, QComboBox,
    QPushButton, QListWidget, QListWidgetItem, QMessageBox, QRadioButton, QTimeEdit,
    QButtonGroup, QGroupBox,
)
from PySide6.QtCore import Qt, QTime
from PySide6.QtGui import QColor

from care_schedule.exceptions import ScheduleError
from care_schedule.models.schedule import SLOT_LABELS, default_slots
from care_schedule.utils.date_helper import make_ts, ts_hhmm


def open_professional_picker(parent, editor, date: str, slot: str) -> bool:
    dlg = ProfessionalPickerDialog(parent, editor, date, slot)
    dlg.exec()
    return dlg.changed


class ProfessionalPickerDialog(QDialog):
    """
    한 칸(날짜+slot) 직원 배정
      - 이름/직무 검색, 겹치는 근무가 있는 직원은 빨간색 표시
      - 시간: slot 기본 시간 또는 직접 지정(프리셋 선택 가능)
      - 현재 배정 삭제 / slot 비우기
    """
    def __init__(self, parent, editor, date: str, slot: str):
        super().__init__(parent)
        self.editor = editor
        self.store = editor.store
        self.date = date
        self.slot = slot
        self.changed = False
        self.setWindowTitle(f"{date} {SLOT_LABELS.get(slot, slot)} 배정")
        self.resize(460, 560)

        v = QVBoxLayout(self)

        # 현재 배정
        v.addWidget(QLabel("현재 배정"))
        self.current_list = QListWidget()
        self.current_list.setMaximumHeight(90)
        v.addWidget(self.current_list)
        cur_btns = QHBoxLayout()
        self.btn_remove = QPushButton("선택 배정 삭제")
        self.btn_clear = QPushButton("slot 비우기")
        cur_btns.addWidget(self.btn_remove)
        cur_btns.addWidget(self.btn_clear)
        cur_btns.addStretch(1)
        v.addLayout(cur_btns)

        # 직원 검색 + 목록
        self.search = QLineEdit()
        self.search.setPlaceholderText("이름/직무 검색")
        v.addWidget(self.search)
        self.listbox = QListWidget()
        v.addWidget(self.listbox)

        # 시간
        gb = QGroupBox("근무 시간")
        tv = QVBoxLayout(gb)
        start, end = self._slot_window(slot)
        self.rb_default = QRadioButton(f"slot 기본 시간 ({ts_hhmm(start)}~{ts_hhmm(end)}, 기존 배정 교체)")
        self.rb_custom = QRadioButton("직접 지정 (slot에 추가)")
        self.rb_default.setChecked(True)
        grp = QButtonGroup(self)
        grp.addButton(self.rb_default); grp.addButton(self.rb_custom)
        tv.addWidget(self.rb_default)
        tv.addWidget(self.rb_custom)

        row = QHBoxLayout()
        self.preset = QComboBox()
        self.preset.addItem("프리셋", userData=None)
        for s, s_start, s_end in default_slots(date, self.store.regime, self.store.start_time):
            self.preset.addItem(f"{SLOT_LABELS[s]} {ts_hhmm(s_start)}~{ts_hhmm(s_end)}",
                                userData=(s_start, s_end))
        row.addWidget(self.preset)
        self.start_edit = QTimeEdit(QTime.fromString(ts_hhmm(start), "HH:mm")); self.start_edit.setDisplayFormat("HH:mm")
        self.end_edit = QTimeEdit(QTime.fromString(ts_hhmm(end), "HH:mm")); self.end_edit.setDisplayFormat("HH:mm")
        row.addWidget(QLabel("시작")); row.addWidget(self.start_edit)
        row.addWidget(QLabel("종료")); row.addWidget(self.end_edit)
        tv.addLayout(row)
        self.next_day = QCheckBox("다음날 종료")
        self.next_day.setChecked(end[:10] != date)
        tv.addWidget(self.next_day)
        v.addWidget(gb)

        # 버튼
        btns = QHBoxLayout()
        btns.addStretch(1)
        cancel_btn = QPushButton("닫기")
        save_btn = QPushButton("배정")
        btns.addWidget(cancel_btn)
        btns.addWidget(save_btn)
        v.addLayout(btns)

        self.search.textChanged.connect(self._fill_options)
        self.preset.currentIndexChanged.connect(self._apply_preset)
        self.rb_custom.toggled.connect(self._on_mode)
        self.listbox.itemDoubleClicked.connect(lambda _it: self.on_assign())
        self.btn_remove.clicked.connect(self.on_remove)
        self.btn_clear.clicked.connect(self.on_clear)
        cancel_btn.clicked.connect(self.reject)
        save_btn.clicked.connect(self.on_assign)

        self._on_mode(False)
        self._fill_current()
        self._fill_options()

    # ---------- 채우기 ----------
    def _slot_window(self, slot):
        for s, start, end in default_slots(self.date, self.store.regime, self.store.start_time):
            if s == slot:
                return start, end
        raise ValueError(f"Unknown slot: {slot}")

    def _fill_current(self):
        self.current_list.clear()
        for a in self.store.slot_assignments(self.date, self.slot):
            QListWidgetItem(
                f"{self.editor.professional_name(a.professional_id)} | {ts_hhmm(a.start_at)}~{ts_hhmm(a.end_at)}",
                self.current_list,
            )
        has = self.current_list.count() > 0
        self.btn_remove.setEnabled(has)
        self.btn_clear.setEnabled(has)

    def _fill_options(self):
        self.listbox.clear()
        for opt in self.editor.professional_options(self.date, self.slot, self.search.text()):
            item = QListWidgetItem(opt.label + (" ✔" if opt.in_slot else ""), self.listbox)
            item.setData(Qt.UserRole, opt.professional.id)
            if opt.conflict:
                item.setForeground(QColor("#dc2626"))
                item.setToolTip("이 시간대에 다른 근무가 있습니다.")

    def _apply_preset(self, idx):
        data = self.preset.itemData(idx)
        if not data:
            return
        start, end = data
        self.rb_custom.setChecked(True)
        self.start_edit.setTime(QTime.fromString(ts_hhmm(start), "HH:mm"))
        self.end_edit.setTime(QTime.fromString(ts_hhmm(end), "HH:mm"))
        self.next_day.setChecked(end[:10] != self.date)

    def _on_mode(self, custom: bool):
        for w in (self.preset, self.start_edit, self.end_edit, self.next_day):
            w.setEnabled(custom)

    # ---------- 동작 ----------
    def on_assign(self):
        item = self.listbox.currentItem()
        if item is None:
            QMessageBox.information(self, "안내", "배정할 직원을 선택해주세요.")
            return
        pid = item.data(Qt.UserRole)
        try:
            if self.rb_default.isChecked():
                self.store.assign_professional(self.date, self.slot, pid)
            else:
                start = self.start_edit.time().toString("HH:mm")
                end = self.end_edit.time().toString("HH:mm")
                self.store.add_assignment(
                    self.date, self.slot, pid,
                    make_ts(self.date, start),
                    make_ts(self.date, end, 1 if self.next_day.isChecked() else 0),
                )
        except ScheduleError as e:
            QMessageBox.warning(self, "배정 불가", e.message)
            return
        self.changed = True
        self.accept()

    def on_remove(self):
        row = self.current_list.currentRow()
        if row < 0:
            QMessageBox.information(self, "안내", "삭제할 배정을 선택해주세요.")
            return
        try:
            self.store.remove_assignment(self.date, self.slot, row)
        except ScheduleError as e:
            QMessageBox.warning(self, "오류", e.message)
            return
        self.changed = True
        self._fill_current()
        self._fill_options()

    def on_clear(self):
        if QMessageBox.question(self, "확인", "이 slot의 배정을 모두 비우시겠습니까?") != QMessageBox.Yes:
            return
        try:
            self.store.remove_professional(self.date, self.slot)
        except ScheduleError as e:
            QMessageBox.warning(self, "오류", e.message)
            return
        self.changed = True
        self.accept()
