# gui/bulk_editor.py
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QDateEdit, QComboBox,
    QRadioButton, QPushButton, QMessageBox, QButtonGroup
)
from PySide6.QtCore import QDate

from care_schedule.exceptions import ScheduleError
from care_schedule.models.schedule import BATCH_PRESETS, SLOT_LABELS, SLOTS_BY_REGIME

PRESET_LABELS = {
    "weekdays": "평일(월~금)",
    "saturdays": "토요일",
    "sundays": "일요일",
    "even_days": "짝수일",
    "odd_days": "홀수일",
    "full_week": "기준일이 속한 주(일~토)",
    "full_month": "이번 달 전체",
}


class BulkEditorDialog(QDialog):
    """
    선택 날짜 일괄 배정:
      - 날짜: 현재 선택(달력 Ctrl+클릭) 또는 프리셋
      - slot: 전체 또는 하나
      - 직원 1명
    잠금 날짜는 선택되지 않고, 이중 배정이 되는 날은 건너뜀
    """
    def __init__(self, parent, editor):
        super().__init__(parent)
        self.setWindowTitle("일괄 배정")
        self.editor = editor
        self.store = editor.store
        self.changed = False

        v = QVBoxLayout(self)

        v.addWidget(QLabel("날짜 선택"))
        self.grp = QButtonGroup(self)
        n_sel = len(self.store.selected_dates)
        self.rb_current = QRadioButton(f"현재 선택 유지 ({n_sel}일)")
        self.grp.addButton(self.rb_current)
        v.addWidget(self.rb_current)
        self.preset_buttons = {}
        for p in BATCH_PRESETS:
            rb = QRadioButton(PRESET_LABELS.get(p, p))
            self.grp.addButton(rb)
            v.addWidget(rb)
            self.preset_buttons[p] = rb
        if n_sel:
            self.rb_current.setChecked(True)
        else:
            self.rb_current.setEnabled(False)
            self.preset_buttons["weekdays"].setChecked(True)

        row = QHBoxLayout()
        row.addWidget(QLabel("기준일"))
        ref = min(self.store.selected_dates) if n_sel else f"{self.store.year:04d}-{self.store.month:02d}-01"
        self.ref_edit = QDateEdit(QDate.fromString(ref, "yyyy-MM-dd")); self.ref_edit.setCalendarPopup(True)
        row.addWidget(self.ref_edit)
        row.addStretch(1)
        v.addLayout(row)

        row2 = QHBoxLayout()
        row2.addWidget(QLabel("slot"))
        self.slot_combo = QComboBox()
        self.slot_combo.addItem("전체", userData=None)
        for s in SLOTS_BY_REGIME[self.store.regime]:
            self.slot_combo.addItem(SLOT_LABELS[s], userData=s)
        row2.addWidget(self.slot_combo)
        row2.addSpacing(12)
        row2.addWidget(QLabel("직원"))
        self.prof_combo = QComboBox()
        for p in editor.professionals():
            self.prof_combo.addItem(p.display_name, userData=p.id)
        row2.addWidget(self.prof_combo)
        v.addLayout(row2)

        row3 = QHBoxLayout()
        row3.addStretch(1)
        btn_apply = QPushButton("적용")
        btn_cancel = QPushButton("취소")
        row3.addWidget(btn_cancel); row3.addWidget(btn_apply)
        v.addLayout(row3)

        btn_cancel.clicked.connect(self.reject)
        btn_apply.clicked.connect(self.on_apply)

    def _chosen_preset(self):
        for p, rb in self.preset_buttons.items():
            if rb.isChecked():
                return p
        return None

    def on_apply(self):
        pid = self.prof_combo.currentData()
        if not pid:
            QMessageBox.warning(self, "확인", "직원을 선택해주세요.")
            return
        preset = self._chosen_preset()
        if preset:
            self.store.apply_batch_preset(preset, self.ref_edit.date().toString("yyyy-MM-dd"))
        if not self.store.selected_dates:
            QMessageBox.information(self, "안내", "선택된 날짜가 없습니다. (잠금 날짜 제외)")
            return

        count = len(self.store.selected_dates)
        try:
            skipped = self.store.apply_batch_assignment(pid, self.slot_combo.currentData())
        except ScheduleError as e:
            QMessageBox.warning(self, "오류", e.message)
            return

        self.changed = True
        msg = f"{count - len(skipped)}일 배정되었습니다."
        if skipped:
            msg += "\n겹치는 근무로 건너뜀: " + ", ".join(d[8:] for d in skipped)
        QMessageBox.information(self, "완료", msg)
        self.accept()
