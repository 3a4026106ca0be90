# gui/autofill_dialog.py
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QCheckBox, QComboBox, QSpinBox,
    QPushButton, QListWidget, QListWidgetItem, QMessageBox, QTableWidget,
    QTableWidgetItem, QAbstractItemView, QGroupBox,
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor

from care_schedule.models.schedule import SLOT_LABELS, SLOTS_BY_REGIME, AutoFillConfig, assignment_key
from care_schedule.utils.date_helper import day_of_week, days_in_month

WEEKDAYS = ("일", "월", "화", "수", "목", "금", "토")


class AutoFillDialog(QDialog):
    """
    로테이션 자동 채우기
      좌: 로테이션 순서 (체크 = 포함, ▲▼ 순서 변경)
      우: 대체 인력 / 1인당 연속 일수 / slot / 요일 / 미리보기
    적용 전까지 스케줄은 바뀌지 않음
    """
    def __init__(self, parent, editor):
        super().__init__(parent)
        self.setWindowTitle("자동 채우기")
        self.resize(900, 620)
        self.editor = editor
        self.store = editor.store
        self.preview = None
        self.changed = False

        root = QHBoxLayout(self)

        # 좌: 로테이션
        left = QVBoxLayout()
        left.addWidget(QLabel("로테이션 순서"))
        self.rotation_list = QListWidget()
        self.rotation_list.setSelectionMode(QAbstractItemView.SingleSelection)
        for p in editor.professionals():
            item = QListWidgetItem(p.display_name, self.rotation_list)
            item.setData(Qt.UserRole, p.id)
            item.setFlags(item.flags() | Qt.ItemIsUserCheckable)
            item.setCheckState(Qt.Unchecked if p.is_substitute else Qt.Checked)
        left.addWidget(self.rotation_list)
        order_row = QHBoxLayout()
        btn_up = QPushButton("▲ 위로")
        btn_down = QPushButton("▼ 아래로")
        order_row.addWidget(btn_up); order_row.addWidget(btn_down)
        left.addLayout(order_row)

        # 우: 옵션 + 미리보기
        right = QVBoxLayout()
        opts = QGroupBox("옵션")
        ov = QVBoxLayout(opts)

        sub_row = QHBoxLayout()
        sub_row.addWidget(QLabel("대체 인력"))
        self.sub_combo = QComboBox()
        self.sub_combo.addItem("없음", userData=None)
        for p in editor.professionals():
            self.sub_combo.addItem(p.display_name + (" (대체)" if p.is_substitute else ""), userData=p.id)
            if p.is_substitute and self.sub_combo.currentData() is None:
                self.sub_combo.setCurrentIndex(self.sub_combo.count() - 1)
        sub_row.addWidget(self.sub_combo)
        sub_row.addSpacing(12)
        sub_row.addWidget(QLabel("1인당 연속 일수"))
        self.spin_days = QSpinBox(); self.spin_days.setRange(1, 31); self.spin_days.setValue(1)
        sub_row.addWidget(self.spin_days)
        sub_row.addSpacing(12)
        sub_row.addWidget(QLabel("slot"))
        self.slot_combo = QComboBox()
        self.slot_combo.addItem("전체", userData=None)
        for s in SLOTS_BY_REGIME[self.store.regime]:
            self.slot_combo.addItem(SLOT_LABELS[s], userData=s)
        self.slot_combo.setEnabled(len(SLOTS_BY_REGIME[self.store.regime]) > 1)
        sub_row.addWidget(self.slot_combo)
        sub_row.addStretch(1)
        ov.addLayout(sub_row)

        day_row = QHBoxLayout()
        day_row.addWidget(QLabel("근무 요일"))
        self.chk_days = []
        for i, name in enumerate(WEEKDAYS):
            cb = QCheckBox(name)
            cb.setChecked(True)
            cb.setProperty("weekday_index", i)  # 0=일..6=토
            self.chk_days.append(cb)
            day_row.addWidget(cb)
        day_row.addStretch(1)
        ov.addLayout(day_row)
        right.addWidget(opts)

        slots = SLOTS_BY_REGIME[self.store.regime]
        self.table = QTableWidget(0, 1 + len(slots))
        self.table.setHorizontalHeaderLabels(["날짜"] + [SLOT_LABELS[s] for s in slots])
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.horizontalHeader().setStretchLastSection(True)
        right.addWidget(self.table)

        self.info = QLabel("")
        right.addWidget(self.info)

        btns = QHBoxLayout()
        btn_preview = QPushButton("미리보기")
        btn_cancel = QPushButton("취소")
        btn_apply = QPushButton("적용")
        btns.addWidget(btn_preview); btns.addStretch(1)
        btns.addWidget(btn_cancel); btns.addWidget(btn_apply)
        right.addLayout(btns)

        root.addLayout(left, 1)
        root.addLayout(right, 3)

        btn_up.clicked.connect(lambda: self._move(-1))
        btn_down.clicked.connect(lambda: self._move(1))
        btn_preview.clicked.connect(self.on_preview)
        btn_cancel.clicked.connect(self.reject)
        btn_apply.clicked.connect(self.on_apply)

        # 옵션 바뀌면 이전 미리보기 무효
        self.rotation_list.itemChanged.connect(self._invalidate)
        self.sub_combo.currentIndexChanged.connect(self._invalidate)
        self.spin_days.valueChanged.connect(self._invalidate)
        self.slot_combo.currentIndexChanged.connect(self._invalidate)
        for cb in self.chk_days:
            cb.toggled.connect(self._invalidate)

    # ---------- helpers ----------
    def _move(self, step: int):
        row = self.rotation_list.currentRow()
        target = row + step
        if row < 0 or not 0 <= target < self.rotation_list.count():
            return
        item = self.rotation_list.takeItem(row)
        self.rotation_list.insertItem(target, item)
        self.rotation_list.setCurrentRow(target)
        self._invalidate()

    def _invalidate(self, *_):
        self.preview = None

    def config(self) -> AutoFillConfig:
        rotation = []
        for i in range(self.rotation_list.count()):
            item = self.rotation_list.item(i)
            if item.checkState() == Qt.Checked:
                rotation.append(item.data(Qt.UserRole))
        return AutoFillConfig(
            rotation=rotation,
            substitute_id=self.sub_combo.currentData(),
            days_per_professional=self.spin_days.value(),
            weekdays=[cb.property("weekday_index") for cb in self.chk_days if cb.isChecked()],
            slot=self.slot_combo.currentData(),
        )

    # ---------- 동작 ----------
    def on_preview(self) -> bool:
        config = self.config()
        if not config.rotation:
            QMessageBox.warning(self, "확인", "로테이션에 한 명 이상 포함해주세요.")
            return False
        self.preview = self.store.generate_autofill_preview(config)
        self._fill_table()
        return True

    def _fill_table(self):
        slots = SLOTS_BY_REGIME[self.store.regime]
        skipped = {key for key, _reason in self.preview.skipped}
        days = days_in_month(self.store.year, self.store.month)
        self.table.setRowCount(len(days))
        for r, d in enumerate(days):
            head = QTableWidgetItem(f"{d[5:]} ({WEEKDAYS[day_of_week(d)]})")
            if self.store.is_locked(d):
                head.setForeground(QColor("#9ca3af"))
            self.table.setItem(r, 0, head)
            for c, s in enumerate(slots, start=1):
                pid = self.preview.professional_for(d, s)
                cell = QTableWidgetItem(self.editor.professional_name(pid) if pid else "-")
                if assignment_key(d, s) in skipped:
                    cell.setBackground(QColor("#fee2e2"))
                    cell.setToolTip("겹치는 근무로 채우지 못함")
                self.table.setItem(r, c, cell)
        self.info.setText(
            f"배정 {len(self.preview.filled)}건 (대체 {len(self.preview.substituted)}건), 건너뜀 {len(self.preview.skipped)}건"
        )

    def on_apply(self):
        if self.preview is None and not self.on_preview():
            return
        if self.preview.skipped:
            ret = QMessageBox.question(
                self, "확인",
                f"겹치는 근무로 {len(self.preview.skipped)}건을 채우지 못했습니다.\n그래도 적용할까요?",
            )
            if ret != QMessageBox.Yes:
                return
        self.store.apply_autofill(self.preview)
        self.changed = True
        self.accept()
