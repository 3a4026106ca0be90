# gui/main_window.py
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QVBoxLayout, QToolBar, QPushButton,
    QLabel, QTableWidget, QTableWidgetItem, QMessageBox, QComboBox, QHeaderView,
    QAbstractItemView, QSplitter, QInputDialog,
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QColor, QKeySequence
from datetime import date
import logging

from care_schedule.exceptions import ScheduleError, UnsavedChangesError
from care_schedule.gui.autofill_dialog import AutoFillDialog
from care_schedule.gui.bulk_editor import BulkEditorDialog
from care_schedule.gui.calendar_widget import CalendarWidget
from care_schedule.gui.professional_picker import open_professional_picker
from care_schedule.utils.date_helper import days_in_month, next_month, prev_month

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, editor):
        super().__init__()
        self.setWindowTitle("환자 월간 케어 스케줄")
        self.resize(1280, 950)
        self.editor = editor
        self.store = editor.store

        self._build_ui()
        self._load_patients()
        self.refresh()

    # ---------------- UI ----------------
    def _build_ui(self):
        tb = QToolBar()
        self.addToolBar(tb)

        tb.addWidget(QLabel("환자 "))
        self.patient_combo = QComboBox()
        self.patient_combo.setEditable(True)
        self.patient_combo.setMinimumWidth(140)
        tb.addWidget(self.patient_combo)
        btn_open = QPushButton("열기")
        btn_open.clicked.connect(self.open_patient)
        tb.addWidget(btn_open)

        tb.addSeparator()

        btn_prev = QPushButton("◀ 이전달")
        btn_prev.clicked.connect(lambda: self.change_month(forward=False))
        tb.addWidget(btn_prev)

        self.month_label = QLabel("")
        self.month_label.setStyleSheet("font-weight:600; padding:0 8px;")
        tb.addWidget(self.month_label)

        btn_next = QPushButton("다음달 ▶")
        btn_next.clicked.connect(lambda: self.change_month(forward=True))
        tb.addWidget(btn_next)

        tb.addSeparator()

        self.act_undo = QAction("되돌리기", self)
        self.act_undo.setShortcut(QKeySequence("Ctrl+Z"))
        self.act_undo.triggered.connect(self.undo)
        tb.addAction(self.act_undo)

        self.act_redo = QAction("다시 실행", self)
        self.act_redo.setShortcuts([QKeySequence("Ctrl+Y"), QKeySequence("Ctrl+Shift+Z")])
        self.act_redo.triggered.connect(self.redo)
        tb.addAction(self.act_redo)

        tb.addSeparator()

        btn_auto = QPushButton("자동 채우기")
        btn_auto.setToolTip("로테이션 순서로 이 달을 채웁니다 (미리보기 후 적용)")
        btn_auto.clicked.connect(self.open_autofill)
        tb.addWidget(btn_auto)

        btn_bulk = QPushButton("일괄 배정")
        btn_bulk.clicked.connect(self.open_bulk_editor)
        tb.addWidget(btn_bulk)

        btn_clear = QPushButton("월 비우기")
        btn_clear.clicked.connect(self.clear_month)
        tb.addWidget(btn_clear)

        tb.addSeparator()

        self.act_save = QAction("저장", self)
        self.act_save.setShortcut(QKeySequence("Ctrl+S"))
        self.act_save.triggered.connect(self.save)
        tb.addAction(self.act_save)

        self.act_toggle_side = QAction("요약 패널 보기", self)
        self.act_toggle_side.setCheckable(True)
        self.act_toggle_side.setChecked(self.store.is_sidebar_open)
        self.act_toggle_side.toggled.connect(self.toggle_sidebar)
        tb.addAction(self.act_toggle_side)

        # 중앙: 달력 | 요약
        central = QWidget()
        self.setCentralWidget(central)
        root = QHBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)

        splitter = QSplitter(Qt.Horizontal)
        splitter.setHandleWidth(2)
        root.addWidget(splitter)

        self.calendar = CalendarWidget(
            on_slot_open=self.open_slot,
            on_day_action=self.day_action,
            on_day_toggle=self.toggle_day,
        )
        splitter.addWidget(self.calendar)

        side = QWidget()
        sv = QVBoxLayout(side)
        sv.addWidget(QLabel("이 달 요약"))
        self.summary_label = QLabel("")
        sv.addWidget(self.summary_label)
        self.summary_table = QTableWidget(0, 2)
        self.summary_table.setHorizontalHeaderLabels(["직원", "근무"])
        self.summary_table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.summary_table.setSelectionMode(QAbstractItemView.NoSelection)
        header = self.summary_table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.Stretch)
        header.setSectionResizeMode(1, QHeaderView.ResizeToContents)
        sv.addWidget(self.summary_table)
        side.setMinimumWidth(240)
        side.setMaximumWidth(300)
        side.setVisible(self.store.is_sidebar_open)
        splitter.addWidget(side)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 0)
        splitter.setCollapsible(0, False)
        self._side = side

        self.status = self.statusBar()

    # ---------------- 데이터/바인딩 ----------------
    def _load_patients(self):
        patients = self.editor.backend.patient_ids()
        self.patient_combo.clear()
        self.patient_combo.addItems(patients)
        if patients:
            today = date.today()
            self._guard(self.editor.open, patients[0], today.year, today.month)

    def refresh(self):
        store = self.store
        self.calendar.render_month(store, self.editor.professional_name, self._color_of)

        dirty = " *" if store.is_dirty else ""
        patient = store.patient_id or "-"
        self.month_label.setText(f"{store.year}-{store.month:02d}  ({store.regime}){dirty}")
        self.setWindowTitle(f"환자 월간 케어 스케줄 - {patient}{dirty}")
        self.act_undo.setEnabled(store.can_undo)
        self.act_redo.setEnabled(store.can_redo)
        self.act_save.setEnabled(store.is_dirty and not store.is_saving)
        self._fill_summary()

        msg = f"환자 {patient} | 선택 {len(store.selected_dates)}일"
        if store.patient_id and store.pad_item_id is None:
            msg += " | 활성 PAD 없음 (저장 불가)"
        elif store.min_editable_date:
            msg += f" | {store.min_editable_date} 이전 잠금"
        self.status.showMessage(msg)

    def _fill_summary(self):
        s = self.editor.summary()
        self.summary_label.setText(
            f"채워진 날 {s['filled_days']} / 남은 날 {s['pending_days']} (총 {s['total_days']}일)"
        )
        self.summary_table.setRowCount(0)
        for row in s["rows"]:
            r = self.summary_table.rowCount()
            self.summary_table.insertRow(r)
            name = QTableWidgetItem(row.professional_name)
            if row.color:
                name.setForeground(QColor(row.color))
            self.summary_table.setItem(r, 0, name)
            self.summary_table.setItem(r, 1, QTableWidgetItem(str(row.total_shifts)))

    def _color_of(self, professional_id):
        for p in self.editor.professionals():
            if p.id == professional_id:
                return p.color
        return None

    def _guard(self, fn, *args, **kwargs) -> bool:
        """ScheduleError → 경고창. 성공 여부 반환"""
        try:
            fn(*args, **kwargs)
        except ScheduleError as e:
            QMessageBox.warning(self, "확인", e.message)
            return False
        return True

    def _confirm_discard(self) -> bool:
        mb = QMessageBox(self)
        mb.setIcon(QMessageBox.Question)
        mb.setWindowTitle("저장하지 않은 변경")
        mb.setText("저장하지 않은 변경 사항이 있습니다.\n저장할까요?")
        mb.setStandardButtons(QMessageBox.Save | QMessageBox.Discard | QMessageBox.Cancel)
        mb.setDefaultButton(QMessageBox.Save)
        mb.button(QMessageBox.Save).setText("저장")
        mb.button(QMessageBox.Discard).setText("저장 안 함")
        mb.button(QMessageBox.Cancel).setText("취소")
        ret = mb.exec()
        if ret == QMessageBox.Save:
            return self.save()
        return ret == QMessageBox.Discard

    # ---------------- 동작 ----------------
    def open_patient(self):
        patient_id = self.patient_combo.currentText().strip()
        if not patient_id:
            QMessageBox.information(self, "안내", "환자 ID를 입력해주세요.")
            return
        if self.store.is_dirty and not self._confirm_discard():
            return
        if self._guard(self.editor.open, patient_id, self.store.year, self.store.month):
            self.refresh()

    def change_month(self, forward: bool):
        move = self.editor.next_month if forward else self.editor.previous_month
        if not self.store.patient_id:
            shift = next_month if forward else prev_month
            self.store.set_month(*shift(self.store.year, self.store.month))
            self.refresh()
            return
        try:
            move()
        except UnsavedChangesError:
            if not self._confirm_discard():
                return
            self._guard(move, discard=True)
        except ScheduleError as e:
            QMessageBox.warning(self, "확인", e.message)
        self.refresh()

    def _require_patient(self) -> bool:
        if not self.store.patient_id:
            QMessageBox.information(self, "안내", "먼저 환자를 열어주세요.")
            return False
        return True

    def open_slot(self, date_key: str, slot: str):
        if not self._require_patient():
            return
        if self.store.is_locked(date_key):
            QMessageBox.information(self, "잠금", f"{date_key} 는 PAD 시작일 이전이라 편집할 수 없습니다.")
            return
        if open_professional_picker(self, self.editor, date_key, slot):
            self.refresh()

    def toggle_day(self, date_key: str):
        self.store.toggle_date_selection(date_key)
        self.refresh()

    def day_action(self, action: str, date_key: str):
        if not self._require_patient():
            return
        store = self.store
        if action == "toggle":
            store.toggle_date_selection(date_key)
        elif action == "swap":
            day, ok = QInputDialog.getInt(self, "교환", f"{date_key} 와 교환할 날짜(일)", 1, 1, 31)
            if not ok:
                return
            other = f"{store.year:04d}-{store.month:02d}-{day:02d}"
            if other not in days_in_month(store.year, store.month):
                QMessageBox.warning(self, "확인", "이 달에 없는 날짜입니다.")
                return
            self._guard(store.swap_day_assignments, date_key, other)
        elif action == "duplicate_week":
            if QMessageBox.question(self, "확인", f"{date_key}부터 7일을 이후 주에 복제할까요?") != QMessageBox.Yes:
                return
            self._guard(store.duplicate_week, date_key)
        elif action == "clear":
            for slot in sorted({a.slot for a in store.day_assignments(date_key)}):
                if not self._guard(store.remove_professional, date_key, slot):
                    break
        self.refresh()

    def undo(self):
        if self.store.undo():
            self.refresh()

    def redo(self):
        if self.store.redo():
            self.refresh()

    def open_autofill(self):
        if not self._require_patient():
            return
        if not self.editor.professionals():
            QMessageBox.information(self, "안내", "등록된 직원이 없습니다.")
            return
        dlg = AutoFillDialog(self, self.editor)
        if dlg.exec() and dlg.changed:
            self.refresh()

    def open_bulk_editor(self):
        if not self._require_patient():
            return
        dlg = BulkEditorDialog(self, self.editor)
        if dlg.exec() and dlg.changed:
            self.refresh()

    def clear_month(self):
        if not self._require_patient():
            return
        mb = QMessageBox(self)
        mb.setIcon(QMessageBox.Question)
        mb.setWindowTitle("월 비우기 확인")
        mb.setText(f"{self.store.year}-{self.store.month:02d} 의 모든 배정을 비울까요?\n※ 잠금 날짜는 유지됩니다.")
        mb.setStandardButtons(QMessageBox.Yes | QMessageBox.No)
        mb.setDefaultButton(QMessageBox.No)
        mb.button(QMessageBox.Yes).setText("예")
        mb.button(QMessageBox.No).setText("아니오")
        if mb.exec() != QMessageBox.Yes:
            self.status.showMessage("취소했습니다.", 3000)
            return
        self.store.clear_month()
        self.refresh()

    def save(self) -> bool:
        if not self.store.is_dirty:
            self.status.showMessage("변경 사항이 없습니다.", 3000)
            return True
        try:
            self.editor.save()
        except ScheduleError as e:
            QMessageBox.warning(self, "저장 실패", e.message)
            return False
        except Exception as e:
            # 저장소 오류 등 (editor에서 이미 로그 남김)
            QMessageBox.critical(self, "저장 실패", str(e))
            return False
        self.refresh()
        self.status.showMessage("저장되었습니다.", 3000)
        return True

    def toggle_sidebar(self, visible: bool):
        if visible != self.store.is_sidebar_open:
            self.store.toggle_sidebar()
        self._side.setVisible(visible)

    def closeEvent(self, event):
        if self.store.is_dirty and not self._confirm_discard():
            event.ignore()
            return
        event.accept()
