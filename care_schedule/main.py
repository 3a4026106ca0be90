import argparse
import logging
import sys
from pathlib import Path

from care_schedule.config import BACKENDS, Settings, configure_logging
from care_schedule.data.backends import open_backend
from care_schedule.logic.editor import ScheduleEditor

logger = logging.getLogger(__name__)


def run_cli(editor: ScheduleEditor) -> int:
    from care_schedule.cli.menu import main_menu

    main_menu(editor)
    return 0


def run_gui(editor: ScheduleEditor) -> int:
    # PySide6는 GUI 모드에서만 로드
    from PySide6.QtWidgets import QApplication
    from care_schedule.gui.main_window import MainWindow

    app = QApplication(sys.argv)
    win = MainWindow(editor)
    win.show()
    return app.exec()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="care-schedule", description="환자 월간 케어 스케줄 편집기")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--cli", action="store_true", help="콘솔 메뉴로 실행")
    mode.add_argument("--gui", action="store_true", help="PySide6 창으로 실행 (기본)")
    parser.add_argument("--backend", choices=BACKENDS, help="저장소 종류 (CARE_SCHEDULE_BACKEND)")
    parser.add_argument("--data-dir", type=Path, help="데이터 폴더 (CARE_SCHEDULE_DATA_DIR)")
    parser.add_argument("--seed", action="store_true", help="직원이 없으면 예시 직원 등록")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    settings = Settings.from_env()
    if args.backend:
        settings.backend = args.backend
    if args.data_dir:
        settings.data_dir = args.data_dir
    configure_logging("DEBUG" if settings.debug else settings.log_level)

    logger.info("starting care-schedule (%s, backend=%s)", "cli" if args.cli else "gui", settings.backend)
    backend = open_backend(settings)
    if args.seed:
        backend.seed_if_empty()

    editor = ScheduleEditor(backend, history_limit=settings.history_limit)
    try:
        return run_cli(editor) if args.cli else run_gui(editor)
    finally:
        backend.close()


if __name__ == "__main__":
    sys.exit(main())
