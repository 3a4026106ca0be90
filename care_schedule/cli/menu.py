# cli/menu.py
from datetime import date

from care_schedule.cli.pad_menu import pad_menu
from care_schedule.cli.professional_menu import professional_menu
from care_schedule.cli.schedule_menu import schedule_menu
from care_schedule.exceptions import CancelAction, GoBackAction, ScheduleError
from care_schedule.logic.editor import ScheduleEditor
from care_schedule.utils.input_handler import get_input
from care_schedule.utils.parse_utils import parse_year_month


def open_schedule(editor: ScheduleEditor):
    patients = editor.backend.patient_ids()
    if patients:
        print("\n[환자 목록] " + ", ".join(patients))
    patient_id = get_input("환자 ID")
    today = date.today()
    year, month = parse_year_month(get_input("월(YYYY-MM)", default=f"{today.year:04d}-{today.month:02d}"))
    editor.open(patient_id, year, month)
    if editor.store.pad_item_id is None:
        print("※ 활성 PAD가 없습니다. PAD 관리에서 먼저 등록해주세요.")
    schedule_menu(editor)


def main_menu(editor: ScheduleEditor):
    while True:
        print("\n[환자 월간 케어 스케줄]")
        print("1. 월간 스케줄 편집")
        print("2. 직원 관리")
        print("3. PAD 관리")
        print("0. 종료")

        try:
            choice = get_input("선택")
            if choice == "1":
                open_schedule(editor)
            elif choice == "2":
                professional_menu(editor.backend)
                editor.professionals(refresh=True)
            elif choice == "3":
                pad_menu(editor.backend)
            elif choice == "0":
                print("프로그램을 종료합니다.")
                break
            else:
                print("잘못된 선택.")
        except ScheduleError as e:
            print(f"[{e.code}] {e.message}")
        except GoBackAction:
            print("이전 메뉴로 이동")
        except CancelAction:
            print("메인 메뉴로 이동")
