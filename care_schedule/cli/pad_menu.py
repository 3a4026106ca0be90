# cli/pad_menu.py
from datetime import datetime

from care_schedule.exceptions import CancelAction, GoBackAction, ValidationError
from care_schedule.models.pad import PadItem
from care_schedule.utils.input_handler import confirm, get_input, get_int
from care_schedule.utils.parse_utils import parse_hhmm


def pad_menu(backend):
    while True:
        print("\n[PAD 관리]")
        print("1. PAD 목록 보기")
        print("2. PAD 추가")
        print("3. PAD 비활성화")
        print("0. 메인 메뉴로")
        try:
            choice = get_input("선택")
            if choice == "1":
                show_pad_items(backend)
            elif choice == "2":
                add_pad_item(backend)
            elif choice == "3":
                deactivate_pad_item(backend)
            elif choice == "0":
                break
            else:
                print("잘못된 선택.")
        except ValidationError as e:
            print(e.message)
        except GoBackAction:
            print("이전 메뉴로 이동")
        except CancelAction:
            print("메인 메뉴로 이동")
            return


def show_pad_items(backend):
    items = backend.list_pad_items()
    print("\n[PAD 목록]")
    for i, p in enumerate(items, start=1):
        state = "활성" if p.active else "비활성"
        print(f"{i} | 환자 {p.patient_id} | 시작 {p.start_date or '-'} | {p.hours_per_day}h"
              f"{' 분할' if p.is_split else ''} → {p.regime} | {p.start_time} | {state}")
    return items


def add_pad_item(backend):
    patient_id = get_input("환자 ID")
    start_date = get_input("시작일(YYYY-MM-DD)", allow_empty=True)
    if start_date:
        try:
            datetime.strptime(start_date, "%Y-%m-%d")
        except ValueError:
            print("날짜 형식이 올바르지 않습니다.")
            return
    hours = get_int("하루 시간 (24/12/8)", default=24, minimum=1)
    is_split = hours == 24 and confirm("12h 두 교대로 나눕니까?")
    start_time = parse_hhmm(get_input("시작 시각", default=backend.default_start_time))
    backend.save_pad_item(PadItem(
        id="", patient_id=patient_id, start_date=start_date or None,
        hours_per_day=hours, start_time=start_time, is_split=is_split,
    ))
    print("PAD가 추가되었습니다.")


def deactivate_pad_item(backend):
    items = show_pad_items(backend)
    raw = get_input("비활성화할 번호")
    if not raw.isdigit() or not 1 <= int(raw) <= len(items):
        print("해당 번호가 없습니다.")
        return
    item = items[int(raw) - 1]
    item.active = False
    backend.save_pad_item(item)
    print("비활성화되었습니다.")
