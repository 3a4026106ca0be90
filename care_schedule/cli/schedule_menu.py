# cli/schedule_menu.py
from care_schedule.exceptions import CancelAction, GoBackAction, ScheduleError, UnsavedChangesError
from care_schedule.models.schedule import BATCH_PRESETS, SLOT_LABELS, SLOTS_BY_REGIME, AutoFillConfig, assignment_key
from care_schedule.utils.date_helper import (
    day_of_week, days_in_month, make_ts, month_week_index_map, ts_hhmm, week_first_day,
)
from care_schedule.utils.input_handler import confirm, get_input, get_int
from care_schedule.utils.parse_utils import parse_hhmm, parse_id_list, parse_weekdays

WEEKDAYS = ("일", "월", "화", "수", "목", "금", "토")


def schedule_menu(editor):
    store = editor.store
    while True:
        dirty = " *미저장" if store.is_dirty else ""
        print(f"\n[월간 스케줄] {store.patient_id} | {store.year}-{store.month:02d} | {store.regime}{dirty}")
        print("1. 스케줄 보기")
        print("2. 배정 (slot 기본 시간)")
        print("3. 배정 (시간 지정)")
        print("4. 배정 삭제")
        print("5. 이동/복사")
        print("6. 교환")
        print("7. 일괄 배정")
        print("8. 자동 채우기")
        print("9. 주 복제")
        print("10. 월 전체 비우기")
        print("11. 되돌리기 / 12. 다시 실행")
        print("13. 요약")
        print("14. 저장")
        print("15. 이전 달 / 16. 다음 달")
        print("0. 메인 메뉴로")

        try:
            choice = get_input("선택")
            if choice == "1":
                show_grid(editor)
            elif choice == "2":
                assign_slot(editor)
            elif choice == "3":
                assign_custom(editor)
            elif choice == "4":
                remove_menu(editor)
            elif choice == "5":
                move_or_copy(editor)
            elif choice == "6":
                swap_menu(editor)
            elif choice == "7":
                batch_menu(editor)
            elif choice == "8":
                autofill_menu(editor)
            elif choice == "9":
                start = _ask_week_start(editor)
                store.duplicate_week(start)
                print("주 복제 완료.")
            elif choice == "10":
                if confirm("이 달의 모든 배정을 비우시겠습니까?"):
                    store.clear_month()
                    print("비웠습니다. (잠금 날짜 제외)")
            elif choice == "11":
                print("되돌렸습니다." if store.undo() else "되돌릴 작업이 없습니다.")
            elif choice == "12":
                print("다시 실행했습니다." if store.redo() else "다시 실행할 작업이 없습니다.")
            elif choice == "13":
                show_summary(editor)
            elif choice == "14":
                print("저장되었습니다." if editor.save() else "변경 사항이 없습니다.")
            elif choice in ("15", "16"):
                _navigate(editor, forward=(choice == "16"))
            elif choice == "0":
                if store.is_dirty and not confirm("저장하지 않은 변경 사항이 있습니다. 나가시겠습니까?"):
                    continue
                break
            else:
                print("잘못된 선택.")
        except ScheduleError as e:
            print(f"[{e.code}] {e.message}")
        except (IndexError, ValueError) as e:
            print(f"입력 오류: {e}")
        except GoBackAction:
            print("이전 메뉴로 이동")
        except CancelAction:
            print("메인 메뉴로 이동")
            return


def _navigate(editor, forward: bool):
    move = editor.next_month if forward else editor.previous_month
    try:
        move()
    except UnsavedChangesError:
        if not confirm("저장하지 않은 변경 사항이 있습니다. 버리고 이동할까요?"):
            return
        move(discard=True)


def _ask_date(editor, label: str) -> str:
    store = editor.store
    raw = get_input(f"{label} (일 또는 YYYY-MM-DD)")
    if raw.isdigit():
        raw = f"{store.year:04d}-{store.month:02d}-{int(raw):02d}"
    if raw not in days_in_month(store.year, store.month):
        raise ValueError(f"{raw} 는 {store.year}-{store.month:02d} 날짜가 아닙니다.")
    return raw


def _ask_week_start(editor) -> str:
    """주차 번호(1..N) 또는 YYYY-MM-DD"""
    store = editor.store
    weeks = max(month_week_index_map(store.year, store.month).values())
    raw = get_input(f"복제할 주 (1~{weeks}주차 또는 YYYY-MM-DD)")
    if raw.isdigit():
        return week_first_day(store.year, store.month, int(raw))
    if raw not in days_in_month(store.year, store.month):
        raise ValueError(f"{raw} 는 {store.year}-{store.month:02d} 날짜가 아닙니다.")
    return raw


def _ask_slot(editor, allow_all: bool = False) -> str | None:
    slots = SLOTS_BY_REGIME[editor.store.regime]
    if len(slots) == 1 and not allow_all:
        return slots[0]
    opts = ", ".join(f"{i + 1}={SLOT_LABELS[s]}" for i, s in enumerate(slots))
    if allow_all:
        opts += ", 0=전체"
    n = get_int(f"slot ({opts})", default=0 if allow_all else 1, minimum=0)
    if n == 0 and allow_all:
        return None
    if not 1 <= n <= len(slots):
        raise ValueError("slot 번호가 올바르지 않습니다.")
    return slots[n - 1]


def _ask_professional(editor, date: str | None = None, slot: str | None = None) -> str:
    if date and slot:
        options = editor.professional_options(date, slot)
        for i, o in enumerate(options, start=1):
            print(f"{i}. {o.label}")
        profs = [o.professional for o in options]
    else:
        profs = editor.professionals()
        for i, p in enumerate(profs, start=1):
            print(f"{i}. {p.display_name} ({p.role or '-'})")
    if not profs:
        raise ValueError("등록된 직원이 없습니다.")
    n = get_int("직원 번호", minimum=1)
    if n > len(profs):
        raise ValueError("직원 번호가 올바르지 않습니다.")
    return profs[n - 1].id


def _ask_index(editor, date: str, slot: str) -> int:
    day = editor.store.slot_assignments(date, slot)
    if not day:
        raise ValueError("해당 slot에 배정이 없습니다.")
    if len(day) == 1:
        return 0
    for i, a in enumerate(day, start=1):
        print(f"{i}. {editor.professional_name(a.professional_id)} {ts_hhmm(a.start_at)}~{ts_hhmm(a.end_at)}")
    return get_int("번호", minimum=1) - 1


def show_grid(editor):
    store = editor.store
    slots = SLOTS_BY_REGIME[store.regime]
    print(f"\n날짜          " + "  ".join(f"{SLOT_LABELS[s]:<14}" for s in slots))
    print("-" * (14 + 16 * len(slots)))
    weeks = month_week_index_map(store.year, store.month)
    current = None
    for d in days_in_month(store.year, store.month):
        if weeks[d] != current:
            current = weeks[d]
            print(f"-- {current}주차 --")
        cells = []
        for s in slots:
            day = store.assignments.get(assignment_key(d, s), [])
            names = ",".join(editor.professional_name(a.professional_id) for a in day) or "-"
            cells.append(f"{names:<14}")
        lock = "🔒" if store.is_locked(d) else "  "
        sel = "✔" if d in store.selected_dates else " "
        print(f"{d[5:]}({WEEKDAYS[day_of_week(d)]}){lock}{sel} " + "  ".join(cells))


def assign_slot(editor):
    date = _ask_date(editor, "날짜")
    slot = _ask_slot(editor)
    pid = _ask_professional(editor, date, slot)
    editor.store.assign_professional(date, slot, pid)
    print("배정되었습니다.")


def assign_custom(editor):
    store = editor.store
    date = _ask_date(editor, "날짜")
    slot = _ask_slot(editor)
    pid = _ask_professional(editor, date, slot)
    start = parse_hhmm(get_input("시작 시각(HH:MM)", default=store.start_time))
    end = parse_hhmm(get_input("종료 시각(HH:MM)"))
    next_day = end <= start or confirm("종료가 다음날입니까?")
    store.add_assignment(date, slot, pid, make_ts(date, start), make_ts(date, end, 1 if next_day else 0))
    print("배정되었습니다.")


def remove_menu(editor):
    date = _ask_date(editor, "날짜")
    slot = _ask_slot(editor)
    idx = _ask_index(editor, date, slot)
    editor.store.remove_assignment(date, slot, idx)
    print("삭제되었습니다.")


def move_or_copy(editor):
    src = _ask_date(editor, "원본 날짜")
    slot = _ask_slot(editor)
    idx = _ask_index(editor, src, slot)
    dst = _ask_date(editor, "대상 날짜")
    if confirm("복사하시겠습니까? (N = 이동)"):
        editor.store.copy_assignment(src, slot, idx, dst)
        print("복사되었습니다.")
    else:
        editor.store.move_assignment(src, slot, idx, dst)
        print("이동되었습니다.")


def swap_menu(editor):
    store = editor.store
    mode = get_input("1=하루 전체 교환, 2=근무자 교환", default="1")
    a = _ask_date(editor, "날짜 A")
    if mode == "1":
        b = _ask_date(editor, "날짜 B")
        names_a = ", ".join(editor.professional_name(x.professional_id) for x in store.day_assignments(a)) or "비어 있음"
        names_b = ", ".join(editor.professional_name(x.professional_id) for x in store.day_assignments(b)) or "비어 있음"
        print(f"{a}: {names_a}\n{b}: {names_b}")
        if confirm("두 날짜의 근무자를 교환하시겠습니까?"):
            store.swap_day_assignments(a, b)
            print("교환되었습니다.")
        return
    slot_a = _ask_slot(editor)
    idx_a = _ask_index(editor, a, slot_a)
    b = _ask_date(editor, "날짜 B")
    slot_b = _ask_slot(editor)
    idx_b = _ask_index(editor, b, slot_b)
    store.swap_assignments(assignment_key(a, slot_a), idx_a, assignment_key(b, slot_b), idx_b)
    print("교환되었습니다.")


def batch_menu(editor):
    store = editor.store
    print("날짜 선택: " + ", ".join(f"{i + 1}={p}" for i, p in enumerate(BATCH_PRESETS)) + ", 0=직접 입력")
    n = get_int("선택", default=0, minimum=0)
    if n == 0:
        days = parse_id_list(get_input("날짜(일, 쉼표 구분)"))
        month_days = days_in_month(store.year, store.month)
        store.select_date_range(
            f"{store.year:04d}-{store.month:02d}-{int(d):02d}" for d in days
            if d.isdigit() and 1 <= int(d) <= len(month_days)
        )
    elif n <= len(BATCH_PRESETS):
        store.apply_batch_preset(BATCH_PRESETS[n - 1])
    else:
        raise ValueError("선택이 올바르지 않습니다.")
    if not store.selected_dates:
        print("선택된 날짜가 없습니다.")
        return
    print(f"선택: {len(store.selected_dates)}일 ({', '.join(sorted(d[8:] for d in store.selected_dates))})")
    slot = _ask_slot(editor, allow_all=True)
    pid = _ask_professional(editor)
    skipped = store.apply_batch_assignment(pid, slot)
    print("일괄 배정 완료." + (f" (충돌로 건너뜀: {', '.join(skipped)})" if skipped else ""))


def autofill_menu(editor):
    store = editor.store
    profs = editor.professionals()
    for i, p in enumerate(profs, start=1):
        print(f"{i}. {p.display_name}{' (대체)' if p.is_substitute else ''}")
    picks = parse_id_list(get_input("로테이션 순서 (번호, 쉼표 구분)"))
    rotation = [profs[int(t) - 1].id for t in picks if t.isdigit() and 1 <= int(t) <= len(profs)]
    if not rotation:
        print("로테이션이 비어 있습니다.")
        return
    sub_raw = get_input("대체 인력 번호 (없으면 빈칸)", allow_empty=True)
    substitute = profs[int(sub_raw) - 1].id if sub_raw.isdigit() and 1 <= int(sub_raw) <= len(profs) else None
    per = get_int("1인당 연속 일수", default=1, minimum=1)
    weekdays = parse_weekdays(get_input("요일 (0=일..6=토)", default="0,1,2,3,4,5,6"))
    only_slot = _ask_slot(editor, allow_all=True) if len(SLOTS_BY_REGIME[store.regime]) > 1 else None

    preview = store.generate_autofill_preview(AutoFillConfig(
        rotation=rotation, substitute_id=substitute, days_per_professional=per, weekdays=weekdays,
        slot=only_slot,
    ))
    slots = [only_slot] if only_slot else SLOTS_BY_REGIME[store.regime]
    print("\n[미리보기]")
    for d in days_in_month(store.year, store.month):
        names = [editor.professional_name(preview.professional_for(d, s) or "-") for s in slots]
        print(f"{d[5:]}({WEEKDAYS[day_of_week(d)]})  " + " / ".join(names))
    if preview.skipped:
        print(f"충돌로 비운 근무: {len(preview.skipped)}건")
    if confirm("적용하시겠습니까?"):
        store.apply_autofill(preview)
        print("자동 채우기 적용 완료.")


def show_summary(editor):
    s = editor.summary()
    print(f"\n채워진 날: {s['filled_days']} / 남은 날: {s['pending_days']} (총 {s['total_days']}일)")
    for row in s["rows"]:
        print(f"  {row.professional_name:<20} {row.total_shifts}회")
