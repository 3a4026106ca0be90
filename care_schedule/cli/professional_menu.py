# cli/professional_menu.py
from care_schedule.exceptions import CancelAction, GoBackAction
from care_schedule.models.professional import Professional
from care_schedule.utils.input_handler import confirm, get_input


def professional_menu(backend):
    while True:
        print("\n[직원 관리]")
        print("1. 직원 목록 보기")
        print("2. 직원 추가")
        print("3. 직원 수정")
        print("4. 직원 삭제")
        print("0. 메인 메뉴로")

        try:
            choice = get_input("선택")
            if choice == "1":
                show_professionals(backend)
            elif choice == "2":
                add_professional(backend)
            elif choice == "3":
                edit_professional(backend)
            elif choice == "4":
                delete_professional(backend)
            elif choice == "0":
                break
            else:
                print("잘못된 선택입니다.")
        except GoBackAction:
            print("이전 메뉴로 이동")
        except CancelAction:
            print("메인 메뉴로 이동")
            return


def show_professionals(backend):
    profs = backend.list_professionals()
    print("\n[직원 목록]")
    for i, p in enumerate(profs, start=1):
        flags = []
        if not p.active:
            flags.append("비활성")
        if p.is_substitute:
            flags.append("대체")
        print(f"{i} | {p.display_name} | {p.role or '-'} | {p.phone or '-'} | {','.join(flags)}")
    return profs


def _pick(backend, label: str):
    profs = show_professionals(backend)
    raw = get_input(label)
    if not raw.isdigit() or not 1 <= int(raw) <= len(profs):
        print("해당 번호의 직원이 없습니다.")
        return None
    return profs[int(raw) - 1]


def add_professional(backend):
    name = get_input("이름")
    role = get_input("직무", allow_empty=True)
    phone = get_input("전화", allow_empty=True)
    color = get_input("색상(#RRGGBB)", allow_empty=True)
    substitute = confirm("대체 인력입니까?")
    backend.save_professional(Professional(
        id="", name=name, role=role or None, phone=phone or None,
        color=color or None, is_substitute=substitute,
    ))
    print("직원이 추가되었습니다.")


def edit_professional(backend):
    p = _pick(backend, "수정할 직원 번호")
    if not p:
        return
    p.name = get_input("이름", default=p.name)
    p.role = get_input("직무", default=p.role or "") or None
    p.phone = get_input("전화", default=p.phone or "") or None
    p.color = get_input("색상(#RRGGBB)", default=p.color or "") or None
    p.active = get_input("활성(Y/N)", default="Y" if p.active else "N").upper().startswith("Y")
    p.is_substitute = get_input("대체 인력(Y/N)", default="Y" if p.is_substitute else "N").upper().startswith("Y")
    backend.save_professional(p)
    print("직원 정보가 수정되었습니다.")


def delete_professional(backend):
    p = _pick(backend, "삭제할 직원 번호")
    if not p:
        return
    if confirm(f"[{p.display_name}]을(를) 삭제하시겠습니까?"):
        backend.delete_professional(p.id)
        print("직원이 삭제되었습니다.")
