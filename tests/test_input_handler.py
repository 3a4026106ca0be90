import pytest

from care_schedule.exceptions import CancelAction, GoBackAction
from care_schedule.utils.input_handler import confirm, get_input, get_int


def _feed(monkeypatch, *answers):
    it = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(it))


def test_get_input_default_and_retry(monkeypatch):
    _feed(monkeypatch, "")
    assert get_input("월", default="2025-08") == "2025-08"

    _feed(monkeypatch, "", "  p1 ")
    assert get_input("환자") == "p1"


def test_cancel_and_back_words(monkeypatch):
    _feed(monkeypatch, "취소")
    with pytest.raises(CancelAction):
        get_input("선택")

    _feed(monkeypatch, "BACK")
    with pytest.raises(GoBackAction):
        get_input("선택")


def test_get_int_and_confirm(monkeypatch):
    _feed(monkeypatch, "abc", "0", "3")
    assert get_int("번호", minimum=1) == 3

    _feed(monkeypatch, "")
    assert confirm("삭제?") is False
    _feed(monkeypatch, "y")
    assert confirm("삭제?") is True
