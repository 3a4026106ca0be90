import pytest

from care_schedule.exceptions import ValidationError
from care_schedule.utils.parse_utils import parse_hhmm, parse_id_list, parse_weekdays, parse_year_month


def test_parse_id_list_dedups_in_order():
    assert parse_id_list("b, a,b,, c") == ["b", "a", "c"]
    assert parse_id_list("  ") == []


def test_parse_weekdays_ignores_invalid_tokens():
    assert parse_weekdays("6,1,x,7,1,0") == [0, 1, 6]
    assert parse_weekdays("") == []


def test_parse_hhmm():
    assert parse_hhmm("7:00") == "07:00"
    with pytest.raises(ValidationError):
        parse_hhmm("24:00")
    with pytest.raises(ValidationError):
        parse_hhmm("7h")


def test_parse_year_month():
    assert parse_year_month("2025-08") == (2025, 8)
    with pytest.raises(ValidationError):
        parse_year_month("2025-13")
