import re

from care_schedule.exceptions import ValidationError

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_id_list(text: str) -> list[str]:
    """
    'a, b,a' -> ['a', 'b']
    빈문자열 -> []
    중복 제거, 입력 순서 유지
    """
    if not text or not text.strip():
        return []
    seen = set()
    out = []
    for tok in text.split(","):
        tok = tok.strip()
        if not tok:
            continue
        if tok not in seen:
            seen.add(tok)
            out.append(tok)
    return out


def parse_weekdays(text: str) -> list[int]:
    """
    '1,2,3' -> [1, 2, 3]  (0=일 ... 6=토)
    범위 밖/숫자 아닌 토큰은 무시
    """
    out = set()
    for tok in (text or "").split(","):
        tok = tok.strip()
        if not tok.isdigit():
            continue
        n = int(tok)
        if 0 <= n <= 6:
            out.add(n)
    return sorted(out)


def parse_hhmm(text: str) -> str:
    """'7:00' -> '07:00'"""
    m = _HHMM.match((text or "").strip())
    if not m:
        raise ValidationError(f"시간 형식이 올바르지 않습니다: {text!r} (예: 07:00)")
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        raise ValidationError(f"시간 범위를 벗어났습니다: {text!r}")
    return f"{hour:02d}:{minute:02d}"


def parse_year_month(text: str) -> tuple[int, int]:
    """'2025-08' -> (2025, 8)"""
    m = re.match(r"^(\d{4})-(\d{1,2})$", (text or "").strip())
    if not m or not 1 <= int(m.group(2)) <= 12:
        raise ValidationError(f"형식이 올바르지 않습니다: {text!r} (예: 2025-08)")
    return int(m.group(1)), int(m.group(2))
