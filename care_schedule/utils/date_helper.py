import calendar
from datetime import date, datetime, timedelta

DATE_FMT = "%Y-%m-%d"
TS_FMT = "%Y-%m-%dT%H:%M:%S"


def to_date(date_key: str) -> date:
    return datetime.strptime(date_key, DATE_FMT).date()


def date_key(d: date) -> str:
    return d.strftime(DATE_FMT)


def days_in_month(year: int, month: int) -> list[str]:
    """해당 월의 모든 날짜 'YYYY-MM-DD' 리스트 (1일 ~ 말일)"""
    last = calendar.monthrange(year, month)[1]
    return [f"{year:04d}-{month:02d}-{d:02d}" for d in range(1, last + 1)]


def day_of_week(date_key_: str) -> int:
    """
    요일 번호: 0=일, 1=월 ... 6=토
    (파이썬 weekday()는 0=월..6=일 → 일요일 시작으로 변환)
    """
    return (to_date(date_key_).weekday() + 1) % 7


def is_date_locked(date_key_: str, min_editable_date: str | None) -> bool:
    # 'YYYY-MM-DD' 문자열은 사전순 = 날짜순
    return bool(min_editable_date) and date_key_ < min_editable_date


def parse_ts(value) -> datetime:
    """
    ISO 8601 → naive 로컬 datetime.
    오프셋이 붙은 값(서버 timestamptz, 'Z')은 로컬 시간으로 바꾼 뒤 tzinfo 제거.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).strip())
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def format_ts(dt: datetime) -> str:
    return dt.strftime(TS_FMT)


def normalize_ts(value) -> str:
    return format_ts(parse_ts(value))


def make_ts(date_key_: str, hhmm: str, day_offset: int = 0) -> str:
    """날짜 + 'HH:MM' (+ 일수 오프셋) → ISO 문자열. 24시 이상은 다음날로 넘어감"""
    hour, minute = (int(x) for x in hhmm.split(":"))
    base = datetime.strptime(date_key_, DATE_FMT)
    return format_ts(base + timedelta(days=day_offset, hours=hour, minutes=minute))


def day_diff(from_date: str, to_date_: str) -> int:
    return (to_date(to_date_) - to_date(from_date)).days


def shift_ts(ts: str, days: int) -> str:
    return format_ts(parse_ts(ts) + timedelta(days=days))


def ts_hhmm(ts: str) -> str:
    return parse_ts(ts).strftime("%H:%M")


def week_start(date_key_: str) -> str:
    """해당 날짜가 속한 주의 일요일"""
    d = to_date(date_key_)
    return date_key(d - timedelta(days=day_of_week(date_key_)))


def week_dates(date_key_: str) -> list[str]:
    sunday = to_date(week_start(date_key_))
    return [date_key(sunday + timedelta(days=i)) for i in range(7)]


def month_week_index_map(year: int, month: int) -> dict[str, int]:
    """날짜 → 주차(1..N), 일요일 시작. 1일이 속한 주가 1주차 (2025-08: 01~02 = 1주차, 31 = 6주차)"""
    days = days_in_month(year, month)
    offset = day_of_week(days[0])
    return {d: (int(d[8:10]) - 1 + offset) // 7 + 1 for d in days}


def week_first_day(year: int, month: int, week: int) -> str:
    """해당 월 week 주차의 첫 날짜 (월 경계 안에서)"""
    days = [d for d, w in month_week_index_map(year, month).items() if w == week]
    if not days:
        raise ValueError(f"{year}-{month:02d} 에 {week}주차가 없습니다.")
    return days[0]


def prev_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1
