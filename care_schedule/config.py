import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# 패키지 루트 = .../care_schedule
BASE_DIR = Path(__file__).resolve().parent
DEFAULT_DATA_DIR = BASE_DIR / "data" / "store"

BACKENDS = ("json", "sqlite")


def _get_env(name: str, default: Optional[str] = None, required: bool = False) -> str:
    """
    Get an environment variable. If required=True and missing, raise RuntimeError.
    """
    val = os.getenv(name, default)
    if required and not val:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return val or ""


def _parse_bool(val: Optional[str], default: bool = False) -> bool:
    if val is None:
        return default
    return str(val).strip().lower() in ("1", "true", "yes", "y", "on")


def _parse_int(val: Optional[str], default: int) -> int:
    try:
        s = str(val).strip()
        # Tolerate float-like env values such as "30.0".
        try:
            return int(s)
        except ValueError:
            return int(float(s))
    except (TypeError, ValueError):
        return default


@dataclass
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    backend: str = "json"
    db_path: Optional[Path] = None
    history_limit: int = 50
    start_time: str = "07:00"
    log_level: str = "INFO"
    debug: bool = False

    @property
    def sqlite_path(self) -> Path:
        return self.db_path or (self.data_dir / "schedule.sqlite3")

    @classmethod
    def from_env(cls) -> "Settings":
        data_dir = Path(_get_env("CARE_SCHEDULE_DATA_DIR", str(DEFAULT_DATA_DIR)))
        backend = _get_env("CARE_SCHEDULE_BACKEND", "json").strip().lower()
        if backend not in BACKENDS:
            raise RuntimeError(f"Unsupported CARE_SCHEDULE_BACKEND: {backend!r} (expected one of {BACKENDS})")
        db_path = _get_env("CARE_SCHEDULE_DB_PATH")
        history_limit = max(1, _parse_int(os.getenv("CARE_SCHEDULE_HISTORY_LIMIT"), 50))
        return cls(
            data_dir=data_dir,
            backend=backend,
            db_path=Path(db_path) if db_path else None,
            history_limit=history_limit,
            start_time=_get_env("CARE_SCHEDULE_START_TIME", "07:00"),
            log_level=_get_env("CARE_SCHEDULE_LOG_LEVEL", "INFO").upper(),
            debug=_parse_bool(os.getenv("CARE_SCHEDULE_DEBUG")),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
