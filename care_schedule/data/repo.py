import logging
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from care_schedule.data.data_manager import seed_professionals
from care_schedule.exceptions import StorageError, ValidationError
from care_schedule.models.pad import PadItem
from care_schedule.models.professional import Professional
from care_schedule.models.schedule import Assignment, MonthSchedule, UpsertSchedulePayload

logger = logging.getLogger(__name__)


class Repo:
    """SQLite 저장소 (JsonRepo와 같은 메서드)"""

    def __init__(self, db_path: str = "schedule.sqlite3", default_start_time: str = "07:00"):
        self.db_path = db_path
        self.default_start_time = default_start_time
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._create_tables()

    def _create_tables(self):
        cur = self.conn.cursor()
        cur.execute("""
        CREATE TABLE IF NOT EXISTS professionals(
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            social_name TEXT,
            role TEXT,
            profession_code TEXT,
            active INTEGER NOT NULL DEFAULT 1,
            email TEXT,
            phone TEXT,
            color TEXT,
            is_substitute INTEGER NOT NULL DEFAULT 0
        );
        """)
        cur.execute("""
        CREATE TABLE IF NOT EXISTS pad_items(
            id TEXT PRIMARY KEY,
            pad_id TEXT,
            patient_id TEXT NOT NULL,
            start_date TEXT,             -- YYYY-MM-DD
            hours_per_day INTEGER NOT NULL DEFAULT 24,
            start_time TEXT NOT NULL DEFAULT '07:00',
            is_split INTEGER NOT NULL DEFAULT 0,
            active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT
        );
        """)
        cur.execute("""
        CREATE TABLE IF NOT EXISTS shifts(
            id TEXT PRIMARY KEY,
            patient_id TEXT NOT NULL,
            pad_item_id TEXT,
            date TEXT NOT NULL,          -- YYYY-MM-DD
            slot TEXT,
            professional_id TEXT NOT NULL,
            start_at TEXT NOT NULL,      -- YYYY-MM-DDTHH:MM:SS
            end_at TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'planned',
            UNIQUE(patient_id, start_at, professional_id),
            FOREIGN KEY(professional_id) REFERENCES professionals(id) ON DELETE CASCADE
        );
        """)
        cur.execute("CREATE INDEX IF NOT EXISTS ix_shifts_patient_start ON shifts(patient_id, start_at);")
        cur.execute("CREATE INDEX IF NOT EXISTS ix_pad_items_patient ON pad_items(patient_id);")
        self.conn.commit()

    def close(self):
        self.conn.close()

    # --- Professionals ---
    def list_professionals(self, active_only: bool = False) -> List[Professional]:
        sql = "SELECT * FROM professionals"
        if active_only:
            sql += " WHERE active=1"
        rows = self.conn.execute(sql + " ORDER BY COALESCE(social_name, name) COLLATE NOCASE;").fetchall()
        return [Professional.from_dict(dict(r)) for r in rows]

    def save_professional(self, prof: Professional) -> Professional:
        if not prof.id:
            prof.id = uuid.uuid4().hex
        d = prof.to_dict()
        d["active"] = int(prof.active)
        d["is_substitute"] = int(prof.is_substitute)
        with self.conn:
            self.conn.execute("""
            INSERT INTO professionals(id, name, social_name, role, profession_code, active, email, phone, color, is_substitute)
            VALUES(:id, :name, :social_name, :role, :profession_code, :active, :email, :phone, :color, :is_substitute)
            ON CONFLICT(id) DO UPDATE SET
                name=excluded.name, social_name=excluded.social_name, role=excluded.role,
                profession_code=excluded.profession_code, active=excluded.active, email=excluded.email,
                phone=excluded.phone, color=excluded.color, is_substitute=excluded.is_substitute;
            """, d)
        return prof

    def delete_professional(self, prof_id: str) -> bool:
        with self.conn:
            cur = self.conn.execute("DELETE FROM professionals WHERE id=?", (prof_id,))
        return cur.rowcount > 0

    # --- PAD items ---
    def list_pad_items(self, patient_id: Optional[str] = None) -> List[PadItem]:
        if patient_id is None:
            rows = self.conn.execute("SELECT * FROM pad_items ORDER BY created_at;").fetchall()
        else:
            rows = self.conn.execute(
                "SELECT * FROM pad_items WHERE patient_id=? ORDER BY created_at;", (patient_id,)).fetchall()
        return [PadItem.from_dict(dict(r)) for r in rows]

    def save_pad_item(self, item: PadItem) -> PadItem:
        if not item.id:
            item.id = uuid.uuid4().hex
        if not item.created_at:
            item.created_at = datetime.now().isoformat(timespec="seconds")
        d = item.to_dict()
        d["is_split"] = int(item.is_split)
        d["active"] = int(item.active)
        with self.conn:
            self.conn.execute("""
            INSERT INTO pad_items(id, pad_id, patient_id, start_date, hours_per_day, start_time, is_split, active, created_at)
            VALUES(:id, :pad_id, :patient_id, :start_date, :hours_per_day, :start_time, :is_split, :active, :created_at)
            ON CONFLICT(id) DO UPDATE SET
                pad_id=excluded.pad_id, patient_id=excluded.patient_id, start_date=excluded.start_date,
                hours_per_day=excluded.hours_per_day, start_time=excluded.start_time,
                is_split=excluded.is_split, active=excluded.active;
            """, d)
        return item

    def active_pad_item(self, patient_id: str) -> Optional[PadItem]:
        row = self.conn.execute("""
            SELECT * FROM pad_items
            WHERE patient_id=? AND active=1
            ORDER BY created_at DESC
            LIMIT 1
        """, (patient_id,)).fetchone()
        return PadItem.from_dict(dict(row)) if row else None

    def patient_ids(self) -> List[str]:
        rows = self.conn.execute("SELECT DISTINCT patient_id FROM pad_items ORDER BY patient_id;").fetchall()
        return [r["patient_id"] for r in rows]

    # --- Shifts ---
    def load_month(self, patient_id: str, year: int, month: int) -> MonthSchedule:
        pad = self.active_pad_item(patient_id)
        yyyymm = f"{year:04d}-{month:02d}"
        rows = self.conn.execute("""
            SELECT id, date, slot, professional_id, start_at, end_at
            FROM shifts
            WHERE patient_id=? AND substr(start_at,1,7)=?
            ORDER BY start_at
        """, (patient_id, yyyymm)).fetchall()
        return MonthSchedule(
            patient_id=patient_id,
            year=year,
            month=month,
            regime=pad.regime if pad else "24h",
            start_time=pad.start_time if pad else self.default_start_time,
            pad_id=pad.pad_id if pad else None,
            pad_item_id=pad.id if pad else None,
            start_date=pad.start_date if pad else None,
            assignments=[Assignment.from_dict(dict(r)) for r in rows],
        )

    def save_month(self, payload: UpsertSchedulePayload) -> int:
        """월 단위 교체를 한 트랜잭션으로 처리"""
        if not payload.pad_item_id:
            raise ValidationError("pad_item_id 가 필요합니다.")
        yyyymm = f"{payload.year:04d}-{payload.month:02d}"
        try:
            with self.conn:
                self.conn.execute(
                    "DELETE FROM shifts WHERE patient_id=? AND substr(start_at,1,7)=?",
                    (payload.patient_id, yyyymm))
                self.conn.executemany("""
                    INSERT INTO shifts(id, patient_id, pad_item_id, date, slot, professional_id, start_at, end_at, status)
                    VALUES(?,?,?,?,?,?,?,?,'planned')
                """, [
                    (a.id or uuid.uuid4().hex, payload.patient_id, payload.pad_item_id, a.date, a.slot,
                     a.professional_id, a.start_at, a.end_at)
                    for a in payload.assignments
                ])
        except sqlite3.IntegrityError as e:
            raise StorageError(f"스케줄 저장 실패: {e}") from e
        logger.info("saved %d shift(s) patient=%s %s", len(payload.assignments), payload.patient_id, yyyymm)
        return len(payload.assignments)

    # 간단 시드
    def seed_if_empty(self):
        if self.list_professionals():
            return
        for prof in seed_professionals():
            self.save_professional(prof)
