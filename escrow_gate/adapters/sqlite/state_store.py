import logging
import sqlite3
from typing import Any

from escrow_gate.domain.entities import (
    Beneficiary,
    EligibilityRecord,
    EngineState,
    Fund,
    FundSettings,
)

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS funds (
    sponsor TEXT PRIMARY KEY,
    balance INTEGER NOT NULL,
    total_distributed INTEGER NOT NULL,
    active INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS fund_settings (
    sponsor TEXT PRIMARY KEY,
    min_score INTEGER NOT NULL,
    payout_amount INTEGER NOT NULL,
    period_length INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS beneficiaries (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    org TEXT NOT NULL,
    program TEXT NOT NULL,
    enrolled_at INTEGER NOT NULL,
    active INTEGER NOT NULL,
    total_received INTEGER NOT NULL,
    last_payout_at INTEGER,
    payout_count INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS eligibility_records (
    beneficiary_id TEXT PRIMARY KEY,
    score INTEGER NOT NULL,
    credit_units INTEGER NOT NULL,
    term INTEGER NOT NULL,
    updated_at INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS attestors (
    identity TEXT PRIMARY KEY
);
CREATE TABLE IF NOT EXISTS verification_records (
    beneficiary_id TEXT NOT NULL,
    period INTEGER NOT NULL,
    position INTEGER NOT NULL,
    attestor TEXT NOT NULL,
    PRIMARY KEY (beneficiary_id, period, attestor)
);
CREATE TABLE IF NOT EXISTS engine_scalars (
    name TEXT PRIMARY KEY,
    value INTEGER NOT NULL
);
"""

_TABLES = (
    "funds",
    "fund_settings",
    "beneficiaries",
    "eligibility_records",
    "attestors",
    "verification_records",
    "engine_scalars",
)

_SCALARS = ("active", "total_funds_created", "total_beneficiaries", "total_distributed")

_VERSION = "version"


class StaleStateError(Exception):
    """The database was written by someone else since this store last read it."""

    def __init__(self, expected: int, found: int) -> None:
        self.expected = expected
        self.found = found
        super().__init__(f"State version is {found}, expected {expected}; reload and retry")


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


class SQLiteStateStore:
    """
    StateStorePort backed by a SQLite file.

    One table per keyed store plus a name/value table for the scalars.
    `save` rewrites every table inside a single transaction, so a crash
    mid-save leaves the previous state intact.

    A version counter in the scalars table guards against lost updates when
    several stores share one file: `save` takes the write lock with
    BEGIN IMMEDIATE and raises StaleStateError if the version moved since
    this store last loaded or saved.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        conn = self._get_conn()
        try:
            conn.executescript(SCHEMA)
            self._version = self._read_version(conn)
        finally:
            conn.close()

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        return conn

    def _read_version(self, conn: sqlite3.Connection) -> int:
        row = conn.execute(
            "SELECT value FROM engine_scalars WHERE name = ?", (_VERSION,)
        ).fetchone()
        return row["value"] if row else 0

    def load(self) -> EngineState:
        conn = self._get_conn()
        try:
            state = EngineState()

            for row in conn.execute("SELECT * FROM funds"):
                state.funds[row["sponsor"]] = Fund(
                    sponsor=row["sponsor"],
                    balance=row["balance"],
                    total_distributed=row["total_distributed"],
                    active=bool(row["active"]),
                )

            for row in conn.execute("SELECT * FROM fund_settings"):
                sponsor = row.pop("sponsor")
                state.fund_settings[sponsor] = FundSettings(**row)

            for row in conn.execute("SELECT * FROM beneficiaries"):
                row["active"] = bool(row["active"])
                state.beneficiaries[row["id"]] = Beneficiary(**row)

            for row in conn.execute("SELECT * FROM eligibility_records"):
                beneficiary_id = row.pop("beneficiary_id")
                state.eligibility_records[beneficiary_id] = EligibilityRecord(**row)

            state.attestors = {
                row["identity"] for row in conn.execute("SELECT identity FROM attestors")
            }

            cursor = conn.execute(
                "SELECT beneficiary_id, period, attestor FROM verification_records "
                "ORDER BY beneficiary_id, period, position"
            )
            for row in cursor:
                periods = state.verification_records.setdefault(row["beneficiary_id"], {})
                periods.setdefault(row["period"], []).append(row["attestor"])

            scalars = {
                row["name"]: row["value"]
                for row in conn.execute("SELECT name, value FROM engine_scalars")
            }
            if scalars:
                state.active = bool(scalars.get("active", 1))
                state.total_funds_created = scalars.get("total_funds_created", 0)
                state.total_beneficiaries = scalars.get("total_beneficiaries", 0)
                state.total_distributed = scalars.get("total_distributed", 0)
            self._version = scalars.get(_VERSION, 0)

            return state
        finally:
            conn.close()

    def save(self, state: EngineState) -> None:
        conn = self._get_conn()
        try:
            with conn:
                conn.execute("BEGIN IMMEDIATE")
                found = self._read_version(conn)
                if found != self._version:
                    raise StaleStateError(self._version, found)

                for table in _TABLES:
                    conn.execute(f"DELETE FROM {table}")

                conn.executemany(
                    "INSERT INTO funds (sponsor, balance, total_distributed, active) "
                    "VALUES (?, ?, ?, ?)",
                    [
                        (f.sponsor, f.balance, f.total_distributed, int(f.active))
                        for f in state.funds.values()
                    ],
                )
                conn.executemany(
                    "INSERT INTO fund_settings "
                    "(sponsor, min_score, payout_amount, period_length) VALUES (?, ?, ?, ?)",
                    [
                        (sponsor, s.min_score, s.payout_amount, s.period_length)
                        for sponsor, s in state.fund_settings.items()
                    ],
                )
                conn.executemany(
                    """
                    INSERT INTO beneficiaries
                    (id, name, org, program, enrolled_at, active,
                     total_received, last_payout_at, payout_count)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            b.id,
                            b.name,
                            b.org,
                            b.program,
                            b.enrolled_at,
                            int(b.active),
                            b.total_received,
                            b.last_payout_at,
                            b.payout_count,
                        )
                        for b in state.beneficiaries.values()
                    ],
                )
                conn.executemany(
                    "INSERT INTO eligibility_records "
                    "(beneficiary_id, score, credit_units, term, updated_at) "
                    "VALUES (?, ?, ?, ?, ?)",
                    [
                        (bid, r.score, r.credit_units, r.term, r.updated_at)
                        for bid, r in state.eligibility_records.items()
                    ],
                )
                conn.executemany(
                    "INSERT INTO attestors (identity) VALUES (?)",
                    [(a,) for a in sorted(state.attestors)],
                )
                conn.executemany(
                    "INSERT INTO verification_records "
                    "(beneficiary_id, period, position, attestor) VALUES (?, ?, ?, ?)",
                    [
                        (bid, period, pos, attestor)
                        for bid, periods in state.verification_records.items()
                        for period, attestors in periods.items()
                        for pos, attestor in enumerate(attestors)
                    ],
                )
                conn.executemany(
                    "INSERT INTO engine_scalars (name, value) VALUES (?, ?)",
                    [(name, int(getattr(state, name))) for name in _SCALARS]
                    + [(_VERSION, found + 1)],
                )
            self._version = found + 1
            logger.debug("Saved engine state to %s", self.db_path)
        finally:
            conn.close()
