import uuid
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from answerlens.database.connection import get_connection
from answerlens.database.models import AnalysisRecord, AnalysisStatus
from answerlens.database.repositories.base import BaseAnalysisRepository

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS analyses (
    id          UUID PRIMARY KEY,
    status      TEXT NOT NULL,
    file_hash   TEXT NOT NULL,
    document    JSONB NOT NULL,
    created_at  TIMESTAMPTZ NOT NULL,
    updated_at  TIMESTAMPTZ NOT NULL
);
CREATE INDEX IF NOT EXISTS analyses_file_hash_status_idx
    ON analyses (file_hash, status);
CREATE INDEX IF NOT EXISTS analyses_created_at_idx
    ON analyses (created_at DESC);
"""


def create_schema(conn: psycopg.Connection[Any]) -> None:
    """Create the analyses table and its indexes if missing."""
    conn.execute(SCHEMA_SQL)
    conn.commit()


class AnalysisRepository(BaseAnalysisRepository):
    """Database operations for the analyses table.

    The full record lives in the ``document`` JSONB column; status and
    file_hash are duplicated into columns for lookups.
    """

    def save(self, record: AnalysisRecord) -> None:
        """Upsert the whole record document."""
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO analyses (id, status, file_hash, document, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s)
                ON CONFLICT (id) DO UPDATE
                SET status = EXCLUDED.status,
                    document = EXCLUDED.document,
                    updated_at = EXCLUDED.updated_at
                """,
                (
                    record.id,
                    record.status.value,
                    record.file_hash,
                    Jsonb(record.to_document()),
                    record.created_at,
                    record.updated_at,
                ),
            )
            conn.commit()

    def find_by_id(self, analysis_id: str) -> AnalysisRecord | None:
        try:
            uuid.UUID(analysis_id)
        except ValueError:
            return None
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    "SELECT document FROM analyses WHERE id = %s",
                    (analysis_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return AnalysisRecord.from_document(row["document"])

    def find_completed_by_hash(self, file_hash: str) -> list[AnalysisRecord]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT document
                    FROM analyses
                    WHERE file_hash = %s AND status = %s
                    ORDER BY created_at DESC
                    """,
                    (file_hash, AnalysisStatus.COMPLETED.value),
                )
                rows = cur.fetchall()

        return [AnalysisRecord.from_document(row["document"]) for row in rows]
