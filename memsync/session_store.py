"""
Session Store
SQLite storage for observations captured during memory sessions.
"""

import sqlite3
import json
import time
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any, Sequence, Tuple
from pathlib import Path
from memsync.models import GetObservationsOptions, ObservationRecord, OrderBy
from memsync.logging import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "id, memory_session_id, project, text, type, title, subtitle, facts, narrative, "
    "concepts, files_read, files_modified, prompt_number, discovery_tokens, "
    "created_at, created_at_epoch"
)

class SessionStore:
    """Manages the observations table."""

    def __init__(self, db_path: str = "memsync.db"):
        self.db_path = Path(db_path)
        self._init_database()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_database(self):
        """Initialize the observations schema."""
        try:
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS observations (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        memory_session_id TEXT NOT NULL,
                        project TEXT NOT NULL,
                        text TEXT,
                        type TEXT NOT NULL,
                        title TEXT,
                        subtitle TEXT,
                        facts TEXT,  -- JSON array
                        narrative TEXT,
                        concepts TEXT,  -- JSON array
                        files_read TEXT,  -- JSON array
                        files_modified TEXT,  -- JSON array
                        prompt_number INTEGER,
                        discovery_tokens INTEGER DEFAULT 0,
                        created_at TEXT NOT NULL,
                        created_at_epoch INTEGER NOT NULL
                    )
                """)

                conn.execute("""
                    CREATE INDEX IF NOT EXISTS idx_observations_session
                    ON observations(memory_session_id)
                """)

                conn.execute("""
                    CREATE INDEX IF NOT EXISTS idx_observations_project
                    ON observations(project)
                """)

                conn.execute("""
                    CREATE INDEX IF NOT EXISTS idx_observations_created
                    ON observations(created_at_epoch DESC)
                """)

                conn.commit()
                logger.info(f"Session store initialized at {self.db_path}")

        except sqlite3.Error as e:
            logger.error(f"Failed to initialize session store: {e}")
            raise

    def store_observation(
        self,
        memory_session_id: str,
        project: str,
        observation: Dict[str, Any],
        prompt_number: Optional[int] = None,
        discovery_tokens: int = 0,
        created_at_epoch: Optional[int] = None,
    ) -> Tuple[int, int]:
        """Insert one observation and return ``(id, created_at_epoch)``.

        List fields in ``observation`` are stored as JSON text.
        """
        epoch_ms = created_at_epoch if created_at_epoch is not None else int(time.time() * 1000)
        created_at = datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).isoformat()

        with self._connect() as conn:
            cursor = conn.execute("""
                INSERT INTO observations
                (memory_session_id, project, text, type, title, subtitle, facts, narrative,
                 concepts, files_read, files_modified, prompt_number, discovery_tokens,
                 created_at, created_at_epoch)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                memory_session_id,
                project,
                observation.get("text"),
                observation.get("type", "discovery"),
                observation.get("title"),
                observation.get("subtitle"),
                json.dumps(observation.get("facts") or []),
                observation.get("narrative"),
                json.dumps(observation.get("concepts") or []),
                json.dumps(observation.get("files_read") or []),
                json.dumps(observation.get("files_modified") or []),
                prompt_number,
                discovery_tokens,
                created_at,
                epoch_ms,
            ))
            conn.commit()
            return cursor.lastrowid, epoch_ms

    def get_observation_by_id(self, observation_id: int) -> Optional[ObservationRecord]:
        """Get a single observation by id."""
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM observations WHERE id = ?", (observation_id,)
            ).fetchone()
            return self._row_to_observation(row) if row else None

    def get_observations_by_ids(
        self,
        ids: Sequence[int],
        options: Optional[GetObservationsOptions] = None,
    ) -> List[ObservationRecord]:
        """Fetch every observation whose id is in ``ids`` with one query.

        Missing ids are simply absent from the result.
        """
        if not ids:
            return []

        options = options or GetObservationsOptions()
        # Duplicates collapse in the IN clause
        params: List[Any] = list(ids)
        where = [f"id IN ({', '.join('?' for _ in ids)})"]

        if options.project:
            where.append("project = ?")
            params.append(options.project)

        if options.type:
            types = [options.type] if isinstance(options.type, str) else list(options.type)
            where.append(f"type IN ({', '.join('?' for _ in types)})")
            params.extend(types)

        direction = "ASC" if OrderBy(options.order_by) == OrderBy.DATE_ASC else "DESC"
        sql = (
            f"SELECT {_COLUMNS} FROM observations "
            f"WHERE {' AND '.join(where)} "
            f"ORDER BY created_at_epoch {direction}"
        )

        if options.limit is not None:
            sql += " LIMIT ?"
            params.append(options.limit)

        with self._connect() as conn:
            rows = conn.execute(sql, params).fetchall()

        return [self._row_to_observation(row) for row in rows]

    def count_observations(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM observations").fetchone()[0]

    def _row_to_observation(self, row: sqlite3.Row) -> ObservationRecord:
        return ObservationRecord.from_mapping(dict(row))
