"""
RoundStore - PostgreSQL storage for rounds and hole results.

Uses psycopg2 for PostgreSQL connections with connection pooling.
"""

import os
import threading
from typing import List, Optional, Protocol, Sequence
from uuid import UUID

import psycopg2
from psycopg2 import pool
from psycopg2.extras import RealDictCursor, execute_values

from disc_tracker.models.round import HoleResult, NewHoleResult, NewRound, Round


ROUND_COLUMNS = (
    "user_id", "course_name", "layout_name", "start_time", "end_time",
    "total_strokes", "score_vs_par", "round_rating", "holes_count",
    "source", "source_ref",
)

HOLE_COLUMNS = (
    "round_id", "play_order", "hole_label", "par", "strokes", "ob", "notes",
)


class RoundRepository(Protocol):
    """
    Persistence collaborator used by the round materializer.
    Why: The two writes are independent; no transaction spans them.
    """

    def insert_round(self, new_round: NewRound) -> Round:
        ...

    def insert_hole_results(self, round_id: UUID, holes: Sequence[NewHoleResult]) -> int:
        ...


class RoundStore:
    """
    PostgreSQL storage for rounds.
    Why: Persist rounds across sessions for history and stats.
    """

    def __init__(self, connection_string: Optional[str] = None):
        """
        Initialize store with database connection.

        Args:
            connection_string: PostgreSQL connection string.
                             Defaults to DATABASE_URL env var.
        """
        self.connection_string = connection_string or os.getenv('DATABASE_URL')
        self._pool: Optional[pool.ThreadedConnectionPool] = None
        self._pool_lock = threading.Lock()

    def _get_connection(self):
        """Get a connection from the pool."""
        with self._pool_lock:
            if not self._pool:
                # Shared by FastAPI threadpool workers
                self._pool = pool.ThreadedConnectionPool(
                    1, 10,  # min 1, max 10 connections
                    self.connection_string
                )
            conn_pool = self._pool
        return conn_pool.getconn()

    def _release_connection(self, conn):
        """Return connection to pool."""
        if self._pool:
            self._pool.putconn(conn)

    def init_schema(self) -> None:
        """Create the rounds and round_hole_results tables if they don't exist."""
        conn = self._get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("""
                    CREATE EXTENSION IF NOT EXISTS pgcrypto;

                    CREATE TABLE IF NOT EXISTS rounds (
                        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                        user_id TEXT NOT NULL,
                        course_name TEXT NOT NULL,
                        layout_name TEXT,
                        start_time TIMESTAMP,
                        end_time TIMESTAMP,
                        total_strokes INTEGER,
                        score_vs_par INTEGER,
                        round_rating NUMERIC,
                        holes_count INTEGER,
                        source TEXT NOT NULL DEFAULT 'manual',
                        source_ref TEXT,
                        created_at TIMESTAMP NOT NULL DEFAULT (now() AT TIME ZONE 'utc')
                    );

                    CREATE INDEX IF NOT EXISTS idx_rounds_user_start
                    ON rounds(user_id, start_time DESC);

                    CREATE TABLE IF NOT EXISTS round_hole_results (
                        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                        round_id UUID NOT NULL REFERENCES rounds(id) ON DELETE CASCADE,
                        play_order INTEGER NOT NULL,
                        hole_label TEXT NOT NULL,
                        par INTEGER,
                        strokes INTEGER NOT NULL,
                        ob BOOLEAN NOT NULL DEFAULT FALSE,
                        notes TEXT NOT NULL DEFAULT ''
                    );

                    CREATE INDEX IF NOT EXISTS idx_hole_results_round
                    ON round_hole_results(round_id, play_order);
                """)
                conn.commit()
        finally:
            self._release_connection(conn)

    def insert_round(self, new_round: NewRound) -> Round:
        """
        Insert a round and return the stored row.

        Args:
            new_round: Round payload to insert

        Returns:
            Round with database-generated id and created_at
        """
        conn = self._get_connection()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(
                    f"""
                    INSERT INTO rounds ({", ".join(ROUND_COLUMNS)})
                    VALUES ({", ".join(["%s"] * len(ROUND_COLUMNS))})
                    RETURNING *
                    """,
                    tuple(getattr(new_round, col) for col in ROUND_COLUMNS),
                )
                row = cur.fetchone()
            conn.commit()
            return Round(**row)
        except psycopg2.Error:
            conn.rollback()
            raise
        finally:
            self._release_connection(conn)

    def insert_hole_results(self, round_id: UUID, holes: Sequence[NewHoleResult]) -> int:
        """
        Batch insert hole results for a round in one statement.

        Args:
            round_id: Parent round id
            holes: Hole results to insert

        Returns:
            Number of rows inserted
        """
        if not holes:
            return 0

        rows = [
            (str(round_id), h.play_order, h.hole_label, h.par, h.strokes, h.ob, h.notes)
            for h in holes
        ]
        conn = self._get_connection()
        try:
            with conn.cursor() as cur:
                execute_values(
                    cur,
                    f"INSERT INTO round_hole_results ({', '.join(HOLE_COLUMNS)}) VALUES %s",
                    rows,
                )
            conn.commit()
            return len(rows)
        except psycopg2.Error:
            conn.rollback()
            raise
        finally:
            self._release_connection(conn)

    def list_rounds(self, user_id: str) -> List[Round]:
        """
        Retrieve all rounds for a user, newest first.

        Args:
            user_id: Owning user

        Returns:
            Rounds ordered by start_time then created_at, descending
        """
        conn = self._get_connection()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    SELECT * FROM rounds
                    WHERE user_id = %s
                    ORDER BY start_time DESC NULLS LAST, created_at DESC
                """, (user_id,))
                return [Round(**row) for row in cur.fetchall()]
        finally:
            self._release_connection(conn)

    def get_round(self, round_id: UUID) -> Optional[Round]:
        """
        Retrieve a round by ID.

        Returns:
            Round if found, None otherwise
        """
        conn = self._get_connection()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("SELECT * FROM rounds WHERE id = %s", (str(round_id),))
                row = cur.fetchone()
                return Round(**row) if row else None
        finally:
            self._release_connection(conn)

    def list_hole_results(self, round_id: UUID) -> List[HoleResult]:
        """Retrieve a round's hole results in play order."""
        conn = self._get_connection()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    SELECT * FROM round_hole_results
                    WHERE round_id = %s
                    ORDER BY play_order
                """, (str(round_id),))
                return [HoleResult(**row) for row in cur.fetchall()]
        finally:
            self._release_connection(conn)

    def close(self) -> None:
        """Close all connections in the pool."""
        with self._pool_lock:
            if self._pool:
                self._pool.closeall()
                self._pool = None
