"""PostgreSQL storage implementation."""

import json
import logging
import os
import psycopg2
from psycopg2.extras import RealDictCursor

from core.config import CONFIG_FILE
from core.interfaces import Storage
from core.models import Word, WordList, Mastery, StudentProfile

logger = logging.getLogger(__name__)


class PostgresStorage(Storage):
    """PostgreSQL-based storage implementation."""

    def __init__(self, config_file: str = None, db_url: str = None):
        self.config_file = config_file or os.path.expanduser(CONFIG_FILE)
        self.db_url = db_url or os.environ.get(
            'DATABASE_URL',
            'postgresql://localhost:5432/spelldrill'
        )
        self._conn = None
        self._initialized = False

    @property
    def conn(self):
        """Lazy connection initialization."""
        if self._conn is None or self._conn.closed:
            self._conn = psycopg2.connect(self.db_url)
            if not self._initialized:
                self._init_db()
                self._initialized = True
        return self._conn

    def _init_db(self):
        """Create tables if they don't exist."""
        with self._conn.cursor() as cur:
            cur.execute("""
                CREATE TABLE IF NOT EXISTS word_lists (
                    id VARCHAR(64) PRIMARY KEY,
                    title VARCHAR(255) NOT NULL,
                    mastery_correct INTEGER NOT NULL DEFAULT 0,
                    mastery_total INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            cur.execute("""
                CREATE TABLE IF NOT EXISTS words (
                    id VARCHAR(64) NOT NULL,
                    list_id VARCHAR(64) NOT NULL REFERENCES word_lists(id) ON DELETE CASCADE,
                    position SERIAL,
                    text VARCHAR(255) NOT NULL,
                    definition TEXT NOT NULL DEFAULT '',
                    part_of_speech VARCHAR(50) NOT NULL DEFAULT '',
                    example_sentence TEXT NOT NULL DEFAULT '',
                    PRIMARY KEY (list_id, id)
                )
            """)
            cur.execute("""
                CREATE TABLE IF NOT EXISTS student_profile (
                    id INTEGER PRIMARY KEY,
                    profile JSONB NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            # Practice events log
            cur.execute("""
                CREATE TABLE IF NOT EXISTS events (
                    id SERIAL PRIMARY KEY,
                    timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    event VARCHAR(50) NOT NULL,
                    list_id VARCHAR(64),
                    session_id VARCHAR(64),
                    data JSONB
                )
            """)
            cur.execute("""
                CREATE INDEX IF NOT EXISTS idx_events_list_id ON events(list_id)
            """)
            cur.execute("""
                CREATE INDEX IF NOT EXISTS idx_events_timestamp ON events(timestamp)
            """)
        self._conn.commit()

    def close(self):
        """Close the database connection."""
        if self._conn and not self._conn.closed:
            self._conn.close()

    def load_config(self) -> dict:
        if not os.path.exists(self.config_file):
            return {}
        with open(self.config_file, 'r') as f:
            return json.load(f)

    def _fetch_words(self, cur, list_id: str) -> list[Word]:
        cur.execute("""
            SELECT id, text, definition, part_of_speech, example_sentence
            FROM words WHERE list_id = %s ORDER BY position
        """, (list_id,))
        return [Word.from_dict(row) for row in cur.fetchall()]

    def _row_to_list(self, cur, row: dict) -> WordList:
        return WordList(
            row['id'],
            row['title'],
            self._fetch_words(cur, row['id']),
            Mastery(row['mastery_correct'], row['mastery_total'])
        )

    def list_word_lists(self) -> list[WordList]:
        with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute("SELECT * FROM word_lists ORDER BY created_at, id")
            rows = cur.fetchall()
            return [self._row_to_list(cur, row) for row in rows]

    def get_word_list(self, list_id: str) -> WordList:
        with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute("SELECT * FROM word_lists WHERE id = %s", (list_id,))
            row = cur.fetchone()
            if not row:
                raise KeyError(list_id)
            return self._row_to_list(cur, row)

    def words(self, list_id: str) -> list[Word]:
        return self.get_word_list(list_id).words

    def _execute(self, query: str, params: tuple) -> int:
        """Run a write statement and commit. Returns the affected row count."""
        try:
            with self.conn.cursor() as cur:
                cur.execute(query, params)
                count = cur.rowcount
            self.conn.commit()
            return count
        except Exception as e:
            logger.error(f"Database write failed: {e}")
            self.conn.rollback()
            raise

    def create_word_list(self, title: str) -> WordList:
        word_list = WordList.create(title)
        self._execute(
            "INSERT INTO word_lists (id, title) VALUES (%s, %s)",
            (word_list.id, word_list.title)
        )
        return word_list

    def delete_word_list(self, list_id: str) -> bool:
        return self._execute("DELETE FROM word_lists WHERE id = %s", (list_id,)) > 0

    def add_word(self, list_id: str, word: Word) -> None:
        self.get_word_list(list_id)
        self._execute("""
            INSERT INTO words (id, list_id, text, definition, part_of_speech, example_sentence)
            VALUES (%s, %s, %s, %s, %s, %s)
        """, (word.id, list_id, word.text, word.definition, word.part_of_speech, word.example_sentence))

    def update_word(self, list_id: str, word_id: str, field: str, value: str) -> Word:
        word = self.get_word_list(list_id).get_word(word_id).with_field(field, value)
        # with_field rejects anything outside EDITABLE_WORD_FIELDS
        self._execute(
            f"UPDATE words SET {field} = %s WHERE list_id = %s AND id = %s",
            (value, list_id, word_id)
        )
        return word

    def delete_word(self, list_id: str, word_id: str) -> bool:
        self.get_word_list(list_id)
        return self._execute(
            "DELETE FROM words WHERE list_id = %s AND id = %s",
            (list_id, word_id)
        ) > 0

    def record(self, list_id: str, correct: int, total: int) -> None:
        updated = self._execute("""
            UPDATE word_lists
            SET mastery_correct = %s, mastery_total = %s, updated_at = CURRENT_TIMESTAMP
            WHERE id = %s
        """, (correct, total, list_id))
        if not updated:
            raise KeyError(list_id)

    def load_profile(self) -> StudentProfile:
        with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute("SELECT profile FROM student_profile WHERE id = 1")
            row = cur.fetchone()
            return StudentProfile.from_dict(row['profile'] if row else None)

    def save_profile(self, profile: StudentProfile) -> None:
        self._execute("""
            INSERT INTO student_profile (id, profile, updated_at)
            VALUES (1, %s, CURRENT_TIMESTAMP)
            ON CONFLICT (id)
            DO UPDATE SET profile = EXCLUDED.profile, updated_at = CURRENT_TIMESTAMP
        """, (json.dumps(profile.to_dict()),))

    def log_event(self, event: str, list_id: str = None, session_id: str = None, **data) -> None:
        """Log a practice event to the database."""
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO events (event, list_id, session_id, data)
                    VALUES (%s, %s, %s, %s)
                """, (event, list_id, session_id, json.dumps(data) if data else None))
            self.conn.commit()
        except Exception as e:
            logger.error(f"Error logging event: {e}")
            self.conn.rollback()

    def get_recent_events(self, list_id: str = None, limit: int = 50) -> list[dict]:
        """Get recent practice events, optionally for one list."""
        with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
            if list_id:
                cur.execute("""
                    SELECT * FROM events WHERE list_id = %s
                    ORDER BY timestamp DESC LIMIT %s
                """, (list_id, limit))
            else:
                cur.execute("""
                    SELECT * FROM events ORDER BY timestamp DESC LIMIT %s
                """, (limit,))
            rows = cur.fetchall()
        for row in rows:
            if row.get('timestamp'):
                row['timestamp'] = row['timestamp'].isoformat()
        return [dict(row) for row in rows]
