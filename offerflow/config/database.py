"""
SQLite persistence for the OfferFlow interview preparation assistant.

Everything the interview prep core persists (question banks, resume context,
usage counters, the points balance) lives in a single string-keyed settings
table, so the store survives restarts of the same installation.
"""

import sqlite3
import json
from typing import Dict, Optional, Any
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

class DatabaseManager:
    """Manages SQLite database operations for the interview prep system."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database manager with path to SQLite database."""
        if db_path is None:
            from .settings import get_config
            db_path = get_config().database_path
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.init_database()

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory for dict-like access."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_database(self) -> None:
        """Initialize database with all required tables."""
        with self.get_connection() as conn:
            # Settings table - string-keyed snapshots and counters
            conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            conn.commit()
            logger.info("Database initialized successfully")

    # Settings operations
    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting value."""
        with self.get_connection() as conn:
            cursor = conn.execute("SELECT value FROM settings WHERE key = ?", (key,))
            row = cursor.fetchone()
            if row:
                try:
                    return json.loads(row['value'])
                except (json.JSONDecodeError, TypeError):
                    return row['value']
            return default

    def set_setting(self, key: str, value: Any) -> None:
        """Set a setting value."""
        with self.get_connection() as conn:
            json_value = json.dumps(value) if not isinstance(value, str) else value
            conn.execute("""
                INSERT OR REPLACE INTO settings (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
            """, (key, json_value))

    def get_stats(self) -> Dict[str, Any]:
        """Get storage statistics."""
        with self.get_connection() as conn:
            cursor = conn.execute("SELECT COUNT(*) as count FROM settings")
            total = cursor.fetchone()['count']

            cursor = conn.execute(
                "SELECT COUNT(*) as count FROM settings WHERE key LIKE 'prep_questions:%'"
            )
            banks = cursor.fetchone()['count']

            return {
                'stored_keys': total,
                'question_banks': banks,
            }
