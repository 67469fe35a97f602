"""SQLite store for locally persisted settings"""
import sqlite3
from typing import Dict, Optional
import logging
import config

logger = logging.getLogger(__name__)

CLIENT_ID_KEY = "google_client_id"
SPREADSHEET_ID_KEY = "google_sheet_id"


class SettingsStore:
    """Key/value settings persisted in a local SQLite database"""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize store

        Args:
            db_path: Path to SQLite database. If None, uses config.DB_PATH
        """
        self.db_path = db_path or config.DB_PATH
        self._init_db()

    def _init_db(self):
        """Initialize database tables"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

        conn.commit()
        conn.close()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a setting value

        Args:
            key: Setting name
            default: Returned when the key is not stored

        Returns:
            Stored value or default
        """
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row[0] if row else default
        except sqlite3.Error as e:
            logger.debug(f"Settings read failed for {key}: {e}")
            return default
        finally:
            conn.close()

    def set(self, key: str, value: str):
        """Store a setting value"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute(
                """
                INSERT OR REPLACE INTO settings (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                """,
                (key, value),
            )
            conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Error saving setting {key}: {e}")
        finally:
            conn.close()

    def get_sheet_config(self) -> Dict[str, str]:
        """Client id and spreadsheet id, falling back to the environment

        Returns:
            {"client_id": str, "spreadsheet_id": str}
        """
        return {
            "client_id": self.get(CLIENT_ID_KEY) or config.GOOGLE_CLIENT_ID or "",
            "spreadsheet_id": self.get(SPREADSHEET_ID_KEY) or config.GOOGLE_SPREADSHEET_ID or "",
        }

    def save_sheet_config(self, client_id: str, spreadsheet_id: str):
        """Persist the sheet configuration after an explicit user edit"""
        self.set(CLIENT_ID_KEY, client_id.strip())
        self.set(SPREADSHEET_ID_KEY, spreadsheet_id.strip())
        logger.info("Sheet configuration saved")

    def clear(self):
        """Clear all stored settings"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM settings")
            conn.commit()
            logger.info("Settings cleared")
        except sqlite3.Error as e:
            logger.error(f"Error clearing settings: {e}")
        finally:
            conn.close()
