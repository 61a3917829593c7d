"""
SQLite repository for a device's wine collection.
"""

import logging
from typing import Optional

from ..db import BaseRepository, ensure_schema
from ..models import AddWineRequest, WineRecord

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, device_id, name, producer, varietal, vintage, date_purchased, "
    "best_drink_date, notes, label_image_url, created_at"
)


class WineCollectionRepository(BaseRepository):
    """Per-device wine records."""

    def __init__(self, db_path: Optional[str] = None):
        super().__init__(db_path)
        ensure_schema(self.db_path)

    def add_wine(self, wine: AddWineRequest) -> int:
        """Insert a wine. Returns the new row id."""
        with self._transaction() as cursor:
            cursor.execute("""
                INSERT INTO wines
                    (device_id, name, producer, varietal, vintage, date_purchased,
                     best_drink_date, notes, label_image_url)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                wine.device_id,
                wine.name.strip(),
                wine.producer,
                wine.varietal,
                wine.vintage,
                wine.date_purchased,
                wine.best_drink_date,
                wine.notes,
                wine.label_image_url,
            ))
            return cursor.lastrowid

    def list_wines(self, device_id: str) -> list[WineRecord]:
        """All wines for a device, newest first."""
        cursor = self._get_connection().cursor()
        cursor.execute(f"""
            SELECT {_COLUMNS}
            FROM wines
            WHERE device_id = ?
            ORDER BY created_at DESC, id DESC
        """, (device_id,))
        return [WineRecord(**dict(row)) for row in cursor.fetchall()]

    def count(self, device_id: Optional[str] = None) -> int:
        """Number of stored wines, optionally for one device."""
        cursor = self._get_connection().cursor()
        if device_id is None:
            cursor.execute("SELECT COUNT(*) FROM wines")
        else:
            cursor.execute("SELECT COUNT(*) FROM wines WHERE device_id = ?", (device_id,))
        return cursor.fetchone()[0]
