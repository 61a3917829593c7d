"""Create wines table for per-device collections.

Revision ID: 001
Revises: None
Create Date: 2026-10-18

Wines are scoped by the client-generated device identifier; there is
no user table.
"""
from typing import Sequence, Union

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS wines (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    device_id TEXT NOT NULL,
    name TEXT NOT NULL,
    producer TEXT,
    varietal TEXT,
    vintage INTEGER,
    date_purchased TEXT NOT NULL,
    best_drink_date TEXT,
    notes TEXT,
    label_image_url TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_wines_device_created ON wines(device_id, created_at);
"""


def upgrade() -> None:
    conn = op.get_bind()
    raw_conn = conn.connection.dbapi_connection
    raw_conn.executescript(SCHEMA_SQL)


def downgrade() -> None:
    conn = op.get_bind()
    raw_conn = conn.connection.dbapi_connection
    raw_conn.execute("DROP INDEX IF EXISTS idx_wines_device_created")
    raw_conn.execute("DROP TABLE IF EXISTS wines")
