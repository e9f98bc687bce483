"""
Database schema definitions
Contains all CREATE TABLE and CREATE INDEX statements
"""

# Table creation statements
CREATE_KV_STORE_TABLE = """
    CREATE TABLE IF NOT EXISTS kv_store (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP,
        updated_at TEXT DEFAULT CURRENT_TIMESTAMP
    )
"""

# Index creation statements
CREATE_KV_STORE_UPDATED_INDEX = """
    CREATE INDEX IF NOT EXISTS idx_kv_store_updated
    ON kv_store(updated_at DESC)
"""

ALL_TABLES = [
    CREATE_KV_STORE_TABLE,
]

ALL_INDEXES = [
    CREATE_KV_STORE_UPDATED_INDEX,
]
