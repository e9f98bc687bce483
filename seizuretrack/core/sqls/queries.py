"""
Database query SQL statements
Contains all SELECT, INSERT, UPDATE, DELETE statements
"""

# Key-value queries
UPSERT_ITEM = """
    INSERT INTO kv_store (key, value, updated_at)
    VALUES (?, ?, CURRENT_TIMESTAMP)
    ON CONFLICT(key) DO UPDATE SET
        value = excluded.value,
        updated_at = CURRENT_TIMESTAMP
"""

SELECT_ITEM = """
    SELECT value FROM kv_store WHERE key = ?
"""

SELECT_ALL_KEYS = """
    SELECT key FROM kv_store ORDER BY key
"""

SELECT_ITEM_SIZES = """
    SELECT key, LENGTH(value) AS size, updated_at
    FROM kv_store
    ORDER BY key
"""

DELETE_ITEM = """
    DELETE FROM kv_store WHERE key = ?
"""
