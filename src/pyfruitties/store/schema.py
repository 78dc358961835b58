"""sqlite schema for the local store."""

from __future__ import annotations

SCHEMA = """
CREATE TABLE IF NOT EXISTS fruit (
  id        INTEGER PRIMARY KEY AUTOINCREMENT,
  name      TEXT NOT NULL,
  fullName  TEXT NOT NULL,
  calories  TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS cartitem (
  id     INTEGER PRIMARY KEY NOT NULL
         REFERENCES fruit(id) ON DELETE CASCADE,
  count  INTEGER NOT NULL DEFAULT 1 CHECK (count >= 1)
);
"""

SELECT_FRUITS = "SELECT id, name, fullName, calories FROM fruit ORDER BY id"

COUNT_FRUITS = "SELECT COUNT(*) FROM fruit"

INSERT_OR_REPLACE_FRUIT = "INSERT OR REPLACE INTO fruit(id, name, fullName, calories) VALUES (?, ?, ?, ?)"

DELETE_FRUIT = "DELETE FROM fruit WHERE id = ?"

SELECT_CART_ENTRY = "SELECT id, count FROM cartitem WHERE id = ?"

INSERT_OR_IGNORE_CART_ENTRY = "INSERT OR IGNORE INTO cartitem(id, count) VALUES (?, ?)"

UPDATE_CART_ENTRY = "UPDATE cartitem SET count = ? WHERE id = ?"

SELECT_CART_WITH_FRUITS = """
SELECT c.id AS id, c.count AS count, f.name AS name, f.fullName AS fullName, f.calories AS calories
FROM cartitem c
JOIN fruit f ON f.id = c.id
ORDER BY c.id
"""
