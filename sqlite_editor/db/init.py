# sqlite_editor/db/init.py
from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from .client import apply_pragmas

log = logging.getLogger(__name__)

SQLITE_HEADER = b"SQLite format 3\x00"

SAMPLE_SCHEMA = """
CREATE TABLE users (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  username TEXT NOT NULL,
  email TEXT UNIQUE,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE products (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL,
  description TEXT,
  price REAL NOT NULL,
  category TEXT,
  stock INTEGER DEFAULT 0,
  is_active BOOLEAN DEFAULT 1,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""

SAMPLE_USERS = [
    ("admin", "admin@example.com"),
    ("user1", "user1@example.com"),
    ("user2", "user2@example.com"),
]

SAMPLE_PRODUCTS = [
    ("Laptop", "High-performance laptop with 16GB RAM", 1299.99, "Electronics", 10, 1),
    ("Smartphone", "6.5-inch smartphone with dual camera", 699.99, "Electronics", 15, 1),
    ("Coffee Maker", "Automatic coffee maker with timer", 49.99, "Home Appliances", 5, 1),
    ("Desk Chair", "Ergonomic office chair with lumbar support", 199.99, "Furniture", 8, 1),
    ("Headphones", "Noise-cancelling wireless headphones", 149.99, "Electronics", 20, 1),
]


def looks_like_sqlite(data: bytes) -> bool:
    # Zero-length files are valid, empty SQLite databases.
    return not data or data.startswith(SQLITE_HEADER)


def create_sample_database(path: Path) -> list[str]:
    """Create a new database at ``path`` seeded with sample tables; returns their names."""
    con = sqlite3.connect(path)
    try:
        apply_pragmas(con)
        with con:
            con.executescript(SAMPLE_SCHEMA)
            con.executemany("INSERT INTO users (username, email) VALUES (?, ?);", SAMPLE_USERS)
            con.executemany(
                "INSERT INTO products (name, description, price, category, stock, is_active) "
                "VALUES (?, ?, ?, ?, ?, ?);",
                SAMPLE_PRODUCTS,
            )
    except Exception:
        con.close()
        path.unlink(missing_ok=True)
        raise
    con.close()
    log.info("created sample database %s", path.name)
    return ["users", "products"]
