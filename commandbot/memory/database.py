import os
import sqlite3

SCHEMA = """
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        telegram_id INTEGER NOT NULL UNIQUE,
        username TEXT,
        first_name TEXT,
        last_name TEXT,
        language_code TEXT,
        message_count INTEGER NOT NULL DEFAULT 0,
        command_count INTEGER NOT NULL DEFAULT 0,
        last_command TEXT,
        last_seen_at DATETIME,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        metadata JSON
    );
    CREATE TABLE IF NOT EXISTS messages (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER REFERENCES users(id),
        telegram_user_id INTEGER NOT NULL,
        chat_id INTEGER NOT NULL,
        message_id INTEGER,
        timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
        message_text TEXT,
        message_type TEXT NOT NULL,
        command TEXT,
        command_args JSON,
        is_command INTEGER NOT NULL DEFAULT 0,
        metadata JSON
    );
    CREATE TABLE IF NOT EXISTS licenses (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        stl_key TEXT NOT NULL UNIQUE,
        plan TEXT NOT NULL,
        features JSON,
        expires_at DATETIME,
        active INTEGER NOT NULL DEFAULT 1
    );
    CREATE TABLE IF NOT EXISTS license_validations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        stl_key TEXT NOT NULL,
        result TEXT NOT NULL,
        validated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        metadata JSON
    );
"""


def init_db(path):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    db = sqlite3.connect(path, check_same_thread=False)
    db.row_factory = sqlite3.Row
    db.execute("PRAGMA journal_mode=WAL")
    db.executescript(SCHEMA)
    db.commit()
    return db
