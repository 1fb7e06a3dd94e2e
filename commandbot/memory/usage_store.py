"""SQLite-backed usage store: per-user counters, message log, licenses."""

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone

from commandbot.core.errors import PersistenceError
from commandbot.memory.database import init_db


def _now():
    return datetime.now(timezone.utc).isoformat()


def _parse_ts(value):
    ts = datetime.fromisoformat(value)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


class UsageStore:
    def __init__(self, path=None, db=None):
        try:
            self.db = db if db is not None else init_db(path)
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not open database {path}: {e}") from e
        self.path = path

    @contextmanager
    def _guard(self):
        try:
            yield
        except sqlite3.Error as e:
            self.db.rollback()
            raise PersistenceError(str(e)) from e

    def close(self):
        self.db.close()

    def ping(self):
        with self._guard():
            self.db.execute("SELECT 1").fetchone()

    # ── users & messages ──────────────────────────

    def record_message(self, message, direction="incoming"):
        """Upsert the sender and append the message to the log."""
        tokens = message.text.split() if message.text else []
        is_command = message.is_command
        command = tokens[0] if is_command and tokens else None
        now = _now()

        with self._guard():
            self.db.execute(
                """
                INSERT INTO users (telegram_id, username, first_name, last_name, language_code,
                                   message_count, command_count, last_command, last_seen_at)
                VALUES (?, ?, ?, ?, ?, 1, ?, ?, ?)
                ON CONFLICT(telegram_id) DO UPDATE SET
                    message_count = users.message_count + 1,
                    command_count = users.command_count + excluded.command_count,
                    last_command = COALESCE(excluded.last_command, users.last_command),
                    last_seen_at = excluded.last_seen_at
                """,
                (message.sender_id, message.username, message.first_name, message.last_name,
                 message.language_code, 1 if is_command else 0, command, now),
            )
            user_id = self.db.execute(
                "SELECT id FROM users WHERE telegram_id = ?", (message.sender_id,)
            ).fetchone()["id"]
            self.db.execute(
                """
                INSERT INTO messages (user_id, telegram_user_id, chat_id, message_id, message_text,
                                      message_type, command, command_args, is_command, metadata)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (user_id, message.sender_id, message.conversation_id, message.message_id,
                 message.text, "command" if is_command else "text", command,
                 json.dumps(tokens[1:]) if is_command else None, int(is_command),
                 json.dumps({"chat_type": message.chat_type, "date": message.date,
                             "direction": direction})),
            )
            self.db.commit()

    def get_user(self, sender_id):
        with self._guard():
            row = self.db.execute(
                "SELECT * FROM users WHERE telegram_id = ?", (sender_id,)
            ).fetchone()
        return dict(row) if row else None

    def count_users(self):
        with self._guard():
            return self.db.execute("SELECT COUNT(*) FROM users").fetchone()[0]

    def count_messages(self):
        with self._guard():
            return self.db.execute("SELECT COUNT(*) FROM messages").fetchone()[0]

    def register_email(self, sender_id, email):
        """Merge `email` into the user's metadata. False if the user is unknown."""
        user = self.get_user(sender_id)
        if user is None:
            return False
        metadata = json.loads(user["metadata"]) if user["metadata"] else {}
        metadata["email"] = email
        with self._guard():
            self.db.execute(
                "UPDATE users SET metadata = ? WHERE id = ?", (json.dumps(metadata), user["id"])
            )
            self.db.commit()
        return True

    # ── licenses ──────────────────────────────────

    def add_license(self, stl_key, plan, features=None, expires_at=None, active=True):
        with self._guard():
            self.db.execute(
                "INSERT INTO licenses (stl_key, plan, features, expires_at, active) VALUES (?, ?, ?, ?, ?)",
                (stl_key, plan, json.dumps(features or {}), expires_at, int(active)),
            )
            self.db.commit()

    def validate_license(self, stl_key, sender_id=None):
        """Check a license key and log the validation for /mylicenses."""
        with self._guard():
            row = self.db.execute(
                "SELECT * FROM licenses WHERE stl_key = ?", (stl_key,)
            ).fetchone()

        result = {"valid": False, "plan": None, "expires_at": None, "features": {}, "message": ""}
        if row is None:
            result["message"] = "License key not found"
        elif not row["active"]:
            result["message"] = "License has been revoked"
        elif row["expires_at"] and _parse_ts(row["expires_at"]) < datetime.now(timezone.utc):
            result["message"] = "License has expired"
        else:
            result.update(
                valid=True,
                plan=row["plan"],
                expires_at=row["expires_at"],
                features=json.loads(row["features"]) if row["features"] else {},
            )

        with self._guard():
            self.db.execute(
                "INSERT INTO license_validations (stl_key, result, validated_at, metadata) VALUES (?, ?, ?, ?)",
                (stl_key, "valid" if result["valid"] else "invalid", _now(),
                 json.dumps({"telegram_id": str(sender_id)} if sender_id is not None else {})),
            )
            self.db.commit()
        return result

    def recent_validations(self, sender_id, limit=5):
        with self._guard():
            rows = self.db.execute(
                """
                SELECT stl_key, result, validated_at FROM license_validations
                WHERE json_extract(metadata, '$.telegram_id') = ?
                ORDER BY validated_at DESC, id DESC LIMIT ?
                """,
                (str(sender_id), limit),
            ).fetchall()
        return [dict(r) for r in rows]
