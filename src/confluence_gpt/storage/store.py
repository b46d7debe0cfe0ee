"""SQLite-backed store for users, sessions, settings and chat history."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite

from confluence_gpt.storage.migrations import INDEXES, TABLES
from confluence_gpt.storage.models import (
    ConversationRecord,
    ConversationSummary,
    MessagePreview,
    MessageRecord,
    SessionRecord,
    UserRecord,
    UserSettingsRecord,
    utcnow,
)

LAST_MESSAGE_PREVIEW_CHARS = 100

_SETTINGS_FIELDS = (
    "confluence_domain",
    "confluence_email",
    "confluence_token",
    "ai_api_key",
    "ai_base_url",
    "ai_model",
    "ai_enabled",
)


def _ts(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _preview(content: str) -> str:
    if len(content) > LAST_MESSAGE_PREVIEW_CHARS:
        return content[:LAST_MESSAGE_PREVIEW_CHARS] + "..."
    return content


def _user_from_row(row: aiosqlite.Row) -> UserRecord:
    return UserRecord(
        id=row["id"],
        email=row["email"],
        name=row["name"],
        password_hash=row["password_hash"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _message_from_row(row: aiosqlite.Row) -> MessageRecord:
    action_data = row["action_data"]
    return MessageRecord(
        id=row["id"],
        conversation_id=row["conversation_id"],
        role=row["role"],
        content=row["content"],
        attachment_filename=row["attachment_filename"],
        attachment_preview=row["attachment_preview"],
        action_type=row["action_type"],
        action_status=row["action_status"],
        action_data=json.loads(action_data) if action_data else None,
        created_at=row["created_at"],
    )


class AppStore:
    def __init__(self, db_path: Path | str = ":memory:") -> None:
        self.db_path = str(db_path)
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self.db_path)
        self._db.row_factory = aiosqlite.Row
        await self._db.execute("PRAGMA foreign_keys = ON")
        for sql in TABLES + INDEXES:
            await self._db.execute(sql)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    def _get_db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("AppStore not initialized, call initialize() first")
        return self._db

    async def _insert(self, sql: str, params: tuple[Any, ...]) -> int:
        db = self._get_db()
        cursor = await db.execute(sql, params)
        await db.commit()
        return int(cursor.lastrowid)

    # ── users ──

    async def create_user(self, email: str, password_hash: str, name: str) -> UserRecord:
        now = utcnow()
        user_id = await self._insert(
            "INSERT INTO users (email, password_hash, name, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (email, password_hash, name, _ts(now), _ts(now)),
        )
        return UserRecord(
            id=user_id, email=email, name=name, password_hash=password_hash,
            created_at=now, updated_at=now,
        )

    async def get_user_by_email(self, email: str) -> UserRecord | None:
        db = self._get_db()
        cursor = await db.execute("SELECT * FROM users WHERE email = ?", (email,))
        row = await cursor.fetchone()
        return _user_from_row(row) if row else None

    async def get_user(self, user_id: int) -> UserRecord | None:
        db = self._get_db()
        cursor = await db.execute("SELECT * FROM users WHERE id = ?", (user_id,))
        row = await cursor.fetchone()
        return _user_from_row(row) if row else None

    # ── settings ──

    async def get_settings(self, user_id: int) -> UserSettingsRecord | None:
        db = self._get_db()
        cursor = await db.execute("SELECT * FROM user_settings WHERE user_id = ?", (user_id,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return UserSettingsRecord(
            user_id=row["user_id"],
            confluence_domain=row["confluence_domain"],
            confluence_email=row["confluence_email"],
            confluence_token=row["confluence_token"],
            ai_api_key=row["ai_api_key"],
            ai_base_url=row["ai_base_url"],
            ai_model=row["ai_model"],
            ai_enabled=bool(row["ai_enabled"]),
            updated_at=row["updated_at"],
        )

    async def upsert_settings(self, user_id: int, **fields: Any) -> UserSettingsRecord:
        """Create or update a user's settings row.

        Only the given fields change. ``None`` values are ignored so partial
        updates never wipe stored credentials.
        """
        unknown = set(fields) - set(_SETTINGS_FIELDS)
        if unknown:
            raise ValueError(f"Unknown settings fields: {sorted(unknown)}")
        updates = {k: v for k, v in fields.items() if v is not None}
        if "ai_enabled" in updates:
            updates["ai_enabled"] = int(bool(updates["ai_enabled"]))

        db = self._get_db()
        now = _ts(utcnow())
        existing = await self.get_settings(user_id)
        if existing is None:
            columns = ["user_id", *updates, "created_at", "updated_at"]
            values = [user_id, *updates.values(), now, now]
            await db.execute(
                f"INSERT INTO user_settings ({', '.join(columns)}) "
                f"VALUES ({', '.join('?' for _ in columns)})",
                tuple(values),
            )
        elif updates:
            assignments = ", ".join(f"{column} = ?" for column in updates)
            await db.execute(
                f"UPDATE user_settings SET {assignments}, updated_at = ? WHERE user_id = ?",
                (*updates.values(), now, user_id),
            )
        await db.commit()

        record = await self.get_settings(user_id)
        assert record is not None
        return record

    # ── sessions ──

    async def create_session(self, user_id: int, token: str, expires_at: datetime) -> SessionRecord:
        now = utcnow()
        session_id = await self._insert(
            "INSERT INTO sessions (user_id, token, expires_at, created_at) VALUES (?, ?, ?, ?)",
            (user_id, token, _ts(expires_at), _ts(now)),
        )
        return SessionRecord(
            id=session_id, user_id=user_id, token=token, expires_at=expires_at, created_at=now
        )

    async def get_session(self, token: str) -> SessionRecord | None:
        db = self._get_db()
        cursor = await db.execute(
            "SELECT * FROM sessions WHERE token = ? AND expires_at > ?",
            (token, _ts(utcnow())),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return SessionRecord(
            id=row["id"],
            user_id=row["user_id"],
            token=row["token"],
            expires_at=row["expires_at"],
            created_at=row["created_at"],
        )

    async def delete_session(self, token: str) -> None:
        db = self._get_db()
        await db.execute("DELETE FROM sessions WHERE token = ?", (token,))
        await db.commit()

    # ── conversations ──

    async def create_conversation(self, user_id: int, title: str) -> ConversationRecord:
        now = utcnow()
        conversation_id = await self._insert(
            "INSERT INTO conversations (user_id, title, created_at, updated_at) VALUES (?, ?, ?, ?)",
            (user_id, title, _ts(now), _ts(now)),
        )
        return ConversationRecord(
            id=conversation_id, user_id=user_id, title=title, created_at=now, updated_at=now
        )

    async def get_conversation(self, conversation_id: int) -> ConversationRecord | None:
        db = self._get_db()
        cursor = await db.execute(
            "SELECT * FROM conversations WHERE id = ?", (conversation_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return ConversationRecord(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def list_conversations(self, user_id: int) -> list[ConversationSummary]:
        db = self._get_db()
        cursor = await db.execute(
            "SELECT c.id, c.user_id, c.title, c.created_at, c.updated_at, "
            "m.content AS last_content, m.role AS last_role, m.created_at AS last_at "
            "FROM conversations c "
            "LEFT JOIN messages m ON m.id = ("
            "  SELECT id FROM messages WHERE conversation_id = c.id "
            "  ORDER BY created_at DESC, id DESC LIMIT 1"
            ") "
            "WHERE c.user_id = ? ORDER BY c.updated_at DESC, c.id DESC",
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [
            ConversationSummary(
                id=r["id"],
                user_id=r["user_id"],
                title=r["title"],
                created_at=r["created_at"],
                updated_at=r["updated_at"],
                last_message=(
                    MessagePreview(
                        content=_preview(r["last_content"]),
                        role=r["last_role"],
                        created_at=r["last_at"],
                    )
                    if r["last_content"] is not None
                    else None
                ),
            )
            for r in rows
        ]

    async def rename_conversation(self, conversation_id: int, title: str) -> None:
        db = self._get_db()
        await db.execute(
            "UPDATE conversations SET title = ?, updated_at = ? WHERE id = ?",
            (title, _ts(utcnow()), conversation_id),
        )
        await db.commit()

    async def touch_conversation(self, conversation_id: int) -> None:
        db = self._get_db()
        await db.execute(
            "UPDATE conversations SET updated_at = ? WHERE id = ?",
            (_ts(utcnow()), conversation_id),
        )
        await db.commit()

    async def delete_conversation(self, conversation_id: int) -> None:
        db = self._get_db()
        await db.execute("DELETE FROM conversations WHERE id = ?", (conversation_id,))
        await db.commit()

    async def delete_user_conversations(self, user_id: int) -> int:
        db = self._get_db()
        cursor = await db.execute("DELETE FROM conversations WHERE user_id = ?", (user_id,))
        await db.commit()
        return cursor.rowcount

    # ── messages ──

    async def add_message(
        self,
        conversation_id: int,
        role: str,
        content: str,
        attachment_filename: str | None = None,
        attachment_preview: str | None = None,
        action_type: str | None = None,
        action_status: str | None = None,
        action_data: Any = None,
    ) -> MessageRecord:
        now = utcnow()
        message_id = await self._insert(
            "INSERT INTO messages (conversation_id, role, content, attachment_filename, "
            "attachment_preview, action_type, action_status, action_data, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                conversation_id,
                role,
                content,
                attachment_filename,
                attachment_preview,
                action_type,
                action_status,
                json.dumps(action_data) if action_data is not None else None,
                _ts(now),
            ),
        )
        await self.touch_conversation(conversation_id)
        return MessageRecord(
            id=message_id,
            conversation_id=conversation_id,
            role=role,
            content=content,
            attachment_filename=attachment_filename,
            attachment_preview=attachment_preview,
            action_type=action_type,
            action_status=action_status,
            action_data=action_data,
            created_at=now,
        )

    async def list_messages(self, conversation_id: int) -> list[MessageRecord]:
        db = self._get_db()
        cursor = await db.execute(
            "SELECT * FROM messages WHERE conversation_id = ? ORDER BY created_at ASC, id ASC",
            (conversation_id,),
        )
        return [_message_from_row(r) for r in await cursor.fetchall()]

    async def get_message(self, message_id: int) -> MessageRecord | None:
        db = self._get_db()
        cursor = await db.execute("SELECT * FROM messages WHERE id = ?", (message_id,))
        row = await cursor.fetchone()
        return _message_from_row(row) if row else None

    async def update_message_action(
        self, message_id: int, action_status: str, action_data: Any = None
    ) -> None:
        db = self._get_db()
        await db.execute(
            "UPDATE messages SET action_status = ?, action_data = ? WHERE id = ?",
            (
                action_status,
                json.dumps(action_data) if action_data is not None else None,
                message_id,
            ),
        )
        await db.commit()

    async def count_user_messages(self, user_id: int) -> int:
        db = self._get_db()
        cursor = await db.execute(
            "SELECT COUNT(*) FROM messages m "
            "JOIN conversations c ON c.id = m.conversation_id WHERE c.user_id = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        return int(row[0]) if row else 0
